"""
Resolve Context Use Case

Entry point of the embedded app: maps the session's account and board to
the internal tenant and board, provisioning them on first touch.
"""

from context_service.app.services.identity_provider import SessionIdentity
from context_service.app.use_cases.base import BoardScopedUseCase
from context_service.libs.result import Result, Return

from .dtos import CapsResponse, ContextResponse


class ResolveContextUseCase(BoardScopedUseCase):
    """
    Business Rules:
    - Tenant and board are created lazily (board subject to max_boards)
    - Callers with a user id must pass the viewer check
    - A board created for a denied caller is rolled back
    """

    async def execute(self, session: SessionIdentity, monday_board_id: str) -> Result[ContextResponse]:
        async with self.uow:
            resolved = await self._enter_board(session, monday_board_id)

            return Return.ok(
                ContextResponse(
                    tenant_id=str(resolved.tenant.id),
                    board_id=str(resolved.board.id),
                    monday_board_id=resolved.board.monday_board_id,
                    plan=resolved.plan.value,
                    caps=CapsResponse(**resolved.caps.as_dict()),
                    board_was_created=resolved.board_was_created,
                )
            )
