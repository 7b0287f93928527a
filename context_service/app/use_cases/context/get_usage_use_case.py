from context_service.app.services.identity_provider import SessionIdentity
from context_service.app.use_cases.base import BoardScopedUseCase
from context_service.libs.result import Result, Return

from .dtos import CapsResponse, UsageCounters, UsageResponse


class GetUsageUseCase(BoardScopedUseCase):
    """Usage of the caller's tenant against its plan caps"""

    async def execute(self, session: SessionIdentity, monday_board_id: str) -> Result[UsageResponse]:
        async with self.uow:
            resolved = await self._enter_board(session, monday_board_id)
            usage = await self.accountant.get_usage(resolved.tenant.id)

            return Return.ok(
                UsageResponse(
                    plan=usage.plan.value,
                    caps=CapsResponse(**usage.caps.as_dict()),
                    usage=UsageCounters(
                        boards_used=usage.boards_used,
                        storage_bytes_used=usage.storage_bytes_used,
                        viewers_used=usage.viewers_used,
                    ),
                )
            )
