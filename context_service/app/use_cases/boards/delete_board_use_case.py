"""
Delete Board Use Case

Removes a board of the caller's tenant with its notes, files and viewers.
"""

from context_service.app.services.board_deletion import BoardDeletion
from context_service.app.services.identity_provider import SessionIdentity
from context_service.app.services.tenancy import normalise_board_id
from context_service.app.use_cases.files.base import FileUseCase
from context_service.domain.errors import AuthorizationError
from context_service.domain.plans import FEATURE_BOARD_ADMIN_DELETE, can_use_feature
from context_service.domain.viewer_roles import NON_PRIVILEGED
from context_service.libs.result import Error, Result, Return

from .dtos import DeleteBoardResponse


class DeleteBoardUseCase(FileUseCase):
    """
    Business Rules:
    - Account admins may delete any board of their tenant
    - With board_admin_delete_enabled on a plan that has the feature, the
      target board's owner may delete it too
    """

    async def execute(
        self, session: SessionIdentity, monday_board_id: str, target_board_id: str
    ) -> Result[DeleteBoardResponse]:
        target_key = normalise_board_id(target_board_id)

        async with self.uow:
            resolved = await self._enter_board(session, monday_board_id)
            if not session.user_id:
                raise AuthorizationError(AuthorizationError.ADMIN_REQUIRED)

            target = await self.uow.boards.get_by_monday_id(resolved.tenant.id, target_key)
            if target is None:
                return Return.err(Error("BOARD_NOT_FOUND", "Board not found"))

            facts = await self.authority.role_facts(
                resolved.credential, target.monday_board_id, [session.user_id]
            )
            actor = facts.get(str(session.user_id), NON_PRIVILEGED)
            owner_may_delete = (
                resolved.tenant.board_admin_delete_enabled
                and can_use_feature(resolved.plan, FEATURE_BOARD_ADMIN_DELETE)
                and actor.is_owner
            )
            if not actor.is_admin and not owner_may_delete:
                raise AuthorizationError(AuthorizationError.ADMIN_REQUIRED)

            released = await BoardDeletion(self.uow, self.storage).delete(target)
            return Return.ok(
                DeleteBoardResponse(deleted=True, monday_board_id=target_key, bytes_released=released)
            )
