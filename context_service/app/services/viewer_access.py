"""
Viewer Access Authority

Merges the stored per-board viewer status with live admin/owner facts from
monday.com. Live admins and board owners always get editor-equivalent access;
the stored status only governs everybody else.
"""

import logging
from typing import Dict, List, Optional, Sequence

from context_service.app.services.identity_provider import IIdentityProvider
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.domain.entities import (
    Board,
    BoardViewer,
    LimitKind,
    ViewerRole,
    ViewerStatus,
)
from context_service.domain.errors import AuthorizationError, LimitError
from context_service.domain.plans import allowed_roles_for_plan, caps_for_plan, normalise_plan_id
from context_service.domain.viewer_roles import (
    NON_PRIVILEGED,
    AccessLevel,
    RoleFacts,
    counts_against_cap,
    effective_access,
    to_stored_status,
)

logger = logging.getLogger(__name__)

ROLE_NOT_IN_PLAN = "role not available on current plan"


class ViewerAccessAuthority:
    """
    Resolves and manages viewer access on a board.

    Business Rules:
    - First access auto-provisions a row: allowed for admins/owners, restricted otherwise,
      with the user's name and email when monday.com returns them
    - A restricted row is re-checked live on every access
    - Only live account admins may change roles, never their own
    - Privileged users cannot be restricted
    - The viewer cap demotes the most recently updated non-privileged rows first

    The unit of work must already be entered by the caller.
    """

    def __init__(self, uow: UnitOfWork, identity_provider: IIdentityProvider):
        self.uow = uow
        self.identity_provider = identity_provider

    async def role_facts(
        self, credential: Optional[str], monday_board_id: str, user_ids: Sequence[str]
    ) -> Dict[str, RoleFacts]:
        """One bulk query; without a tenant credential nobody can be verified as privileged"""
        ids = [str(user_id) for user_id in user_ids if user_id]
        if not ids:
            return {}
        if not credential:
            logger.warning("Tenant has no monday.com credential; treating users as non-privileged")
            return {user_id: NON_PRIVILEGED for user_id in ids}
        facts = await self.identity_provider.fetch_role_facts(credential, monday_board_id, ids)
        return {user_id: facts.get(user_id, NON_PRIVILEGED) for user_id in ids}

    async def _remember_profile(self, row: BoardViewer, credential: Optional[str]) -> BoardViewer:
        """Best-effort name and email on a freshly provisioned row"""
        if not credential or (row.name and row.email):
            return row
        try:
            profiles = await self.identity_provider.fetch_users(credential, [row.monday_user_id])
        except Exception as exc:
            logger.warning("Profile lookup failed for user %s: %s", row.monday_user_id, exc)
            return row
        profile = profiles.get(row.monday_user_id)
        if profile is None or (profile.name, profile.email) == (row.name, row.email):
            return row
        row.name = profile.name or row.name
        row.email = profile.email or row.email
        return await self.uow.viewers.update(row)

    async def _facts_for(self, credential: Optional[str], monday_board_id: str, user_id: str) -> RoleFacts:
        facts = await self.role_facts(credential, monday_board_id, [user_id])
        return facts.get(str(user_id), NON_PRIVILEGED)

    async def assert_allowed(
        self, board: Board, user_id: str, credential: Optional[str]
    ) -> AccessLevel:
        """
        Permit or deny baseline (read) access to a board.

        Args:
            board: Resolved board
            user_id: monday.com user id of the caller
            credential: Decrypted tenant access token

        Returns:
            Effective access level (viewer or editor)

        Raises:
            AuthorizationError: viewer restricted
            DependencyError: live role query failed
        """
        user_id = str(user_id)
        row = await self.uow.viewers.get(board.id, user_id)

        if row is None:
            facts = await self._facts_for(credential, board.monday_board_id, user_id)
            status = ViewerStatus.allowed if facts.is_privileged else ViewerStatus.restricted
            row = await self.uow.viewers.insert_if_absent(board.id, user_id, status)
            row = await self._remember_profile(row, credential)
            await self.uow.commit()
            access = effective_access(row.status, facts)
        elif row.status != ViewerStatus.restricted:
            access = effective_access(row.status, NON_PRIVILEGED)
        else:
            facts = await self._facts_for(credential, board.monday_board_id, user_id)
            access = effective_access(row.status, facts)

        if access == AccessLevel.none:
            raise AuthorizationError(AuthorizationError.VIEWER_RESTRICTED)
        return access

    async def assert_allowed_with_rollback(self, resolved, user_id: str) -> AccessLevel:
        """
        assert_allowed for a resolved context; a board provisioned by this
        request is deleted again when the caller is not let in.
        """
        board_id = resolved.board.id
        monday_board_id = resolved.board.monday_board_id
        try:
            return await self.assert_allowed(resolved.board, user_id, resolved.credential)
        except Exception:
            if resolved.board_was_created:
                # rollback() expires loaded rows, so only the captured ids are used below
                await self.uow.rollback()
                await self.uow.viewers.delete_by_board(board_id)
                await self.uow.boards.delete(board_id)
                await self.uow.commit()
                logger.info(
                    "Rolled back board %s provisioned for denied user %s",
                    monday_board_id,
                    user_id,
                )
            raise

    async def ensure_editor_access(
        self, board: Board, user_id: Optional[str], credential: Optional[str]
    ) -> None:
        """Stored editor, or live admin/owner; otherwise 'editor access required'"""
        if not user_id:
            raise AuthorizationError(AuthorizationError.EDITOR_REQUIRED)

        row = await self.uow.viewers.get(board.id, str(user_id))
        stored = row.status if row else None
        if stored == ViewerStatus.editor:
            return

        facts = await self._facts_for(credential, board.monday_board_id, str(user_id))
        if effective_access(stored, facts) != AccessLevel.editor:
            raise AuthorizationError(AuthorizationError.EDITOR_REQUIRED)

    async def ensure_admin(self, board: Board, user_id: Optional[str], credential: Optional[str]) -> RoleFacts:
        """Live account admin check"""
        if not user_id:
            raise AuthorizationError(AuthorizationError.ADMIN_REQUIRED)
        facts = await self._facts_for(credential, board.monday_board_id, str(user_id))
        if not facts.is_admin:
            raise AuthorizationError(AuthorizationError.ADMIN_REQUIRED)
        return facts

    async def set_role(
        self,
        board: Board,
        target_user_id: str,
        requested_role: ViewerRole,
        acting_user_id: Optional[str],
        plan,
        credential: Optional[str],
    ):
        """
        Change the stored role of a user on a board.

        Raises:
            AuthorizationError: admin required, role not in plan, privileged
                target, or self-modification
            LimitError: the change would exceed the plan's viewer cap
        """
        if not acting_user_id:
            raise AuthorizationError(AuthorizationError.ADMIN_REQUIRED)
        acting_user_id = str(acting_user_id)
        target_user_id = str(target_user_id)
        plan = normalise_plan_id(plan)
        limit = caps_for_plan(plan).max_viewers

        active_rows = []
        if limit is not None and requested_role != ViewerRole.restricted:
            active_rows = await self.uow.viewers.list_active_by_board(board.id)

        ids = [acting_user_id, target_user_id] + [row.monday_user_id for row in active_rows]
        facts = await self.role_facts(credential, board.monday_board_id, ids)
        actor = facts.get(acting_user_id, NON_PRIVILEGED)
        target = facts.get(target_user_id, NON_PRIVILEGED)

        if not actor.is_admin:
            raise AuthorizationError(AuthorizationError.ADMIN_REQUIRED)
        if requested_role not in allowed_roles_for_plan(plan):
            raise AuthorizationError(ROLE_NOT_IN_PLAN)
        if target.is_privileged and requested_role == ViewerRole.restricted:
            raise AuthorizationError(AuthorizationError.PRIVILEGED_TARGET)
        if acting_user_id == target_user_id:
            raise AuthorizationError(AuthorizationError.SELF_MODIFICATION)

        if limit is not None and requested_role != ViewerRole.restricted and not target.is_privileged:
            already_counted = any(
                row.monday_user_id == target_user_id and counts_against_cap(row.status)
                for row in active_rows
            )
            if not already_counted:
                effective_count = sum(
                    1
                    for row in active_rows
                    if not facts.get(row.monday_user_id, NON_PRIVILEGED).is_privileged
                )
                if effective_count + 1 > limit:
                    raise LimitError(LimitKind.viewers, plan, limit=limit, message="Viewer limit reached")

        viewer = await self.uow.viewers.upsert_status(
            board.id, target_user_id, to_stored_status(requested_role)
        )
        await self.uow.commit()
        logger.info(
            "User %s set role of %s on board %s to %s",
            acting_user_id,
            target_user_id,
            board.monday_board_id,
            requested_role.value,
        )
        return viewer

    async def enforce_viewer_cap(
        self, board: Board, credential: Optional[str], limit: int
    ) -> List[str]:
        """
        Demote excess non-privileged viewers to restricted.

        Rows are ordered by updated_at descending and restricted from the
        front, so long-standing viewers keep their access.

        Returns:
            monday.com user ids that were restricted
        """
        active_rows = await self.uow.viewers.list_active_by_board(board.id)
        if len(active_rows) <= limit:
            return []
        if not credential:
            logger.warning(
                "Skipping viewer cap on board %s: tenant has no monday.com credential",
                board.monday_board_id,
            )
            return []

        facts = await self.role_facts(
            credential, board.monday_board_id, [row.monday_user_id for row in active_rows]
        )
        capped = [
            row
            for row in active_rows
            if not facts.get(row.monday_user_id, NON_PRIVILEGED).is_privileged
        ]
        excess = len(capped) - limit
        if excess <= 0:
            return []

        capped.sort(key=lambda row: row.updated_at, reverse=True)
        demoted = capped[:excess]
        await self.uow.viewers.set_status([row.id for row in demoted], ViewerStatus.restricted)
        await self.uow.commit()

        demoted_ids = [row.monday_user_id for row in demoted]
        logger.warning(
            "Viewer cap %s exceeded on board %s; restricted %s",
            limit,
            board.monday_board_id,
            demoted_ids,
        )
        return demoted_ids
