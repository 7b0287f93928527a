from typing import Optional

from context_service.app.services.identity_provider import IIdentityProvider, SessionIdentity
from context_service.app.services.tenancy import (
    ResolvedContext,
    TenantBoardResolver,
    UsageAccountant,
)
from context_service.app.services.token_cipher import TokenCipher
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.app.services.viewer_access import ViewerAccessAuthority


class BoardScopedUseCase:
    """
    Base for use cases acting on one board.

    Wires the resolver, accountant and access authority onto the use case's
    unit of work. ``_enter_board`` resolves the board and runs the baseline
    viewer check, rolling back a board provisioned for a denied caller.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        identity_provider: IIdentityProvider,
        cipher: Optional[TokenCipher] = None,
    ):
        self.uow = uow
        self.identity_provider = identity_provider
        self.cipher = cipher
        self.authority = ViewerAccessAuthority(uow, identity_provider)
        self.resolver = TenantBoardResolver(uow, cipher, self.authority)
        self.accountant = UsageAccountant(uow)

    async def _enter_board(self, session: SessionIdentity, monday_board_id) -> ResolvedContext:
        resolved = await self.resolver.resolve(session.account_id, monday_board_id, session.user_id)
        if session.user_id:
            await self.authority.assert_allowed_with_rollback(resolved, session.user_id)
        return resolved

    async def _enter_board_as_editor(self, session: SessionIdentity, monday_board_id) -> ResolvedContext:
        resolved = await self._enter_board(session, monday_board_id)
        await self.authority.ensure_editor_access(resolved.board, session.user_id, resolved.credential)
        return resolved
