from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from context_service.api.error import ServerError
from context_service.api.utils.board_ref import BoardId, board_ref
from context_service.api.utils.rate_limit import board_admin_delete_toggle_rate_limit
from context_service.app.services.identity_provider import IIdentityProvider, SessionIdentity
from context_service.app.services.token_cipher import TokenCipher
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.app.use_cases.boards import (
    BoardAdminDeleteResponse,
    SetBoardAdminDeleteUseCase,
)
from context_service.depends import (
    get_identity_provider,
    get_session_identity,
    get_token_cipher,
    get_unit_of_work,
)

router = APIRouter(prefix="/settings", tags=["Settings"])


class BoardAdminDeleteRequest(BaseModel):
    """
    Board admin delete setting HTTP request payload
    """

    model_config = ConfigDict(populate_by_name=True)

    board_id: Optional[BoardId] = Field(None, alias="boardId", description="monday.com board id")
    enabled: bool = Field(..., description="Allow board owners to delete their boards")


@router.post(
    "/board-admin-delete",
    status_code=status.HTTP_200_OK,
    response_model=BoardAdminDeleteResponse,
    dependencies=[Depends(board_admin_delete_toggle_rate_limit)],
)
async def set_board_admin_delete(
    request: BoardAdminDeleteRequest,
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    Toggle Board Owner Deletion

    Raises:
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Admin required
    """
    use_case = SetBoardAdminDeleteUseCase(uow, identity_provider, cipher)
    result = await use_case.execute(session, board_ref(request.board_id, session), request.enabled)

    if result.is_err():
        raise ServerError(result.error)

    return result.value
