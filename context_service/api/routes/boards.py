from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field

from context_service.api.error import ClientError, ServerError
from context_service.api.utils.board_ref import BoardId, board_ref
from context_service.api.utils.rate_limit import boards_delete_rate_limit, boards_list_rate_limit
from context_service.app.services.identity_provider import IIdentityProvider, SessionIdentity
from context_service.app.services.object_storage import IObjectStorage
from context_service.app.services.token_cipher import TokenCipher
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.app.use_cases.boards import (
    BoardListResponse,
    DeleteBoardResponse,
    DeleteBoardUseCase,
    ListBoardsUseCase,
)
from context_service.depends import (
    get_identity_provider,
    get_object_storage,
    get_session_identity,
    get_token_cipher,
    get_unit_of_work,
)

router = APIRouter(prefix="/boards", tags=["Boards"])


class DeleteBoardRequest(BaseModel):
    """
    Delete board HTTP request payload

    boardId is the board the app runs on; targetBoardId the board to delete.
    """

    model_config = ConfigDict(populate_by_name=True)

    board_id: Optional[BoardId] = Field(None, alias="boardId", description="Current monday.com board id")
    target_board_id: BoardId = Field(..., alias="targetBoardId", description="monday.com board id to delete")


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=BoardListResponse,
    dependencies=[Depends(boards_list_rate_limit)],
)
async def list_boards(
    board_id: Optional[str] = Query(None, alias="boardId"),
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    List Tenant Boards

    Raises:
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Viewer restricted
    """
    use_case = ListBoardsUseCase(uow, identity_provider, cipher)
    result = await use_case.execute(session, board_ref(board_id, session))

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.post(
    "/delete",
    status_code=status.HTTP_200_OK,
    response_model=DeleteBoardResponse,
    dependencies=[Depends(boards_delete_rate_limit)],
)
async def delete_board(
    request: DeleteBoardRequest,
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    storage: IObjectStorage = Depends(get_object_storage),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    Delete Board

    Removes the board with its notes, files, recovery records and viewers.

    Raises:
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Admin (or enabled board owner) required
        - 404 Not Found: Board not found in this account
    """
    use_case = DeleteBoardUseCase(uow, identity_provider, storage, cipher)
    result = await use_case.execute(
        session, board_ref(request.board_id, session), str(request.target_board_id)
    )

    if result.is_err():
        error = result.error
        if error.code == "BOARD_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value
