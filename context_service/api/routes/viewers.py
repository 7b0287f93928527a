from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field

from context_service.api.error import ClientError, ServerError
from context_service.api.utils.board_ref import BoardId, board_ref
from context_service.api.utils.rate_limit import (
    read_rate_limit,
    viewer_mutation_rate_limit,
    viewers_remove_rate_limit,
    viewers_status_rate_limit,
)
from context_service.app.services.identity_provider import IIdentityProvider, SessionIdentity
from context_service.app.services.token_cipher import TokenCipher
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.app.use_cases.viewers import (
    GetViewerStatusUseCase,
    ListViewersUseCase,
    RemoveViewerResponse,
    RemoveViewerUseCase,
    SetViewerRoleUseCase,
    ViewerItem,
    ViewerListResponse,
    ViewerStatusResponse,
)
from context_service.depends import (
    get_identity_provider,
    get_session_identity,
    get_token_cipher,
    get_unit_of_work,
)

router = APIRouter(prefix="/viewers", tags=["Viewers"])


class SetViewerRoleRequest(BaseModel):
    """
    Set viewer role HTTP request payload
    """

    model_config = ConfigDict(populate_by_name=True)

    board_id: Optional[BoardId] = Field(None, alias="boardId", description="monday.com board id")
    user_id: BoardId = Field(..., alias="userId", description="Target monday.com user id")
    role: str = Field(..., description="viewer, restricted or editor")


class RemoveViewerRequest(BaseModel):
    """
    Remove viewer HTTP request payload
    """

    model_config = ConfigDict(populate_by_name=True)

    board_id: Optional[BoardId] = Field(None, alias="boardId", description="monday.com board id")
    user_id: BoardId = Field(..., alias="userId", description="Target monday.com user id")


@router.get(
    "/status",
    status_code=status.HTTP_200_OK,
    response_model=ViewerStatusResponse,
    dependencies=[Depends(viewers_status_rate_limit)],
)
async def get_viewer_status(
    board_id: Optional[str] = Query(None, alias="boardId"),
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    Caller's Viewer Status

    Raises:
        - 400 Bad Request: Session has no user id
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Viewer restricted
    """
    use_case = GetViewerStatusUseCase(uow, identity_provider, cipher)
    result = await use_case.execute(session, board_ref(board_id, session))

    if result.is_err():
        error = result.error
        if error.code == "USER_REQUIRED":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=ViewerListResponse,
    dependencies=[Depends(read_rate_limit)],
)
async def list_viewers(
    board_id: Optional[str] = Query(None, alias="boardId"),
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    List Board Viewers

    Raises:
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Viewer restricted
    """
    use_case = ListViewersUseCase(uow, identity_provider, cipher)
    result = await use_case.execute(session, board_ref(board_id, session))

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.post(
    "/set-role",
    status_code=status.HTTP_200_OK,
    response_model=ViewerItem,
    dependencies=[Depends(viewer_mutation_rate_limit)],
)
async def set_viewer_role(
    request: SetViewerRoleRequest,
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    Set Viewer Role

    Raises:
        - 400 Bad Request: Unknown role or missing user id
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Admin required, self-change, privileged target,
                        role not in plan or viewer limit reached
    """
    use_case = SetViewerRoleUseCase(uow, identity_provider, cipher)
    result = await use_case.execute(
        session, board_ref(request.board_id, session), str(request.user_id), request.role
    )

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_ROLE", "INVALID_USER"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


@router.post(
    "/remove",
    status_code=status.HTTP_200_OK,
    response_model=RemoveViewerResponse,
    dependencies=[Depends(viewers_remove_rate_limit)],
)
async def remove_viewer(
    request: RemoveViewerRequest,
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    Remove Viewer

    Raises:
        - 400 Bad Request: Missing user id
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Admin required, self-removal or privileged target
        - 404 Not Found: No viewer row for the user
    """
    use_case = RemoveViewerUseCase(uow, identity_provider, cipher)
    result = await use_case.execute(session, board_ref(request.board_id, session), str(request.user_id))

    if result.is_err():
        error = result.error
        if error.code == "INVALID_USER":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "VIEWER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value
