from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field

from context_service.api.error import ClientError, ServerError
from context_service.api.utils.board_ref import BoardId, board_ref
from context_service.api.utils.rate_limit import (
    file_mutation_rate_limit,
    files_confirm_upload_rate_limit,
    files_recovery_list_rate_limit,
    files_recovery_restore_rate_limit,
    files_sign_upload_rate_limit,
    read_rate_limit,
)
from context_service.app.services.identity_provider import IIdentityProvider, SessionIdentity
from context_service.app.services.object_storage import IObjectStorage
from context_service.app.services.token_cipher import TokenCipher
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.app.use_cases.files import (
    ConfirmUploadUseCase,
    DeleteFileResponse,
    DeleteFileUseCase,
    DownloadUrlResponse,
    FileItem,
    FileListResponse,
    GetDownloadUrlUseCase,
    ListFilesUseCase,
    ListRecoveryUseCase,
    RecoveryListResponse,
    RestoreRecoveryUseCase,
    SignUploadResponse,
    SignUploadUseCase,
)
from context_service.depends import (
    get_identity_provider,
    get_object_storage,
    get_session_identity,
    get_token_cipher,
    get_unit_of_work,
)

router = APIRouter(prefix="/files", tags=["Files"])


class SignUploadRequest(BaseModel):
    """
    Sign upload HTTP request payload

    The declared size is only used for the pre-flight storage check.
    """

    model_config = ConfigDict(populate_by_name=True)

    board_id: Optional[BoardId] = Field(None, alias="boardId", description="monday.com board id")
    filename: Optional[str] = Field(None, description="Original file name (1-200 chars)")
    content_type: Optional[str] = Field(None, alias="contentType", description="MIME type")
    size_bytes: Optional[int] = Field(None, alias="sizeBytes", description="Declared size in bytes")


class ConfirmUploadRequest(BaseModel):
    """
    Confirm upload HTTP request payload
    """

    model_config = ConfigDict(populate_by_name=True)

    board_id: Optional[BoardId] = Field(None, alias="boardId", description="monday.com board id")
    storage_path: Optional[str] = Field(None, alias="storagePath", description="Path returned by sign-upload")
    filename: Optional[str] = Field(None, description="Original file name")
    content_type: Optional[str] = Field(None, alias="contentType", description="MIME type")


class FileRequest(BaseModel):
    """
    Single file HTTP request payload
    """

    model_config = ConfigDict(populate_by_name=True)

    board_id: Optional[BoardId] = Field(None, alias="boardId", description="monday.com board id")
    file_id: UUID = Field(..., alias="fileId", description="File id")


class RestoreRecoveryRequest(BaseModel):
    """
    Restore recovery record HTTP request payload
    """

    model_config = ConfigDict(populate_by_name=True)

    board_id: Optional[BoardId] = Field(None, alias="boardId", description="monday.com board id")
    recovery_id: UUID = Field(..., alias="recoveryId", description="Recovery record id")


@router.post(
    "/sign-upload",
    status_code=status.HTTP_200_OK,
    response_model=SignUploadResponse,
    dependencies=[Depends(files_sign_upload_rate_limit)],
)
async def sign_upload(
    request: SignUploadRequest,
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    storage: IObjectStorage = Depends(get_object_storage),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    Sign File Upload

    Raises:
        - 400 Bad Request: Invalid size, file name or content type
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Editor access required or storage limit reached
        - 502 Bad Gateway: Storage unavailable
    """
    use_case = SignUploadUseCase(uow, identity_provider, storage, cipher)
    result = await use_case.execute(
        session,
        board_ref(request.board_id, session),
        request.filename,
        request.content_type,
        request.size_bytes,
    )

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.post(
    "/confirm",
    status_code=status.HTTP_201_CREATED,
    response_model=FileItem,
    dependencies=[Depends(files_confirm_upload_rate_limit)],
)
async def confirm_upload(
    request: ConfirmUploadRequest,
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    storage: IObjectStorage = Depends(get_object_storage),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    Confirm File Upload

    Registers the uploaded object using the size read back from storage.

    Raises:
        - 400 Bad Request: Invalid storage path or object not uploaded
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Editor access required or storage limit reached
        - 409 Conflict: Upload already confirmed
        - 413 Request Entity Too Large: Object exceeds the maximum size
    """
    use_case = ConfirmUploadUseCase(uow, identity_provider, storage, cipher)
    result = await use_case.execute(
        session,
        board_ref(request.board_id, session),
        request.storage_path,
        request.filename,
        request.content_type,
    )

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_STORAGE_PATH", "UPLOAD_NOT_FOUND"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "FILE_ALREADY_CONFIRMED":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == "FILE_TOO_LARGE":
            raise ClientError(error, status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE)
        raise ServerError(error)

    return result.value


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=FileListResponse,
    dependencies=[Depends(read_rate_limit)],
)
async def list_files(
    board_id: Optional[str] = Query(None, alias="boardId"),
    q: Optional[str] = Query(None, max_length=200),
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    storage: IObjectStorage = Depends(get_object_storage),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    List Board Files

    Raises:
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Viewer restricted
    """
    use_case = ListFilesUseCase(uow, identity_provider, storage, cipher)
    result = await use_case.execute(session, board_ref(board_id, session), q)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get(
    "/download",
    status_code=status.HTTP_200_OK,
    response_model=DownloadUrlResponse,
    dependencies=[Depends(read_rate_limit)],
)
async def get_download_url(
    file_id: UUID = Query(..., alias="fileId"),
    board_id: Optional[str] = Query(None, alias="boardId"),
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    storage: IObjectStorage = Depends(get_object_storage),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    Signed Download URL

    Raises:
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Viewer restricted
        - 404 Not Found: File not found on this board
    """
    use_case = GetDownloadUrlUseCase(uow, identity_provider, storage, cipher)
    result = await use_case.execute(session, board_ref(board_id, session), file_id)

    if result.is_err():
        error = result.error
        if error.code == "FILE_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.post(
    "/delete",
    status_code=status.HTTP_200_OK,
    response_model=DeleteFileResponse,
    dependencies=[Depends(file_mutation_rate_limit)],
)
async def delete_file(
    request: FileRequest,
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    storage: IObjectStorage = Depends(get_object_storage),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    Delete File

    Vault plans keep the object restorable for seven days.

    Raises:
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Editor access required
        - 404 Not Found: File not found on this board
        - 502 Bad Gateway: Storage unavailable
    """
    use_case = DeleteFileUseCase(uow, identity_provider, storage, cipher)
    result = await use_case.execute(session, board_ref(request.board_id, session), request.file_id)

    if result.is_err():
        error = result.error
        if error.code == "FILE_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.get(
    "/recovery",
    status_code=status.HTTP_200_OK,
    response_model=RecoveryListResponse,
    dependencies=[Depends(files_recovery_list_rate_limit)],
)
async def list_recovery(
    board_id: Optional[str] = Query(None, alias="boardId"),
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    storage: IObjectStorage = Depends(get_object_storage),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    List Recovery Vault

    Raises:
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Editor access required or plan without recovery vault
    """
    use_case = ListRecoveryUseCase(uow, identity_provider, storage, cipher)
    result = await use_case.execute(session, board_ref(board_id, session))

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.post(
    "/recovery/restore",
    status_code=status.HTTP_200_OK,
    response_model=FileItem,
    dependencies=[Depends(files_recovery_restore_rate_limit)],
)
async def restore_recovery(
    request: RestoreRecoveryRequest,
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    storage: IObjectStorage = Depends(get_object_storage),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    Restore File from Recovery Vault

    Raises:
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Editor access required, plan without vault or storage limit reached
        - 404 Not Found: Recovery record not found
        - 409 Conflict: Already restored
        - 410 Gone: Recovery window has passed
    """
    use_case = RestoreRecoveryUseCase(uow, identity_provider, storage, cipher)
    result = await use_case.execute(
        session, board_ref(request.board_id, session), request.recovery_id
    )

    if result.is_err():
        error = result.error
        if error.code == "RECOVERY_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "RECOVERY_ALREADY_RESTORED":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == "RECOVERY_EXPIRED":
            raise ClientError(error, status_code=status.HTTP_410_GONE)
        raise ServerError(error)

    return result.value
