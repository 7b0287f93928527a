from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field

from context_service.api.error import ClientError, ServerError
from context_service.api.utils.board_ref import BoardId, board_ref
from context_service.api.utils.rate_limit import (
    file_mutation_rate_limit,
    notes_snapshots_list_rate_limit,
    notes_snapshots_restore_rate_limit,
    read_rate_limit,
)
from context_service.app.services.identity_provider import IIdentityProvider, SessionIdentity
from context_service.app.services.token_cipher import TokenCipher
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.app.use_cases.notes import (
    GetNoteUseCase,
    ListSnapshotsUseCase,
    NoteResponse,
    RestoreSnapshotUseCase,
    SaveNoteUseCase,
    SnapshotListResponse,
)
from context_service.depends import (
    get_identity_provider,
    get_session_identity,
    get_token_cipher,
    get_unit_of_work,
)

router = APIRouter(prefix="/notes", tags=["Notes"])


class SaveNoteRequest(BaseModel):
    """
    Save note HTTP request payload
    """

    model_config = ConfigDict(populate_by_name=True)

    board_id: Optional[BoardId] = Field(None, alias="boardId", description="monday.com board id")
    html: str = Field("", description="Rich-text note body")


class RestoreSnapshotRequest(BaseModel):
    """
    Restore snapshot HTTP request payload
    """

    model_config = ConfigDict(populate_by_name=True)

    board_id: Optional[BoardId] = Field(None, alias="boardId", description="monday.com board id")
    snapshot_id: UUID = Field(..., alias="snapshotId", description="Snapshot to restore")


@router.get(
    "", status_code=status.HTTP_200_OK, response_model=NoteResponse, dependencies=[Depends(read_rate_limit)]
)
async def get_note(
    board_id: Optional[str] = Query(None, alias="boardId"),
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    Get Board Note

    Raises:
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Viewer restricted or board limit reached
    """
    use_case = GetNoteUseCase(uow, identity_provider, cipher)
    result = await use_case.execute(session, board_ref(board_id, session))

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.post(
    "",
    status_code=status.HTTP_200_OK,
    response_model=NoteResponse,
    dependencies=[Depends(file_mutation_rate_limit)],
)
async def save_note(
    request: SaveNoteRequest,
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    Save Board Note

    Upserts the note. An effectively empty body never replaces a non-empty note.

    Raises:
        - 413 Request Entity Too Large: Note too large
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Editor access required
    """
    use_case = SaveNoteUseCase(uow, identity_provider, cipher)
    result = await use_case.execute(session, board_ref(request.board_id, session), request.html)

    if result.is_err():
        error = result.error
        if error.code == "NOTE_TOO_LARGE":
            raise ClientError(error, status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE)
        raise ServerError(error)

    return result.value


@router.get(
    "/snapshots",
    status_code=status.HTTP_200_OK,
    response_model=SnapshotListResponse,
    dependencies=[Depends(notes_snapshots_list_rate_limit)],
)
async def list_snapshots(
    board_id: Optional[str] = Query(None, alias="boardId"),
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    List Note Snapshots

    Raises:
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Plan without snapshots or viewer restricted
    """
    use_case = ListSnapshotsUseCase(uow, identity_provider, cipher)
    result = await use_case.execute(session, board_ref(board_id, session))

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.post(
    "/snapshots/restore",
    status_code=status.HTTP_200_OK,
    response_model=NoteResponse,
    dependencies=[Depends(notes_snapshots_restore_rate_limit)],
)
async def restore_snapshot(
    request: RestoreSnapshotRequest,
    session: SessionIdentity = Depends(get_session_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    Restore Note Snapshot

    Raises:
        - 401 Unauthorized: Invalid session token
        - 403 Forbidden: Editor access required or plan without snapshots
        - 404 Not Found: Snapshot not found
    """
    use_case = RestoreSnapshotUseCase(uow, identity_provider, cipher)
    result = await use_case.execute(
        session, board_ref(request.board_id, session), request.snapshot_id
    )

    if result.is_err():
        error = result.error
        if error.code == "SNAPSHOT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value
