from fastapi import APIRouter, Depends, status

from context_service.api.error import ServerError
from context_service.api.utils.cron_auth import verify_cron_secret
from context_service.app.services.identity_provider import IOAuthClient
from context_service.app.services.object_storage import IObjectStorage
from context_service.app.services.token_cipher import TokenCipher
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.app.use_cases.billing import RefreshTenantTokensUseCase, TokenRefreshResponse
from context_service.app.use_cases.files import PurgeRecoveryResponse, PurgeRecoveryVaultUseCase
from context_service.app.use_cases.notes import SnapshotSweepResponse, TakeNoteSnapshotsUseCase
from context_service.depends import (
    get_oauth_client,
    get_object_storage,
    get_token_cipher,
    get_unit_of_work,
)

router = APIRouter(prefix="/cron", tags=["Cron"], dependencies=[Depends(verify_cron_secret)])


@router.api_route(
    "/snapshot-notes",
    methods=["GET", "POST"],
    status_code=status.HTTP_200_OK,
    response_model=SnapshotSweepResponse,
)
async def snapshot_notes(uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Daily Note Snapshots

    Raises:
        - 401 Unauthorized: Cron secret missing or invalid
    """
    result = await TakeNoteSnapshotsUseCase(uow).execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.api_route(
    "/recovery-vault",
    methods=["GET", "POST"],
    status_code=status.HTTP_200_OK,
    response_model=PurgeRecoveryResponse,
)
async def purge_recovery_vault(
    uow: UnitOfWork = Depends(get_unit_of_work),
    storage: IObjectStorage = Depends(get_object_storage),
):
    """
    Purge Expired Recovery Records

    Raises:
        - 401 Unauthorized: Cron secret missing or invalid
    """
    result = await PurgeRecoveryVaultUseCase(uow, storage).execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.api_route(
    "/refresh-monday",
    methods=["GET", "POST"],
    status_code=status.HTTP_200_OK,
    response_model=TokenRefreshResponse,
)
async def refresh_monday_tokens(
    uow: UnitOfWork = Depends(get_unit_of_work),
    oauth_client: IOAuthClient = Depends(get_oauth_client),
    cipher: TokenCipher = Depends(get_token_cipher),
):
    """
    Refresh monday.com Access Tokens

    Raises:
        - 401 Unauthorized: Cron secret missing or invalid
    """
    result = await RefreshTenantTokensUseCase(uow, oauth_client, cipher).execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value
