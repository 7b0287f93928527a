from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from context_service.app.services.identity_provider import UserProfile
from context_service.app.use_cases.viewers import (
    GetViewerStatusUseCase,
    RemoveViewerUseCase,
    SetViewerRoleUseCase,
)
from context_service.domain.entities import BoardViewer, PlanId, ViewerStatus
from context_service.domain.errors import AuthorizationError
from tests.fixtures.contexts import SESSION, enter_board, make_resolved


@pytest.fixture
def uow(mock_uow):
    mock_uow.viewers = MagicMock()
    mock_uow.viewers.get = AsyncMock(return_value=None)
    mock_uow.viewers.list_active_by_board = AsyncMock(return_value=[])
    mock_uow.viewers.upsert_status = AsyncMock()
    mock_uow.viewers.set_status = AsyncMock()
    mock_uow.viewers.update = AsyncMock(side_effect=lambda viewer: viewer)
    mock_uow.viewers.delete = AsyncMock()
    return mock_uow


@pytest.mark.asyncio
async def test_status_of_admin_without_row(uow, identity_provider):
    identity_provider.admins.add("1")
    use_case = enter_board(GetViewerStatusUseCase(uow, identity_provider), make_resolved())

    result = await use_case.execute(SESSION, "500")

    assert result.value.model_dump() == {
        "role": "editor",
        "is_admin": True,
        "is_owner": False,
        "can_edit": True,
        "can_manage": True,
    }


@pytest.mark.asyncio
async def test_status_of_stored_viewer(uow, identity_provider):
    resolved = make_resolved(PlanId.plus)
    uow.viewers.get.return_value = BoardViewer(board_id=resolved.board.id, monday_user_id="1", status=ViewerStatus.allowed)
    use_case = enter_board(GetViewerStatusUseCase(uow, identity_provider), resolved)

    result = await use_case.execute(SESSION, "500")

    assert result.value.role == "viewer"
    assert result.value.can_edit is False


@pytest.mark.asyncio
async def test_set_role_refreshes_profile(uow, identity_provider):
    identity_provider.admins.add("1")
    identity_provider.profiles["2"] = UserProfile(id="2", name="Ada", email="ada@example.com")
    resolved = make_resolved(PlanId.premium)
    uow.viewers.get.return_value = BoardViewer(
        board_id=resolved.board.id, monday_user_id="2", status=ViewerStatus.editor
    )
    use_case = enter_board(SetViewerRoleUseCase(uow, identity_provider), resolved)

    result = await use_case.execute(SESSION, "500", "2", "Editors")

    assert result.value.role == "editor"
    assert result.value.name == "Ada"
    uow.viewers.upsert_status.assert_awaited_once_with(resolved.board.id, "2", ViewerStatus.editor)


@pytest.mark.asyncio
async def test_set_role_input_validation(uow, identity_provider):
    use_case = enter_board(SetViewerRoleUseCase(uow, identity_provider), make_resolved())

    assert (await use_case.execute(SESSION, "500", "2", "owner")).error.code == "INVALID_ROLE"
    assert (await use_case.execute(SESSION, "500", " ", "viewer")).error.code == "INVALID_USER"


@pytest.mark.asyncio
async def test_remove_viewer(uow, identity_provider):
    identity_provider.admins.add("1")
    resolved = make_resolved(PlanId.plus)
    uow.viewers.get.return_value = BoardViewer(id=uuid4(), board_id=resolved.board.id, monday_user_id="2")
    use_case = enter_board(RemoveViewerUseCase(uow, identity_provider), resolved)

    result = await use_case.execute(SESSION, "500", "2")

    assert result.value.removed is True
    uow.viewers.delete.assert_awaited_once_with(resolved.board.id, "2")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "target,reason",
    [
        ("1", AuthorizationError.SELF_MODIFICATION),
        ("7", AuthorizationError.PRIVILEGED_TARGET),
    ],
)
async def test_remove_viewer_rejections(uow, identity_provider, target, reason):
    identity_provider.admins.add("1")
    identity_provider.owners.add("7")
    use_case = enter_board(RemoveViewerUseCase(uow, identity_provider), make_resolved(PlanId.plus))

    with pytest.raises(AuthorizationError) as exc:
        await use_case.execute(SESSION, "500", target)

    assert exc.value.reason == reason


@pytest.mark.asyncio
async def test_remove_missing_viewer(uow, identity_provider):
    identity_provider.admins.add("1")
    use_case = enter_board(RemoveViewerUseCase(uow, identity_provider), make_resolved(PlanId.plus))

    result = await use_case.execute(SESSION, "500", "2")

    assert result.error.code == "VIEWER_NOT_FOUND"
