from datetime import date
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from context_service.app.use_cases.notes import (
    ListSnapshotsUseCase,
    RestoreSnapshotUseCase,
    SaveNoteUseCase,
    TakeNoteSnapshotsUseCase,
)
from context_service.app.use_cases.notes.html_text import is_effectively_empty, sanitize_note_html
from context_service.app.use_cases.notes.save_note_use_case import MAX_NOTE_LENGTH
from context_service.domain.entities import Board, Note, NoteSnapshot, PlanId, Tenant
from context_service.domain.errors import LimitError
from tests.fixtures.contexts import SESSION, enter_board, make_resolved


@pytest.fixture
def uow(mock_uow):
    mock_uow.notes = MagicMock()
    mock_uow.notes.get_by_board = AsyncMock(return_value=None)
    mock_uow.notes.upsert = AsyncMock(
        side_effect=lambda board_id, tenant_id, html, user_id: Note(
            board_id=board_id, tenant_id=tenant_id, html=html, updated_by=user_id
        )
    )
    mock_uow.note_snapshots = MagicMock()
    mock_uow.note_snapshots.list_by_board = AsyncMock(return_value=[])
    mock_uow.note_snapshots.upsert_for_day = AsyncMock()
    mock_uow.note_snapshots.prune = AsyncMock(return_value=0)
    return mock_uow


@pytest.mark.parametrize(
    "html,empty",
    [
        ("", True),
        ("<p></p>", True),
        ("<p>&nbsp;</p><br/>", True),
        ("<p>  &#160;</p>", True),
        ("<p>Hi</p>", False),
        ("plain text", False),
    ],
)
def test_is_effectively_empty(html, empty):
    assert is_effectively_empty(html) is empty


def test_sanitize_drops_scripts_handlers_and_unsafe_links():
    html = sanitize_note_html(
        '<p onclick="steal()">hi</p><script>alert(1)</script><a href="javascript:alert(2)">x</a>'
    )

    assert "<p>hi</p>" in html
    assert "<script" not in html
    assert "alert" not in html
    assert "onclick" not in html


def test_sanitize_keeps_safe_formatting():
    html = sanitize_note_html(
        '<h2 class="title">Plan</h2><span data-id="7" style="color: red">Ana</span>'
        '<a href="https://example.com" target="_blank">docs</a><a href="mailto:a@example.com">mail</a>'
    )

    assert '<h2 class="title">Plan</h2>' in html
    assert 'data-id="7"' in html
    assert 'style="color: red"' in html
    assert 'href="https://example.com"' in html
    assert 'target="_blank"' in html
    assert 'rel="noopener noreferrer"' in html
    assert 'href="mailto:a@example.com"' in html


@pytest.mark.parametrize(
    "html",
    [
        '<a href="//evil.example/x">x</a>',
        '<a href="data:text/html,hi">x</a>',
        '<img src="x" onerror="alert(1)">',
        '<iframe src="https://evil.example"></iframe>',
    ],
)
def test_sanitize_drops_unsafe_sources(html):
    cleaned = sanitize_note_html(html)

    assert "evil" not in cleaned
    assert "data:" not in cleaned
    assert "onerror" not in cleaned
    assert "<img" not in cleaned


@pytest.mark.asyncio
async def test_save_note(uow, identity_provider):
    resolved = make_resolved()
    use_case = enter_board(SaveNoteUseCase(uow, identity_provider), resolved)

    result = await use_case.execute(SESSION, "500", "<p>Hello</p>")

    assert result.is_ok()
    assert result.value.html == "<p>Hello</p>"
    assert result.value.updated_by == "1"
    assert result.value.monday_board_id == "500"
    uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_empty_save_never_overwrites_content(uow, identity_provider):
    resolved = make_resolved()
    existing = Note(board_id=resolved.board.id, tenant_id=resolved.tenant.id, html="<p>Keep me</p>")
    uow.notes.get_by_board.return_value = existing
    use_case = enter_board(SaveNoteUseCase(uow, identity_provider), resolved)

    result = await use_case.execute(SESSION, "500", "<p>&nbsp;</p>")

    assert result.is_ok()
    assert result.value.html == "<p>Keep me</p>"
    uow.notes.upsert.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_save_on_empty_note_is_written(uow, identity_provider):
    use_case = enter_board(SaveNoteUseCase(uow, identity_provider), make_resolved())

    result = await use_case.execute(SESSION, "500", "")

    assert result.is_ok()
    uow.notes.upsert.assert_awaited_once()


@pytest.mark.asyncio
async def test_oversized_note_is_rejected(uow, identity_provider):
    use_case = enter_board(SaveNoteUseCase(uow, identity_provider), make_resolved())

    result = await use_case.execute(SESSION, "500", "x" * (MAX_NOTE_LENGTH + 1))

    assert result.is_err()
    assert result.error.code == "NOTE_TOO_LARGE"


@pytest.mark.asyncio
async def test_snapshots_require_plan_feature(uow, identity_provider):
    use_case = enter_board(ListSnapshotsUseCase(uow, identity_provider), make_resolved(PlanId.premium))

    with pytest.raises(LimitError) as exc:
        await use_case.execute(SESSION, "500")

    assert exc.value.kind == "snapshots"


@pytest.mark.asyncio
async def test_snapshot_sweep_writes_and_prunes(uow):
    tenant = Tenant(id=uuid4(), account_id="1", plan=PlanId.pro)
    with_note = Board(id=uuid4(), tenant_id=tenant.id, monday_board_id="1")
    without_note = Board(id=uuid4(), tenant_id=tenant.id, monday_board_id="2")
    uow.tenants = MagicMock()
    uow.tenants.list_by_plans = AsyncMock(return_value=[tenant])
    uow.boards = MagicMock()
    uow.boards.list_by_tenant = AsyncMock(return_value=[with_note, without_note])
    uow.notes.get_by_board = AsyncMock(
        side_effect=lambda board_id: Note(board_id=board_id, tenant_id=tenant.id, html="<p>x</p>")
        if board_id == with_note.id
        else None
    )
    uow.note_snapshots.prune.return_value = 1

    result = await TakeNoteSnapshotsUseCase(uow).execute()

    assert result.value.model_dump() == {
        "tenants": 1,
        "boards": 2,
        "snapshots_written": 1,
        "snapshots_pruned": 1,
    }
    plans = set(uow.tenants.list_by_plans.await_args.args[0])
    assert plans == {"pro", "enterprise"}
    uow.note_snapshots.prune.assert_awaited_once_with(with_note.id, keep=7)


@pytest.mark.asyncio
async def test_save_stores_sanitized_html(uow, identity_provider):
    use_case = enter_board(SaveNoteUseCase(uow, identity_provider), make_resolved())

    result = await use_case.execute(SESSION, "500", '<p onclick="x()">Hi</p><script>alert(1)</script>')

    assert result.value.html == "<p>Hi</p>"
    stored_html = uow.notes.upsert.await_args.args[2]
    assert stored_html == "<p>Hi</p>"


@pytest.mark.asyncio
async def test_script_only_save_keeps_existing_note(uow, identity_provider):
    resolved = make_resolved()
    uow.notes.get_by_board.return_value = Note(
        board_id=resolved.board.id, tenant_id=resolved.tenant.id, html="<p>Keep me</p>"
    )
    use_case = enter_board(SaveNoteUseCase(uow, identity_provider), resolved)

    result = await use_case.execute(SESSION, "500", "<script>document.body.innerHTML = ''</script>")

    assert result.value.html == "<p>Keep me</p>"
    uow.notes.upsert.assert_not_awaited()


@pytest.mark.asyncio
async def test_restore_sanitizes_stored_snapshot(uow, identity_provider):
    resolved = make_resolved(PlanId.pro)
    snapshot = NoteSnapshot(
        board_id=resolved.board.id, html="<p>Old</p><script>alert(1)</script>", snapshot_date=date(2026, 10, 1)
    )
    uow.note_snapshots.get_by_id = AsyncMock(return_value=snapshot)
    use_case = enter_board(RestoreSnapshotUseCase(uow, identity_provider), resolved)

    result = await use_case.execute(SESSION, "500", snapshot.id)

    assert result.value.html == "<p>Old</p>"
    uow.commit.assert_awaited_once()
