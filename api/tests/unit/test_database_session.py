from unittest.mock import patch

import pytest

from timetable_sync.application.use_cases.timetable_use_cases import TimetableUseCases
from timetable_sync.infrastructure.database import session as db_session_module
from timetable_sync.infrastructure.database.models import TimetableModel
from timetable_sync.infrastructure.database.session import SQLITE_BUSY_TIMEOUT_S, build_engine


def test_sqlite_engine_waits_for_write_lock():
    with patch.object(db_session_module, "create_async_engine") as create:
        build_engine("sqlite+aiosqlite:///./timetable.db")

    kwargs = create.call_args.kwargs
    assert kwargs["connect_args"] == {"timeout": SQLITE_BUSY_TIMEOUT_S}
    assert "pool_size" not in kwargs


def test_postgres_engine_uses_pool():
    with patch.object(db_session_module, "create_async_engine") as create:
        build_engine("postgresql+asyncpg://u:p@localhost/timetable")

    kwargs = create.call_args.kwargs
    assert kwargs["pool_pre_ping"] is True
    assert "connect_args" not in kwargs


def test_overrides_win_over_defaults():
    with patch.object(db_session_module, "create_async_engine") as create:
        build_engine("sqlite+aiosqlite:///:memory:", echo=True)

    assert create.call_args.kwargs["echo"] is True


def test_timetable_table_has_no_update_timestamp():
    # Los registros solo se borran e insertan, nunca se actualizan.
    assert "updated_at" not in TimetableModel.__table__.columns
    assert "created_at" in TimetableModel.__table__.columns


@pytest.mark.asyncio
async def test_session_factory_keeps_rows_readable_after_commit(session_factory, items_factory):
    async with session_factory() as db:
        await TimetableUseCases(db).overwrite_schedules(items_factory("A", 1))
        stored = await TimetableUseCases(db).get_schedule_for_group("A")
        await db.commit()

    assert stored[0].group == "A"
