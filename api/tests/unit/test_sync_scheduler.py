"""
Tests del scheduler: cada corrida recorre las hojas configuradas y los errores
del sync nunca llegan a APScheduler.
"""
from unittest.mock import AsyncMock, Mock

import pytest
from apscheduler.triggers.cron import CronTrigger
from loguru import logger

from timetable_sync.core.config import GoogleSheetsSyncConfig
from timetable_sync.infrastructure.external.google_sheets.sheets_client import GoogleSheetsClient
from timetable_sync.infrastructure.external.google_sheets.sync_service import (
    SheetSyncReport,
    SheetToTimetableSync,
)
from timetable_sync.infrastructure.external.google_sheets.types import SheetData
from timetable_sync.infrastructure.repositories.timetable_repository import TimetableRepository
from timetable_sync.infrastructure.scheduling.sync_scheduler import (
    SYNC_JOB_ID,
    TELEGRAM_JOB_ID,
    TimetableSyncScheduler,
)
from timetable_sync.shared.exceptions.sync import (
    SheetsParseError,
    SheetsTransportError,
    TimetableStoreError,
)


def _config(**overrides) -> GoogleSheetsSyncConfig:
    values = dict(spreadsheet_id="sheet-id", default_sheet="Лист1", sheet_names=("Лист1",))
    values.update(overrides)
    return GoogleSheetsSyncConfig(**values)


def _sync_service(**config_overrides) -> Mock:
    service = Mock()
    service.config = _config(**config_overrides)
    service.run_many = AsyncMock()
    return service


def _real_service(session_factory, client: Mock, **config_overrides) -> SheetToTimetableSync:
    return SheetToTimetableSync(
        config=_config(**config_overrides),
        client=client,
        session_factory=session_factory,
    )


def _row(group: str) -> dict:
    return {
        "Группа": group,
        "Дата": "08.11.24",
        "Время": "09:00",
        "Дисциплина": "Математика",
        "ФИО преподавателя": "Иванов И.И.",
    }


@pytest.fixture
def error_logs():
    """Mensajes de nivel ERROR emitidos durante el test."""
    messages = []
    handler_id = logger.add(messages.append, level="ERROR", format="{message}")
    yield messages
    logger.remove(handler_id)


@pytest.mark.asyncio
async def test_scheduled_sync_covers_every_configured_sheet(session_factory):
    client = Mock(spec=GoogleSheetsClient)
    client.get_sheet_data.side_effect = [
        SheetData(title="Лист1", rows=[_row("A")]),
        SheetData(title="Лист2", rows=[_row("B")]),
    ]
    service = _real_service(session_factory, client, sheet_names=("Лист1", "Лист2"))

    reports = await TimetableSyncScheduler(service).run_scheduled_sync()

    fetched = [c.args[1] for c in client.get_sheet_data.call_args_list]
    assert fetched == ["Лист1", "Лист2"]
    assert [r.sheet for r in reports] == ["Лист1", "Лист2"]
    async with session_factory() as db:
        assert await TimetableRepository(db).list_groups() == ["A", "B"]


@pytest.mark.asyncio
async def test_scheduled_sync_falls_back_to_default_sheet(session_factory):
    client = Mock(spec=GoogleSheetsClient)
    client.get_sheet_data.return_value = SheetData(title="Лист1", rows=[])
    service = _real_service(session_factory, client, sheet_names=())

    await TimetableSyncScheduler(service).run_scheduled_sync()

    client.get_sheet_data.assert_called_once()
    assert client.get_sheet_data.call_args.args == ("sheet-id", "Лист1")


@pytest.mark.asyncio
async def test_failed_sheet_logs_transport_details_and_cycle_continues(session_factory, error_logs):
    client = Mock(spec=GoogleSheetsClient)
    client.get_sheet_data.side_effect = [
        SheetsTransportError(
            "Error HTTP al descargar la hoja",
            url="https://docs.google.com/x",
            http_status=503,
            reason="Service Unavailable",
        ),
        SheetData(title="Лист2", rows=[_row("B")]),
    ]
    service = _real_service(session_factory, client, sheet_names=("Лист1", "Лист2"))

    reports = await TimetableSyncScheduler(service).run_scheduled_sync()

    assert [r.success for r in reports] == [False, True]
    assert reports[0].error_details == {
        "url": "https://docs.google.com/x",
        "status_code": 503,
        "reason": "Service Unavailable",
    }
    assert len(error_logs) == 1
    logged = str(error_logs[0])
    assert "Лист1" in logged
    assert "https://docs.google.com/x" in logged
    assert "503" in logged
    assert "Service Unavailable" in logged


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        SheetsTransportError("timeout", url="http://x", http_status=504, reason="Gateway Timeout"),
        SheetsParseError("bad json", payload="{oops"),
        TimetableStoreError("db down", stage="delete", groups=["A"]),
        RuntimeError("inesperado"),
    ],
)
async def test_scheduled_sync_swallows_errors(error, error_logs):
    service = _sync_service()
    service.run_many.side_effect = error

    result = await TimetableSyncScheduler(service).run_scheduled_sync()

    assert result is None
    service.run_many.assert_awaited_once_with()
    assert len(error_logs) == 1


@pytest.mark.asyncio
async def test_swallowed_transport_error_keeps_details_in_log(error_logs):
    service = _sync_service()
    service.run_many.side_effect = SheetsTransportError(
        "timeout", url="http://x/gviz", http_status=504, reason="Gateway Timeout"
    )

    await TimetableSyncScheduler(service).run_scheduled_sync()

    logged = str(error_logs[0])
    assert "SHEETS_TRANSPORT_ERROR" in logged
    assert "http://x/gviz" in logged
    assert "504" in logged
    assert "Gateway Timeout" in logged


@pytest.mark.asyncio
async def test_scheduled_sync_returns_reports():
    service = _sync_service()
    reports = [SheetSyncReport(sheet="Лист1", source_rows_fetched=3, message="ok")]
    service.run_many.return_value = reports

    assert await TimetableSyncScheduler(service).run_scheduled_sync() is reports


def test_register_jobs_uses_cron_and_overlap_limit():
    service = _sync_service(sync_cron="*/15 * * * *", max_overlapping_runs=1)
    scheduler = TimetableSyncScheduler(service)

    scheduler.register_jobs()

    job = scheduler.scheduler.get_job(SYNC_JOB_ID)
    assert job is not None
    assert isinstance(job.trigger, CronTrigger)
    assert job.max_instances == 1
    assert job.coalesce is False
    assert scheduler.scheduler.get_job(TELEGRAM_JOB_ID) is None


def test_register_jobs_adds_polling_when_bot_present():
    scheduler = TimetableSyncScheduler(_sync_service(), bot=Mock(), telegram_poll_interval_s=7)

    scheduler.register_jobs()

    assert scheduler.scheduler.get_job(TELEGRAM_JOB_ID) is not None


@pytest.mark.asyncio
async def test_telegram_polling_errors_are_logged_not_raised():
    bot = Mock()
    bot.process_updates = AsyncMock(side_effect=RuntimeError("sin red"))

    await TimetableSyncScheduler(_sync_service(), bot=bot).run_telegram_polling()

    bot.process_updates.assert_awaited_once()
