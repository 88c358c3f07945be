"""
Tests del reemplazo por grupo (overwrite) y de las consultas del horario.
"""
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from timetable_sync.application.use_cases.timetable_use_cases import (
    TimetableUseCases,
    affected_groups,
    build_insert_rows,
)
from timetable_sync.domain.entities.timetable import TimetableItem
from timetable_sync.infrastructure.repositories.timetable_repository import TimetableRepository
from timetable_sync.shared.exceptions.domain import ScheduleNotFoundException, ValidationException
from timetable_sync.shared.exceptions.sync import TimetableStoreError


def _item(group="ИВТ-21", date="2024-11-07T00:00:00+00:00", time="09:00", subject="Математика", **kw):
    return TimetableItem(group=group, date=date, time=time, subject=subject,
                         teacher_name=kw.pop("teacher_name", "Иванов И.И."), **kw)


def test_affected_groups_keeps_first_seen_order_and_skips_blank():
    items = [_item(group="Б"), _item(group="А"), _item(group="Б"), _item(group="  ")]
    assert affected_groups(items) == ["Б", "А"]


def test_build_insert_rows_drops_invalid_candidates():
    items = [
        _item(),
        _item(date="30.02.24"),
        _item(time=""),
        _item(subject="  "),
        _item(group=""),
    ]
    rows = build_insert_rows(items)

    assert len(rows) == 1
    assert rows[0]["date"] == datetime(2024, 11, 7, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_empty_batch_returns_zero_and_touches_nothing(db_session):
    use_cases = TimetableUseCases(db_session)
    with patch.object(TimetableRepository, "delete_by_groups", new=AsyncMock()) as delete_mock:
        result = await use_cases.overwrite_schedules([])

    assert result.new_count == 0
    assert result.deleted_count == 0
    assert result.groups_affected == []
    delete_mock.assert_not_awaited()


@pytest.mark.asyncio
async def test_overwrite_is_idempotent(db_session, items_factory):
    use_cases = TimetableUseCases(db_session)
    batch = items_factory("ИВТ-21", 3) + items_factory("ПИ-22", 2)

    first = await use_cases.overwrite_schedules(batch)
    second = await use_cases.overwrite_schedules(batch)

    assert first.new_count == 5
    assert first.deleted_count == 0
    assert second.deleted_count == first.new_count
    assert second.new_count == first.new_count
    assert second.groups_affected == first.groups_affected == ["ИВТ-21", "ПИ-22"]


@pytest.mark.asyncio
async def test_groups_absent_from_batch_are_untouched(db_session, items_factory):
    use_cases = TimetableUseCases(db_session)
    repo = TimetableRepository(db_session)
    await use_cases.overwrite_schedules(items_factory("A", 2) + items_factory("B", 4))

    result = await use_cases.overwrite_schedules(items_factory("A", 1, date="2024-11-08T00:00:00+00:00"))

    assert result.groups_affected == ["A"]
    assert result.deleted_count == 2
    assert await repo.count_by_group("B") == 4
    stored_a = await repo.find_by_group("A")
    assert len(stored_a) == 1
    assert stored_a[0].date == datetime(2024, 11, 8, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_invalid_candidates_do_not_count_but_group_is_replaced(db_session, items_factory):
    use_cases = TimetableUseCases(db_session)
    await use_cases.overwrite_schedules(items_factory("A", 2))

    result = await use_cases.overwrite_schedules([_item(group="A", date="30.02.24")])

    assert result.new_count == 0
    assert result.deleted_count == 2
    assert await TimetableRepository(db_session).count_by_group("A") == 0


@pytest.mark.asyncio
async def test_non_atomic_delete_survives_insert_failure(db_session, items_factory):
    use_cases = TimetableUseCases(db_session)
    await use_cases.overwrite_schedules(items_factory("A", 2))

    failing = AsyncMock(side_effect=TimetableStoreError("boom", stage="insert", groups=["A"]))
    with patch.object(TimetableRepository, "bulk_insert", new=failing):
        with pytest.raises(TimetableStoreError):
            await use_cases.overwrite_schedules(items_factory("A", 3))

    # El borrado ya estaba confirmado: el grupo queda vacio hasta la proxima corrida
    assert await TimetableRepository(db_session).count_by_group("A") == 0


@pytest.mark.asyncio
async def test_atomic_replace_rolls_back_delete_on_insert_failure(db_session, items_factory):
    await TimetableUseCases(db_session).overwrite_schedules(items_factory("A", 2))

    use_cases = TimetableUseCases(db_session, atomic_replace=True)
    failing = AsyncMock(side_effect=TimetableStoreError("boom", stage="insert", groups=["A"]))
    with patch.object(TimetableRepository, "bulk_insert", new=failing):
        with pytest.raises(TimetableStoreError):
            await use_cases.overwrite_schedules(items_factory("A", 3))

    assert await TimetableRepository(db_session).count_by_group("A") == 2


@pytest.mark.asyncio
async def test_schedule_for_group_is_ordered_by_date_then_time(db_session):
    use_cases = TimetableUseCases(db_session)
    await use_cases.overwrite_schedules([
        _item(date="2024-11-08T00:00:00+00:00", time="09:00", subject="C"),
        _item(date="2024-11-07T00:00:00+00:00", time="12:00", subject="B"),
        _item(date="2024-11-07T00:00:00+00:00", time="08:00", subject="A"),
    ])

    items = await use_cases.get_schedule_for_group("ИВТ-21")
    assert [i.subject for i in items] == ["A", "B", "C"]


@pytest.mark.asyncio
async def test_next_day_schedule_picks_earliest_upcoming_date(db_session):
    use_cases = TimetableUseCases(db_session)
    await use_cases.overwrite_schedules([
        _item(group="Б", date="2024-11-05T00:00:00+00:00", subject="Прошлое"),
        _item(group="Б", date="2024-11-08T00:00:00+00:00", time="10:00", subject="Физика"),
        _item(group="А", date="2024-11-08T00:00:00+00:00", time="09:00", subject="Химия"),
        _item(group="А", date="2024-11-09T00:00:00+00:00", subject="Позже"),
    ])

    day, items = await use_cases.get_next_day_schedule(datetime(2024, 11, 7, tzinfo=timezone.utc))

    assert day == datetime(2024, 11, 8, tzinfo=timezone.utc)
    assert [(i.group, i.subject) for i in items] == [("А", "Химия"), ("Б", "Физика")]


@pytest.mark.asyncio
async def test_next_day_schedule_includes_today(db_session):
    use_cases = TimetableUseCases(db_session)
    await use_cases.overwrite_schedules([_item(date="2024-11-07T00:00:00+00:00")])

    day, _ = await use_cases.get_next_day_schedule(datetime(2024, 11, 7, tzinfo=timezone.utc))
    assert day == datetime(2024, 11, 7, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_next_day_schedule_raises_not_found(db_session):
    use_cases = TimetableUseCases(db_session)
    await use_cases.overwrite_schedules([_item(date="2024-11-01T00:00:00+00:00")])

    with pytest.raises(ScheduleNotFoundException) as exc_info:
        await use_cases.get_next_day_schedule(datetime(2024, 11, 7, tzinfo=timezone.utc))

    assert exc_info.value.status_code == 404
    assert exc_info.value.details["since"] == "2024-11-07"


@pytest.mark.asyncio
async def test_next_day_schedule_formatted(db_session):
    use_cases = TimetableUseCases(db_session)
    await use_cases.overwrite_schedules([_item(date="2024-11-08T00:00:00+00:00")])

    text = await use_cases.get_next_day_schedule_formatted(datetime(2024, 11, 7, tzinfo=timezone.utc))
    assert text.startswith("Расписание на 08.11.2024:")
    assert "Группа: ИВТ-21" in text


@pytest.mark.asyncio
async def test_schedule_for_blank_group_is_rejected(db_session):
    with pytest.raises(ValidationException) as exc_info:
        await TimetableUseCases(db_session).get_schedule_for_group("  ")

    assert exc_info.value.status_code == 400
    assert exc_info.value.details == {"field": "group"}
