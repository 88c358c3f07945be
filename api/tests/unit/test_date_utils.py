from datetime import datetime, timezone

from timetable_sync.shared.utils.date_utils import (
    format_ru_date,
    normalize_sheet_date,
    parse_canonical_utc,
    to_canonical_utc,
)


def test_normalize_padded_date():
    assert normalize_sheet_date("07.11.24") == "2024-11-07T00:00:00+00:00"


def test_normalize_non_padded_date():
    assert normalize_sheet_date("7.2.24") == "2024-02-07T00:00:00+00:00"


def test_normalize_keeps_impossible_calendar_date():
    # 30 de febrero no existe
    assert normalize_sheet_date("30.02.24") == "30.02.24"


def test_normalize_keeps_leap_day_only_on_leap_years():
    assert normalize_sheet_date("29.02.24") == "2024-02-29T00:00:00+00:00"
    assert normalize_sheet_date("29.02.23") == "29.02.23"


def test_normalize_keeps_wrong_separator():
    assert normalize_sheet_date("2024-11-07") == "2024-11-07"


def test_normalize_keeps_out_of_range_parts():
    assert normalize_sheet_date("07.13.24") == "07.13.24"
    assert normalize_sheet_date("32.01.24") == "32.01.24"
    assert normalize_sheet_date("07.11.2024") == "07.11.2024"


def test_normalize_keeps_non_numeric_and_blank():
    assert normalize_sheet_date("пн.11.24") == "пн.11.24"
    assert normalize_sheet_date("07.11") == "07.11"
    assert normalize_sheet_date("") == ""
    assert normalize_sheet_date("   ") == "   "


def test_normalize_ignores_extra_parts():
    assert normalize_sheet_date("07.11.24.extra") == "2024-11-07T00:00:00+00:00"


def test_parse_canonical_round_trip():
    value = to_canonical_utc(datetime(2024, 11, 7).date())
    assert parse_canonical_utc(value) == datetime(2024, 11, 7, tzinfo=timezone.utc)


def test_parse_canonical_rejects_raw_sheet_text():
    assert parse_canonical_utc("30.02.24") is None
    assert parse_canonical_utc("2024-11-07") is None
    assert parse_canonical_utc("2024-11-07T10:00:00+00:00") is None
    assert parse_canonical_utc("") is None
    assert parse_canonical_utc(None) is None


def test_format_ru_date_treats_naive_as_utc():
    assert format_ru_date(datetime(2024, 2, 7)) == "07.02.2024"
