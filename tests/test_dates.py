from datetime import date, datetime

from admin_console.utils.dates import (
    academic_year,
    calculate_age,
    compact_time,
    days_ago,
    export_timestamp,
    parse_date,
    trend_label,
)


def test_age_changes_on_the_birthday():
    assert calculate_age("2010-06-15", on=date(2024, 6, 14)) == 13
    assert calculate_age("2010-06-15", on=date(2024, 6, 15)) == 14


def test_age_for_leap_day_birthday():
    assert calculate_age("2008-02-29", on=date(2024, 2, 28)) == 15
    assert calculate_age("2008-02-29", on=date(2024, 2, 29)) == 16


def test_age_is_none_for_missing_invalid_or_future_dates():
    assert calculate_age(None) is None
    assert calculate_age("") is None
    assert calculate_age("not a date") is None
    assert calculate_age("2030-01-01", on=date(2024, 1, 1)) is None


def test_parse_date_accepts_dates_and_datetimes():
    assert parse_date("2024-03-05") == date(2024, 3, 5)
    assert parse_date("2024-03-05T10:15:00Z") == date(2024, 3, 5)
    assert parse_date(datetime(2024, 3, 5, 8)) == date(2024, 3, 5)
    assert parse_date("garbage") is None


def test_days_ago_and_academic_year():
    assert days_ago(30, on=date(2024, 3, 31)) == "2024-03-01"
    assert academic_year(date(2025, 9, 1)) == "2025-2026"


def test_labels_and_timestamps():
    assert trend_label(date(2024, 3, 5)) == "Mar 5"
    assert export_timestamp(datetime(2024, 3, 5, 14, 7, 9)) == "2024-03-05T14-07-09"
    assert compact_time("15:30") == "1530"
    assert compact_time(None) == ""
