# /tests/test_dates.py

from datetime import date, datetime, timezone

from casetrack.services.dates import date_part, weekday_dates


def test_date_part_truncates_without_timezone_conversion():
    assert date_part("2024-01-10T23:30:00-06:00") == "2024-01-10"
    assert date_part(datetime(2024, 1, 10, 23, 30, tzinfo=timezone.utc)) == "2024-01-10"
    assert date_part(date(2024, 1, 10)) == "2024-01-10"
    assert date_part("2024-01-10") == "2024-01-10"


def test_date_part_of_none_is_empty():
    assert date_part(None) == ""


def test_weekday_dates_skip_weekends():
    # Friday 2024-01-12 through Tuesday 2024-01-16
    assert weekday_dates(date(2024, 1, 12), date(2024, 1, 16)) == [
        date(2024, 1, 12),
        date(2024, 1, 15),
        date(2024, 1, 16),
    ]


def test_weekday_dates_empty_when_range_reversed():
    assert weekday_dates(date(2024, 1, 16), date(2024, 1, 12)) == []
