"""Date helpers shared by the dashboard and progress views.

Calendar dates are taken from stored values by truncating their ISO form to
``YYYY-MM-DD``. Nothing here converts between time zones: a timestamp stored
as ``2024-01-10T23:30:00-06:00`` is the 10th, whatever the viewer's zone.
"""

from datetime import date, datetime, timedelta


def date_part(value) -> str:
    """Return the ``YYYY-MM-DD`` prefix of a date, datetime or ISO string.

    Returns an empty string for ``None``.
    """
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        value = value.isoformat()
    return str(value).split("T")[0][:10]


def today_str() -> str:
    return date.today().isoformat()


def weekday_dates(start: date, end: date) -> list[date]:
    """All Monday-Friday dates from start to end, inclusive."""
    dates = []
    current = start
    while current <= end:
        if current.weekday() < 5:
            dates.append(current)
        current += timedelta(days=1)
    return dates
