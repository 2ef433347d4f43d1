from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def today() -> date:
    return datetime.now(timezone.utc).date()


def parse_date(value: Any) -> Optional[date]:
    """Best-effort conversion of an API date/datetime value to a ``date``."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(str(value)).date()
    except (ValueError, OverflowError):
        pass
    try:
        return date_parser.parse(str(value)).date()
    except (ValueError, OverflowError):
        return None


def calculate_age(date_of_birth: Any, on: Optional[date] = None) -> Optional[int]:
    born = parse_date(date_of_birth)
    if born is None:
        return None
    on = on or today()
    if born > on:
        return None
    return relativedelta(on, born).years


def days_ago(days: int, on: Optional[date] = None) -> str:
    return ((on or today()) - timedelta(days=days)).isoformat()


def academic_year(on: Optional[date] = None) -> str:
    year = (on or today()).year
    return f"{year}-{year + 1}"


def trend_label(day: date) -> str:
    # "Mar 5", matching the dashboards' short month/day labels
    return f"{day.strftime('%b')} {day.day}"


def export_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H-%M-%S")


def compact_time(value: Optional[str]) -> str:
    """``"15:30"`` -> ``"1530"`` for file names."""
    return (value or "").replace(":", "")[:4]
