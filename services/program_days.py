from datetime import date, datetime, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

from config.settings import settings
from services.exceptions import MalformedRequest
from services.signing import PROGRAM_DAY_COUNT


def validate_day(day) -> int:
    if not isinstance(day, int) or isinstance(day, bool) or not 1 <= day <= PROGRAM_DAY_COUNT:
        raise MalformedRequest(f"Invalid day (must be 1-{PROGRAM_DAY_COUNT})")
    return day


def today() -> date:
    """Calendar date 'now' in the program's timezone."""
    return datetime.now(ZoneInfo(settings.PROGRAM_TIMEZONE)).date()


def program_days() -> List[date]:
    start = settings.PROGRAM_START_DATE
    return [start + timedelta(days=i) for i in range(PROGRAM_DAY_COUNT)]


def day_date(day: int) -> date:
    validate_day(day)
    return program_days()[day - 1]


def is_day_reached(day: int, on: Optional[date] = None) -> bool:
    # whole-date comparison; time of day is ignored
    return (on or today()) >= day_date(day)


def current_day(on: Optional[date] = None) -> Optional[int]:
    on = on or today()
    for day, d in enumerate(program_days(), start=1):
        if d == on:
            return day
    return None


def past_days(on: Optional[date] = None) -> List[int]:
    on = on or today()
    return [day for day in range(1, PROGRAM_DAY_COUNT + 1) if is_day_reached(day, on)]


def format_date(d: date) -> str:
    # "December 11, 2025"
    return f"{d:%B} {d.day}, {d.year}"


def day_name(day: int) -> str:
    return f"{day_date(day):%A}"


def _hour_label(hour: int) -> str:
    suffix = "AM" if hour < 12 else "PM"
    h = hour % 12 or 12
    return f"{h}:00 {suffix}"


def confirmation_window_text() -> str:
    return f"{_hour_label(settings.CONFIRMATION_START_HOUR)} - {_hour_label(settings.CONFIRMATION_END_HOUR)}"


def as_utc(moment: datetime) -> datetime:
    # naive values come back from SQLite; they were written as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=ZoneInfo("UTC"))
    return moment


def to_local(moment: datetime) -> datetime:
    return as_utc(moment).astimezone(ZoneInfo(settings.PROGRAM_TIMEZONE))


def format_scan_time(moment: datetime) -> str:
    local = to_local(moment)
    return f"{local:%B} {local.day}, {local.year} {local:%I:%M %p}"
