"""
services/attendance_filter.py

"Attended every selected day" queries for the admin dashboard.

filter_by_days({1, 3}) = present(day 1) ∩ present(day 3)
filter_by_days({})     = None  (no filtering, everyone qualifies)
"""

from dataclasses import dataclass, field
from math import ceil
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from models.attendees import Attendee
from models.attendance_logs import AttendanceLog, PRESENT
from services.attendance_recorder import attendance_days
from services.exceptions import MalformedRequest
from services.signing import PROGRAM_DAY_COUNT
from utils.phone import normalize_phone


def parse_days(raw: Optional[str]) -> List[int]:
    """'3, 1,x,9,1' -> [1, 3]"""
    if not raw:
        return []
    days = set()
    for part in raw.split(","):
        part = part.strip()
        if part.isdigit() and 1 <= int(part) <= PROGRAM_DAY_COUNT:
            days.add(int(part))
    return sorted(days)


def _escape_like(text: str) -> str:
    """literal match inside LIKE (escape char is a backslash)"""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def present_on(db: Session, day: int) -> Set[int]:
    rows = (
        db.query(AttendanceLog.attendee_id)
        .filter(AttendanceLog.day == day, AttendanceLog.status == PRESENT)
        .all()
    )
    return {attendee_id for (attendee_id,) in rows}


def filter_by_days(db: Session, days: Iterable[int]) -> Optional[Set[int]]:
    days = sorted(set(days))
    if not days:
        return None
    matching: Optional[Set[int]] = None
    for day in days:
        ids = present_on(db, day)
        matching = ids if matching is None else matching & ids
        if not matching:
            break
    return matching or set()


def attendance_flags(days: Set[int]) -> Dict[str, bool]:
    return {f"day{d}": d in days for d in range(1, PROGRAM_DAY_COUNT + 1)}


@dataclass
class AttendeePage:
    items: List[tuple] = field(default_factory=list)   # (Attendee, {"day1": bool, ...})
    page: int = 1
    limit: int = 50
    total: int = 0

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.limit) if self.limit else 0


def list_attendees(
    db: Session,
    page: int = 1,
    limit: int = 50,
    search: str = "",
    days: Iterable[int] = (),
) -> AttendeePage:
    page = max(1, page)
    limit = max(1, limit)
    result = AttendeePage(page=page, limit=limit)

    matching = filter_by_days(db, days)
    if matching is not None and not matching:
        return result

    query = db.query(Attendee)
    if search:
        pattern = f"%{_escape_like(search.lower())}%"
        conditions = [
            func.lower(Attendee.name).like(pattern, escape="\\"),
            Attendee.phone.like(pattern, escape="\\"),
        ]
        digits = normalize_phone(search)
        if digits:
            # phones are stored as digits only; "0803-000" should still match
            conditions.append(Attendee.phone.like(f"%{digits}%"))
        query = query.filter(or_(*conditions))
    if matching is not None:
        query = query.filter(Attendee.id.in_(matching))

    result.total = query.count()
    attendees = (
        query.order_by(Attendee.created_at.desc(), Attendee.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    present = attendance_days(db, (a.id for a in attendees))
    result.items = [(a, attendance_flags(present[a.id])) for a in attendees]
    return result


def report_attendees(db: Session, days: Iterable[int]) -> List[Attendee]:
    days = sorted(set(days))
    if not days:
        raise MalformedRequest("Invalid days parameter")
    matching = filter_by_days(db, days)
    if not matching:
        return []
    return (
        db.query(Attendee)
        .filter(Attendee.id.in_(matching))
        .order_by(Attendee.name.asc(), Attendee.id.asc())
        .all()
    )


def attendance_summary(db: Session) -> Dict[str, int]:
    summary = {"total_registered": db.query(func.count(Attendee.id)).scalar() or 0}
    counts = dict(
        db.query(AttendanceLog.day, func.count(AttendanceLog.id))
        .filter(AttendanceLog.status == PRESENT)
        .group_by(AttendanceLog.day)
        .all()
    )
    for day in range(1, PROGRAM_DAY_COUNT + 1):
        summary[f"day{day}_count"] = counts.get(day, 0)
    return summary
