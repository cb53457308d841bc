import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Set

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.attendance_logs import AttendanceLog, PRESENT

logger = logging.getLogger(__name__)


@dataclass
class RecordResult:
    log: AttendanceLog
    created: bool

    @property
    def duplicate(self) -> bool:
        return not self.created


def find_present_log(db: Session, attendee_id: int, day: int) -> Optional[AttendanceLog]:
    return (
        db.query(AttendanceLog)
        .filter(
            AttendanceLog.attendee_id == attendee_id,
            AttendanceLog.day == day,
            AttendanceLog.status == PRESENT,
        )
        .first()
    )


def record_presence(db: Session, attendee_id: int, day: int, scanned_by: Optional[str]) -> RecordResult:
    """
    Insert a present row for (attendee, day) unless one exists.

    The read below answers the common case; the unique constraint on
    (attendee_id, day) settles two scans racing past it, and the loser gets
    the winner's row back as a duplicate.
    """
    existing = find_present_log(db, attendee_id, day)
    if existing:
        return RecordResult(log=existing, created=False)

    log = AttendanceLog(
        attendee_id=attendee_id,
        day=day,
        status=PRESENT,
        scanned_by=scanned_by or "unknown",
    )
    db.add(log)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        existing = find_present_log(db, attendee_id, day)
        if existing is None:
            raise
        logger.info("Concurrent scan resolved as duplicate: attendee_id=%s day=%s", attendee_id, day)
        return RecordResult(log=existing, created=False)

    db.refresh(log)
    return RecordResult(log=log, created=True)


def attendance_days(db: Session, attendee_ids: Iterable[int]) -> Dict[int, Set[int]]:
    """attendee_id -> set of days with a present log"""
    ids = list(attendee_ids)
    result: Dict[int, Set[int]] = {i: set() for i in ids}
    if not ids:
        return result
    rows = (
        db.query(AttendanceLog.attendee_id, AttendanceLog.day)
        .filter(AttendanceLog.status == PRESENT, AttendanceLog.attendee_id.in_(ids))
        .all()
    )
    for attendee_id, day in rows:
        result[attendee_id].add(day)
    return result
