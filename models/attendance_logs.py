from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from database.db import Base

PRESENT = "present"                 # the only status ever written; absence = no row
DAILY_TOKEN_SCANNER = "daily-token"  # scanned_by marker for the venue QR path


def _utcnow():
    return datetime.now(timezone.utc)


class AttendanceLog(Base):
    __tablename__ = "attendance_logs"  # one row per attendee per attended day
    __table_args__ = (
        UniqueConstraint("attendee_id", "day", name="uq_attendance_logs_attendee_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    attendee_id = Column(Integer, ForeignKey("attendees.id", ondelete="CASCADE"), nullable=False, index=True)
    day = Column(Integer, nullable=False, index=True)                  # program day 1..4
    status = Column(String(20), nullable=False, default=PRESENT)
    scan_time = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    scanned_by = Column(String(100), nullable=False, default="unknown")  # device tag or DAILY_TOKEN_SCANNER

    attendee = relationship("Attendee", back_populates="logs")
