from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship

from database.db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Attendee(Base):
    __tablename__ = "attendees"  # registered program attendees

    id = Column(Integer, primary_key=True, index=True)                # internal PK
    uid = Column(String(16), unique=True, nullable=False, index=True)  # short code printed on QR links (e.g. WRCM3K9Z1A)
    name = Column(String(120), nullable=False)                         # display name
    phone = Column(String(20), unique=True, nullable=False, index=True)  # digits only
    qr_secret = Column(String(64))                                     # per-attendee HMAC input, hex

    # signed verification links, one per program day
    qr_day1_url = Column(String(500))
    qr_day2_url = Column(String(500))
    qr_day3_url = Column(String(500))
    qr_day4_url = Column(String(500))

    # rendered QR images in object storage
    qr_day1_image_url = Column(String(500))
    qr_day2_image_url = Column(String(500))
    qr_day3_image_url = Column(String(500))
    qr_day4_image_url = Column(String(500))

    voucher_collected = Column(Boolean, nullable=False, default=False)  # physical voucher handed out
    voucher_collected_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    logs = relationship("AttendanceLog", back_populates="attendee", cascade="all, delete-orphan")

    def qr_url(self, day: int):
        return getattr(self, f"qr_day{day}_url")

    def qr_image_url(self, day: int):
        return getattr(self, f"qr_day{day}_image_url")
