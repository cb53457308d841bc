"""
services/verifier.py

Check-in flows that end in an attendance log row.

1) Signed scan (per-attendee QR):
   structure -> day window -> attendee lookup -> signature -> replay -> record
2) Venue scan (shared daily QR + phone number):
   token -> day window -> phone required? -> attendee lookup by phone -> replay -> record

Every rejection is a distinct exception from services.exceptions.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from config.settings import settings
from models.attendees import Attendee
from models.attendance_logs import DAILY_TOKEN_SCANNER
from services import program_days
from services.attendance_recorder import record_presence
from services.day_tokens import DayTokenRegistry
from services.exceptions import (
    AlreadyScanned,
    DayNotOpen,
    InvalidDayToken,
    InvalidSignature,
    MalformedRequest,
    NotFound,
    UnregisteredAttendee,
)
from services.signing import keys_for, sign, signatures_match
from utils.phone import normalize_phone

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    day: int
    message: str
    attendee_name: Optional[str] = None
    scan_time: Optional[datetime] = None
    requires_phone: bool = False


def _ensure_day_open(day: int, today: Optional[date]) -> None:
    if not program_days.is_day_reached(day, today):
        raise DayNotOpen(
            f"Day {day} has not started yet. QR codes can only be scanned on their "
            f"respective program day ({program_days.format_date(program_days.day_date(day))})."
        )


def _record_or_reject(db: Session, attendee: Attendee, day: int, scanned_by: str) -> datetime:
    result = record_presence(db, attendee.id, day, scanned_by)
    first_scan = program_days.as_utc(result.log.scan_time)
    if result.duplicate:
        logger.info("Duplicate scan rejected: uid=%s day=%s", attendee.uid, day)
        raise AlreadyScanned(
            f"Already checked in on Day {day} at {program_days.format_scan_time(first_scan)}",
            first_scan_time=first_scan,
        )
    return first_scan


def verify_signed_scan(
    db: Session,
    uid: Optional[str],
    day: Optional[int],
    sig: Optional[str],
    scanned_by: Optional[str] = None,
    today: Optional[date] = None,
) -> ScanResult:
    # 1. structure
    if not uid or not day or not sig:
        raise MalformedRequest("Missing required parameters")
    program_days.validate_day(day)

    # 2. day window
    _ensure_day_open(day, today)

    # 3. identity
    attendee = db.query(Attendee).filter(Attendee.uid == uid).first()
    if attendee is None or not attendee.qr_secret:
        raise UnregisteredAttendee("Unregistered user")

    # 4. signature
    expected = sign(attendee.uid, day, keys_for(attendee.qr_secret))
    if not signatures_match(expected, sig):
        logger.warning("Invalid QR signature: uid=%s day=%s", uid, day)
        raise InvalidSignature("Invalid QR signature")

    # 5 + 6. replay check and record
    scan_time = _record_or_reject(db, attendee, day, scanned_by or "unknown")
    logger.info("Signed scan accepted: uid=%s day=%s by=%s", uid, day, scanned_by or "unknown")
    return ScanResult(
        day=day,
        message=f"{attendee.name} checked in for Day {day}",
        attendee_name=attendee.name,
        scan_time=scan_time,
    )


def check_in_with_day_token(
    db: Session,
    token: Optional[str],
    phone: Optional[str],
    registry: DayTokenRegistry,
    today: Optional[date] = None,
) -> ScanResult:
    if not token:
        raise MalformedRequest("Missing QR token")

    day = registry.resolve_day(token)
    if day is None:
        raise InvalidDayToken("Invalid or expired QR code")

    _ensure_day_open(day, today)

    # the venue token carries no identity; ask for the phone number first
    if not phone:
        return ScanResult(
            day=day,
            requires_phone=True,
            message=f"Enter your phone number to confirm attendance for {program_days.day_name(day)}.",
        )

    digits = normalize_phone(phone)
    if len(digits) != settings.PHONE_DIGITS:
        raise MalformedRequest(f"Phone number must be exactly {settings.PHONE_DIGITS} digits")

    attendee = db.query(Attendee).filter(Attendee.phone == digits).first()
    if attendee is None:
        raise NotFound("We couldn't find a registration with this phone number.")

    scan_time = _record_or_reject(db, attendee, day, DAILY_TOKEN_SCANNER)
    logger.info("Venue token check-in accepted: uid=%s day=%s", attendee.uid, day)
    return ScanResult(
        day=day,
        message=f"{attendee.name} checked in for {program_days.day_name(day)}!",
        attendee_name=attendee.name,
        scan_time=scan_time,
    )
