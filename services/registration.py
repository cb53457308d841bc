import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.attendees import Attendee
from services.exceptions import DuplicateRegistration, MalformedRequest, NotFound
from services.qr_images import render_qr_png
from services.signing import (
    PROGRAM_DAY_COUNT,
    generate_attendee_secret,
    generate_uid,
    keys_for,
    signed_urls,
)
from services.storage import StorageClient, qr_image_path
from utils.phone import normalize_phone

logger = logging.getLogger(__name__)

UID_ATTEMPTS = 3


@dataclass
class Registration:
    attendee: Attendee
    qr_urls: Dict[int, str] = field(default_factory=dict)
    qr_image_urls: Dict[int, Optional[str]] = field(default_factory=dict)


def _find_by_phone(db: Session, phone: str) -> Optional[Attendee]:
    return db.query(Attendee).filter(Attendee.phone == phone).first()


def _unused_uid(db: Session) -> str:
    for _ in range(UID_ATTEMPTS):
        uid = generate_uid()
        if not db.query(Attendee.id).filter(Attendee.uid == uid).first():
            return uid
    raise RuntimeError("could not allocate a unique attendee code")


def register_attendee(db: Session, name: str, phone: str, storage: Optional[StorageClient] = None) -> Registration:
    name = (name or "").strip()
    if not name or not phone:
        raise MalformedRequest("Name and phone are required")
    digits = normalize_phone(phone)
    if not digits:
        raise MalformedRequest("Phone number must contain digits")

    if _find_by_phone(db, digits):
        raise DuplicateRegistration(
            "This phone number is already registered. Please use a different phone number "
            "or retrieve your QR codes using the 'Retrieve QR Codes' page."
        )

    uid = _unused_uid(db)
    qr_secret = generate_attendee_secret()
    qr_urls = signed_urls(uid, keys_for(qr_secret))

    qr_image_urls: Dict[int, Optional[str]] = {day: None for day in qr_urls}
    if storage is not None and storage.enabled:
        for day, url in qr_urls.items():
            qr_image_urls[day] = storage.upload(qr_image_path(uid, day), render_qr_png(url))
    else:
        logger.warning("Object storage not configured; QR images not uploaded for uid=%s", uid)

    attendee = Attendee(uid=uid, name=name, phone=digits, qr_secret=qr_secret)
    for day in range(1, PROGRAM_DAY_COUNT + 1):
        setattr(attendee, f"qr_day{day}_url", qr_urls[day])
        setattr(attendee, f"qr_day{day}_image_url", qr_image_urls[day])

    db.add(attendee)
    try:
        db.commit()
    except IntegrityError:
        # phone registered concurrently
        db.rollback()
        raise DuplicateRegistration("This phone number is already registered.")
    db.refresh(attendee)

    logger.info("Registered attendee uid=%s", uid)
    return Registration(attendee=attendee, qr_urls=qr_urls, qr_image_urls=qr_image_urls)


def retrieve_by_phone(db: Session, phone: str) -> Attendee:
    digits = normalize_phone(phone)
    if not digits:
        raise MalformedRequest("Phone number is required")
    attendee = _find_by_phone(db, digits)
    if attendee is None:
        raise NotFound("No registration found for this phone number")
    return attendee
