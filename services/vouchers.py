import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from models.attendees import Attendee
from services.exceptions import NotFound

logger = logging.getLogger(__name__)


def mark_voucher(db: Session, attendee_id: int, collected: bool) -> Attendee:
    attendee = db.query(Attendee).filter(Attendee.id == attendee_id).first()
    if attendee is None:
        raise NotFound("Attendee not found")

    attendee.voucher_collected = bool(collected)
    attendee.voucher_collected_at = datetime.now(timezone.utc) if collected else None
    db.commit()
    db.refresh(attendee)

    logger.info("Voucher %s for uid=%s", "collected" if collected else "cleared", attendee.uid)
    return attendee
