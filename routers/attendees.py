from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_admin
from schemas.attendees import (
    AttendanceFlags,
    AttendeeListResponse,
    AttendeeOut,
    AttendeeWithAttendance,
    RetrieveResponse,
    VoucherMarkRequest,
    VoucherMarkResponse,
)
from schemas.common import make_pagination
from services.attendance_filter import list_attendees, parse_days
from services.registration import retrieve_by_phone
from services.signing import PROGRAM_DAY_COUNT
from services.vouchers import mark_voucher

router = APIRouter(prefix="/attendees", tags=["attendees"])


# ==========================================================
# Admin
# ==========================================================

# ✅ [LIST] paginated, searchable, filtered by "attended every selected day"
@router.get("", response_model=AttendeeListResponse, dependencies=[Depends(require_admin)])
def read_attendees(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    search: str = Query("", max_length=100),
    days: str = Query("", description='comma separated days, e.g. "1,3"'),
    db: Session = Depends(get_db),
):
    result = list_attendees(db, page=page, limit=limit, search=search.strip(), days=parse_days(days))
    return AttendeeListResponse(
        attendees=[
            AttendeeWithAttendance(
                **AttendeeOut.model_validate(attendee).model_dump(),
                attendance=AttendanceFlags(**flags),
            )
            for attendee, flags in result.items
        ],
        pagination=make_pagination(result.total, result.page, result.limit),
    )


# ✅ [VOUCHER] toggle the physical voucher flag
@router.post("/mark-collected", response_model=VoucherMarkResponse, dependencies=[Depends(require_admin)])
def mark_collected(payload: VoucherMarkRequest, db: Session = Depends(get_db)):
    attendee = mark_voucher(db, payload.attendee_id, payload.collected)
    return VoucherMarkResponse(attendee=AttendeeOut.model_validate(attendee))


# ==========================================================
# Public
# ==========================================================

# ✅ [RETRIEVE] stored QR links for a registered phone number
@router.get("/retrieve", response_model=RetrieveResponse)
def retrieve(phone: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    attendee = retrieve_by_phone(db, phone)
    days = range(1, PROGRAM_DAY_COUNT + 1)
    return RetrieveResponse(
        uid=attendee.uid,
        name=attendee.name,
        qr_urls={f"day{d}": attendee.qr_url(d) for d in days},
        qr_image_urls={f"day{d}": attendee.qr_image_url(d) for d in days},
    )
