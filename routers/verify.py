from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.rate_limit import enforce_rate_limit
from schemas.attendance import VerifyBody, VerifyResponse
from schemas.common import ErrorResponse
from services.verifier import verify_signed_scan

router = APIRouter(tags=["verification"])


# ✅ [VERIFY] per-attendee signed QR scan
@router.post(
    "/verify",
    response_model=VerifyResponse,
    responses={code: {"model": ErrorResponse} for code in (400, 404, 409, 429)},
    dependencies=[Depends(enforce_rate_limit)],
)
def verify(
    uid: Optional[str] = Query(None, description="attendee code"),
    day: Optional[int] = Query(None, description="program day 1-4"),
    sig: Optional[str] = Query(None, description="hex HMAC signature"),
    body: Optional[VerifyBody] = Body(None),
    db: Session = Depends(get_db),
):
    scanned_by = body.scanned_by if body else None
    result = verify_signed_scan(db, uid, day, sig, scanned_by=scanned_by)
    return VerifyResponse(
        message=result.message,
        attendee_name=result.attendee_name,
        day=result.day,
        scan_time=result.scan_time,
    )
