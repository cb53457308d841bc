from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from schemas.attendance import TokenCheckRequest, TokenCheckResponse
from schemas.common import ErrorResponse
from services.day_tokens import DayTokenRegistry, get_day_token_registry
from services.verifier import check_in_with_day_token

router = APIRouter(tags=["verification"])


# ✅ [TOKEN CHECK] shared venue QR; phone number supplied on the second call
@router.post(
    "/token-check",
    response_model=TokenCheckResponse,
    responses={code: {"model": ErrorResponse} for code in (400, 404, 409)},
)
def token_check(
    payload: TokenCheckRequest,
    db: Session = Depends(get_db),
    registry: DayTokenRegistry = Depends(get_day_token_registry),
):
    result = check_in_with_day_token(db, payload.token, payload.phone, registry)
    return TokenCheckResponse(
        day=result.day,
        message=result.message,
        requires_phone=result.requires_phone,
        attendee_name=result.attendee_name,
        scan_time=result.scan_time,
    )
