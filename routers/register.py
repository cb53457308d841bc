from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database.db import get_db
from schemas.attendees import AttendeeOut, RegisterRequest, RegisterResponse
from services.registration import register_attendee
from services.storage import StorageClient, get_storage

router = APIRouter(tags=["registration"])


# ✅ [REGISTER] create attendee + four signed day links (+ QR images when storage is configured)
@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
):
    registration = register_attendee(db, payload.name, payload.phone, storage)
    return RegisterResponse(
        uid=registration.attendee.uid,
        qr_urls={f"day{d}": url for d, url in registration.qr_urls.items()},
        qr_image_urls={f"day{d}": url for d, url in registration.qr_image_urls.items()},
        attendee=AttendeeOut.model_validate(registration.attendee),
    )
