from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.common import PaginationMeta, UtcDatetime


# ✅ registration input
class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    phone: str = Field(..., min_length=1, max_length=32)


# ✅ stored attendee record (no secrets)
class AttendeeOut(BaseModel):
    id: int
    uid: str
    name: str
    phone: str
    qr_day1_url: Optional[str] = None
    qr_day2_url: Optional[str] = None
    qr_day3_url: Optional[str] = None
    qr_day4_url: Optional[str] = None
    qr_day1_image_url: Optional[str] = None
    qr_day2_image_url: Optional[str] = None
    qr_day3_image_url: Optional[str] = None
    qr_day4_image_url: Optional[str] = None
    voucher_collected: bool = False
    voucher_collected_at: Optional[UtcDatetime] = None
    created_at: UtcDatetime

    model_config = ConfigDict(from_attributes=True)


class AttendanceFlags(BaseModel):
    day1: bool = False
    day2: bool = False
    day3: bool = False
    day4: bool = False


class AttendeeWithAttendance(AttendeeOut):
    attendance: AttendanceFlags


class RegisterResponse(BaseModel):
    success: bool = True
    uid: str
    qr_urls: Dict[str, str]                      # {"day1": url, ...}
    qr_image_urls: Dict[str, Optional[str]]
    attendee: AttendeeOut


class AttendeeListResponse(BaseModel):
    success: bool = True
    attendees: List[AttendeeWithAttendance]
    pagination: PaginationMeta


class VoucherMarkRequest(BaseModel):
    attendee_id: int
    collected: bool


class VoucherMarkResponse(BaseModel):
    success: bool = True
    attendee: AttendeeOut


class RetrieveResponse(BaseModel):
    success: bool = True
    uid: str
    name: str
    qr_urls: Dict[str, Optional[str]]
    qr_image_urls: Dict[str, Optional[str]]
