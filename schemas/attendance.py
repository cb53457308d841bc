from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from schemas.attendees import AttendeeOut
from schemas.common import UtcDatetime


# ✅ /verify body (query carries uid/day/sig)
class VerifyBody(BaseModel):
    scanned_by: Optional[str] = Field(default=None, max_length=100)


class VerifyResponse(BaseModel):
    success: bool = True
    message: str
    attendee_name: str
    day: int
    scan_time: UtcDatetime


# ✅ venue QR: token first, phone on the second call
class TokenCheckRequest(BaseModel):
    token: Optional[str] = None
    phone: Optional[str] = None


class TokenCheckResponse(BaseModel):
    success: bool = True
    day: int
    message: str
    requires_phone: bool = False
    attendee_name: Optional[str] = None
    scan_time: Optional[UtcDatetime] = None


class ReportResponse(BaseModel):
    success: bool = True
    days: List[int]
    count: int
    attendees: List[AttendeeOut]


class AttendanceSummary(BaseModel):
    total_registered: int
    day1_count: int
    day2_count: int
    day3_count: int
    day4_count: int


class SummaryResponse(BaseModel):
    success: bool = True
    summary: AttendanceSummary


class DayLog(BaseModel):
    day: int
    status: str
    scan_time: UtcDatetime


class ConfirmAttendee(BaseModel):
    uid: str
    name: str


class ConfirmResponse(BaseModel):
    success: bool = True
    attendee: ConfirmAttendee
    attendance: Dict[str, Optional[DayLog]]      # {"day1": DayLog | None, ...}


class DayLink(BaseModel):
    day: int
    has_token: bool
    env_key: str
    token: Optional[str] = None


class DayLinksResponse(BaseModel):
    success: bool = True
    day_tokens: List[DayLink]
    missing: List[str]
