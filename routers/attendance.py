from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_admin
from models.attendance_logs import AttendanceLog, PRESENT
from schemas.attendance import (
    AttendanceSummary,
    ConfirmAttendee,
    ConfirmResponse,
    DayLog,
    ReportResponse,
    SummaryResponse,
)
from schemas.attendees import AttendeeOut
from services.attendance_filter import attendance_summary, parse_days, report_attendees
from services.exceptions import MalformedRequest
from services.registration import retrieve_by_phone
from services.signing import PROGRAM_DAY_COUNT

router = APIRouter(prefix="/attendance", tags=["attendance"])


# ✅ [REPORT] everyone present on every listed day (no pagination)
@router.get("/report", response_model=ReportResponse, dependencies=[Depends(require_admin)])
def attendance_report(
    days: str = Query(..., description='comma separated days, e.g. "1,2,3"'),
    db: Session = Depends(get_db),
):
    selected = parse_days(days)
    if not selected:
        raise MalformedRequest("Invalid days parameter")
    attendees = report_attendees(db, selected)
    return ReportResponse(
        days=selected,
        count=len(attendees),
        attendees=[AttendeeOut.model_validate(a) for a in attendees],
    )


# ✅ [SUMMARY] registered total + present count per day
@router.get("/summary", response_model=SummaryResponse, dependencies=[Depends(require_admin)])
def read_summary(db: Session = Depends(get_db)):
    return SummaryResponse(summary=AttendanceSummary(**attendance_summary(db)))


# ✅ [CONFIRM] attendee looks up their own check-ins by phone
@router.get("/confirm", response_model=ConfirmResponse)
def confirm_attendance(phone: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    attendee = retrieve_by_phone(db, phone)
    logs = (
        db.query(AttendanceLog)
        .filter(AttendanceLog.attendee_id == attendee.id, AttendanceLog.status == PRESENT)
        .order_by(AttendanceLog.day)
        .all()
    )
    by_day = {log.day: log for log in logs}
    return ConfirmResponse(
        attendee=ConfirmAttendee(uid=attendee.uid, name=attendee.name),
        attendance={
            f"day{d}": (
                DayLog(day=d, status=by_day[d].status, scan_time=by_day[d].scan_time)
                if d in by_day else None
            )
            for d in range(1, PROGRAM_DAY_COUNT + 1)
        },
    )
