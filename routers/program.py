from fastapi import APIRouter

from services import program_days

router = APIRouter(prefix="/program", tags=["program"])


# ==========================================================
# [1] program calendar
# ==========================================================
def describe_days():
    """date, weekday and whether each day is open for check-in"""
    today = program_days.today()
    return [
        {
            "day": day,
            "date": d.isoformat(),
            "label": program_days.format_date(d),
            "weekday": program_days.day_name(day),
            "open": program_days.is_day_reached(day, today),
        }
        for day, d in enumerate(program_days.program_days(), start=1)
    ]


# ==========================================================
# [2] router
# ==========================================================

# ✅ [READ] program days, today's day and the (display only) confirmation window
@router.get("")
def get_program():
    today = program_days.today()
    current = program_days.current_day(today)
    return {
        "success": True,
        "data": {
            "today": today.isoformat(),
            "current_day": current,
            "past_days": program_days.past_days(today),
            "days": describe_days(),
            "confirmation_window": program_days.confirmation_window_text(),
        },
        "message": f"Day {current} of the program" if current else "No program day today",
    }
