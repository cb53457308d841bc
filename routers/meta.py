from fastapi import APIRouter

from config.settings import settings
from services.day_tokens import DayTokenRegistry
from services.signing import PROGRAM_DAY_COUNT
from services.storage import get_storage

router = APIRouter(prefix="/meta", tags=["Meta"])


@router.get("/health")
def health():
    return {
        "status": "ok",
        "version": settings.APP_VERSION,
        "env": settings.ENV,
        "qr_storage": get_storage().enabled,
        "missing_day_tokens": DayTokenRegistry.from_settings().missing_env_keys(),
    }


@router.get("/limits")
def limits():
    return {
        "program_days": PROGRAM_DAY_COUNT,
        "page_size_default": 50,
        "page_size_max": 200,
        "phone_digits": settings.PHONE_DIGITS,
        "verify_rate_limit": {
            "max_requests": settings.RATE_LIMIT_MAX,
            "window_seconds": settings.RATE_LIMIT_WINDOW_SECONDS,
        },
    }
