from fastapi import APIRouter, Depends

from dependencies.security import require_admin
from schemas.attendance import DayLink, DayLinksResponse
from services.day_tokens import DayTokenRegistry, get_day_token_registry

router = APIRouter(prefix="/admin", tags=["admin"])


# ✅ [DAY LINKS] venue tokens so the dashboard can print the daily QR codes
@router.get("/day-links", response_model=DayLinksResponse, dependencies=[Depends(require_admin)])
def day_links(registry: DayTokenRegistry = Depends(get_day_token_registry)):
    return DayLinksResponse(
        day_tokens=[DayLink(**entry) for entry in registry.describe()],
        missing=registry.missing_env_keys(),
    )
