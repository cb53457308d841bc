import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from config.settings import settings
from dependencies.security import admin_code_matches

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# ✅ request body
class AdminLoginRequest(BaseModel):
    code: str = ""


# ✅ response body
class AdminLoginResponse(BaseModel):
    success: bool = True


# ✅ [LOGIN] shared admin password check
@router.post("", response_model=AdminLoginResponse)
def admin_login(request: AdminLoginRequest):
    if not request.code:
        raise HTTPException(status_code=400, detail="Code is required")
    if not settings.ADMIN_PASSWORD:
        logger.error("ADMIN_PASSWORD is not configured")
        raise HTTPException(status_code=500, detail="Internal server error")
    if admin_code_matches(request.code):
        return AdminLoginResponse()
    logger.warning("Rejected admin login attempt")
    raise HTTPException(status_code=401, detail="Invalid code")
