from typing import Optional, Annotated
from fastapi import Header, HTTPException
from config.settings import settings
import hmac

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]
AdminCodeHeader = Annotated[Optional[str], Header(alias="X-Admin-Code")]


def admin_code_matches(code: Optional[str]) -> bool:
    """Timing-safe compare against ADMIN_PASSWORD."""
    if not code:
        return False
    return hmac.compare_digest(code.strip().encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8"))


def require_admin(authorization: AuthHeader = None, x_admin_code: AdminCodeHeader = None):
    # a missing server password is a deployment error, not a client one
    if not settings.ADMIN_PASSWORD:
        raise HTTPException(status_code=500, detail="Admin password not configured")

    code = x_admin_code
    if not code and authorization:
        # "Bearer <code>"
        try:
            scheme, token = authorization.split(" ", 1)
        except ValueError:
            raise HTTPException(
                status_code=401,
                detail="Invalid Authorization header format",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if scheme.lower() != "bearer":
            raise HTTPException(
                status_code=401,
                detail="Invalid auth scheme",
                headers={"WWW-Authenticate": "Bearer"},
            )
        code = token

    if not code:
        raise HTTPException(
            status_code=401,
            detail="Admin code required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not admin_code_matches(code):
        raise HTTPException(
            status_code=401,
            detail="Invalid code",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {"client": "admin"}
