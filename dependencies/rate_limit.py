import logging

from fastapi import Depends, HTTPException, Request

from services.rate_limiter import RateLimiter, get_rate_limiter

logger = logging.getLogger(__name__)


def client_address(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        # "client, proxy1, proxy2"
        return forwarded.split(",")[0].strip() or "unknown"
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def enforce_rate_limit(request: Request, limiter: RateLimiter = Depends(get_rate_limiter)):
    key = client_address(request)
    decision = limiter.hit(key)
    if not decision.allowed:
        logger.warning("Rate limit exceeded for %s on %s", key, request.url.path)
        raise HTTPException(
            status_code=429,
            detail="Rate limit exceeded",
            headers={"Retry-After": str(decision.retry_after)},
        )
    return decision
