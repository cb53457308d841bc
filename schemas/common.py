"""
schemas/common.py

- Schemas shared across the API (Pydantic v2)
- Contents:
  1) error envelope: ErrorDetail, ErrorResponse
  2) pagination meta: PaginationMeta, make_pagination()
  3) UtcDatetime: datetimes always rendered with a UTC offset
"""

from __future__ import annotations

from datetime import datetime, timezone
from math import ceil
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, Field, ConfigDict

from services.program_days import as_utc


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


# =========================================================
# 1) error envelope
# =========================================================

class ErrorDetail(BaseModel):
    """machine code + human message"""
    code: str = Field(..., description="error code (e.g. ALREADY_SCANNED, MALFORMED_REQUEST)")
    message: str = Field(..., description="message safe to show at the scanner")


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """
    Body returned by every handler in middlewares/error_handler.py
    - reason mirrors error.message for scanner clients that only read one string
    - first_scan_time is filled for ALREADY_SCANNED
    """
    success: bool = False
    error: ErrorDetail
    reason: str
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    first_scan_time: Optional[datetime] = None
    fields: Optional[List[FieldError]] = None

    model_config = ConfigDict(extra="allow")


# =========================================================
# 2) pagination
# =========================================================

class PaginationMeta(BaseModel):
    """
    Meta for paginated lists
    - page: 1-based
    - total_pages: 0 when nothing matches
    """
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)

    model_config = ConfigDict(extra="ignore")


def make_pagination(total: int, page: int, limit: int) -> PaginationMeta:
    total_pages = ceil(total / max(1, limit))
    return PaginationMeta(page=page, limit=limit, total=total, total_pages=total_pages)
