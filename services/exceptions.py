"""
services/exceptions.py

Domain errors raised by the attendance services. Each carries the HTTP status,
a stable machine code and a message that is safe to show to the person at the
scanner; middlewares/error_handler.py turns them into the JSON error envelope.
"""

from typing import Any, Dict, Optional


class AttendanceError(Exception):
    status_code = 400
    code = "BAD_REQUEST"

    def __init__(self, message: str, *, extra: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}


class MalformedRequest(AttendanceError):
    code = "MALFORMED_REQUEST"


class DayNotOpen(AttendanceError):
    code = "DAY_NOT_OPEN"


class InvalidSignature(AttendanceError):
    code = "INVALID_SIGNATURE"


class InvalidDayToken(AttendanceError):
    code = "INVALID_DAY_TOKEN"


class NotFound(AttendanceError):
    status_code = 404
    code = "NOT_FOUND"


class UnregisteredAttendee(NotFound):
    code = "UNREGISTERED"


class AlreadyScanned(AttendanceError):
    status_code = 409
    code = "ALREADY_SCANNED"

    def __init__(self, message: str, *, first_scan_time):
        super().__init__(
            message,
            extra={"first_scan_time": first_scan_time.isoformat().replace("+00:00", "Z")},
        )
        self.first_scan_time = first_scan_time


class DuplicateRegistration(AttendanceError):
    status_code = 409
    code = "DUPLICATE_PHONE"


class StorageError(AttendanceError):
    status_code = 502
    code = "STORAGE_ERROR"
