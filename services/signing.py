"""
services/signing.py

Per-attendee, per-day QR signatures.

    sig = HMAC-SHA256(server_secret, f"{uid}:{day}:{attendee_secret}").hexdigest()

Two secrets are involved and they must never swap places: the server secret
(settings.QR_SIGNATURE_SECRET) is the HMAC key, the attendee secret (stored on
the attendee row) is part of the message. SigningKeys keeps the roles explicit.
"""

import hmac
import hashlib
import secrets
import string
import time
from dataclasses import dataclass
from urllib.parse import urlencode

from config.settings import PROGRAM_DAY_COUNT, settings

UID_PREFIX = "WRC"
UID_LENGTH = 10

_BASE36 = string.digits + string.ascii_uppercase


@dataclass(frozen=True)
class SigningKeys:
    server_secret: str
    attendee_secret: str

    def __post_init__(self):
        if not self.server_secret:
            raise ValueError("server secret is not configured")
        if not self.attendee_secret:
            raise ValueError("attendee secret is missing")
        if hmac.compare_digest(self.server_secret, self.attendee_secret):
            raise ValueError("server secret and attendee secret must differ")

    def __repr__(self):
        return "SigningKeys(server_secret=***, attendee_secret=***)"


def keys_for(attendee_secret: str) -> SigningKeys:
    """SigningKeys for one attendee, paired with the configured server secret."""
    return SigningKeys(server_secret=settings.QR_SIGNATURE_SECRET, attendee_secret=attendee_secret)


def sign(uid: str, day: int, keys: SigningKeys) -> str:
    if day not in range(1, PROGRAM_DAY_COUNT + 1):
        raise ValueError(f"day must be between 1 and {PROGRAM_DAY_COUNT}")
    payload = f"{uid}:{day}:{keys.attendee_secret}"
    return hmac.new(
        keys.server_secret.encode("utf-8"),
        payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def signatures_match(expected: str, supplied: str) -> bool:
    # constant-time compare
    return hmac.compare_digest(expected.encode("utf-8"), supplied.encode("utf-8"))


def generate_attendee_secret() -> str:
    return secrets.token_hex(32)


def _to_base36(n: int) -> str:
    out = ""
    while n:
        n, rem = divmod(n, 36)
        out = _BASE36[rem] + out
    return out or "0"


def generate_uid() -> str:
    """Short attendee code: prefix + low base36 digits of the ms clock + random tail."""
    stamp = _to_base36(int(time.time() * 1000))[-3:]
    tail_len = UID_LENGTH - len(UID_PREFIX) - len(stamp)
    tail = "".join(secrets.choice(_BASE36) for _ in range(tail_len))
    return f"{UID_PREFIX}{stamp}{tail}"


def verification_url(uid: str, day: int, sig: str) -> str:
    query = urlencode({"uid": uid, "day": day, "sig": sig})
    return f"{settings.APP_URL}/api/verify?{query}"


def signed_urls(uid: str, keys: SigningKeys) -> dict:
    """{1: url, 2: url, 3: url, 4: url} for a freshly registered attendee"""
    return {
        day: verification_url(uid, day, sign(uid, day, keys))
        for day in range(1, PROGRAM_DAY_COUNT + 1)
    }
