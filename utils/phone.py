import re

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: str) -> str:
    """'+234 (803) 555-0101' -> '2348035550101'"""
    return _NON_DIGITS.sub("", phone or "")
