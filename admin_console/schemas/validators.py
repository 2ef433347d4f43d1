import re
from typing import Any, Optional

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
SECONDS_RE = re.compile(r":[0-5]\d$")

ROLES = ("admin", "teacher", "parent")
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 128


def blank_to_none(value: Any) -> Any:
    # HTML forms submit "" for untouched optional fields
    if isinstance(value, str) and not value.strip():
        return None
    return value


def required_text(value: Optional[str], label: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(f"{label} is required")
    return str(value).strip()


def valid_email(value: str) -> str:
    value = required_text(value, "Email")
    if not EMAIL_RE.match(value):
        raise ValueError("Invalid email format")
    return value.lower()


def valid_phone(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    digits = re.sub(r"[^\d]", "", value)
    if not 10 <= len(digits) <= 15:
        raise ValueError("Invalid phone number format")
    return value


def valid_password(value: str) -> str:
    if not value:
        raise ValueError("Password is required")
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if len(value) > MAX_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_LENGTH} characters long")
    return value


def valid_time(value: Optional[str], label: str) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    # the backend returns HH:MM:SS
    if len(value) == 8:
        value = SECONDS_RE.sub("", value)
    if not TIME_RE.match(value):
        raise ValueError(f"{label} must be in HH:MM format")
    return value
