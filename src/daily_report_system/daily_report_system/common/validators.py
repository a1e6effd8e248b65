from __future__ import annotations

import re
from typing import Optional

from ..core.constants import MIN_PASSWORD_LENGTH

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and _EMAIL_RE.match(email) is not None


def is_strong_password(password: Optional[str]) -> bool:
    """At least 8 chars with an upper-case letter, a lower-case letter and a digit."""
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        return False
    return (
        re.search(r"[A-Z]", password) is not None
        and re.search(r"[a-z]", password) is not None
        and re.search(r"\d", password) is not None
    )
