"""
Request validation and rate limit helpers.
"""
from __future__ import annotations

import re
import time
from typing import Dict, Tuple

from email_validator import EmailNotValidError, validate_email


def is_valid_email(email: str) -> bool:
    email = (email or "").strip()
    if not email or len(email) > 254:
        return False
    if not re.fullmatch(r"[^@\s]+@[^@\s]+\.[^@\s]+", email):
        return False
    # Reject punycode/IDNA domains for now
    domain = email.rsplit("@", 1)[-1].lower()
    if domain.startswith("xn--") or ".xn--" in domain:
        return False
    try:
        # Skip MX/deliverability checks; only validate syntax
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_password(pw: str) -> bool:
    """8-25 chars, no whitespace, at least one letter and one number."""
    raw_pw = pw or ""
    if re.search(r"\s", raw_pw):
        return False
    if len(raw_pw) < 8 or len(raw_pw) > 25:
        return False
    return bool(re.search(r"[A-Za-z]", raw_pw) and re.search(r"\d", raw_pw))


# -------- Rate limiting (in-memory) --------
_rate_state: Dict[str, list[float]] = {}


def allow_request(key: str, limit: int = 5, window_seconds: int = 60) -> bool:
    """
    Simple sliding-window rate limit stored in memory.
    Returns True if under limit, False otherwise.
    """
    allowed, _ = allow_request_with_remaining(key, limit=limit, window_seconds=window_seconds)
    return allowed


def allow_request_with_remaining(key: str, limit: int = 5, window_seconds: int = 60) -> Tuple[bool, int]:
    """
    Sliding-window rate limit with remaining-count feedback.
    Returns (allowed: bool, remaining_after: int).
    """
    now = time.time()
    window_start = now - window_seconds
    history = [t for t in _rate_state.get(key, []) if t > window_start]
    if len(history) >= limit:
        _rate_state[key] = history
        return False, 0
    history.append(now)
    _rate_state[key] = history
    return True, max(0, limit - len(history))


__all__ = [
    "is_valid_email",
    "is_valid_password",
    "allow_request",
    "allow_request_with_remaining",
]
