"""
OTP Cache Keys
==============
Key scheme for the forward (phone) and reverse (code) OTP entries.
"""

import hashlib

PHONE_KEY_PREFIX = "auth:otp:phone:"
CODE_KEY_PREFIX = "auth:otp:code:"


def phone_key(phone: str) -> str:
    return f"{PHONE_KEY_PREFIX}{phone}"


def code_key(code: str) -> str:
    return f"{CODE_KEY_PREFIX}{code}"


def phone_fingerprint(phone: str) -> str:
    """Truncated SHA-256 of a phone number, safe to log."""
    return hashlib.sha256(f":{phone}".encode()).hexdigest()[:16]
