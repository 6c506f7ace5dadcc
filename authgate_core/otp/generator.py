"""
OTP Code Generator
==================
Uniform random numeric codes with an exact digit count.
"""

import random
import secrets
from typing import Optional

from ..config.models import OTP_MAX_LENGTH, OTP_MIN_LENGTH


class OTPCodeGenerator:
    """Draws codes from ``[10^(n-1), 10^n - 1]``, so no leading zeros."""

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Args:
            rng: Random source; defaults to the OS CSPRNG
        """
        self.rng = rng or secrets.SystemRandom()

    def generate(self, length: int) -> str:
        if not OTP_MIN_LENGTH <= length <= OTP_MAX_LENGTH:
            raise ValueError(
                f"OTP length must be between {OTP_MIN_LENGTH} and {OTP_MAX_LENGTH}"
            )
        return str(self.rng.randint(10 ** (length - 1), 10 ** length - 1))
