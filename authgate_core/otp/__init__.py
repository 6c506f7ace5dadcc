"""
OTP Module
==========
Phone one-time password issuance and verification.
"""

from .models import OTPRecord
from .keys import phone_key, code_key, phone_fingerprint
from .generator import OTPCodeGenerator
from .engine import OTPFlowEngine

__all__ = [
    # Models
    "OTPRecord",
    # Keys
    "phone_key",
    "code_key",
    "phone_fingerprint",
    # Generator
    "OTPCodeGenerator",
    # Engine
    "OTPFlowEngine",
]
