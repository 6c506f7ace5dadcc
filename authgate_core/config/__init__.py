"""
Configuration Module
====================
Configuration providers and the typed per-flow configuration records.
"""

from .models import (
    OTPFlowConfig,
    ResetSecretConfig,
    ResetFlowConfig,
    EXPIRES_IN_DURATIONS,
    VALID_EXPIRES_IN,
    DEFAULT_OTP_LIFETIME_MS,
    OTP_MIN_LENGTH,
    OTP_MAX_LENGTH,
)
from .provider import ConfigProvider, StaticConfigProvider, HttpConfigProvider, load_blob

__all__ = [
    # Models
    "OTPFlowConfig",
    "ResetSecretConfig",
    "ResetFlowConfig",
    "EXPIRES_IN_DURATIONS",
    "VALID_EXPIRES_IN",
    "DEFAULT_OTP_LIFETIME_MS",
    "OTP_MIN_LENGTH",
    "OTP_MAX_LENGTH",
    # Providers
    "ConfigProvider",
    "StaticConfigProvider",
    "HttpConfigProvider",
    "load_blob",
]
