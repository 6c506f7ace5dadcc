"""
Gateway Settings
================
Environment-driven settings for the gateway and its collaborators.
"""

import os
from dataclasses import dataclass, field


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


@dataclass
class GatewaySettings:
    """Settings read from the environment at construction time."""
    service_name: str = field(default_factory=lambda: os.environ.get("AUTHGATE_SERVICE_NAME", "authgate"))
    log_level: str = field(default_factory=lambda: os.environ.get("AUTHGATE_LOG_LEVEL", "INFO"))
    log_json: bool = field(default_factory=lambda: _env_bool("AUTHGATE_LOG_JSON", "true"))

    redis_url: str = field(default_factory=lambda: os.environ.get("AUTHGATE_REDIS_URL", "redis://localhost:6379/0"))
    cache_prefix: str = field(default_factory=lambda: os.environ.get("AUTHGATE_CACHE_PREFIX", ""))

    directory_url: str = field(default_factory=lambda: os.environ.get("DIRECTORY_SERVICE_URL", "http://localhost:8001"))
    credential_url: str = field(default_factory=lambda: os.environ.get("CREDENTIAL_SERVICE_URL", "http://localhost:8002"))
    token_url: str = field(default_factory=lambda: os.environ.get("TOKEN_SERVICE_URL", "http://localhost:8003"))
    notification_url: str = field(default_factory=lambda: os.environ.get("NOTIFICATION_SERVICE_URL", "http://localhost:8004"))
    config_url: str = field(default_factory=lambda: os.environ.get("CONFIG_SERVICE_URL", "http://localhost:8005"))
    internal_secret: str = field(default_factory=lambda: os.environ.get("INTERNAL_API_SECRET", ""))
    http_timeout: float = field(default_factory=lambda: float(os.environ.get("AUTHGATE_HTTP_TIMEOUT", "10.0")))

    otp_config_key: str = field(default_factory=lambda: os.environ.get("AUTHGATE_OTP_CONFIG_KEY", "AUTH_CONFIG"))
    reset_config_key: str = field(default_factory=lambda: os.environ.get("AUTHGATE_RESET_CONFIG_KEY", "EMAIL_FORGET_CONFIG"))
    otp_max_generation_attempts: int = field(
        default_factory=lambda: int(os.environ.get("AUTHGATE_OTP_MAX_GENERATION_ATTEMPTS", "10"))
    )
