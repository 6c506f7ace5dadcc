"""
AuthGate Core
=============
Authentication gateway: phone OTP login, email and username password
login, and creator-scoped password reset over external identity services.

Usage:
    from authgate_core import AuthGateway, GatewaySettings, setup_logging

    settings = GatewaySettings()
    setup_logging(settings.service_name, settings.log_level, settings.log_json)
    gateway = AuthGateway.from_settings(settings)
"""

__version__ = "0.1.0"

from .errors import (
    AuthGatewayError,
    ValidationError,
    ConfigurationError,
    FlowStateError,
    CacheUnavailableError,
    OTPGenerationExhaustedError,
)
from .collaborators import (
    CollaboratorError,
    ServiceUnavailableError,
    ServiceConnectError,
    ServiceTimeoutError,
    NotFoundError,
    UserProfile,
)
from .cache import CacheClient, InMemoryCache, RedisCache
from .config import OTPFlowConfig, ResetFlowConfig, StaticConfigProvider, HttpConfigProvider
from .events import EventBus, LoginEvent, USER_LOGIN
from .otp import OTPFlowEngine, OTPCodeGenerator, OTPRecord
from .reset import ResetFlowEngine, ResetTokenSigner, ResetClaims
from .strategies import EmailPasswordStrategy, UsernamePasswordStrategy, IdentityLookup
from .settings import GatewaySettings
from .log_config import setup_logging, bind_request_context
from .gateway import AuthGateway

__all__ = [
    # Errors
    "AuthGatewayError",
    "ValidationError",
    "ConfigurationError",
    "FlowStateError",
    "CacheUnavailableError",
    "OTPGenerationExhaustedError",
    "CollaboratorError",
    "ServiceUnavailableError",
    "ServiceConnectError",
    "ServiceTimeoutError",
    "NotFoundError",
    # Models
    "UserProfile",
    "OTPRecord",
    "ResetClaims",
    "LoginEvent",
    "USER_LOGIN",
    # Cache
    "CacheClient",
    "InMemoryCache",
    "RedisCache",
    # Config
    "OTPFlowConfig",
    "ResetFlowConfig",
    "StaticConfigProvider",
    "HttpConfigProvider",
    "GatewaySettings",
    # Flows
    "OTPFlowEngine",
    "OTPCodeGenerator",
    "ResetFlowEngine",
    "ResetTokenSigner",
    "EmailPasswordStrategy",
    "UsernamePasswordStrategy",
    "IdentityLookup",
    "EventBus",
    "AuthGateway",
    # Logging
    "setup_logging",
    "bind_request_context",
]
