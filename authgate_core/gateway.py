"""
Auth Gateway
============
Composition root: wires the cache, configuration and collaborators into
the flow engines and strategies.

Usage:
    from authgate_core import AuthGateway, GatewaySettings

    gateway = AuthGateway.from_settings(GatewaySettings())
    await gateway.otp.request_otp("5551234", "+1")
    ...
    await gateway.aclose()
"""

import time
from typing import Callable, List, Optional

import structlog
from redis.asyncio import Redis

from .cache.base import CacheClient
from .cache.redis_cache import RedisCache
from .collaborators.base import CredentialStore, Directory, Notifier, TokenIssuer
from .collaborators.clients import (
    CredentialClient,
    DirectoryClient,
    NotificationClient,
    TokenClient,
)
from .config.provider import ConfigProvider, HttpConfigProvider
from .events import EventBus
from .otp.engine import DEFAULT_MAX_GENERATION_ATTEMPTS, OTPFlowEngine
from .otp.generator import OTPCodeGenerator
from .reset.engine import ResetFlowEngine
from .settings import GatewaySettings
from .strategies.email import EmailPasswordStrategy
from .strategies.identity import IdentityLookup
from .strategies.username import UsernamePasswordStrategy

logger = structlog.get_logger(__name__)


class AuthGateway:
    """All authentication flows over one set of collaborators."""

    def __init__(
        self,
        cache: CacheClient,
        config_provider: ConfigProvider,
        directory: Directory,
        credentials: CredentialStore,
        token_issuer: TokenIssuer,
        notifier: Notifier,
        events: Optional[EventBus] = None,
        generator: Optional[OTPCodeGenerator] = None,
        clock: Callable[[], float] = time.time,
        otp_config_key: str = "AUTH_CONFIG",
        reset_config_key: str = "EMAIL_FORGET_CONFIG",
        otp_max_generation_attempts: int = DEFAULT_MAX_GENERATION_ATTEMPTS,
    ):
        self.cache = cache
        self.events = events or EventBus()
        self._closeables: List = []

        self.otp = OTPFlowEngine(
            cache=cache,
            config_provider=config_provider,
            directory=directory,
            token_issuer=token_issuer,
            notifier=notifier,
            events=self.events,
            generator=generator,
            clock=clock,
            max_generation_attempts=otp_max_generation_attempts,
            config_key=otp_config_key,
        )
        self.reset = ResetFlowEngine(
            config_provider=config_provider,
            directory=directory,
            credentials=credentials,
            notifier=notifier,
            clock=clock,
            config_key=reset_config_key,
        )
        self.email = EmailPasswordStrategy(directory, credentials, token_issuer, self.events)
        self.username = UsernamePasswordStrategy(
            directory,
            credentials,
            token_issuer,
            self.events,
            reset_engine=self.reset,
        )
        self.identity = IdentityLookup(directory)

    @classmethod
    def from_settings(cls, settings: GatewaySettings) -> "AuthGateway":
        """Build a gateway backed by Redis and the HTTP collaborators."""
        client_options = {
            "api_key": settings.internal_secret or None,
            "timeout": settings.http_timeout,
        }
        redis_client = Redis.from_url(settings.redis_url)
        directory = DirectoryClient(settings.directory_url, **client_options)
        credentials = CredentialClient(settings.credential_url, **client_options)
        tokens = TokenClient(settings.token_url, **client_options)
        notifier = NotificationClient(settings.notification_url, **client_options)
        config_provider = HttpConfigProvider(settings.config_url, **client_options)

        gateway = cls(
            cache=RedisCache(redis_client, prefix=settings.cache_prefix),
            config_provider=config_provider,
            directory=directory,
            credentials=credentials,
            token_issuer=tokens,
            notifier=notifier,
            otp_config_key=settings.otp_config_key,
            reset_config_key=settings.reset_config_key,
            otp_max_generation_attempts=settings.otp_max_generation_attempts,
        )
        gateway._closeables = [directory, credentials, tokens, notifier, config_provider, redis_client]
        logger.info("Gateway configured", service=settings.service_name)
        return gateway

    async def aclose(self) -> None:
        """Close the HTTP and Redis clients created by ``from_settings``."""
        for resource in self._closeables:
            await resource.aclose()
        self._closeables = []
