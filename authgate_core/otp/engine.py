"""
OTP Flow Engine
===============
Issues, rate-limits and verifies one-time phone codes.

Two cache entries exist per outstanding OTP, sharing one TTL:

    auth:otp:phone:<phone> -> {"otp", "country", "expireAt"}
    auth:otp:code:<code>   -> <phone>

The reverse entry keeps two phones from holding the same code at once.
Expiry is enforced by the cache TTL alone; there is no sweep.

The rate-limit read and the final write are not atomic. Two concurrent
requests for the same phone can both pass the check; the later write wins.
"""

import hmac
import time
from typing import Callable, Optional

import structlog

from ..cache.base import CacheClient
from ..collaborators.base import Directory, Notifier, TokenIssuer
from ..config.models import OTPFlowConfig
from ..config.provider import ConfigProvider, load_blob
from ..errors import FlowStateError, OTPGenerationExhaustedError
from ..events import EventBus, emit_login
from .generator import OTPCodeGenerator
from .keys import code_key, phone_fingerprint, phone_key
from .models import OTPRecord

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_KEY = "AUTH_CONFIG"
DEFAULT_MAX_GENERATION_ATTEMPTS = 10
SESSION_SCOPE = "auth"


class OTPFlowEngine:
    """Phone OTP request/verify lifecycle."""

    def __init__(
        self,
        cache: CacheClient,
        config_provider: ConfigProvider,
        directory: Directory,
        token_issuer: TokenIssuer,
        notifier: Notifier,
        events: Optional[EventBus] = None,
        generator: Optional[OTPCodeGenerator] = None,
        clock: Callable[[], float] = time.time,
        max_generation_attempts: int = DEFAULT_MAX_GENERATION_ATTEMPTS,
        config_key: str = DEFAULT_CONFIG_KEY,
    ):
        if max_generation_attempts < 1:
            raise ValueError("max_generation_attempts must be at least 1")
        self.cache = cache
        self.config_provider = config_provider
        self.directory = directory
        self.token_issuer = token_issuer
        self.notifier = notifier
        self.events = events
        self.generator = generator or OTPCodeGenerator()
        self.clock = clock
        self.max_generation_attempts = max_generation_attempts
        self.config_key = config_key

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    async def get_record(self, phone: str) -> Optional[OTPRecord]:
        value = await self.cache.get(phone_key(phone))
        if value is None:
            return None
        return OTPRecord.from_cache(value)

    async def load_config(self) -> OTPFlowConfig:
        blob = await load_blob(self.config_provider, self.config_key)
        return OTPFlowConfig.from_blob(blob)

    async def generate_code(self, length: int) -> str:
        """
        Draw a code not currently held by any phone.

        Raises:
            OTPGenerationExhaustedError: every attempt collided
        """
        for attempt in range(1, self.max_generation_attempts + 1):
            code = self.generator.generate(length)
            if await self.cache.get(code_key(code)) is None:
                return code
            logger.warning("OTP code collision", attempt=attempt, length=length)

        logger.error("OTP generation exhausted", attempts=self.max_generation_attempts)
        raise OTPGenerationExhaustedError(self.max_generation_attempts)

    async def request_otp(self, phone: str, country: str) -> None:
        """
        Send a fresh OTP to ``country + phone``.

        Args:
            phone: Subscriber number, already validated
            country: Calling code, ``+`` followed by 1-3 digits

        Raises:
            FlowStateError: OTP_ALREADY_REQUESTED while a code is outstanding
            ConfigurationError: the ``AUTH_CONFIG`` blob is missing or invalid
            OTPGenerationExhaustedError: no free code could be drawn
            CollaboratorError: the SMS send failed (nothing is cached)
        """
        fingerprint = phone_fingerprint(phone)

        existing = await self.get_record(phone)
        now_ms = self._now_ms()
        if existing is not None and existing.is_live(now_ms):
            remaining = existing.remaining_ms(now_ms)
            logger.info("OTP already outstanding", phone=fingerprint, remaining_ms=remaining)
            raise FlowStateError(
                "OTP_ALREADY_REQUESTED",
                data={
                    "date": existing.expire_at_iso,
                    "timestamp": existing.expire_at,
                    "remaining": remaining,
                },
            )

        config = await self.load_config()
        code = await self.generate_code(config.otp_length)
        expire_at = self._now_ms() + config.lifetime_ms

        await self.notifier.send_sms(
            f"{country}{phone}",
            config.template,
            {"param1": code},
        )

        record = OTPRecord(otp=code, country=country, expire_at=expire_at)
        ttl_seconds = max(1, (expire_at - self._now_ms()) // 1000)
        await self.cache.set_many(
            {
                phone_key(phone): record.to_cache(),
                code_key(code): phone,
            },
            ttl_seconds,
        )

        logger.info(
            "OTP sent",
            phone=fingerprint,
            country=country,
            expires_in=ttl_seconds,
        )

    async def verify_otp(self, phone: str, code: str) -> str:
        """
        Consume an OTP and log the phone's user in.

        The stored ``expireAt`` is not re-checked here: a record that is still
        in the cache is treated as live.

        Returns:
            The issued session token

        Raises:
            FlowStateError: OTP_NOT_REQUESTED or OTP_NOT_VALID
            CollaboratorError: directory or token issuance failed
        """
        fingerprint = phone_fingerprint(phone)

        record = await self.get_record(phone)
        if record is None:
            logger.info("OTP not requested", phone=fingerprint)
            raise FlowStateError("OTP_NOT_REQUESTED")

        if not hmac.compare_digest(record.otp.encode(), code.encode()):
            # A mismatch leaves the record in place
            logger.warning("Invalid OTP attempt", phone=fingerprint)
            raise FlowStateError("OTP_NOT_VALID")

        user = await self.directory.create(
            {
                "phone": phone,
                "phoneCountryCode": record.country,
                "phoneVerified": True,
            },
            unique="phone",
        )

        await self.cache.delete(phone_key(phone))
        await self.cache.delete(code_key(record.otp))

        token = await self.token_issuer.issue(user.id, SESSION_SCOPE)

        await emit_login(self.events, user, token, strategy="phone")
        logger.info("OTP verified", phone=fingerprint, user_id=user.id)
        return token
