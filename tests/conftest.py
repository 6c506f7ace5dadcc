"""
Shared fixtures: in-memory collaborators, a controllable clock and a
scripted random source.
"""

import itertools
import time
from typing import Any, Dict, List, Optional

import pytest

from authgate_core.cache import InMemoryCache
from authgate_core.collaborators.exceptions import CollaboratorError
from authgate_core.collaborators.models import UserProfile
from authgate_core.config import StaticConfigProvider
from authgate_core.events import EventBus
from authgate_core.gateway import AuthGateway
from authgate_core.otp.generator import OTPCodeGenerator

JWT_SECRET = "test-reset-secret-0123456789abcdef0123456789"

AUTH_CONFIG = {
    "auth_phone_otp_length": 6,
    "auth_phone_otp_template": "otp-login",
    "otp_expire_time": 180000,
}

EMAIL_FORGET_CONFIG = {
    "email_forget_template": "forget-password",
    "email_jwt_secret": JWT_SECRET,
    "email_jwt_expiresIn": "1h",
}


class FakeClock:
    """Wall clock in seconds that only moves when told to."""

    def __init__(self, start: Optional[float] = None):
        # Whole seconds keep millisecond arithmetic exact
        self.now = float(int(time.time())) if start is None else start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedRandom:
    """Returns the scripted values from ``randint`` in order."""

    def __init__(self, values: List[int]):
        self.values = list(values)
        self.calls = 0

    def randint(self, low: int, high: int) -> int:
        value = self.values[self.calls]
        self.calls += 1
        assert low <= value <= high
        return value


class FakeDirectory:
    def __init__(self):
        self.users: Dict[Any, UserProfile] = {}
        self._ids = itertools.count(1)
        self.create_calls: List[Dict[str, Any]] = []
        self.create_error: Optional[Exception] = None

    def add(self, **fields) -> UserProfile:
        user = UserProfile(id=next(self._ids), **fields)
        self.users[user.id] = user
        return user

    async def get_by_unique(self, field: str, value: str) -> Optional[UserProfile]:
        for user in self.users.values():
            if getattr(user, field, None) == value:
                return user
        return None

    async def get_by_id(self, user_id) -> Optional[UserProfile]:
        return self.users.get(user_id)

    async def create(self, fields: Dict[str, Any], unique: str) -> UserProfile:
        self.create_calls.append({"fields": dict(fields), "unique": unique})
        if self.create_error is not None:
            raise self.create_error
        existing = await self.get_by_unique(unique, fields[unique])
        if existing is not None:
            return existing
        return self.add(**fields)


class FakeCredentials:
    def __init__(self):
        self.passwords: Dict[Any, str] = {}

    async def save(self, user_id, password: str) -> None:
        self.passwords[user_id] = password

    async def compare(self, user_id, password: str) -> bool:
        return self.passwords.get(user_id) == password


class FakeTokens:
    def __init__(self):
        self.issued: List[Dict[str, Any]] = []

    async def issue(self, identity, scope: str) -> str:
        token = f"session-{identity}-{len(self.issued) + 1}"
        self.issued.append({"identity": identity, "scope": scope, "token": token})
        return token


class FakeNotifier:
    def __init__(self):
        self.emails: List[Dict[str, Any]] = []
        self.sms: List[Dict[str, Any]] = []
        self.error: Optional[Exception] = None

    async def send_email(self, to: str, template: str, params: Dict[str, Any]) -> None:
        if self.error is not None:
            raise self.error
        self.emails.append({"to": to, "template": template, "params": params})

    async def send_sms(self, to: str, template: str, params: Dict[str, Any]) -> None:
        if self.error is not None:
            raise self.error
        self.sms.append({"to": to, "template": template, "params": params})


def collaborator_failure(code: str = "DOWNSTREAM_REJECTED") -> CollaboratorError:
    return CollaboratorError("rejected", service="fake", status_code=409, code=code)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return InMemoryCache(clock=clock)


@pytest.fixture
def config_provider():
    return StaticConfigProvider(
        {"AUTH_CONFIG": AUTH_CONFIG, "EMAIL_FORGET_CONFIG": EMAIL_FORGET_CONFIG}
    )


@pytest.fixture
def directory():
    return FakeDirectory()


@pytest.fixture
def credentials():
    return FakeCredentials()


@pytest.fixture
def tokens():
    return FakeTokens()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def events():
    return EventBus()


@pytest.fixture
def make_gateway(cache, config_provider, directory, credentials, tokens, notifier, events, clock):
    """Gateway factory; pass ``codes`` to script the OTP random source."""

    def _make(codes: Optional[List[int]] = None, **kwargs) -> AuthGateway:
        generator = OTPCodeGenerator(ScriptedRandom(codes)) if codes is not None else None
        return AuthGateway(
            cache=cache,
            config_provider=config_provider,
            directory=directory,
            credentials=credentials,
            token_issuer=tokens,
            notifier=notifier,
            events=events,
            generator=generator,
            clock=clock,
            **kwargs,
        )

    return _make


@pytest.fixture
def gateway(make_gateway):
    return make_gateway()
