"""
Collaborator Contracts
======================
Interfaces of the external identity services the engines call.

Implementations raise CollaboratorError subclasses on failure; the engines
let those propagate unchanged.
"""

from typing import Any, Dict, Optional, Protocol, Union

from .models import UserProfile

UserId = Union[int, str]


class Directory(Protocol):
    """User directory service."""

    async def get_by_unique(self, field: str, value: str) -> Optional[UserProfile]:
        """Look a user up by a unique field (email, username, phone)."""

    async def get_by_id(self, user_id: UserId) -> Optional[UserProfile]:
        """Look a user up by id."""

    async def create(self, fields: Dict[str, Any], unique: str) -> UserProfile:
        """Create a user, or return the existing one matching ``unique``."""


class CredentialStore(Protocol):
    """Password hash storage."""

    async def save(self, user_id: UserId, password: str) -> None:
        """Hash and store (or overwrite) the password of a user."""

    async def compare(self, user_id: UserId, password: str) -> bool:
        """Return True if the password matches the stored hash."""


class TokenIssuer(Protocol):
    """Session token issuance service."""

    async def issue(self, identity: UserId, scope: str) -> str:
        """Mint an opaque session token for an identity."""


class Notifier(Protocol):
    """Email and SMS delivery."""

    async def send_email(self, to: str, template: str, params: Dict[str, Any]) -> None:
        ...

    async def send_sms(self, to: str, template: str, params: Dict[str, Any]) -> None:
        ...
