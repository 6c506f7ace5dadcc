"""
Collaborator HTTP Clients
=========================
HTTP implementations of the collaborator contracts.

Usage:
    from authgate_core.collaborators import DirectoryClient

    directory = DirectoryClient("http://directory:8000", api_key=secret)
    user = await directory.get_by_unique("email", "jane@example.com")
"""

from typing import Any, Dict, Optional

from .base import UserId
from .exceptions import (
    AuthenticationError,
    CollaboratorError,
    NotFoundError,
    ServiceUnavailableError,
)
from .http import BaseInternalClient
from .models import UserProfile


class DirectoryClient(BaseInternalClient):
    """User directory over HTTP."""

    def __init__(self, base_url: str, **kwargs):
        super().__init__(base_url, service_name="directory", **kwargs)

    async def get_by_unique(self, field: str, value: str) -> Optional[UserProfile]:
        try:
            return await self.post(
                "/users/lookup",
                json={"unique": field, "value": value},
                response_model=UserProfile,
            )
        except NotFoundError:
            return None

    async def get_by_id(self, user_id: UserId) -> Optional[UserProfile]:
        try:
            return await self.get(f"/users/{user_id}", response_model=UserProfile)
        except NotFoundError:
            return None

    async def create(self, fields: Dict[str, Any], unique: str) -> UserProfile:
        return await self.post(
            "/users",
            json={**fields, "unique": unique},
            response_model=UserProfile,
        )


class CredentialClient(BaseInternalClient):
    """Password store over HTTP."""

    def __init__(self, base_url: str, **kwargs):
        super().__init__(base_url, service_name="credentials", **kwargs)

    async def save(self, user_id: UserId, password: str) -> None:
        await self.post("/passwords", json={"user": user_id, "password": password})

    async def compare(self, user_id: UserId, password: str) -> bool:
        try:
            result = await self.post(
                "/passwords/compare",
                json={"user": user_id, "password": password},
            )
        except (ServiceUnavailableError, AuthenticationError):
            raise
        except CollaboratorError:
            # Any other rejection means "no match"
            return False
        return bool(result and result.get("match", True))


class TokenClient(BaseInternalClient):
    """Session token issuance over HTTP."""

    def __init__(self, base_url: str, **kwargs):
        super().__init__(base_url, service_name="tokens", **kwargs)

    async def issue(self, identity: UserId, scope: str) -> str:
        result = await self.post("/tokens", json={"identity": identity, "service": scope})
        if not result or not result.get("token"):
            raise CollaboratorError(
                "Token service returned no token",
                service=self.service_name,
                code="TOKEN_NOT_ISSUED",
            )
        return result["token"]


class NotificationClient(BaseInternalClient):
    """Email and SMS delivery over HTTP."""

    def __init__(self, base_url: str, **kwargs):
        super().__init__(base_url, service_name="notifications", **kwargs)

    async def send_email(self, to: str, template: str, params: Dict[str, Any]) -> None:
        await self.post(
            "/email/send",
            json={"receptor": to, "template": template, "params": params},
        )

    async def send_sms(self, to: str, template: str, params: Dict[str, Any]) -> None:
        await self.post(
            "/sms/send",
            json={"receptor": to, "template": template, "params": params},
        )
