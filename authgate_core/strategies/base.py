"""
Strategy Helpers
================
Steps shared by the password-based identity strategies.
"""

from typing import Any, Dict, Optional

import structlog

from ..collaborators.base import CredentialStore, Directory, TokenIssuer
from ..collaborators.exceptions import CollaboratorError, ServiceUnavailableError
from ..collaborators.models import UserProfile
from ..errors import FlowStateError
from ..events import EventBus, emit_login

logger = structlog.get_logger(__name__)

SESSION_SCOPE = "auth"


class PasswordStrategy:
    """Base for strategies that authenticate with a stored password."""

    name = "password"

    def __init__(
        self,
        directory: Directory,
        credentials: CredentialStore,
        token_issuer: TokenIssuer,
        events: Optional[EventBus] = None,
    ):
        self.directory = directory
        self.credentials = credentials
        self.token_issuer = token_issuer
        self.events = events

    async def _create_user(self, fields: Dict[str, Any], unique: str, password: str) -> UserProfile:
        fields = {key: value for key, value in fields.items() if value is not None}
        try:
            user = await self.directory.create(fields, unique=unique)
        except ServiceUnavailableError:
            raise
        except CollaboratorError as e:
            logger.warning("User creation rejected", unique=unique, code=e.code)
            raise FlowStateError("FAILED_TO_CREATE_USER") from e

        await self.credentials.save(user.id, password)
        logger.info("User registered", user_id=user.id, strategy=self.name)
        return user

    async def _login(self, user: UserProfile, password: str) -> str:
        if not await self.credentials.compare(user.id, password):
            logger.info("Password mismatch", user_id=user.id, strategy=self.name)
            raise FlowStateError("BAD_PASSWORD")

        token = await self.token_issuer.issue(user.id, SESSION_SCOPE)
        await emit_login(self.events, user, token, strategy=self.name)
        return token
