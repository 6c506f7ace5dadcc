"""
Username/Password Strategy
==========================
Registration, login and password recovery keyed by a unique username.
"""

from typing import Optional

import structlog

from ..errors import FlowStateError
from ..reset.engine import ResetFlowEngine
from .base import PasswordStrategy

logger = structlog.get_logger(__name__)


class UsernamePasswordStrategy(PasswordStrategy):
    """Users identified by username, optionally with an email."""

    name = "username"

    def __init__(self, *args, reset_engine: ResetFlowEngine, **kwargs):
        super().__init__(*args, **kwargs)
        self.reset_engine = reset_engine

    async def register(
        self,
        username: str,
        password: str,
        email: Optional[str] = None,
        firstname: Optional[str] = None,
        lastname: Optional[str] = None,
        fullname: Optional[str] = None,
    ) -> None:
        """
        Raises:
            FlowStateError: USERNAME_EXISTS, EMAIL_EXISTS or FAILED_TO_CREATE_USER
        """
        if await self.directory.get_by_unique("username", username) is not None:
            raise FlowStateError("USERNAME_EXISTS", data={"username": username})

        if email:
            if await self.directory.get_by_unique("email", email) is not None:
                raise FlowStateError("EMAIL_EXISTS", data={"email": email})

        await self._create_user(
            {
                "firstname": firstname,
                "lastname": lastname,
                "fullname": fullname,
                "username": username,
                "email": email or None,
            },
            unique="username",
            password=password,
        )

    async def login(self, username: str, password: str) -> str:
        """
        Raises:
            FlowStateError: BAD_USERNAME or BAD_PASSWORD
        """
        user = await self.directory.get_by_unique("username", username)
        if user is None:
            raise FlowStateError("BAD_USERNAME")
        return await self._login(user, password)

    async def forget(self, username: str, creator: str) -> None:
        """
        Start a password reset for the email on file.

        Raises:
            FlowStateError: BAD_USERNAME or EMAIL_NOT_FOUND, plus anything
                ResetFlowEngine.request_reset raises
        """
        user = await self.directory.get_by_unique("username", username)
        if user is None:
            raise FlowStateError("BAD_USERNAME")

        if not user.email:
            logger.info("Reset requested without email on file", user_id=user.id)
            raise FlowStateError("EMAIL_NOT_FOUND")

        await self.reset_engine.request_reset(user.email, creator)
