"""
Email/Password Strategy
=======================
Registration and login keyed by a unique email address.
"""

from typing import Optional

from ..errors import FlowStateError
from .base import PasswordStrategy


class EmailPasswordStrategy(PasswordStrategy):
    """Users identified by email."""

    name = "email"

    async def register(
        self,
        email: str,
        password: str,
        firstname: Optional[str] = None,
        lastname: Optional[str] = None,
        fullname: Optional[str] = None,
    ) -> None:
        """
        Raises:
            FlowStateError: EMAIL_EXISTS or FAILED_TO_CREATE_USER
        """
        if await self.directory.get_by_unique("email", email) is not None:
            raise FlowStateError("EMAIL_EXISTS", data={"email": email})

        await self._create_user(
            {
                "firstname": firstname,
                "lastname": lastname,
                "fullname": fullname,
                "email": email,
            },
            unique="email",
            password=password,
        )

    async def login(self, email: str, password: str) -> str:
        """
        Raises:
            FlowStateError: BAD_EMAIL or BAD_PASSWORD
        """
        user = await self.directory.get_by_unique("email", email)
        if user is None:
            raise FlowStateError("BAD_EMAIL")
        return await self._login(user, password)
