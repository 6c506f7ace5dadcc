from ..collaborators.base import Directory, UserId
from ..collaborators.models import UserProfile
from ..errors import FlowStateError


class IdentityLookup:
    """Resolves an authenticated identity back to its user profile."""

    def __init__(self, directory: Directory):
        self.directory = directory

    async def whoisthis(self, identity: UserId) -> UserProfile:
        user = await self.directory.get_by_id(identity)
        if user is None:
            raise FlowStateError("USER_NOT_FOUND", status_code=404)
        return user
