"""
Collaborator Models
===================
Shapes exchanged with the user directory.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class UserProfile(BaseModel):
    """A user as returned by the directory. Unknown fields are preserved."""

    model_config = ConfigDict(extra="allow")

    id: Union[int, str]
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    fullname: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    phone: Optional[str] = None
    phoneCountryCode: Optional[str] = None
    phoneVerified: Optional[bool] = None
