"""
Collaborators Module
====================
Contracts and HTTP clients for the external identity services.
"""

from .base import Directory, CredentialStore, TokenIssuer, Notifier, UserId
from .models import UserProfile
from .exceptions import (
    CollaboratorError,
    ServiceUnavailableError,
    ServiceConnectError,
    ServiceTimeoutError,
    AuthenticationError,
    NotFoundError,
)
from .http import BaseInternalClient
from .clients import DirectoryClient, CredentialClient, TokenClient, NotificationClient

__all__ = [
    # Contracts
    "Directory",
    "CredentialStore",
    "TokenIssuer",
    "Notifier",
    "UserId",
    "UserProfile",
    # Exceptions
    "CollaboratorError",
    "ServiceUnavailableError",
    "ServiceConnectError",
    "ServiceTimeoutError",
    "AuthenticationError",
    "NotFoundError",
    # HTTP
    "BaseInternalClient",
    "DirectoryClient",
    "CredentialClient",
    "TokenClient",
    "NotificationClient",
]
