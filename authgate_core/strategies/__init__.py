"""
Identity Strategies
===================
Password-based login strategies and identity lookup.
"""

from .base import PasswordStrategy
from .email import EmailPasswordStrategy
from .username import UsernamePasswordStrategy
from .identity import IdentityLookup

__all__ = [
    "PasswordStrategy",
    "EmailPasswordStrategy",
    "UsernamePasswordStrategy",
    "IdentityLookup",
]
