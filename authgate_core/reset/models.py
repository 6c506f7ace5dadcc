"""
Reset Models
============
Claims carried by a password-reset token.
"""

from dataclasses import dataclass
from typing import Union


def normalize_creator(creator: str) -> str:
    """Canonical form of a creator tag: trimmed and lower-cased."""
    return creator.strip().lower()


@dataclass(frozen=True)
class ResetClaims:
    """Identity and issuing channel bound into a reset token."""
    user: Union[int, str]
    creator: str
