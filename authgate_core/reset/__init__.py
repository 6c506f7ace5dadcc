"""
Password Reset Module
=====================
Signed, creator-scoped reset tokens and the reset flow engine.
"""

from .models import ResetClaims, normalize_creator
from .token import ResetTokenSigner
from .engine import ResetFlowEngine

__all__ = [
    # Models
    "ResetClaims",
    "normalize_creator",
    # Token
    "ResetTokenSigner",
    # Engine
    "ResetFlowEngine",
]
