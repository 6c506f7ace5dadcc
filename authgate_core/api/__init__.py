"""
API Module
==========
FastAPI transport for the authentication flows.
"""

from .app import create_app, RequestContextMiddleware, API_PREFIX
from .router import create_auth_router
from .errors import install_exception_handlers
from .dependencies import get_creator, CREATOR_HEADER

__all__ = [
    # App
    "create_app",
    "RequestContextMiddleware",
    "API_PREFIX",
    # Router
    "create_auth_router",
    "get_creator",
    "CREATOR_HEADER",
    # Errors
    "install_exception_handlers",
]
