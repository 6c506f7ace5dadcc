"""
Auth Application
================
FastAPI application factory for the gateway.

Usage:
    from authgate_core import AuthGateway, GatewaySettings
    from authgate_core.api import create_app

    settings = GatewaySettings()
    app = create_app(AuthGateway.from_settings(settings))
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ..gateway import AuthGateway
from ..log_config import bind_request_context, clear_request_context
from .errors import install_exception_handlers
from .router import create_auth_router

logger = structlog.get_logger(__name__)

API_PREFIX = "/api/v1/auth"
REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds a request id to every log record of the request and echoes it back."""

    async def dispatch(self, request: Request, call_next):
        request_id = bind_request_context(request.headers.get(REQUEST_ID_HEADER))
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def create_app(gateway: AuthGateway, prefix: str = API_PREFIX) -> FastAPI:
    """Build the application serving ``gateway`` under ``prefix``."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await gateway.aclose()
        logger.info("Gateway closed")

    app = FastAPI(title="AuthGate", lifespan=lifespan)
    app.state.gateway = gateway
    app.add_middleware(RequestContextMiddleware)
    install_exception_handlers(app)
    app.include_router(create_auth_router(gateway), prefix=prefix)
    return app
