"""
API Error Handlers
==================
Renders gateway failures as the ``{code, i18n, data}`` envelope.

CRITICAL: Never expose internal error details to end users. Unexpected
exceptions are logged with their traceback and answered with a generic
``INTERNAL_ERROR``.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..collaborators.exceptions import CollaboratorError
from ..errors import AuthGatewayError

logger = structlog.get_logger(__name__)

VALIDATION_ERROR = "VALIDATION_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"


def error_response(status_code: int, code: str, data=None) -> JSONResponse:
    content = {"code": status_code, "i18n": code}
    if data is not None:
        content["data"] = data
    return JSONResponse(status_code=status_code, content=content)


async def gateway_error_handler(request: Request, exc: AuthGatewayError) -> JSONResponse:
    if isinstance(exc, CollaboratorError):
        # Downstream detail stays in the logs
        logger.warning(
            "Collaborator call failed",
            path=request.url.path,
            service=exc.service,
            code=exc.code,
            status_code=exc.status_code,
            details=exc.details,
        )
    else:
        logger.info("Request rejected", path=request.url.path, code=exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
    logger.info("Request validation failed", path=request.url.path, fields=fields)
    return error_response(400, VALIDATION_ERROR, data={"fields": fields})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, error_type=type(exc).__name__)
    return error_response(500, INTERNAL_ERROR)


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthGatewayError, gateway_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
