from typing import Any, Dict, Optional

from ..errors import AuthGatewayError


class CollaboratorError(AuthGatewayError):
    """Base exception for all collaborator communication errors.

    The downstream code, data and status are kept verbatim so callers can
    tell a failed precondition from an unavailable identity system.
    """

    default_code = "COLLABORATOR_ERROR"

    def __init__(
        self,
        message: str,
        service: str = "unknown",
        status_code: Optional[int] = None,
        details: Any = None,
        code: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.service = service
        self.details = details
        super().__init__(
            code or self.default_code,
            data=data,
            status_code=status_code or 502,
            message=f"[{service}] {message} (Status: {status_code})",
        )


class ServiceUnavailableError(CollaboratorError):
    """Raised when the target service is unreachable or returns 5xx."""
    default_code = "SERVICE_UNAVAILABLE"


class ServiceConnectError(ServiceUnavailableError):
    """Raised when no connection could be made; the request was never sent."""
    default_code = "SERVICE_UNREACHABLE"


class ServiceTimeoutError(ServiceUnavailableError):
    """Raised specifically on timeouts."""
    default_code = "SERVICE_TIMEOUT"


class AuthenticationError(CollaboratorError):
    """Raised when internal authentication fails (401/403)."""
    default_code = "SERVICE_AUTH_FAILED"


class NotFoundError(CollaboratorError):
    """Raised when the requested resource is not found (404)."""
    default_code = "NOT_FOUND"
