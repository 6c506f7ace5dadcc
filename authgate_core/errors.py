"""
Error Taxonomy
==============
Exceptions raised by the flow engines and collaborator clients.

Every error carries a stable machine code (rendered as ``i18n`` by the API
layer), optional structured ``data`` and the HTTP status it maps to.
"""

from typing import Any, Dict, Optional


class AuthGatewayError(Exception):
    """Base class for all expected gateway failures."""

    status_code: int = 400

    def __init__(
        self,
        code: str,
        data: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
        message: Optional[str] = None,
    ):
        self.code = code
        self.data = data
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message or code)

    def to_dict(self) -> Dict[str, Any]:
        """Response envelope used by the transport layer."""
        body: Dict[str, Any] = {"code": self.status_code, "i18n": self.code}
        if self.data is not None:
            body["data"] = self.data
        return body


class ValidationError(AuthGatewayError):
    """Malformed input, detected before any side effect."""


class ConfigurationError(AuthGatewayError):
    """Missing or out-of-range operational parameter. Fail closed."""


class FlowStateError(AuthGatewayError):
    """Lifecycle precondition failed (no OTP, wrong code, bad token...)."""


class CacheUnavailableError(AuthGatewayError):
    """The shared cache could not be reached."""

    status_code = 503

    def __init__(self, message: str):
        super().__init__("CACHE_UNAVAILABLE", message=message)


class OTPGenerationExhaustedError(AuthGatewayError):
    """No free OTP code was found within the attempt budget."""

    status_code = 503

    def __init__(self, attempts: int):
        super().__init__(
            "OTP_GENERATION_EXHAUSTED",
            data={"attempts": attempts},
            message=f"No free OTP code after {attempts} attempts",
        )
