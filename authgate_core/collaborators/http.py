"""
Internal HTTP Client
====================
Base class for the collaborator clients.

Every call carries the internal secret and the current request id and
fails with a CollaboratorError that keeps the downstream ``i18n`` code and
``data``. Connection failures are retried for every method. A timeout or
5xx is retried only for reads, since a write (an SMS, a token) may already
have taken effect.
"""

from typing import Any, Dict, Optional, Type, TypeVar, Union

import httpx
import structlog
from pydantic import BaseModel
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from .exceptions import (
    AuthenticationError,
    CollaboratorError,
    NotFoundError,
    ServiceConnectError,
    ServiceTimeoutError,
    ServiceUnavailableError,
)

T = TypeVar("T", bound=BaseModel)

logger = structlog.get_logger(__name__)

MAX_ATTEMPTS = 3
INTERNAL_SECRET_HEADER = "X-Internal-Secret"
REQUEST_ID_HEADER = "X-Request-ID"
IDEMPOTENT_METHODS = frozenset({"GET", "HEAD"})


def _error_envelope(response: httpx.Response) -> Dict[str, Any]:
    """``code``/``data`` from a downstream ``{code, i18n, data}`` body."""
    try:
        body = response.json()
    except ValueError:
        return {}
    if not isinstance(body, dict):
        return {}
    return {"code": body.get("i18n"), "data": body.get("data")}


def _log_retry(retry_state) -> None:
    exc = retry_state.outcome.exception()
    logger.warning(
        "Collaborator unavailable, retrying",
        service=getattr(exc, "service", None),
        attempt=retry_state.attempt_number,
        error=str(exc),
    )


class BaseInternalClient:
    """
    Async client for one identity collaborator.

    Args:
        base_url: Root URL of the collaborator
        service_name: Name used in errors and logs
        api_key: Shared internal secret, sent as ``X-Internal-Secret``
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests use ``httpx.MockTransport``)
    """

    retry_wait = wait_exponential(multiplier=1, min=1, max=10)

    def __init__(
        self,
        base_url: str,
        service_name: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.service_name = service_name

        headers = {
            "User-Agent": f"authgate/{service_name}",
            "Accept": "application/json",
        }
        if api_key:
            headers[INTERNAL_SECRET_HEADER] = api_key

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    def _to_collaborator_error(self, exc: httpx.HTTPError) -> CollaboratorError:
        service = self.service_name
        if isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout)):
            return ServiceConnectError(f"Connection failed: {exc}", service=service, status_code=503)
        if isinstance(exc, httpx.TimeoutException):
            return ServiceTimeoutError("Request timed out", service=service, status_code=504)
        if isinstance(exc, httpx.HTTPStatusError):
            response = exc.response
            status = response.status_code
            envelope = _error_envelope(response)
            if status in (401, 403):
                error_cls = AuthenticationError
            elif status == 404:
                error_cls = NotFoundError
            elif status >= 500:
                error_cls = ServiceUnavailableError
            else:
                error_cls = CollaboratorError
            return error_cls(f"HTTP {status}", service=service, status_code=status, details=response.text, **envelope)
        if isinstance(exc, httpx.TransportError):
            return ServiceUnavailableError(f"Transport failure: {exc}", service=service, status_code=503)
        return CollaboratorError(f"HTTP failure: {exc}", service=service)

    async def _request(
        self,
        method: str,
        path: str,
        response_model: Optional[Type[T]] = None,
        **kwargs,
    ) -> Union[T, Dict[str, Any], None]:
        if method in IDEMPOTENT_METHODS:
            retryable = ServiceUnavailableError
        else:
            retryable = ServiceConnectError
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(retryable),
            stop=stop_after_attempt(MAX_ATTEMPTS),
            wait=self.retry_wait,
            before_sleep=_log_retry,
            reraise=True,
        )
        return await retrying(self._send, method, path, response_model, **kwargs)

    async def _send(
        self,
        method: str,
        path: str,
        response_model: Optional[Type[T]] = None,
        **kwargs,
    ) -> Union[T, Dict[str, Any], None]:
        request_id = structlog.contextvars.get_contextvars().get("request_id")
        if request_id:
            kwargs["headers"] = {REQUEST_ID_HEADER: request_id}

        try:
            response = await self.client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise self._to_collaborator_error(e) from e

        if response.status_code == 204 or not response.content:
            return None

        try:
            payload = response.json()
            if response_model is not None:
                return response_model.model_validate(payload)
            return payload
        except ValueError as e:
            # pydantic.ValidationError is a ValueError too
            logger.error("Malformed collaborator response", service=self.service_name, path=path, error=str(e))
            raise CollaboratorError(
                "Malformed response",
                service=self.service_name,
                status_code=502,
                code="BAD_COLLABORATOR_RESPONSE",
            ) from e

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None, response_model: Optional[Type[T]] = None):
        return await self._request("GET", path, params=params, response_model=response_model)

    async def post(self, path: str, json: Any = None, response_model: Optional[Type[T]] = None):
        return await self._request("POST", path, json=json, response_model=response_model)

    async def put(self, path: str, json: Any = None, response_model: Optional[Type[T]] = None):
        return await self._request("PUT", path, json=json, response_model=response_model)
