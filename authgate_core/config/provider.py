"""
Configuration Providers
=======================
Sources of the dynamic configuration blobs read by the flow engines.
"""

from typing import Any, Dict, Mapping, Optional, Protocol

import structlog

from ..collaborators.exceptions import NotFoundError
from ..collaborators.http import BaseInternalClient
from ..errors import ConfigurationError

logger = structlog.get_logger(__name__)


class ConfigProvider(Protocol):
    """Key to configuration blob lookup."""

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the blob stored under ``key``, or None."""


class StaticConfigProvider:
    """
    In-memory configuration provider.

    For development and testing. Blobs are copied on read so callers
    cannot mutate the stored configuration.
    """

    def __init__(self, blobs: Optional[Mapping[str, Mapping[str, Any]]] = None):
        self._blobs: Dict[str, Dict[str, Any]] = {
            key: dict(value) for key, value in (blobs or {}).items()
        }

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        blob = self._blobs.get(key)
        return dict(blob) if blob is not None else None

    def put(self, key: str, blob: Mapping[str, Any]) -> None:
        self._blobs[key] = dict(blob)


class HttpConfigProvider(BaseInternalClient):
    """Configuration service over HTTP."""

    def __init__(self, base_url: str, **kwargs):
        super().__init__(base_url, service_name="config", **kwargs)

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            result = await self._request("GET", f"/configs/{key}")
        except NotFoundError:
            return None
        if not result:
            return None
        return result.get("value", {})


async def load_blob(provider: ConfigProvider, key: str) -> Dict[str, Any]:
    """
    Fetch a blob that must exist.

    Raises:
        ConfigurationError: CONFIG_NOT_FOUND if the provider has no such blob
    """
    blob = await provider.get(key)
    if blob is None:
        logger.warning("Configuration blob missing", key=key)
        raise ConfigurationError("CONFIG_NOT_FOUND", data={"key": key})
    return blob
