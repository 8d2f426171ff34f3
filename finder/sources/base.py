# =============================================================================
# finder/sources/base.py  —  The Source Adapter Contract
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Defines ResourceSource (the contract every adapter satisfies) and
#   HttpResourceSource (the shared "one GET, parse JSON, normalize" flow
#   used by the HTTP-backed adapters).
#
# FAILURE POLICY:
#   Transport errors, timeouts, non-2xx statuses, undecodable bodies and
#   payloads of the wrong shape all become SourceError HERE.  Nothing an
#   upstream does can escape as a different exception and take the sibling
#   fetches down with it.
#
# ONE CALL, NO RETRY:
#   fetch_resources() performs exactly one outbound request.  Retrying is
#   the host's decision, not the adapter's.
# =============================================================================

from abc import ABC, abstractmethod
import logging
from typing import Any, Optional
from urllib.parse import urlparse

import httpx

from finder.config import FinderConfig
from finder.errors import SourceError
from finder.models import ResourceRecord, SourceKind

logger = logging.getLogger(__name__)


class ResourceSource(ABC):
    """One upstream provider behind the normalized fetch contract."""

    kind: SourceKind
    name: str

    def missing_config(self) -> Optional[str]:
        """Why this source cannot run right now, or None if it can."""
        return None

    @abstractmethod
    async def fetch_resources(self, topic: str, limit: int) -> list[ResourceRecord]:
        """Fetch up to ``limit`` records about ``topic``, in upstream order.

        Raises:
            SourceError: The upstream could not produce usable records.
        """


class HttpResourceSource(ResourceSource):
    """Adapter for an upstream that answers one GET with a JSON body.

    Subclasses provide the request (``build_request``) and the mapping from
    the decoded payload to records (``parse_payload``).
    """

    def __init__(
        self,
        config: FinderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = config
        # Only set by tests (httpx.MockTransport); None means real network.
        self._transport = transport

    @abstractmethod
    def build_request(self, topic: str, limit: int) -> tuple[str, dict[str, Any]]:
        """Return the URL and query parameters for one search."""

    @abstractmethod
    def parse_payload(self, payload: Any) -> list[ResourceRecord]:
        """Map a decoded response body to records.

        Raise TypeError, KeyError or ValueError when the payload does not
        have the expected shape.
        """

    async def fetch_resources(self, topic: str, limit: int) -> list[ResourceRecord]:
        if not topic.strip():
            raise ValueError("topic must not be blank")
        if limit < 1:
            raise ValueError("limit must be >= 1")

        url, params = self.build_request(topic, limit)

        try:
            async with httpx.AsyncClient(
                timeout=self._config.source_timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(url, params=params)
        except httpx.TimeoutException as exc:
            raise SourceError(self.kind, f"request timed out ({type(exc).__name__})") from exc
        except httpx.HTTPError as exc:
            raise SourceError(self.kind, f"network error: {exc}") from exc

        if not response.is_success:
            detail = _error_detail(response)
            message = f"HTTP {response.status_code}"
            if detail:
                message = f"{message}: {detail}"
            logger.warning("%s returned %s", self.name, message)
            raise SourceError(self.kind, message)

        try:
            payload = response.json()
        except ValueError as exc:
            raise SourceError(self.kind, "response body is not valid JSON") from exc

        try:
            records = self.parse_payload(payload)
        except (TypeError, KeyError, ValueError) as exc:
            raise SourceError(self.kind, f"unexpected payload shape: {exc}") from exc

        logger.debug("%s returned %d records for %r", self.name, len(records), topic)
        return records


def is_absolute_url(url: Any) -> bool:
    """True for absolute http(s) URLs."""
    if not isinstance(url, str):
        return False
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def optional_str(value: Any) -> Optional[str]:
    """Keep non-blank strings, drop everything else."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _error_detail(response: httpx.Response) -> str:
    # Google APIs: {"error": {"message": ...}}; Dev.to: {"error": "..."}
    try:
        body = response.json()
    except ValueError:
        return ""
    if not isinstance(body, dict):
        return ""
    error = body.get("error")
    if isinstance(error, dict):
        error = error.get("message")
    message = error or body.get("message")
    return str(message)[:200] if message else ""
