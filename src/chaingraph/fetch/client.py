"""HTTP client for the chain analysis backend."""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)


class ChainFetchError(Exception):
    """Retrieving a chain response failed (network, HTTP status or JSON)."""

    def __init__(self, domain: str, reason: str):
        super().__init__(f"{domain}: {reason}")
        self.domain = domain
        self.reason = reason


class ChainClient:
    """Fetches ``ChainResponse`` documents from ``{base_url}/chain/{domain}``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(timeout=timeout, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, domain: str) -> str:
        """Return the endpoint URL with the domain path-escaped.

        The backend expects names as typed, so the trailing dot is dropped
        from every name but the root.
        """
        name = domain.rstrip(".") or "."
        return f"{self._base_url}/chain/{quote(name, safe='')}"

    def fetch(self, domain: str) -> dict[str, Any]:
        """Fetch the chain response for a domain.

        Raises:
            ChainFetchError: on transport errors, non-2xx statuses or a body
                that is not a JSON object
        """
        url = self.url_for(domain)
        logger.debug("GET %s", url)
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise ChainFetchError(
                domain, f"HTTP {status} {e.response.reason_phrase}".strip()
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ChainFetchError(domain, f"request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise ChainFetchError(domain, "response is not valid JSON") from e

        if not isinstance(data, dict):
            raise ChainFetchError(domain, f"expected a JSON object, got {type(data).__name__}")
        return data

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ChainClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
