"""Chain sources and retrieval coordination."""

from typing import Any, Protocol

from chaingraph.fetch.client import ChainClient, ChainFetchError
from chaingraph.fetch.coordinator import RetrievalCoordinator, RetrievalTicket
from chaingraph.fetch.local import LocalChainSource
from chaingraph.fetch.sample import SAMPLE_RESPONSE, sample_for


class ChainSource(Protocol):
    """Anything that can fetch a ChainResponse by domain name."""

    def fetch(self, domain: str) -> dict[str, Any]:
        ...


__all__ = [
    "ChainSource",
    "ChainClient",
    "ChainFetchError",
    "LocalChainSource",
    "RetrievalCoordinator",
    "RetrievalTicket",
    "SAMPLE_RESPONSE",
    "sample_for",
]
