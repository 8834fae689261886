"""Latest-request-wins coordination of chain retrievals.

Retrievals run in background workers and may finish out of order when the
user submits a new domain or refreshes while one is still in flight. Every
request takes a ticket from a generation counter; results carrying an older
ticket are dropped instead of being compiled and displayed.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional

from chaingraph.compiler.pipeline import ChainOrigin, CompiledChain, compile_chain
from chaingraph.fetch.sample import sample_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetrievalTicket:
    """Identifies one retrieval request."""
    generation: int
    domain: str


class RetrievalCoordinator:
    """Hands out tickets and compiles only the newest retrieval's result."""

    def __init__(self, allow_fallback: bool = True):
        self.allow_fallback = allow_fallback
        self._lock = threading.Lock()
        self._generation = 0

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def begin(self, domain: str) -> RetrievalTicket:
        """Start a retrieval, superseding every earlier ticket."""
        with self._lock:
            self._generation += 1
            ticket = RetrievalTicket(self._generation, domain)
        logger.debug("Retrieval %d started for %s", ticket.generation, domain)
        return ticket

    def is_current(self, ticket: RetrievalTicket) -> bool:
        with self._lock:
            return ticket.generation == self._generation

    def is_latest(self, compiled: CompiledChain) -> bool:
        """Whether a compiled result still belongs to the newest retrieval."""
        with self._lock:
            return compiled.generation == self._generation

    def complete(self, ticket: RetrievalTicket, raw: Any) -> Optional[CompiledChain]:
        """Compile a successful response, or return None if it is stale."""
        if not self.is_current(ticket):
            logger.info(
                "Dropping stale result for %s (generation %d)", ticket.domain, ticket.generation
            )
            return None
        return compile_chain(raw, domain=ticket.domain, generation=ticket.generation)

    def fail(self, ticket: RetrievalTicket, error: Exception) -> Optional[CompiledChain]:
        """Handle a failed retrieval.

        Returns:
            None for a stale ticket, otherwise the sample chain marked as
            fallback data

        Raises:
            The original error when fallback is disabled
        """
        if not self.is_current(ticket):
            logger.info(
                "Dropping stale failure for %s (generation %d): %s",
                ticket.domain, ticket.generation, error,
            )
            return None
        if not self.allow_fallback:
            raise error

        logger.warning("Retrieval for %s failed, showing sample data: %s", ticket.domain, error)
        return compile_chain(
            sample_for(ticket.domain),
            domain=ticket.domain,
            origin=ChainOrigin.FALLBACK,
            error=str(error),
            generation=ticket.generation,
        )
