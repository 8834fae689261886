"""One-shot compilation of a chain response into graph and index."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from chaingraph.compiler.builder import build
from chaingraph.compiler.index import InteractionIndex, build_index
from chaingraph.compiler.normalize import normalize
from chaingraph.models.chain import NormalizedChain
from chaingraph.models.graph import GraphDescription


class ChainOrigin(Enum):
    """Where the compiled data came from."""
    LIVE = "live"           # A real response for the requested domain
    FALLBACK = "fallback"   # Sample data shown because retrieval failed
    EMPTY = "empty"         # No domain selected

    @property
    def color(self) -> str:
        colors = {
            ChainOrigin.LIVE: "green",
            ChainOrigin.FALLBACK: "yellow",
            ChainOrigin.EMPTY: "dim",
        }
        return colors.get(self, "white")


@dataclass(frozen=True)
class CompiledChain:
    """Everything a renderer and a detail panel need for one response."""
    domain: str
    chain: NormalizedChain
    graph: GraphDescription
    index: InteractionIndex = field(compare=False)
    origin: ChainOrigin = ChainOrigin.LIVE
    error: Optional[str] = None
    generation: int = 0

    @property
    def degraded(self) -> bool:
        """True when the data shown is not a real result for ``domain``."""
        return self.origin is ChainOrigin.FALLBACK

    @property
    def overall_status(self) -> str:
        return self.chain.summary.overall_status


def compile_chain(
    raw: Any,
    *,
    domain: Optional[str] = None,
    origin: ChainOrigin = ChainOrigin.LIVE,
    error: Optional[str] = None,
    generation: int = 0,
) -> CompiledChain:
    """Run normalize, build and index over a raw response.

    Args:
        raw: Decoded ChainResponse, or None when no domain is selected
        domain: Requested domain; defaults to the response's target domain
        origin: Provenance of ``raw``
        error: Retrieval error that caused a fallback, if any
        generation: Retrieval generation the response belongs to

    Returns:
        CompiledChain
    """
    if raw is None:
        origin = ChainOrigin.EMPTY

    chain = normalize(raw)
    graph = build(chain)
    return CompiledChain(
        domain=domain or chain.metadata.target_domain,
        chain=chain,
        graph=graph,
        index=build_index(graph, chain),
        origin=origin,
        error=error,
        generation=generation,
    )
