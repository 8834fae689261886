"""Data models for the chain of trust and its graph description."""

from chaingraph.models.chain import (
    DomainType,
    SigningStatus,
    KeyRole,
    KeyDescriptor,
    DSDescriptor,
    ChainBreak,
    ZoneLevel,
    ChainMetadata,
    ChainBreakSummary,
    ChainSummary,
    NormalizedChain,
)
from chaingraph.models.graph import (
    NodeClass,
    EdgeClass,
    NodeKind,
    EdgeKind,
    Node,
    Edge,
    Cluster,
    GraphDescription,
)

__all__ = [
    "DomainType",
    "SigningStatus",
    "KeyRole",
    "KeyDescriptor",
    "DSDescriptor",
    "ChainBreak",
    "ZoneLevel",
    "ChainMetadata",
    "ChainBreakSummary",
    "ChainSummary",
    "NormalizedChain",
    "NodeClass",
    "EdgeClass",
    "NodeKind",
    "EdgeKind",
    "Node",
    "Edge",
    "Cluster",
    "GraphDescription",
]
