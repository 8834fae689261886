"""Visual classification of zone levels and the edges into them."""

from dataclasses import dataclass
from typing import Optional

from chaingraph.models.chain import DomainType, SigningStatus, ZoneLevel
from chaingraph.models.graph import EdgeClass, NodeClass


_STATUS_CLASSES = {
    SigningStatus.SIGNED: NodeClass.SECURE,
    SigningStatus.PARTIAL: NodeClass.PARTIAL,
    SigningStatus.UNSIGNED: NodeClass.UNSIGNED,
}


@dataclass(frozen=True)
class Classification:
    """How one level and its incoming trust edge are drawn."""
    node_class: NodeClass
    edge_into_class: Optional[EdgeClass]  # None for the root: nothing points into it
    break_surfaced: bool
    position: DomainType


def break_is_surfaced(level: ZoneLevel, index: int) -> bool:
    """Decide whether a reported chain break should be shown.

    The root has no parent to break from. A TLD reporting a missing DS is
    expected (the root zone's DS for a TLD is not always exposed), so breaks
    at index 1 mentioning "ds" are suppressed as well.
    """
    info = level.chain_break
    if not info.has_chain_break:
        return False
    if index == 0:
        return False
    if index == 1 and "ds" in info.break_reason.lower():
        return False
    return True


def classify(level: ZoneLevel, index: int, total: int) -> Classification:
    """Classify a level at ``index`` in a chain of ``total`` levels."""
    surfaced = break_is_surfaced(level, index)
    if surfaced:
        node_class = NodeClass.BROKEN
    else:
        node_class = _STATUS_CLASSES.get(level.status, NodeClass.UNSIGNED)

    if index == 0:
        edge_into = None
    elif level.delegation_ds is not None and node_class is not NodeClass.BROKEN:
        edge_into = EdgeClass.VALID
    else:
        edge_into = EdgeClass.INVALID

    return Classification(
        node_class=node_class,
        edge_into_class=edge_into,
        break_surfaced=surfaced,
        position=DomainType.from_position(index, total),
    )
