"""Reverse index from emitted node ids to the entities they draw."""

from collections.abc import Iterator, Mapping
from typing import NamedTuple, Optional, Union

from chaingraph.models.chain import DSDescriptor, KeyDescriptor, NormalizedChain, ZoneLevel
from chaingraph.models.graph import GraphDescription, NodeKind


class KeySet(NamedTuple):
    """Keys shown in a key-pair node."""
    level: ZoneLevel
    ksk_keys: tuple[KeyDescriptor, ...]
    zsk_keys: tuple[KeyDescriptor, ...]


class DelegationSigner(NamedTuple):
    """The DS record vouching for ``level``; ``ds`` is None for a missing DS."""
    level: ZoneLevel
    ds: Optional[DSDescriptor]


EntityRef = Union[ZoneLevel, KeySet, DelegationSigner]


class InteractionIndex(Mapping):
    """Read-only mapping of node id to entity, in node emission order."""

    def __init__(self, entries: dict[str, EntityRef], kinds: dict[str, NodeKind]):
        self._entries = entries
        self._kinds = kinds

    def __getitem__(self, node_id: str) -> EntityRef:
        return self._entries[node_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"InteractionIndex({len(self)} nodes)"

    def kind_of(self, node_id: str) -> Optional[NodeKind]:
        """Return the kind of node an id was emitted for."""
        return self._kinds.get(node_id)

    def zone(self, index: int) -> Optional[ZoneLevel]:
        """Shortcut for the ZoneLevel behind ``zone_<index>``."""
        entity = self._entries.get(f"zone_{index}")
        return entity if isinstance(entity, ZoneLevel) else None


def build_index(graph: GraphDescription, chain: NormalizedChain) -> InteractionIndex:
    """Map every node of ``graph`` to the entity it was built from.

    Entities are taken from ``chain`` itself, so lookups return the very
    instances the builder used. Nodes whose level is missing from the chain
    are skipped and will miss on ``get``.
    """
    entries: dict[str, EntityRef] = {}
    kinds: dict[str, NodeKind] = {}
    levels = chain.levels

    for node in graph.iter_nodes():
        if not 0 <= node.subject_index < len(levels):
            continue
        level = levels[node.subject_index]

        if node.kind in (NodeKind.ZONE, NodeKind.DNSKEY, NodeKind.DS):
            entity: EntityRef = level
        elif node.kind is NodeKind.KEYS:
            entity = KeySet(level, level.ksk_keys, level.zsk_keys)
        elif node.kind is NodeKind.DELEGATION_SIGNER:
            entity = DelegationSigner(level, level.delegation_ds)
        elif node.kind is NodeKind.MISSING_DS:
            entity = DelegationSigner(level, None)
        else:
            continue

        entries[node.id] = entity
        kinds[node.id] = node.kind

    return InteractionIndex(entries, kinds)
