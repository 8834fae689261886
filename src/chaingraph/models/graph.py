"""Render-engine-agnostic graph description produced by the compiler."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional


class NodeClass(Enum):
    """Visual classification of a zone."""
    SECURE = "secure"
    PARTIAL = "partial"
    BROKEN = "broken"
    UNSIGNED = "unsigned"

    @property
    def color(self) -> str:
        """Return the Rich color for this class."""
        colors = {
            NodeClass.SECURE: "green",
            NodeClass.PARTIAL: "yellow",
            NodeClass.BROKEN: "red",
            NodeClass.UNSIGNED: "grey50",
        }
        return colors.get(self, "white")

    @property
    def symbol(self) -> str:
        """Return a symbol for this class."""
        symbols = {
            NodeClass.SECURE: "✓",
            NodeClass.PARTIAL: "◐",
            NodeClass.BROKEN: "✗",
            NodeClass.UNSIGNED: "○",
        }
        return symbols.get(self, "·")


class EdgeClass(Enum):
    """Visual classification of an edge."""
    VALID = "valid"             # Trust propagates
    INVALID = "invalid"         # Missing DS or broken child
    STRUCTURAL = "structural"   # Parent to child delegation, not cryptographic
    MEMBERSHIP = "membership"   # Zone owns a record set or key

    @property
    def color(self) -> str:
        """Return the Rich color for this class."""
        colors = {
            EdgeClass.VALID: "green",
            EdgeClass.INVALID: "red",
            EdgeClass.STRUCTURAL: "dark_orange",
            EdgeClass.MEMBERSHIP: "steel_blue",
        }
        return colors.get(self, "white")


class NodeKind(Enum):
    """What a node stands for."""
    ZONE = "zone"
    DNSKEY = "dnskey"
    KEYS = "keys"
    DS = "ds"
    DELEGATION_SIGNER = "ds_for"
    MISSING_DS = "no_ds"


class EdgeKind(Enum):
    """Relationship an edge draws."""
    HAS = "has"
    SIGNS = "signs"
    VALIDATES = "validates"
    DS_LINK = "ds_link"
    DELEGATES = "delegates"


@dataclass(frozen=True)
class Node:
    """A node in the graph description.

    ``fields`` holds ``(name, text)`` pairs shown inside the node. On the
    record-shaped key-pair node the names double as the ``ksk`` and ``zsk``
    ports edges attach to.
    ``subject_index`` is the level the represented entity belongs to; it
    differs from ``level_index`` only for delegation nodes, which sit in the
    parent's cluster but describe the child's DS.
    """
    id: str
    kind: NodeKind
    label: str
    style_class: str
    level_index: int
    subject_index: int
    fields: tuple[tuple[str, str], ...] = ()
    attrs: dict[str, str] = field(default_factory=dict)

    @property
    def ports(self) -> tuple[str, ...]:
        return tuple(port for port, _ in self.fields)


@dataclass(frozen=True)
class Edge:
    """A directed edge, optionally anchored on node ports."""
    source: str
    target: str
    kind: EdgeKind
    style_class: EdgeClass
    label: str = ""
    source_port: Optional[str] = None
    target_port: Optional[str] = None
    attrs: dict[str, str] = field(default_factory=dict)

    @property
    def endpoints(self) -> tuple[str, str]:
        """Return ``node[:port]`` strings for both ends."""
        src = f"{self.source}:{self.source_port}" if self.source_port else self.source
        dst = f"{self.target}:{self.target_port}" if self.target_port else self.target
        return src, dst


@dataclass(frozen=True)
class Cluster:
    """All nodes belonging to one zone level."""
    id: str
    label: str
    level_index: int
    style_class: NodeClass
    nodes: tuple[Node, ...] = ()
    attrs: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class GraphDescription:
    """Ordered clusters and edges ready for a layout engine."""
    clusters: tuple[Cluster, ...] = ()
    edges: tuple[Edge, ...] = ()
    attrs: dict[str, str] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "GraphDescription":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.clusters

    def iter_nodes(self) -> Iterator[Node]:
        """Yield every node in emission order."""
        for cluster in self.clusters:
            yield from cluster.nodes

    @property
    def node_ids(self) -> list[str]:
        return [node.id for node in self.iter_nodes()]

    def get_node(self, node_id: str) -> Optional[Node]:
        """Find a node by its stable id."""
        for node in self.iter_nodes():
            if node.id == node_id:
                return node
        return None

    def edges_from(self, node_id: str) -> list[Edge]:
        """Return outgoing edges of a node."""
        return [edge for edge in self.edges if edge.source == node_id]

    def edges_into(self, node_id: str) -> list[Edge]:
        """Return incoming edges of a node."""
        return [edge for edge in self.edges if edge.target == node_id]

    def find_edge(
        self,
        source: str,
        target: str,
        target_port: Optional[str] = None,
    ) -> Optional[Edge]:
        """Find the first edge between two nodes."""
        for edge in self.edges:
            if edge.source != source or edge.target != target:
                continue
            if target_port is not None and edge.target_port != target_port:
                continue
            return edge
        return None
