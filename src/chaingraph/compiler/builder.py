"""Compile a normalized chain into a graph description.

Each zone level becomes a cluster holding its zone node, DNSKEY aggregate,
key pair and DS record set. Adjacent levels are tied together by a
delegation-signer node in the parent's cluster, and by a structural
``delegates to`` edge between the zone nodes. Node ids depend only on level
positions, so rebuilding identical input yields identical output.
"""

import logging
from typing import Optional

from chaingraph.compiler.classify import Classification, classify
from chaingraph.models.chain import DomainType, NormalizedChain, ZoneLevel
from chaingraph.models.graph import (
    Cluster,
    Edge,
    EdgeClass,
    EdgeKind,
    GraphDescription,
    Node,
    NodeClass,
    NodeKind,
)

logger = logging.getLogger(__name__)


GRAPH_ATTRS = {"rankdir": "LR", "fontname": "Helvetica"}

# Cluster border / zone node colors per zone role
PALETTE = {
    DomainType.ROOT: {"border": "#FB8C00", "apex": "#FB8C00", "apex_fill": "#FFF3E0"},
    DomainType.TLD: {"border": "#FF9800", "apex": "#FF9800", "apex_fill": "#FFE0B2"},
    DomainType.SUBDOMAIN: {"border": "#4CAF50", "apex": "#2E7D32", "apex_fill": "#C8E6C9"},
    DomainType.TARGET: {"border": "#4CAF50", "apex": "#2E7D32", "apex_fill": "#C8E6C9"},
}
UNSIGNED_COLORS = {"border": "#9E9E9E", "apex": "#9E9E9E", "apex_fill": "#F5F5F5"}
BROKEN_COLORS = {"border": "#D32F2F", "apex": "#D32F2F", "apex_fill": "#FFCDD2"}

KEYS_ATTRS = {"shape": "record", "fillcolor": "#E3F2FD", "color": "#2196F3"}
DNSKEY_ATTRS = {"shape": "ellipse", "fillcolor": "#BBDEFB", "color": "#1976D2"}
DS_ATTRS = {"shape": "ellipse", "fillcolor": "#E1BEE7", "color": "#8E24AA"}
SIGNER_ATTRS = {"shape": "box", "style": "rounded,filled", "fillcolor": "#EDE7F6", "color": "#673AB7"}
SIGNER_ALERT_ATTRS = {"shape": "box", "style": "rounded,filled", "fillcolor": "#FFCDD2", "color": "#D32F2F"}
MISSING_DS_ATTRS = {"shape": "box", "style": "rounded,filled", "fillcolor": "#FFEBEE", "color": "#C62828"}

KEY_EDGE = {"color": "#1976D2"}
DS_EDGE = {"color": "#8E24AA"}
MISSING_DS_EDGE = {"color": "#C62828", "style": "dashed"}
SIGNS_EDGE = {"color": "#4CAF50"}
VALIDATES_EDGE = {"color": "#4CAF50", "penwidth": "2"}
VALIDATES_ALERT_EDGE = {"color": "#D32F2F", "style": "dashed"}
KEY_PAIR_EDGE = {"style": "dotted", "arrowhead": "none", "color": "#424242"}
DELEGATION_EDGE = {"color": "#FF9800", "style": "dashed"}


def zone_id(i: int) -> str:
    return f"zone_{i}"


def dnskey_id(i: int) -> str:
    return f"dnskey_{i}"


def keys_id(i: int) -> str:
    return f"keys_{i}"


def ds_id(i: int) -> str:
    return f"ds_{i}"


def signer_id(i: int) -> str:
    """Id of the delegation-signer node between level i and i+1."""
    return f"ds_for_{i}_{i + 1}"


def missing_ds_id(i: int) -> str:
    """Id of the placeholder drawn when no DS resolves between i and i+1."""
    return f"no_ds_{i}_{i + 1}"


def cluster_id(i: int) -> str:
    return f"cluster_{i}"


def _colors(level: ZoneLevel, classification: Classification) -> dict[str, str]:
    if classification.node_class is NodeClass.BROKEN:
        return BROKEN_COLORS
    if classification.node_class is not NodeClass.SECURE:
        return UNSIGNED_COLORS
    return PALETTE.get(level.domain_type, PALETTE[DomainType.TARGET])


def _cluster_label(level: ZoneLevel, position: DomainType) -> str:
    if position is DomainType.ROOT:
        return f"Root Zone ({level.display_name})"
    if position is DomainType.TARGET:
        return level.display_name
    return f"{level.display_name} Zone"


def _key_fields(level: ZoneLevel) -> tuple[tuple[str, str], ...]:
    ksk = level.first_ksk
    zsk = level.first_zsk
    return (
        ("ksk", ksk.summary if ksk else ""),
        ("zsk", zsk.summary if zsk else ""),
    )


class _LevelBuilder:
    """Accumulates nodes and edges for one level in emission order."""

    def __init__(
        self,
        levels: tuple[ZoneLevel, ...],
        classifications: list[Classification],
        i: int,
    ):
        self.levels = levels
        self.classifications = classifications
        self.i = i
        self.level = levels[i]
        self.classification = classifications[i]
        self.nodes: list[Node] = []
        self.edges: list[Edge] = []

    @property
    def child(self) -> Optional[ZoneLevel]:
        if self.i + 1 < len(self.levels):
            return self.levels[self.i + 1]
        return None

    def _node(
        self,
        node_id: str,
        kind: NodeKind,
        label: str,
        style_class: str,
        attrs: dict[str, str],
        fields: tuple[tuple[str, str], ...] = (),
        subject_index: Optional[int] = None,
    ) -> None:
        self.nodes.append(Node(
            id=node_id,
            kind=kind,
            label=label,
            style_class=style_class,
            level_index=self.i,
            subject_index=self.i if subject_index is None else subject_index,
            fields=fields,
            attrs=dict(attrs),
        ))

    def _edge(
        self,
        source: str,
        target: str,
        kind: EdgeKind,
        style_class: EdgeClass,
        attrs: dict[str, str],
        label: str = "",
        source_port: Optional[str] = None,
        target_port: Optional[str] = None,
    ) -> None:
        self.edges.append(Edge(
            source=source,
            target=target,
            kind=kind,
            style_class=style_class,
            label=label,
            source_port=source_port,
            target_port=target_port,
            attrs=dict(attrs),
        ))

    def build_nodes(self) -> None:
        i = self.i
        level = self.level
        colors = _colors(level, self.classification)

        self._node(
            zone_id(i), NodeKind.ZONE, level.display_name,
            self.classification.node_class.value,
            {"shape": "rect", "fillcolor": colors["apex_fill"], "color": colors["apex"]},
        )
        if i > 0:
            self._node(dnskey_id(i), NodeKind.DNSKEY, "DNSKEY Records", "dnskey", DNSKEY_ATTRS)
        self._node(keys_id(i), NodeKind.KEYS, "Keys", "keys", KEYS_ATTRS, fields=_key_fields(level))
        self._node(ds_id(i), NodeKind.DS, "DS Records", "ds", DS_ATTRS)

        child = self.child
        if child is None:
            return
        ds = child.delegation_ds
        if ds is not None:
            edge_into = self.classifications[i + 1].edge_into_class
            alert = edge_into is EdgeClass.INVALID
            tag = ds.key_tag if ds.key_tag is not None else "?"
            self._node(
                signer_id(i), NodeKind.DELEGATION_SIGNER, f"DS for {child.display_name}",
                edge_into.value if edge_into else EdgeClass.VALID.value,
                SIGNER_ALERT_ATTRS if alert else SIGNER_ATTRS,
                fields=(
                    ("key_tag", f"Key ID {tag}"),
                    ("digest_type", f"Digest Type {ds.digest_type}"),
                    ("digest", f"Digest: {ds.digest_prefix}"),
                ),
                subject_index=i + 1,
            )
        else:
            self._node(
                missing_ds_id(i), NodeKind.MISSING_DS, f"No DS for {child.display_name}",
                EdgeClass.INVALID.value, MISSING_DS_ATTRS,
                subject_index=i + 1,
            )

    def build_edges(self) -> None:
        i = self.i
        if i == 0:
            self._edge(zone_id(i), keys_id(i), EdgeKind.HAS, EdgeClass.MEMBERSHIP, KEY_EDGE,
                       label="has DNSKEYs", target_port="ksk")
        else:
            self._edge(zone_id(i), dnskey_id(i), EdgeKind.HAS, EdgeClass.MEMBERSHIP, KEY_EDGE,
                       label="has")
            self._edge(dnskey_id(i), keys_id(i), EdgeKind.HAS, EdgeClass.MEMBERSHIP, KEY_EDGE,
                       target_port="ksk")
            self._edge(dnskey_id(i), keys_id(i), EdgeKind.HAS, EdgeClass.MEMBERSHIP, KEY_EDGE,
                       target_port="zsk")

        child = self.child
        if child is None:
            self._edge(zone_id(i), ds_id(i), EdgeKind.HAS, EdgeClass.MEMBERSHIP, DS_EDGE, label="has")
        elif child.delegation_ds is not None:
            edge_into = self.classifications[i + 1].edge_into_class or EdgeClass.VALID
            self._edge(zone_id(i), ds_id(i), EdgeKind.HAS, EdgeClass.VALID, DS_EDGE, label="has")
            self._edge(ds_id(i), signer_id(i), EdgeKind.DS_LINK, EdgeClass.VALID, DS_EDGE)
            self._edge(keys_id(i), signer_id(i), EdgeKind.SIGNS, EdgeClass.VALID, SIGNS_EDGE,
                       label="signs", source_port="zsk")
            self._edge(
                signer_id(i), keys_id(i + 1), EdgeKind.VALIDATES, edge_into,
                VALIDATES_EDGE if edge_into is EdgeClass.VALID else VALIDATES_ALERT_EDGE,
                label="validates", target_port="ksk",
            )
        else:
            self._edge(zone_id(i), ds_id(i), EdgeKind.HAS, EdgeClass.INVALID, MISSING_DS_EDGE, label="has")
            self._edge(ds_id(i), missing_ds_id(i), EdgeKind.DS_LINK, EdgeClass.INVALID, MISSING_DS_EDGE)

        self._edge(keys_id(i), keys_id(i), EdgeKind.SIGNS, EdgeClass.MEMBERSHIP, KEY_PAIR_EDGE,
                   source_port="ksk", target_port="zsk")

    def cluster(self) -> Cluster:
        colors = _colors(self.level, self.classification)
        return Cluster(
            id=cluster_id(self.i),
            label=_cluster_label(self.level, self.classification.position),
            level_index=self.i,
            style_class=self.classification.node_class,
            nodes=tuple(self.nodes),
            attrs={"style": "rounded,dashed", "color": colors["border"]},
        )


def classify_levels(chain: NormalizedChain) -> list[Classification]:
    """Classify every level of a chain."""
    total = len(chain.levels)
    return [classify(level, i, total) for i, level in enumerate(chain.levels)]


def build(chain: NormalizedChain) -> GraphDescription:
    """Build the graph description for a normalized chain.

    Args:
        chain: Output of ``normalize``

    Returns:
        GraphDescription; empty when there are no levels or the levels were
        malformed
    """
    if chain.malformed or not chain.levels:
        return GraphDescription.empty()

    levels = chain.levels
    classifications = classify_levels(chain)

    clusters: list[Cluster] = []
    edges: list[Edge] = []
    for i in range(len(levels)):
        builder = _LevelBuilder(levels, classifications, i)
        builder.build_nodes()
        builder.build_edges()
        clusters.append(builder.cluster())
        edges.extend(builder.edges)

    # Structural hierarchy stays visible even when validation fails
    for i in range(len(levels) - 1):
        edges.append(Edge(
            source=zone_id(i),
            target=zone_id(i + 1),
            kind=EdgeKind.DELEGATES,
            style_class=EdgeClass.STRUCTURAL,
            label="delegates to",
            attrs=dict(DELEGATION_EDGE),
        ))

    logger.debug(
        "Built graph for %s: %d clusters, %d edges",
        chain.metadata.target_domain or "<unknown>", len(clusters), len(edges),
    )
    return GraphDescription(clusters=tuple(clusters), edges=tuple(edges), attrs=dict(GRAPH_ATTRS))
