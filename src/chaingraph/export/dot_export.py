"""Graphviz DOT export of a graph description."""

import html
import re
from pathlib import Path

import graphviz

from chaingraph.models.graph import Cluster, GraphDescription, Node, NodeKind

NODE_ATTRS = {"fontname": "Helvetica", "style": "filled"}

# Record field separators and port markers inside field text
_RECORD_SPECIAL = re.compile(r'([{}|<>"\\])')


def _record_text(value: str) -> str:
    return _RECORD_SPECIAL.sub(r"\\\1", value)


def _node_label(node: Node) -> str:
    if node.kind is NodeKind.KEYS:
        parts = [
            f"{{<{port}> {port.upper()} | {_record_text(text)} }}"
            for port, text in node.fields
        ]
        return "{ " + " | ".join(parts) + " }"
    if node.kind in (NodeKind.DELEGATION_SIGNER, NodeKind.MISSING_DS):
        lines = [f"<b>{html.escape(node.label)}</b>"]
        lines.extend(html.escape(text) for _, text in node.fields)
        return "< " + "<br/>".join(lines) + " >"
    return graphviz.escape(node.label)


def _add_cluster(dot: graphviz.Digraph, cluster: Cluster) -> None:
    with dot.subgraph(name=cluster.id) as sub:
        sub.attr(label=graphviz.escape(cluster.label), **cluster.attrs)
        for node in cluster.nodes:
            sub.node(node.id, label=_node_label(node), **node.attrs)

        # Keep the DNSKEY aggregate beside the key pair it feeds
        ranked = [n.id for n in cluster.nodes if n.kind in (NodeKind.DNSKEY, NodeKind.KEYS)]
        if len(ranked) == 2:
            with sub.subgraph() as same:
                same.attr(rank="same")
                for node_id in ranked:
                    same.node(node_id)


def to_digraph(graph: GraphDescription, name: str = "DNSSEC_Chain") -> graphviz.Digraph:
    """Build a ``graphviz.Digraph`` with one subgraph per cluster."""
    dot = graphviz.Digraph(name=name, graph_attr=dict(graph.attrs), node_attr=NODE_ATTRS)
    for cluster in graph.clusters:
        _add_cluster(dot, cluster)
    for edge in graph.edges:
        source, target = edge.endpoints
        dot.edge(source, target, label=edge.label or None, **edge.attrs)
    return dot


def to_dot(graph: GraphDescription, name: str = "DNSSEC_Chain") -> str:
    """Render a graph description as DOT text."""
    return to_digraph(graph, name).source


def export_dot(graph: GraphDescription, path: Path | str | None = None) -> str:
    """Export a graph description to DOT.

    Args:
        graph: The graph description to export
        path: Optional file path to write to

    Returns:
        DOT string
    """
    dot = to_dot(graph)

    if path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dot)

    return dot
