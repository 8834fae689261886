"""JSON export functionality."""

import json
from pathlib import Path
from typing import Any

from chaingraph.compiler.pipeline import CompiledChain
from chaingraph.models.chain import ZoneLevel
from chaingraph.models.graph import Cluster, Edge, GraphDescription, Node


def _serialize_node(node: Node) -> dict[str, Any]:
    return {
        "id": node.id,
        "kind": node.kind.value,
        "label": node.label,
        "style_class": node.style_class,
        "level_index": node.level_index,
        "subject_index": node.subject_index,
        "fields": [{"name": name, "text": text} for name, text in node.fields],
        "attrs": dict(node.attrs),
    }


def _serialize_cluster(cluster: Cluster) -> dict[str, Any]:
    return {
        "id": cluster.id,
        "label": cluster.label,
        "level_index": cluster.level_index,
        "style_class": cluster.style_class.value,
        "attrs": dict(cluster.attrs),
        "nodes": [_serialize_node(node) for node in cluster.nodes],
    }


def _serialize_edge(edge: Edge) -> dict[str, Any]:
    return {
        "source": edge.source,
        "source_port": edge.source_port,
        "target": edge.target,
        "target_port": edge.target_port,
        "kind": edge.kind.value,
        "style_class": edge.style_class.value,
        "label": edge.label,
        "attrs": dict(edge.attrs),
    }


def _serialize_level(level: ZoneLevel) -> dict[str, Any]:
    ds = level.delegation_ds
    return {
        "index": level.index,
        "display_name": level.display_name,
        "domain_type": level.domain_type.value,
        "status": level.status.value,
        "ksk_count": level.ksk_count,
        "zsk_count": level.zsk_count,
        "delegation_ds_key_tag": ds.key_tag if ds else None,
        "has_chain_break": level.chain_break.has_chain_break,
        "break_reason": level.chain_break.break_reason,
    }


def graph_to_dict(graph: GraphDescription) -> dict[str, Any]:
    """Convert a GraphDescription to a dictionary."""
    return {
        "attrs": dict(graph.attrs),
        "clusters": [_serialize_cluster(c) for c in graph.clusters],
        "edges": [_serialize_edge(e) for e in graph.edges],
    }


def compiled_to_dict(compiled: CompiledChain) -> dict[str, Any]:
    """Convert a CompiledChain to a dictionary."""
    summary = compiled.chain.summary
    return {
        "metadata": {
            "domain": compiled.domain,
            "target_domain": compiled.chain.metadata.target_domain,
            "analysis_timestamp": compiled.chain.metadata.analysis_timestamp,
            "origin": compiled.origin.value,
            "degraded": compiled.degraded,
            "error": compiled.error,
            "generation": compiled.generation,
        },
        "summary": {
            "overall_status": summary.overall_status,
            "message": summary.message,
            "total_levels": summary.total_levels,
            "signed_levels": summary.signed_levels,
            "unsigned_levels": summary.unsigned_levels,
            "chain_breaks": [
                {"level": b.level, "domain": b.domain, "reason": b.reason}
                for b in summary.chain_breaks
            ],
        },
        "chain_path": compiled.chain.chain_path(),
        "levels": [_serialize_level(level) for level in compiled.chain.levels],
        "graph": graph_to_dict(compiled.graph),
    }


def export_json(compiled: CompiledChain, path: Path | str | None = None) -> str:
    """Export a compiled chain to JSON.

    Args:
        compiled: The compiled chain to export
        path: Optional file path to write to

    Returns:
        JSON string
    """
    data = compiled_to_dict(compiled)
    json_str = json.dumps(data, indent=2)

    if path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json_str)

    return json_str
