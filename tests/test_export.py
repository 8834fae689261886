"""Tests for JSON and DOT export."""

import json

from chaingraph.compiler.pipeline import compile_chain
from chaingraph.export import export_dot, export_json
from chaingraph.export.dot_export import to_dot
from chaingraph.models.graph import GraphDescription


class TestDotExport:
    def test_clusters_and_nodes(self, sample_raw):
        dot = to_dot(compile_chain(sample_raw).graph)
        assert dot.startswith("digraph DNSSEC_Chain {")
        assert dot.rstrip().endswith("}")
        assert "rankdir=LR" in dot
        assert "subgraph cluster_0 {" in dot
        assert 'label="Root Zone (.)"' in dot
        lines = [line.strip() for line in dot.splitlines()]
        rank = lines.index("rank=same")
        assert lines[rank + 1:rank + 3] == ["dnskey_1", "keys_1"]
        assert "<ksk> KSK" in dot
        assert "<b>DS for com.</b>" in dot

    def test_edges_use_ports(self, sample_raw):
        dot = to_dot(compile_chain(sample_raw).graph)
        assert "ds_for_0_1 -> keys_1:ksk" in dot
        assert "keys_0:zsk -> ds_for_0_1" in dot
        assert "keys_0:ksk -> keys_0:zsk" in dot
        assert 'zone_1 -> zone_2 [label="delegates to"' in dot

    def test_labels_are_quoted(self, make_level, make_response):
        dot = to_dot(compile_chain(make_response(
            make_level("."), make_level("we\"ird\\zone."),
        )).graph)
        assert 'label="we\\"ird\\\\zone."' in dot

    def test_missing_ds_placeholder(self, missing_ds_raw):
        dot = to_dot(compile_chain(missing_ds_raw).graph)
        assert "no_ds_1_2 [label=< <b>No DS for example.com.</b> >" in dot
        assert "ds_1 -> no_ds_1_2" in dot

    def test_empty_graph(self):
        dot = to_dot(GraphDescription.empty())
        assert "subgraph" not in dot
        assert "->" not in dot

    def test_writes_file(self, sample_raw, tmp_path):
        path = tmp_path / "out" / "chain.dot"
        dot = export_dot(compile_chain(sample_raw).graph, path)
        assert path.read_text() == dot


class TestJsonExport:
    def test_document(self, sample_raw):
        data = json.loads(export_json(compile_chain(sample_raw, domain="example.com.")))
        assert data["metadata"]["domain"] == "example.com."
        assert data["metadata"]["origin"] == "live"
        assert data["metadata"]["degraded"] is False
        assert data["chain_path"] == [".", "com.", "example.com."]
        assert data["summary"]["overall_status"] == "secure"
        assert [c["id"] for c in data["graph"]["clusters"]] == ["cluster_0", "cluster_1", "cluster_2"]
        assert data["levels"][1]["delegation_ds_key_tag"] == 19718

    def test_edge_serialization(self, sample_raw):
        data = json.loads(export_json(compile_chain(sample_raw)))
        validates = [e for e in data["graph"]["edges"] if e["kind"] == "validates"]
        assert validates[0] == {
            "source": "ds_for_0_1",
            "source_port": None,
            "target": "keys_1",
            "target_port": "ksk",
            "kind": "validates",
            "style_class": "valid",
            "label": "validates",
            "attrs": {"color": "#4CAF50", "penwidth": "2"},
        }

    def test_writes_file(self, sample_raw, tmp_path):
        path = tmp_path / "chain.json"
        export_json(compile_chain(sample_raw), path)
        assert json.loads(path.read_text())["graph"]["edges"]
