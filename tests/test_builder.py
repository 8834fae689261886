"""Tests for graph building."""

from chaingraph.compiler.builder import BROKEN_COLORS, SIGNER_ALERT_ATTRS, build
from chaingraph.compiler.normalize import normalize
from chaingraph.models.graph import EdgeClass, EdgeKind, NodeClass, NodeKind

TRUST_KINDS = (EdgeKind.DS_LINK, EdgeKind.VALIDATES)


def _cluster_ids(graph):
    return [[node.id for node in cluster.nodes] for cluster in graph.clusters]


class TestSecureChain:
    def test_node_emission_order(self, sample_raw):
        graph = build(normalize(sample_raw))
        assert _cluster_ids(graph) == [
            ["zone_0", "keys_0", "ds_0", "ds_for_0_1"],
            ["zone_1", "dnskey_1", "keys_1", "ds_1", "ds_for_1_2"],
            ["zone_2", "dnskey_2", "keys_2", "ds_2"],
        ]

    def test_clusters(self, sample_raw):
        graph = build(normalize(sample_raw))
        assert [c.id for c in graph.clusters] == ["cluster_0", "cluster_1", "cluster_2"]
        assert [c.label for c in graph.clusters] == ["Root Zone (.)", "com. Zone", "example.com."]
        assert all(c.style_class is NodeClass.SECURE for c in graph.clusters)

    def test_no_invalid_edges(self, sample_raw):
        graph = build(normalize(sample_raw))
        assert not [e for e in graph.edges if e.style_class is EdgeClass.INVALID]
        trust = [e for e in graph.edges if e.kind in TRUST_KINDS]
        assert len(trust) == 4
        assert all(e.style_class is EdgeClass.VALID for e in trust)

    def test_delegation_edges(self, sample_raw):
        graph = build(normalize(sample_raw))
        validates = graph.find_edge("ds_for_0_1", "keys_1", target_port="ksk")
        assert validates.kind is EdgeKind.VALIDATES
        signs = graph.find_edge("keys_0", "ds_for_0_1")
        assert signs.kind is EdgeKind.SIGNS
        assert signs.source_port == "zsk"
        assert graph.find_edge("ds_0", "ds_for_0_1").kind is EdgeKind.DS_LINK

    def test_root_has_no_dnskey_node(self, sample_raw):
        graph = build(normalize(sample_raw))
        assert graph.get_node("dnskey_0") is None
        edge = graph.find_edge("zone_0", "keys_0", target_port="ksk")
        assert edge.label == "has DNSKEYs"

    def test_key_pair_fields(self, sample_raw):
        keys = build(normalize(sample_raw)).get_node("keys_0")
        assert keys.kind is NodeKind.KEYS
        assert keys.ports == ("ksk", "zsk")
        assert dict(keys.fields)["ksk"] == "Key ID 20326 | Algo RSASHA256"
        assert dict(keys.fields)["zsk"] == "Key ID 53148 | Algo RSASHA256"

    def test_signer_fields(self, sample_raw):
        signer = build(normalize(sample_raw)).get_node("ds_for_1_2")
        assert signer.label == "DS for example.com."
        assert signer.subject_index == 2
        assert signer.level_index == 1
        assert dict(signer.fields)["key_tag"] == "Key ID 370"

    def test_structural_edges_come_last(self, sample_raw):
        graph = build(normalize(sample_raw))
        tail = graph.edges[-2:]
        assert [(e.source, e.target) for e in tail] == [("zone_0", "zone_1"), ("zone_1", "zone_2")]
        assert all(e.style_class is EdgeClass.STRUCTURAL for e in tail)
        assert all(e.label == "delegates to" for e in tail)

    def test_build_is_deterministic(self, sample_raw):
        assert build(normalize(sample_raw)) == build(normalize(sample_raw))


class TestBrokenChain:
    def test_broken_target(self, broken_raw):
        graph = build(normalize(broken_raw))
        cluster = graph.clusters[2]
        assert cluster.style_class is NodeClass.BROKEN
        assert cluster.attrs["color"] == BROKEN_COLORS["border"]
        assert graph.get_node("zone_2").style_class == "broken"

        validates = graph.find_edge("ds_for_1_2", "keys_2", target_port="ksk")
        assert validates.style_class is EdgeClass.INVALID

        signer = graph.get_node("ds_for_1_2")
        assert signer.style_class == "invalid"
        assert signer.attrs["fillcolor"] == SIGNER_ALERT_ATTRS["fillcolor"]

    def test_upper_levels_unaffected(self, broken_raw):
        graph = build(normalize(broken_raw))
        assert graph.clusters[1].style_class is NodeClass.SECURE
        assert graph.find_edge("ds_for_0_1", "keys_1").style_class is EdgeClass.VALID


class TestMissingDS:
    def test_placeholder_node(self, missing_ds_raw):
        graph = build(normalize(missing_ds_raw))
        assert graph.get_node("ds_for_1_2") is None
        placeholder = graph.get_node("no_ds_1_2")
        assert placeholder.kind is NodeKind.MISSING_DS
        assert placeholder.label == "No DS for example.com."

        link = graph.find_edge("ds_1", "no_ds_1_2")
        assert link.style_class is EdgeClass.INVALID
        assert graph.find_edge("zone_1", "ds_1").style_class is EdgeClass.INVALID

    def test_no_trust_edge_into_child(self, missing_ds_raw):
        graph = build(normalize(missing_ds_raw))
        assert not [e for e in graph.edges_into("keys_2") if e.kind is EdgeKind.VALIDATES]

    def test_structure_kept(self, missing_ds_raw):
        graph = build(normalize(missing_ds_raw))
        assert graph.find_edge("zone_1", "zone_2").kind is EdgeKind.DELEGATES


class TestEmpty:
    def test_no_levels(self):
        assert build(normalize({"levels": []})).is_empty

    def test_malformed(self):
        graph = build(normalize({"levels": 7}))
        assert graph.is_empty
        assert graph.edges == ()

    def test_single_level(self, make_level, make_response):
        graph = build(normalize(make_response(make_level(".", ksk=(1,)))))
        assert _cluster_ids(graph) == [["zone_0", "keys_0", "ds_0"]]
        assert graph.find_edge("zone_0", "ds_0").style_class is EdgeClass.MEMBERSHIP
        assert not [e for e in graph.edges if e.kind is EdgeKind.DELEGATES]

    def test_unsigned_level_is_gray(self, make_level, make_response):
        graph = build(normalize(make_response(make_level("."), make_level("example.", status="unsigned"))))
        assert graph.clusters[1].style_class is NodeClass.UNSIGNED
        assert graph.clusters[1].attrs["color"] == "#9E9E9E"


class TestScenarios:
    def test_secure_three_levels(self, sample_raw):
        graph = build(normalize(sample_raw))
        assert len(graph.clusters) == 3
        signers = [n for n in graph.iter_nodes() if n.kind is NodeKind.DELEGATION_SIGNER]
        assert [n.id for n in signers] == ["ds_for_0_1", "ds_for_1_2"]
        assert not [n for n in graph.iter_nodes() if n.style_class == "broken"]

    def test_missing_dnskey_break_on_target(self, sample_raw):
        sample_raw["levels"][2]["chain_break_info"] = {
            "has_chain_break": True,
            "break_reason": "Missing DNSKEY",
        }
        graph = build(normalize(sample_raw))
        assert graph.clusters[2].style_class is NodeClass.BROKEN
        assert graph.find_edge("ds_for_1_2", "keys_2", target_port="ksk").style_class is EdgeClass.INVALID
        assert graph.find_edge("ds_for_0_1", "keys_1", target_port="ksk").style_class is EdgeClass.VALID

    def test_ds_on_child_matches_ds_on_parent(self, make_level, make_response, make_ds):
        on_child = normalize(make_response(
            make_level(".", ksk=(1,)),
            make_level("com.", ksk=(2,), ds=(make_ds(2),)),
            make_level("example.com.", ksk=(3,), ds=(make_ds(3),)),
        ))
        on_parent = normalize(make_response(
            make_level(".", ksk=(1,), ds=(make_ds(2),)),
            make_level("com.", ksk=(2,), ds=(make_ds(3),)),
            make_level("example.com.", ksk=(3,)),
        ))
        assert [lvl.delegation_ds for lvl in on_child.levels] == [lvl.delegation_ds for lvl in on_parent.levels]
        assert build(on_child).edges == build(on_parent).edges

    def test_parent_attached_without_root_ds(self, make_level, make_response, make_ds):
        graph = build(normalize(make_response(
            make_level(".", ksk=(1,)),
            make_level("com.", ksk=(2,), ds=(make_ds(3),)),
            make_level("example.com.", ksk=(3,)),
        )))
        assert graph.get_node("ds_for_0_1") is None
        assert graph.get_node("no_ds_0_1").kind is NodeKind.MISSING_DS
        signer = graph.get_node("ds_for_1_2")
        assert signer.label == "DS for example.com."
        assert dict(signer.fields)["key_tag"] == "Key ID 3"
