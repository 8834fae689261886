"""Tests for response normalization."""

from chaingraph.compiler.normalize import normalize, resolve_keys
from chaingraph.models.chain import DomainType, KeyRole, SigningStatus


class TestDefaults:
    def test_none_is_empty_chain(self):
        chain = normalize(None)
        assert chain.is_empty
        assert not chain.malformed
        assert chain.summary.overall_status == "unknown"
        assert chain.metadata.target_domain == ""

    def test_non_sequence_levels_is_malformed(self):
        chain = normalize({"levels": {"root": {}}})
        assert chain.malformed
        assert chain.levels == ()

    def test_string_levels_is_malformed(self):
        assert normalize({"levels": "root,com"}).malformed

    def test_garbage_level_entries_take_defaults(self):
        chain = normalize({"levels": [None, 42]})
        root, target = chain.levels
        assert root.display_name == "."
        assert root.domain_type is DomainType.ROOT
        assert root.status is SigningStatus.UNSIGNED
        assert target.display_name == "level_1"
        assert target.domain_type is DomainType.TARGET
        assert not target.has_keys
        assert not target.chain_break.has_chain_break

    def test_unknown_status_defaults_to_unsigned(self, make_level, make_response):
        chain = normalize(make_response(make_level(".", status="mystery")))
        assert chain.levels[0].status is SigningStatus.UNSIGNED

    def test_string_key_tags_are_coerced(self):
        chain = normalize({"levels": [{"key_hierarchy": {"ksk_keys": [{"key_tag": "123"}, {"key_tag": "abc"}]}}]})
        tags = [k.key_tag for k in chain.levels[0].ksk_keys]
        assert tags == [123, None]

    def test_null_chain_break_info(self, sample_raw):
        chain = normalize(sample_raw)
        assert all(not level.chain_break.has_chain_break for level in chain.levels)


class TestKeySources:
    def test_hierarchy_wins_and_is_not_merged(self):
        hierarchy = {"ksk_keys": [{"key_tag": 1}], "zsk_keys": [{"key_tag": 2}]}
        records = {"dnskey_records": [{"key_tag": 9, "is_ksk": True}]}
        ksk, zsk = resolve_keys(hierarchy, records)
        assert [k.key_tag for k in ksk] == [1]
        assert [k.key_tag for k in zsk] == [2]

    def test_role_flagged_records_used_when_hierarchy_empty(self):
        records = {"dnskey_records": [
            {"key_tag": 9, "is_ksk": True, "algorithm": 13},
            {"key_tag": 10, "role": "zsk", "algorithm_name": "ECDSAP256SHA256"},
            {"key_tag": 11},
        ]}
        ksk, zsk = resolve_keys({}, records)
        assert [(k.key_tag, k.role) for k in ksk] == [(9, KeyRole.KSK)]
        assert [(k.key_tag, k.algorithm) for k in zsk] == [(10, "ECDSAP256SHA256")]

    def test_no_source_yields_no_keys(self):
        assert resolve_keys({}, {"dnskey_records": 3}) == ((), ())

    def test_counts_default_to_list_lengths(self, make_level, make_response):
        level = normalize(make_response(make_level(".", ksk=(1, 2), zsk=(3,)))).levels[0]
        assert (level.ksk_count, level.zsk_count) == (2, 1)

    def test_reported_counts_are_kept(self, sample_raw):
        root = normalize(sample_raw).levels[0]
        assert root.ksk_count == 2
        assert root.dnskey_count == 3

    def test_dnskey_count_from_record_list(self):
        chain = normalize({"levels": [{"records": {"dnskey_records": [{"is_ksk": True}, {"is_zsk": True}]}}]})
        assert chain.levels[0].dnskey_count == 2


class TestDelegationDS:
    def test_child_attached_layout(self, sample_raw):
        root, com, example = normalize(sample_raw).levels
        assert root.delegation_ds is None
        assert com.delegation_ds.key_tag == 19718
        assert example.delegation_ds.key_tag == 370

    def test_child_attached_ignores_parents_own_ds(self, missing_ds_raw):
        example = normalize(missing_ds_raw).levels[2]
        assert example.delegation_ds is None

    def test_parent_attached_layout(self, make_level, make_response, make_ds):
        chain = normalize(make_response(
            make_level(".", ds=(make_ds(11),)),
            make_level("com.", ds=(make_ds(22),)),
            make_level("example.com."),
        ))
        assert chain.levels[1].delegation_ds.key_tag == 11
        assert chain.levels[2].delegation_ds.key_tag == 22

    def test_owner_match_wins(self, make_level, make_response, make_ds):
        chain = normalize(make_response(
            make_level(".", ds=(make_ds(99), make_ds(11, owner="com."))),
            make_level("com.", ds=(make_ds(33, owner="example.com"),)),
            make_level("example.com."),
        ))
        assert chain.levels[1].delegation_ds.key_tag == 11
        assert chain.levels[2].delegation_ds.key_tag == 33

    def test_parent_attached_without_root_ds(self, make_level, make_response, make_ds):
        chain = normalize(make_response(
            make_level(".", ksk=(1,)),
            make_level("com.", ksk=(2,), ds=(make_ds(3),)),
            make_level("example.com.", ksk=(3,)),
        ))
        root, com, example = chain.levels
        assert com.delegation_ds is None
        assert example.delegation_ds.key_tag == 3

    def test_key_tag_match_prefers_parent(self, make_level, make_response, make_ds):
        chain = normalize(make_response(
            make_level(".", ksk=(1,)),
            make_level("com.", ksk=(2,), ds=(make_ds(2), make_ds(4))),
            make_level("example.com.", ksk=(4,), ds=(make_ds(4),)),
        ))
        com, example = chain.levels[1:]
        assert com.delegation_ds.key_tag == 2
        assert example.delegation_ds is chain.levels[1].ds_records[1]

    def test_owner_beats_key_tag(self, make_level, make_response, make_ds):
        chain = normalize(make_response(
            make_level(".", ksk=(1,)),
            make_level("com.", ksk=(2,), ds=(make_ds(2), make_ds(5, owner="example.com."))),
            make_level("example.com.", ksk=(2,)),
        ))
        assert chain.levels[2].delegation_ds.key_tag == 5

    def test_ds_fields(self, sample_raw):
        ds = normalize(sample_raw).levels[1].delegation_ds
        assert ds.digest_type == "SHA-256"
        assert ds.algorithm == "ECDSAP256SHA256"
        assert ds.digest_prefix == "8ACBB0CD…"


class TestSummary:
    def test_security_status(self, sample_raw):
        summary = normalize(sample_raw).summary
        assert summary.overall_status == "secure"
        assert summary.total_levels == 3
        assert summary.signed_levels == 3

    def test_metadata_status_fallback(self):
        chain = normalize({
            "metadata": {"chain_status": "partial", "chain_message": "Partial chain"},
            "chain_summary": {"chain_breaks": [{"level": 2, "domain": "a.b", "reason": "x"}]},
            "levels": [{"dnssec_status": {"status": "signed"}}, {}],
        })
        assert chain.summary.overall_status == "partial"
        assert chain.summary.message == "Partial chain"
        assert chain.summary.signed_levels == 1
        assert chain.summary.unsigned_levels == 1
        assert chain.summary.chain_breaks[0].level == 2

    def test_chain_path(self, sample_raw):
        assert normalize(sample_raw).chain_path() == [".", "com.", "example.com."]
