"""Sample chain response shown when retrieval fails and fallback is allowed."""

import copy
from typing import Any

SAMPLE_RESPONSE: dict[str, Any] = {
    "metadata": {
        "target_domain": "example.com",
        "analysis_timestamp": "2025-06-02T15:55:19.222109",
    },
    "chain_summary": {
        "security_status": {
            "overall_status": "secure",
            "message": "DNSSEC chain is properly configured and secure",
        },
        "total_levels": 3,
        "signed_levels": 3,
        "unsigned_levels": 0,
        "chain_breaks": [],
    },
    "levels": [
        {
            "id": "root",
            "display_name": ".",
            "domain_type": "root",
            "dnssec_status": {"status": "signed", "message": "Root zone is properly signed"},
            "key_hierarchy": {
                "ksk_count": 2,
                "zsk_count": 1,
                "ksk_keys": [
                    {"key_tag": 20326, "algorithm_name": "RSASHA256", "role": "KSK"},
                    {"key_tag": 38696, "algorithm_name": "RSASHA256", "role": "KSK"},
                ],
                "zsk_keys": [
                    {"key_tag": 53148, "algorithm_name": "RSASHA256", "role": "ZSK"},
                ],
            },
            "records": {
                "ds_records": [],
                "dnskey_records": 3,
                "ns_records": ["a.root-servers.net", "b.root-servers.net"],
                "soa_record": {"ttl": 86400},
            },
            "chain_break_info": None,
        },
        {
            "id": "tld",
            "display_name": "com.",
            "domain_type": "tld",
            "dnssec_status": {"status": "signed", "message": "TLD is properly signed"},
            "key_hierarchy": {
                "ksk_count": 1,
                "zsk_count": 1,
                "ksk_keys": [{"key_tag": 19718, "algorithm_name": "ECDSAP256SHA256", "role": "KSK"}],
                "zsk_keys": [{"key_tag": 40097, "algorithm_name": "ECDSAP256SHA256", "role": "ZSK"}],
            },
            "records": {
                "ds_records": [
                    {
                        "key_tag": 19718,
                        "algorithm_name": "ECDSAP256SHA256",
                        "digest_type": 2,
                        "digest_type_name": "SHA-256",
                        "digest": "8ACBB0CD28F41250A80A491389424D341522D946B0DA0C0291F2D3D771D7805A",
                    },
                ],
                "dnskey_records": 2,
                "ns_records": ["a.gtld-servers.net", "b.gtld-servers.net"],
                "soa_record": {"ttl": 172800},
            },
            "chain_break_info": None,
        },
        {
            "id": "domain",
            "display_name": "example.com.",
            "domain_type": "target",
            "dnssec_status": {"status": "signed", "message": "Domain is properly signed"},
            "key_hierarchy": {
                "ksk_count": 1,
                "zsk_count": 1,
                "ksk_keys": [{"key_tag": 370, "algorithm_name": "ECDSAP256SHA256", "role": "KSK"}],
                "zsk_keys": [{"key_tag": 46914, "algorithm_name": "ECDSAP256SHA256", "role": "ZSK"}],
            },
            "records": {
                "ds_records": [
                    {
                        "key_tag": 370,
                        "algorithm_name": "ECDSAP256SHA256",
                        "digest_type": 2,
                        "digest_type_name": "SHA-256",
                        "digest": "BE74359954660069D5C63D200C39F5603827D7DD02B56F120EE9F3A86764247C",
                    },
                ],
                "dnskey_records": 2,
                "ns_records": ["a.iana-servers.net", "b.iana-servers.net"],
                "soa_record": {"ttl": 3600},
            },
            "chain_break_info": None,
        },
    ],
}


def sample_for(domain: str) -> dict[str, Any]:
    """Return a deep copy of the sample with the target domain replaced."""
    data = copy.deepcopy(SAMPLE_RESPONSE)
    data["metadata"]["target_domain"] = domain
    return data
