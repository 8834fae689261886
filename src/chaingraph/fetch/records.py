"""Conversion of dnspython rdata into ChainResponse record entries."""

from typing import Any

import dns.dnssec
import dns.exception
import dns.name
from dns.rdtypes.ANY.DNSKEY import DNSKEY
from dns.rdtypes.ANY.DS import DS


# Digest type mapping
DIGEST_TYPE_NAMES = {
    1: "SHA-1",
    2: "SHA-256",
    3: "GOST R 34.11-94",
    4: "SHA-384",
}

SEP_FLAG = 0x0001


def algorithm_name(algorithm: int) -> str:
    """Return the mnemonic for a DNSSEC algorithm number (e.g. RSASHA256)."""
    return dns.dnssec.algorithm_to_text(algorithm)


def is_ksk(rdata: DNSKEY) -> bool:
    """KSKs carry the Secure Entry Point bit."""
    return (rdata.flags & SEP_FLAG) == 1


def dnskey_entry(rdata: DNSKEY) -> dict[str, Any]:
    """Build a role-flagged ``dnskey_records`` entry."""
    ksk = is_ksk(rdata)
    return {
        "key_tag": dns.dnssec.key_id(rdata),
        "algorithm": rdata.algorithm,
        "algorithm_name": algorithm_name(rdata.algorithm),
        "flags": rdata.flags,
        "role": "KSK" if ksk else "ZSK",
        "is_ksk": ksk,
        "is_zsk": not ksk,
    }


def ds_entry(rdata: DS) -> dict[str, Any]:
    """Build a ``ds_records`` entry."""
    return {
        "key_tag": rdata.key_tag,
        "algorithm": rdata.algorithm,
        "algorithm_name": algorithm_name(rdata.algorithm),
        "digest_type": rdata.digest_type,
        "digest_type_name": DIGEST_TYPE_NAMES.get(rdata.digest_type, f"Unknown ({rdata.digest_type})"),
        "digest": rdata.digest.hex().upper(),
    }


def ds_matches_any(zone: str, ds: DS, dnskeys: list[DNSKEY]) -> bool:
    """Check whether a DS digest matches one of the zone's DNSKEYs."""
    name = dns.name.from_text(zone)
    for key in dnskeys:
        if dns.dnssec.key_id(key) != ds.key_tag or key.algorithm != ds.algorithm:
            continue
        try:
            expected = dns.dnssec.make_ds(name, key, ds.digest_type)
        except (dns.exception.DNSException, ValueError):
            # Unsupported or policy-denied digest types cannot be checked
            continue
        if expected.digest == ds.digest:
            return True
    return False
