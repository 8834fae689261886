"""Chain source that assembles a ChainResponse from live DNS queries.

This stands in for the analysis backend when none is running. It reports what
it can observe (DNSKEY and DS presence, DS digest agreement) in the same JSON
shape the backend produces, with DS records attached to the child zone.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

import dns.exception
import dns.flags
import dns.resolver
from dns.rdtypes.ANY.DNSKEY import DNSKEY
from dns.rdtypes.ANY.DS import DS

from chaingraph.fetch.client import ChainFetchError
from chaingraph.fetch.records import dnskey_entry, ds_entry, ds_matches_any

logger = logging.getLogger(__name__)


@dataclass
class ZoneSnapshot:
    """Raw records observed for one zone."""
    name: str
    dnskeys: list[DNSKEY] = field(default_factory=list)
    ds_records: list[DS] = field(default_factory=list)
    ns_records: list[str] = field(default_factory=list)
    soa_ttl: Optional[int] = None
    answered: bool = False      # Did any query for this zone get an answer?


def zone_hierarchy(domain: str) -> list[str]:
    """Get the zone names from root to domain.

    >>> zone_hierarchy("www.example.com")
    ['.', 'com.', 'example.com.', 'www.example.com.']
    """
    labels = [label for label in domain.strip().rstrip(".").split(".") if label]
    zones = ["."]
    for i in range(len(labels) - 1, -1, -1):
        zones.append(".".join(labels[i:]) + ".")
    return zones


def _domain_type(index: int, total: int) -> str:
    if index == 0:
        return "root"
    if index == total - 1:
        return "target"
    if index == 1:
        return "tld"
    return "subdomain"


def _assess(
    snapshot: ZoneSnapshot,
    index: int,
    parent_signed: bool,
) -> tuple[str, str, Optional[str]]:
    """Return (status, message, break_reason) for one zone."""
    has_keys = bool(snapshot.dnskeys)
    has_ds = bool(snapshot.ds_records)

    if index == 0:
        if has_keys:
            return "signed", "Root zone is signed (trust anchor)", None
        return "unsigned", "Root zone returned no DNSKEY records", None

    if not has_keys:
        if has_ds:
            return "unsigned", "DS exists but zone has no DNSKEY", "DS exists but no DNSKEY in zone"
        return "unsigned", "No DNSSEC (unsigned delegation)", None

    if not has_ds:
        reason = "Missing DS record in parent zone" if parent_signed else None
        return "partial", "Has DNSKEY but no DS record (unsigned delegation)", reason

    if not any(ds_matches_any(snapshot.name, ds, snapshot.dnskeys) for ds in snapshot.ds_records):
        return "partial", "DS does not match any DNSKEY", "DS digest does not match any DNSKEY"

    return "signed", "Fully signed with DNSSEC", None


def build_response(domain: str, snapshots: list[ZoneSnapshot]) -> dict[str, Any]:
    """Assemble a ChainResponse document from zone snapshots."""
    levels = []
    breaks = []
    parent_signed = False
    total = len(snapshots)

    for i, snap in enumerate(snapshots):
        status, message, break_reason = _assess(snap, i, parent_signed)
        parent_signed = status == "signed"

        keys = [dnskey_entry(k) for k in snap.dnskeys]
        ksk_keys = [k for k in keys if k["is_ksk"]]
        zsk_keys = [k for k in keys if k["is_zsk"]]
        domain_name = snap.name.rstrip(".") or "."

        if break_reason:
            breaks.append({"level": i, "domain": domain_name, "reason": break_reason})

        levels.append({
            "id": f"level_{i}",
            "index": i,
            "domain": domain_name,
            "display_name": snap.name,
            "domain_type": _domain_type(i, total),
            "dnssec_status": {"status": status, "message": message},
            "key_hierarchy": {
                "ksk_count": len(ksk_keys),
                "zsk_count": len(zsk_keys),
                "total_keys": len(keys),
                "ksk_keys": ksk_keys,
                "zsk_keys": zsk_keys,
            },
            "records": {
                "ds_records": [ds_entry(ds) for ds in snap.ds_records],
                "dnskey_records": keys,
                "ns_records": list(snap.ns_records),
                "soa_record": {"ttl": snap.soa_ttl} if snap.soa_ttl is not None else None,
            },
            "chain_break_info": {
                "has_chain_break": break_reason is not None,
                "break_reason": break_reason or "",
            },
        })

    signed = sum(1 for lvl in levels if lvl["dnssec_status"]["status"] == "signed")
    unsigned = sum(1 for lvl in levels if lvl["dnssec_status"]["status"] == "unsigned")
    if breaks:
        overall, summary_message = "broken", f"Chain break detected at {len(breaks)} level(s)"
    elif signed == total:
        overall, summary_message = "secure", "DNSSEC chain is properly configured and secure"
    else:
        overall, summary_message = "partial", "Chain of trust does not reach the target domain"

    return {
        "metadata": {
            "target_domain": domain,
            "analysis_timestamp": datetime.now(timezone.utc).isoformat(),
        },
        "chain_summary": {
            "security_status": {"overall_status": overall, "message": summary_message},
            "total_levels": total,
            "signed_levels": signed,
            "unsigned_levels": unsigned,
            "chain_complete": not breaks and signed == total,
            "chain_breaks": breaks,
        },
        "levels": levels,
    }


class LocalChainSource:
    """Builds chain responses by querying DNS directly."""

    def __init__(self, nameservers: Optional[list[str]] = None, timeout: float = 10.0):
        """Initialize the source.

        Args:
            nameservers: List of nameserver IPs to use. If None, uses system default.
            timeout: Lifetime of each query in seconds
        """
        self.resolver = dns.resolver.Resolver()
        if nameservers:
            self.resolver.nameservers = nameservers
        self.resolver.lifetime = timeout
        self.resolver.use_edns(edns=0, ednsflags=dns.flags.DO, payload=4096)

    @property
    def nameservers(self) -> list[str]:
        return [str(ns) for ns in self.resolver.nameservers]

    def _query(self, name: str, rdtype: str) -> Optional[dns.resolver.Answer]:
        try:
            return self.resolver.resolve(name, rdtype, raise_on_no_answer=False)
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer, dns.resolver.NoNameservers):
            return None
        except dns.exception.Timeout:
            logger.warning("Timed out querying %s %s", name, rdtype)
            return None
        except dns.exception.DNSException as e:
            logger.warning("Query %s %s failed: %s", name, rdtype, e)
            return None

    def snapshot(self, zone: str) -> ZoneSnapshot:
        """Query DNSKEY, DS, NS and SOA for one zone."""
        snap = ZoneSnapshot(name=zone)

        answer = self._query(zone, "DNSKEY")
        if answer is not None:
            snap.answered = True
            snap.dnskeys = [r for r in answer if isinstance(r, DNSKEY)]

        if zone != ".":
            answer = self._query(zone, "DS")
            if answer is not None:
                snap.answered = True
                snap.ds_records = [r for r in answer if isinstance(r, DS)]

        answer = self._query(zone, "NS")
        if answer is not None:
            snap.answered = True
            snap.ns_records = sorted(str(r.target) for r in answer)

        answer = self._query(zone, "SOA")
        if answer is not None and answer.rrset is not None:
            snap.answered = True
            snap.soa_ttl = answer.rrset.ttl

        return snap

    def fetch(self, domain: str) -> dict[str, Any]:
        """Build the ChainResponse for a domain.

        Raises:
            ChainFetchError: when no zone in the chain answered at all
        """
        start = time.time()
        snapshots = [self.snapshot(zone) for zone in zone_hierarchy(domain)]
        if not any(snap.answered for snap in snapshots):
            raise ChainFetchError(domain, "no zone in the chain answered")

        logger.debug("Queried %d zones for %s in %.0fms",
                     len(snapshots), domain, (time.time() - start) * 1000)
        return build_response(domain, snapshots)
