"""Canonical data model for a DNSSEC chain of trust."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class DomainType(Enum):
    """Role of a zone in the delegation path."""
    ROOT = "root"
    TLD = "tld"
    SUBDOMAIN = "subdomain"
    TARGET = "target"

    @classmethod
    def from_position(cls, index: int, total: int) -> "DomainType":
        """Infer the zone role from its position in the chain."""
        if index == 0:
            return cls.ROOT
        if index == total - 1:
            return cls.TARGET
        return cls.TLD


class SigningStatus(Enum):
    """Signing state reported by the analysis backend for one zone."""
    SIGNED = "signed"
    PARTIAL = "partial"
    UNSIGNED = "unsigned"


class KeyRole(Enum):
    """Role of a DNSKEY within its zone."""
    KSK = "KSK"
    ZSK = "ZSK"


@dataclass(frozen=True)
class KeyDescriptor:
    """A signing key as described by the backend."""
    role: KeyRole
    key_tag: Optional[int]      # None when the producer sent garbage
    algorithm: str              # Algorithm name (or number as text)

    @property
    def summary(self) -> str:
        """Return the `Key ID <tag> | Algo <alg>` line used in key-pair nodes."""
        tag = self.key_tag if self.key_tag is not None else "?"
        return f"Key ID {tag} | Algo {self.algorithm or '?'}"


@dataclass(frozen=True)
class DSDescriptor:
    """A Delegation Signer record: the parent vouching for a child key."""
    key_tag: Optional[int]
    algorithm: str = ""
    digest_type: str = ""       # Digest type name or number as text
    digest: str = ""
    last_validated: Optional[str] = None
    owner: Optional[str] = None  # Child zone the DS belongs to, when the producer says so

    @property
    def digest_prefix(self) -> str:
        """Return the first 8 characters of the digest for node labels."""
        if not self.digest:
            return ""
        return self.digest[:8] + "…"


@dataclass(frozen=True)
class ChainBreak:
    """Marks that trust could not be established from the parent to this zone."""
    has_chain_break: bool = False
    break_reason: str = ""


@dataclass(frozen=True)
class ZoneLevel:
    """One zone in the root-to-target delegation path."""
    index: int
    id: str
    domain: str
    display_name: str
    domain_type: DomainType
    status: SigningStatus = SigningStatus.UNSIGNED
    status_message: str = ""

    # Keys
    ksk_keys: tuple[KeyDescriptor, ...] = ()
    zsk_keys: tuple[KeyDescriptor, ...] = ()
    ksk_count: int = 0
    zsk_count: int = 0

    # Records
    ds_records: tuple[DSDescriptor, ...] = ()
    delegation_ds: Optional[DSDescriptor] = None  # DS resolved for the delegation into this zone
    dnskey_count: int = 0
    ns_records: tuple[str, ...] = ()
    soa_record: Optional[dict[str, Any]] = field(default=None, compare=False)

    chain_break: ChainBreak = field(default_factory=ChainBreak)

    @property
    def is_root(self) -> bool:
        """Check if this is the trust anchor level."""
        return self.index == 0

    @property
    def has_keys(self) -> bool:
        """Check if any KSK or ZSK descriptor was resolved."""
        return bool(self.ksk_keys or self.zsk_keys)

    @property
    def first_ksk(self) -> Optional[KeyDescriptor]:
        return self.ksk_keys[0] if self.ksk_keys else None

    @property
    def first_zsk(self) -> Optional[KeyDescriptor]:
        return self.zsk_keys[0] if self.zsk_keys else None

    @property
    def soa_ttl(self) -> Optional[int]:
        """Return the SOA TTL if the backend reported one."""
        if not self.soa_record:
            return None
        ttl = self.soa_record.get("ttl")
        return ttl if isinstance(ttl, int) else None


@dataclass(frozen=True)
class ChainMetadata:
    """Metadata describing one analysis run."""
    target_domain: str = ""
    analysis_timestamp: str = ""


@dataclass(frozen=True)
class ChainBreakSummary:
    """One entry of the backend's chain break list."""
    level: Optional[int]
    domain: str
    reason: str


@dataclass(frozen=True)
class ChainSummary:
    """Aggregate counts and the overall verdict for the chain."""
    total_levels: int = 0
    signed_levels: int = 0
    unsigned_levels: int = 0
    overall_status: str = "unknown"
    message: str = ""
    chain_breaks: tuple[ChainBreakSummary, ...] = ()
    chain_complete: Optional[bool] = None


@dataclass(frozen=True)
class NormalizedChain:
    """Complete canonical chain from root to target domain."""
    metadata: ChainMetadata = field(default_factory=ChainMetadata)
    summary: ChainSummary = field(default_factory=ChainSummary)
    levels: tuple[ZoneLevel, ...] = ()
    malformed: bool = False     # `levels` was present but not a sequence

    @property
    def is_empty(self) -> bool:
        """Check if there is nothing to draw."""
        return not self.levels

    @property
    def target_level(self) -> Optional[ZoneLevel]:
        """Get the queried domain's level."""
        if self.levels:
            return self.levels[-1]
        return None

    def chain_path(self) -> list[str]:
        """Return the zone names in order from root to target."""
        return [level.display_name for level in self.levels]
