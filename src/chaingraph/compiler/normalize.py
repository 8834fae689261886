"""Resolve raw chain responses into the canonical model.

Backend versions disagree on where key metadata and DS records live, so every
field is read through an ordered list of fallbacks. Nothing in this module
raises on malformed input: missing or mistyped fields take their defaults.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import Any, Optional

from chaingraph.models.chain import (
    ChainBreak,
    ChainBreakSummary,
    ChainMetadata,
    ChainSummary,
    DomainType,
    DSDescriptor,
    KeyDescriptor,
    KeyRole,
    NormalizedChain,
    SigningStatus,
    ZoneLevel,
)

logger = logging.getLogger(__name__)


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _sequence(value: Any) -> Sequence[Any]:
    """Return value if it is a real list-like (not a string), else ()."""
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return value
    return ()


def _to_int(value: Any) -> Optional[int]:
    """Coerce key tags and counts that may arrive as strings."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _parse_enum(enum_cls, value: Any):
    if not isinstance(value, str):
        return None
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        return None


def _parse_key(entry: Any, role: KeyRole) -> KeyDescriptor:
    entry = _mapping(entry)
    algorithm = entry.get("algorithm_name") or entry.get("algorithm")
    return KeyDescriptor(
        role=role,
        key_tag=_to_int(entry.get("key_tag")),
        algorithm=_to_text(algorithm),
    )


def _role_of(entry: Mapping[str, Any]) -> Optional[KeyRole]:
    """Return the role flagged on an inline DNSKEY entry, if any."""
    if entry.get("is_ksk") is True:
        return KeyRole.KSK
    if entry.get("is_zsk") is True:
        return KeyRole.ZSK
    role = entry.get("role")
    if isinstance(role, str):
        role = role.strip().upper()
        if role == "KSK":
            return KeyRole.KSK
        if role == "ZSK":
            return KeyRole.ZSK
    return None


def _keys_from_hierarchy(
    hierarchy: Mapping[str, Any],
) -> tuple[tuple[KeyDescriptor, ...], tuple[KeyDescriptor, ...]]:
    ksk = tuple(_parse_key(k, KeyRole.KSK) for k in _sequence(hierarchy.get("ksk_keys")))
    zsk = tuple(_parse_key(k, KeyRole.ZSK) for k in _sequence(hierarchy.get("zsk_keys")))
    return ksk, zsk


def _keys_from_dnskey_records(
    records: Sequence[Any],
) -> tuple[tuple[KeyDescriptor, ...], tuple[KeyDescriptor, ...]]:
    ksk: list[KeyDescriptor] = []
    zsk: list[KeyDescriptor] = []
    for entry in records:
        entry = _mapping(entry)
        role = _role_of(entry)
        if role is KeyRole.KSK:
            ksk.append(_parse_key(entry, role))
        elif role is KeyRole.ZSK:
            zsk.append(_parse_key(entry, role))
    return tuple(ksk), tuple(zsk)


def resolve_keys(
    key_hierarchy: Mapping[str, Any],
    records: Mapping[str, Any],
) -> tuple[tuple[KeyDescriptor, ...], tuple[KeyDescriptor, ...]]:
    """Resolve KSK and ZSK descriptor lists for one level.

    Sources are tried in order and the first one yielding any key wins:
    ``key_hierarchy.ksk_keys``/``zsk_keys``, then role-flagged entries of
    ``records.dnskey_records``. Sources are never merged, since producers that
    fill both would otherwise have every key counted twice.
    """
    sources = (
        lambda: _keys_from_hierarchy(key_hierarchy),
        lambda: _keys_from_dnskey_records(_sequence(records.get("dnskey_records"))),
    )
    for source in sources:
        ksk, zsk = source()
        if ksk or zsk:
            return ksk, zsk
    return (), ()


def _parse_ds(entry: Any) -> DSDescriptor:
    entry = _mapping(entry)
    algorithm = entry.get("algorithm_name") or entry.get("algorithm")
    digest_type = entry.get("digest_type_name") or entry.get("digest_type")
    owner = entry.get("owner") or entry.get("domain")
    last_validated = entry.get("last_validated")
    return DSDescriptor(
        key_tag=_to_int(entry.get("key_tag")),
        algorithm=_to_text(algorithm),
        digest_type=_to_text(digest_type),
        digest=_to_text(entry.get("digest")),
        last_validated=_to_text(last_validated) if last_validated is not None else None,
        owner=_to_text(owner) if owner else None,
    )


def _zone_key(name: str) -> str:
    """Compare zone names case-insensitively and without the trailing dot."""
    return name.strip().rstrip(".").lower()


def _names_zone(ds: DSDescriptor, level: ZoneLevel) -> bool:
    if ds.owner is None:
        return False
    owner = _zone_key(ds.owner)
    return owner in (_zone_key(level.domain), _zone_key(level.display_name))


def match_delegation_ds(parent: ZoneLevel, child: ZoneLevel) -> Optional[DSDescriptor]:
    """Find a DS that identifies itself as belonging to the child.

    A DS whose owner names the child wins wherever it is attached. Next comes
    an unowned DS whose key tag is one of the child's KSK tags, the parent's
    list checked before the child's.
    """
    candidates = parent.ds_records + child.ds_records
    for ds in candidates:
        if _names_zone(ds, child):
            return ds

    ksk_tags = {key.key_tag for key in child.ksk_keys if key.key_tag is not None}
    for ds in candidates:
        if ds.owner is None and ds.key_tag in ksk_tags:
            return ds
    return None


def resolve_delegation_ds(
    parent: ZoneLevel,
    child: ZoneLevel,
    parent_attached: bool,
    claimed: Sequence[DSDescriptor] = (),
) -> Optional[DSDescriptor]:
    """Resolve the DS record asserting the delegation from parent to child.

    Owner and key tag matches come first. Otherwise the lookup follows the
    response layout: parent-attached responses check the parent first and
    fall back to the child; child-attached responses only trust the child,
    because there the parent's list is the parent's own DS. Records in
    ``claimed`` already belong to another delegation and are skipped.
    """
    ds = match_delegation_ds(parent, child)
    if ds is not None:
        return ds

    if parent_attached:
        candidates = parent.ds_records + child.ds_records
    else:
        candidates = child.ds_records

    for ds in candidates:
        if ds.owner is None and not any(ds is other for other in claimed):
            return ds
    return None


def _display_name(raw: Mapping[str, Any], index: int) -> str:
    for key in ("display_name", "domain"):
        value = raw.get(key)
        if isinstance(value, str) and value:
            return value
    return "." if index == 0 else f"level_{index}"


def _count(value: Any, fallback: int) -> int:
    count = _to_int(value)
    return count if count is not None and count >= 0 else fallback


def _normalize_level(raw: Any, index: int, total: int) -> ZoneLevel:
    raw = _mapping(raw)
    key_hierarchy = _mapping(raw.get("key_hierarchy"))
    records = _mapping(raw.get("records"))
    status_info = _mapping(raw.get("dnssec_status"))
    break_info = _mapping(raw.get("chain_break_info"))

    display_name = _display_name(raw, index)
    domain = raw.get("domain")
    domain = domain if isinstance(domain, str) and domain else display_name

    domain_type = _parse_enum(DomainType, raw.get("domain_type"))
    if domain_type is None:
        domain_type = DomainType.from_position(index, total)

    status = _parse_enum(SigningStatus, status_info.get("status")) or SigningStatus.UNSIGNED

    ksk_keys, zsk_keys = resolve_keys(key_hierarchy, records)

    dnskey_records = records.get("dnskey_records")
    if isinstance(dnskey_records, int) and not isinstance(dnskey_records, bool):
        dnskey_count = max(dnskey_records, 0)
    else:
        dnskey_count = len(_sequence(dnskey_records))

    soa = records.get("soa_record")

    level_id = raw.get("id")
    return ZoneLevel(
        index=index,
        id=_to_text(level_id) if level_id is not None else f"level_{index}",
        domain=domain,
        display_name=display_name,
        domain_type=domain_type,
        status=status,
        status_message=_to_text(status_info.get("message")),
        ksk_keys=ksk_keys,
        zsk_keys=zsk_keys,
        ksk_count=_count(key_hierarchy.get("ksk_count"), len(ksk_keys)),
        zsk_count=_count(key_hierarchy.get("zsk_count"), len(zsk_keys)),
        ds_records=tuple(_parse_ds(ds) for ds in _sequence(records.get("ds_records"))),
        dnskey_count=dnskey_count,
        ns_records=tuple(_to_text(ns) for ns in _sequence(records.get("ns_records"))),
        soa_record=dict(soa) if isinstance(soa, Mapping) else None,
        chain_break=ChainBreak(
            has_chain_break=break_info.get("has_chain_break") is True,
            break_reason=_to_text(break_info.get("break_reason")),
        ),
    )


def _attach_delegations(levels: list[ZoneLevel]) -> tuple[ZoneLevel, ...]:
    """Fill in ``delegation_ds`` for every non-root level.

    The layout is parent-attached when the root carries DS records or when a
    matched DS was found in a parent's list.
    """
    if not levels:
        return ()
    pairs = list(zip(levels, levels[1:]))
    matched = [match_delegation_ds(parent, child) for parent, child in pairs]
    claimed = [ds for ds in matched if ds is not None]
    parent_attached = bool(levels[0].ds_records) or any(
        ds is not None and any(ds is own for own in parent.ds_records)
        for (parent, _), ds in zip(pairs, matched)
    )

    resolved = [levels[0]]
    for parent, child in pairs:
        ds = resolve_delegation_ds(parent, child, parent_attached, claimed)
        resolved.append(replace(child, delegation_ds=ds))
    return tuple(resolved)


def _normalize_metadata(raw: Mapping[str, Any]) -> ChainMetadata:
    return ChainMetadata(
        target_domain=_to_text(raw.get("target_domain")),
        analysis_timestamp=_to_text(raw.get("analysis_timestamp")),
    )


def _normalize_summary(
    raw: Mapping[str, Any],
    metadata: Mapping[str, Any],
    levels: tuple[ZoneLevel, ...],
) -> ChainSummary:
    security = _mapping(raw.get("security_status"))

    overall = security.get("overall_status") or metadata.get("chain_status")
    message = security.get("message") or metadata.get("chain_message")

    breaks = []
    for entry in _sequence(raw.get("chain_breaks")):
        entry = _mapping(entry)
        breaks.append(ChainBreakSummary(
            level=_to_int(entry.get("level")),
            domain=_to_text(entry.get("domain")),
            reason=_to_text(entry.get("reason")),
        ))

    signed = sum(1 for level in levels if level.status is SigningStatus.SIGNED)
    unsigned = sum(1 for level in levels if level.status is SigningStatus.UNSIGNED)
    complete = raw.get("chain_complete")

    return ChainSummary(
        total_levels=_count(raw.get("total_levels"), len(levels)),
        signed_levels=_count(raw.get("signed_levels"), signed),
        unsigned_levels=_count(raw.get("unsigned_levels"), unsigned),
        overall_status=_to_text(overall) or "unknown",
        message=_to_text(message),
        chain_breaks=tuple(breaks),
        chain_complete=complete if isinstance(complete, bool) else None,
    )


def normalize(raw: Any) -> NormalizedChain:
    """Normalize a raw ChainResponse into a NormalizedChain.

    Args:
        raw: Decoded JSON value, or None when no domain is selected

    Returns:
        NormalizedChain; ``malformed`` is set when ``levels`` was present but
        not a sequence
    """
    raw = _mapping(raw)
    metadata_raw = _mapping(raw.get("metadata"))
    summary_raw = _mapping(raw.get("chain_summary"))

    raw_levels = raw.get("levels")
    malformed = False
    if raw_levels is None:
        entries: Sequence[Any] = ()
    elif isinstance(raw_levels, Sequence) and not isinstance(raw_levels, (str, bytes)):
        entries = raw_levels
    else:
        logger.warning("Ignoring levels of type %s: not a sequence", type(raw_levels).__name__)
        entries = ()
        malformed = True

    total = len(entries)
    levels = _attach_delegations([
        _normalize_level(entry, i, total) for i, entry in enumerate(entries)
    ])

    return NormalizedChain(
        metadata=_normalize_metadata(metadata_raw),
        summary=_normalize_summary(summary_raw, metadata_raw, levels),
        levels=levels,
        malformed=malformed,
    )
