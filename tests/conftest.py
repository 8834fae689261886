"""Pytest configuration and shared fixtures for chaingraph tests."""

import copy
from typing import Any, Callable

import pytest

from chaingraph.fetch.sample import sample_for


def _level(
    name: str,
    status: str = "signed",
    ksk: tuple[int, ...] = (),
    zsk: tuple[int, ...] = (),
    ds: tuple[dict[str, Any], ...] = (),
    break_reason: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build one raw level in the key_hierarchy schema."""
    level = {
        "display_name": name,
        "dnssec_status": {"status": status},
        "key_hierarchy": {
            "ksk_keys": [{"key_tag": tag, "algorithm_name": "ECDSAP256SHA256"} for tag in ksk],
            "zsk_keys": [{"key_tag": tag, "algorithm_name": "ECDSAP256SHA256"} for tag in zsk],
        },
        "records": {"ds_records": list(ds)},
        "chain_break_info": None,
    }
    if break_reason is not None:
        level["chain_break_info"] = {"has_chain_break": True, "break_reason": break_reason}
    level.update(extra)
    return level


def _response(*levels: dict[str, Any], target: str = "example.com.", status: str = "secure") -> dict[str, Any]:
    return {
        "metadata": {"target_domain": target},
        "chain_summary": {"security_status": {"overall_status": status, "message": "test chain"}},
        "levels": list(levels),
    }


def ds(tag: int, owner: str | None = None) -> dict[str, Any]:
    entry = {"key_tag": tag, "digest_type_name": "SHA-256", "digest": "AB" * 32}
    if owner is not None:
        entry["owner"] = owner
    return entry


@pytest.fixture
def make_level() -> Callable[..., dict[str, Any]]:
    return _level


@pytest.fixture
def make_response() -> Callable[..., dict[str, Any]]:
    return _response


@pytest.fixture
def make_ds() -> Callable[..., dict[str, Any]]:
    return ds


@pytest.fixture
def sample_raw() -> dict[str, Any]:
    """Three secure levels with DS records attached to the child."""
    return sample_for("example.com.")


@pytest.fixture
def broken_raw(sample_raw) -> dict[str, Any]:
    """The sample with a surfaced chain break on the target zone."""
    raw = copy.deepcopy(sample_raw)
    raw["levels"][2]["chain_break_info"] = {
        "has_chain_break": True,
        "break_reason": "DS digest does not match any DNSKEY",
    }
    raw["chain_summary"]["security_status"]["overall_status"] = "broken"
    return raw


@pytest.fixture
def missing_ds_raw(sample_raw) -> dict[str, Any]:
    """The sample with no DS published for the target zone."""
    raw = copy.deepcopy(sample_raw)
    raw["levels"][2]["records"]["ds_records"] = []
    return raw
