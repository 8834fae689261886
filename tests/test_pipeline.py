"""Tests for compilation and retrieval coordination."""

import pytest

from chaingraph.compiler.pipeline import ChainOrigin, compile_chain
from chaingraph.fetch import ChainFetchError, RetrievalCoordinator


class TestCompileChain:
    def test_no_domain_selected(self):
        compiled = compile_chain(None)
        assert compiled.origin is ChainOrigin.EMPTY
        assert compiled.graph.is_empty
        assert compiled.domain == ""
        assert not compiled.degraded

    def test_live_result(self, sample_raw):
        compiled = compile_chain(sample_raw, domain="example.com.", generation=4)
        assert compiled.origin is ChainOrigin.LIVE
        assert compiled.domain == "example.com."
        assert compiled.generation == 4
        assert compiled.overall_status == "secure"
        assert len(compiled.index) == len(compiled.graph.node_ids)

    def test_domain_defaults_to_target(self, sample_raw):
        assert compile_chain(sample_raw).domain == "example.com."

    def test_malformed_response_compiles_to_empty_graph(self):
        compiled = compile_chain({"levels": "bad"}, domain="bad.example.")
        assert compiled.chain.malformed
        assert compiled.graph.is_empty
        assert compiled.origin is ChainOrigin.LIVE


class TestRetrievalCoordinator:
    def test_generations_increase(self):
        coordinator = RetrievalCoordinator()
        first = coordinator.begin("a.example.")
        second = coordinator.begin("b.example.")
        assert second.generation == first.generation + 1
        assert coordinator.generation == second.generation
        assert not coordinator.is_current(first)
        assert coordinator.is_current(second)

    def test_latest_request_wins(self, sample_raw):
        coordinator = RetrievalCoordinator()
        stale = coordinator.begin("old.example.")
        current = coordinator.begin("example.com.")

        assert coordinator.complete(stale, sample_raw) is None

        compiled = coordinator.complete(current, sample_raw)
        assert compiled.domain == "example.com."
        assert compiled.generation == current.generation

    def test_failure_falls_back_to_sample(self):
        coordinator = RetrievalCoordinator()
        ticket = coordinator.begin("down.example.")
        compiled = coordinator.fail(ticket, ChainFetchError("down.example.", "HTTP 503"))

        assert compiled.origin is ChainOrigin.FALLBACK
        assert compiled.degraded
        assert compiled.domain == "down.example."
        assert compiled.chain.metadata.target_domain == "down.example."
        assert compiled.error == "down.example.: HTTP 503"
        assert not compiled.graph.is_empty

    def test_stale_failure_is_dropped(self):
        coordinator = RetrievalCoordinator()
        stale = coordinator.begin("a.example.")
        coordinator.begin("b.example.")
        assert coordinator.fail(stale, ChainFetchError("a.example.", "timeout")) is None

    def test_failure_without_fallback_reraises(self):
        coordinator = RetrievalCoordinator(allow_fallback=False)
        ticket = coordinator.begin("down.example.")
        error = ChainFetchError("down.example.", "request failed")
        with pytest.raises(ChainFetchError) as excinfo:
            coordinator.fail(ticket, error)
        assert excinfo.value is error

    def test_result_superseded_after_compiling(self, sample_raw):
        coordinator = RetrievalCoordinator()
        ticket = coordinator.begin("a.example.")
        compiled = coordinator.complete(ticket, sample_raw)
        assert coordinator.is_latest(compiled)

        coordinator.begin("b.example.")
        assert compiled is not None
        assert not coordinator.is_latest(compiled)
