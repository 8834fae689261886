"""Tests for how the app applies worker results."""

from types import SimpleNamespace

import pytest

from chaingraph.app import ChainGraphApp
from chaingraph.config import Settings


@pytest.fixture
def app(monkeypatch):
    app = ChainGraphApp(Settings(api_base="http://backend.test"))
    shown = []
    monkeypatch.setattr(app, "_set_compiled", lambda compiled, notify=True: shown.append(compiled))
    app.shown = shown
    yield app
    app._source.close()


def test_current_result_is_displayed(app, sample_raw):
    ticket = app._coordinator.begin("example.com.")
    compiled = app._coordinator.complete(ticket, sample_raw)
    app._apply_result(compiled)
    assert app.shown == [compiled]


def test_result_superseded_in_flight_is_dropped(app, sample_raw):
    ticket = app._coordinator.begin("a.example.")
    compiled = app._coordinator.complete(ticket, sample_raw)
    app._coordinator.begin("b.example.")
    app._apply_result(compiled)
    assert app.shown == []


def test_history_selection_is_not_checked(app, sample_raw):
    ticket = app._coordinator.begin("a.example.")
    old = app._coordinator.complete(ticket, sample_raw)
    app._coordinator.begin("b.example.")

    app.on_history_panel_history_selected(SimpleNamespace(compiled=old))
    assert app.shown == [old]
