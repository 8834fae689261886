"""TUI widgets for chaingraph."""

from chaingraph.widgets.domain_input import DomainInput
from chaingraph.widgets.history_panel import HistoryPanel
from chaingraph.widgets.node_inspector import NodeInspector
from chaingraph.widgets.status_bar import StatusBar

__all__ = ["DomainInput", "HistoryPanel", "NodeInspector", "StatusBar"]
