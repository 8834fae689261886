"""History panel widget for showing earlier results."""

from rich.text import Text
from textual.message import Message
from textual.widgets import Label, ListItem, ListView, Static

from chaingraph.compiler.pipeline import CompiledChain
from chaingraph.views.common import status_color


class HistoryItem(ListItem):
    """A single history item."""

    DEFAULT_CSS = """
    HistoryItem {
        height: 1;
        padding: 0 1;
        background: transparent;
    }

    HistoryItem:hover {
        background: #1f1f1f;
    }
    """

    def __init__(self, compiled: CompiledChain):
        super().__init__()
        self.compiled = compiled

    def compose(self):
        domain = self.compiled.domain.rstrip(".") or "."
        if len(domain) > 18:
            domain = domain[:15] + "..."

        text = Text()
        text.append("● ", style=status_color(self.compiled.overall_status))
        text.append(domain, style="grey70")
        if self.compiled.degraded:
            text.append(" *", style="yellow")
        yield Label(text)


class HistoryPanel(Static):
    """Panel listing compiled chains, newest first."""

    DEFAULT_CSS = """
    HistoryPanel {
        width: 100%;
        height: 100%;
        background: #111;
    }

    HistoryPanel #history-header {
        height: 3;
        background: #1a1a1a;
        color: #666;
        text-align: center;
        padding: 1 1;
        text-style: bold;
    }

    HistoryPanel #history-list {
        height: 1fr;
        background: #111;
    }

    HistoryPanel #empty-message {
        color: #444;
        text-align: center;
        padding: 2 1;
    }
    """

    class HistorySelected(Message):
        """Posted when a history item is selected."""

        def __init__(self, compiled: CompiledChain):
            super().__init__()
            self.compiled = compiled

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._history: list[CompiledChain] = []

    def compose(self):
        yield Static("HISTORY", id="history-header")
        yield Static("No queries yet", id="empty-message")
        yield ListView(id="history-list")

    def add_entry(self, compiled: CompiledChain) -> None:
        """Add a result, replacing any earlier one for the same domain."""
        self._history = [c for c in self._history if c.domain != compiled.domain]
        self._history.insert(0, compiled)
        self._rebuild_list()

    def _rebuild_list(self) -> None:
        list_view = self.query_one("#history-list", ListView)
        empty_msg = self.query_one("#empty-message", Static)

        list_view.clear()
        empty_msg.display = not self._history
        for compiled in self._history:
            list_view.append(HistoryItem(compiled))

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, HistoryItem):
            self.post_message(self.HistorySelected(event.item.compiled))

    @property
    def history(self) -> list[CompiledChain]:
        return self._history.copy()
