"""Status bar widget."""

from rich.table import Table
from rich.text import Text
from textual.widgets import Static

from chaingraph.compiler.pipeline import CompiledChain
from chaingraph.views.common import status_color


class StatusBar(Static):
    """Status bar showing the current chain, its origin and the source."""

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: 1;
        background: #151515;
        padding: 0 1;
    }
    """

    VIEW_LABELS = {
        "diagram": "Diagram",
        "tree": "Tree",
        "nodes": "Nodes",
    }

    def __init__(self, source_label: str = "", **kwargs):
        super().__init__(**kwargs)
        self._compiled: CompiledChain | None = None
        self._view_mode: str = "diagram"
        self._source_label = source_label
        self._loading: str | None = None

    def set_compiled(self, compiled: CompiledChain | None) -> None:
        self._compiled = compiled
        self.refresh()

    def set_view_mode(self, mode: str) -> None:
        self._view_mode = mode
        self.refresh()

    def set_loading(self, domain: str | None) -> None:
        """Show a loading marker for ``domain``, or clear it with None."""
        self._loading = domain
        self.refresh()

    def render(self) -> Table:
        table = Table.grid(expand=True)
        table.add_column(ratio=2)
        table.add_column(ratio=1, justify="right")

        left = Text()
        if self._loading:
            left.append(f"⏳ Querying {self._loading}...", style="yellow")
        elif self._compiled and not self._compiled.graph.is_empty:
            status = self._compiled.overall_status
            left.append(f"{status.upper()} ", style=f"bold {status_color(status)}")
            left.append(self._compiled.domain, style="bold")
            if self._compiled.degraded:
                left.append("  SAMPLE DATA", style="bold yellow")
        else:
            left.append("Ready", style="dim")

        right = Text()
        right.append(self.VIEW_LABELS.get(self._view_mode, self._view_mode), style="bold")
        if self._source_label:
            right.append(" │ ", style="dim")
            right.append(self._source_label, style="dim")

        table.add_row(left, right)
        return table
