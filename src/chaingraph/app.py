"""Main Textual application for chaingraph."""

import logging
from datetime import datetime
from pathlib import Path

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, ScrollableContainer, Vertical
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Input, Label, Static

from chaingraph.compiler.pipeline import CompiledChain, compile_chain
from chaingraph.config import Settings
from chaingraph.export.dot_export import export_dot
from chaingraph.export.json_export import export_json
from chaingraph.fetch import ChainFetchError, RetrievalCoordinator, RetrievalTicket
from chaingraph.views.diagram_view import DiagramView
from chaingraph.views.tree_view import TreeView
from chaingraph.widgets.domain_input import DomainInput, normalize_domain
from chaingraph.widgets.history_panel import HistoryPanel
from chaingraph.widgets.node_inspector import NodeInspector
from chaingraph.widgets.status_bar import StatusBar

logger = logging.getLogger(__name__)

VIEWS = ("diagram", "tree", "nodes")


class ExportModal(ModalScreen[str | None]):
    """Modal dialog for export options."""

    BINDINGS = [
        Binding("escape", "dismiss", "Cancel"),
    ]

    DEFAULT_CSS = """
    ExportModal {
        align: center middle;
    }

    ExportModal > Container {
        width: 50;
        height: auto;
        border: solid #444;
        background: #1a1a1a;
        padding: 1 2;
    }

    ExportModal .title {
        text-style: bold;
        text-align: center;
        padding-bottom: 1;
        color: #e0e0e0;
    }

    ExportModal .buttons {
        height: 3;
        align: center middle;
        margin-top: 1;
    }

    ExportModal .btn {
        margin: 0 1;
        min-width: 12;
        color: #888;
    }
    """

    def __init__(self, compiled: CompiledChain, directory: Path = Path("exports")):
        super().__init__()
        self.compiled = compiled
        self.directory = directory

    def compose(self) -> ComposeResult:
        with Container():
            yield Label("Export Results", classes="title")
            yield Label(f"Domain: {self.compiled.domain}")
            if self.compiled.degraded:
                yield Label("Note: showing sample data")
            yield Label("")
            yield Label("Choose format:")
            with Horizontal(classes="buttons"):
                yield Static("[1] JSON", classes="btn", id="btn-json")
                yield Static("[2] DOT", classes="btn", id="btn-dot")
                yield Static("[3] Both", classes="btn", id="btn-both")

    def key_1(self) -> None:
        self._export("json")

    def key_2(self) -> None:
        self._export("dot")

    def key_3(self) -> None:
        self._export("both")

    def _export(self, format: str) -> None:
        """Perform export and dismiss."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        domain_safe = self.compiled.domain.rstrip(".").replace(".", "_") or "root"
        base_path = self.directory / f"{domain_safe}_{timestamp}"

        exported = []

        if format in ("json", "both"):
            json_path = base_path.with_suffix(".json")
            export_json(self.compiled, json_path)
            exported.append(str(json_path))

        if format in ("dot", "both"):
            dot_path = base_path.with_suffix(".dot")
            export_dot(self.compiled.graph, dot_path)
            exported.append(str(dot_path))

        self.dismiss(", ".join(exported))


class ChainGraphApp(App):
    """Main chaingraph application."""

    TITLE = "chaingraph"
    SUB_TITLE = "DNSSEC Chain of Trust"

    CSS = """
    Screen {
        background: #0a0a0a;
    }

    Header {
        dock: top;
        height: 1;
        background: #151515;
        color: #888;
    }

    #main-layout {
        layout: horizontal;
        height: 1fr;
    }

    #sidebar {
        width: 24;
        background: #101010;
        border-right: solid #222;
    }

    #content {
        width: 1fr;
    }

    #domain-input {
        dock: top;
        height: 3;
        margin: 1;
        background: #151515;
        border: solid #333;
        color: #ddd;
    }

    #domain-input:focus {
        border: solid #4a9eff;
    }

    #view-area {
        height: 1fr;
        overflow-y: auto;
        background: #0a0a0a;
        padding: 0 1;
    }

    #result-display {
        color: #555;
        padding: 2;
    }

    .hidden {
        display: none;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("escape", "unfocus", "Back", priority=True),
        Binding("slash", "focus_input", "Query"),
        Binding("1", "view_diagram", "Diagram"),
        Binding("2", "view_tree", "Tree"),
        Binding("3", "view_nodes", "Nodes"),
        Binding("r", "refresh", "Refresh"),
        Binding("e", "export", "Export"),
    ]

    def __init__(self, settings: Settings | None = None, initial_domain: str | None = None):
        super().__init__()
        self.settings = settings or Settings()
        self._source = self.settings.make_source()
        self._coordinator = RetrievalCoordinator(allow_fallback=self.settings.allow_fallback)
        self._initial_domain = initial_domain
        self._current: CompiledChain = compile_chain(None)
        self._current_domain: str | None = None
        self._current_view = "diagram"

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Container(id="sidebar"):
                yield HistoryPanel(id="history-panel")
            with Vertical(id="content"):
                yield DomainInput(id="domain-input")
                with ScrollableContainer(id="view-area"):
                    yield Static(
                        "Press / to query a domain\n\nExamples: example.com, isc.org",
                        id="result-display",
                    )
                    yield DiagramView(id="diagram-view", classes="hidden")
                    yield TreeView(id="tree-view", classes="hidden")
                    yield NodeInspector(id="nodes-view", classes="hidden")
        yield StatusBar(self.settings.source_label, id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.set_focus(None)
        if self._initial_domain:
            self.query_domain(self._initial_domain)

    def on_unmount(self) -> None:
        close = getattr(self._source, "close", None)
        if close is not None:
            close()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "domain-input":
            return
        if event.validation_result is not None and not event.validation_result.is_valid:
            self.notify(event.validation_result.failure_descriptions[0], severity="warning")
            return
        self.query_domain(event.value)

    def query_domain(self, domain: str) -> None:
        """Start a retrieval; any retrieval still in flight is superseded."""
        domain = normalize_domain(domain)
        self._current_domain = domain
        ticket = self._coordinator.begin(domain)
        self._set_loading(domain)
        self._retrieve(ticket)

    @work(thread=True, exclusive=True)
    def _retrieve(self, ticket: RetrievalTicket) -> None:
        try:
            raw = self._source.fetch(ticket.domain)
        except ChainFetchError as e:
            try:
                compiled = self._coordinator.fail(ticket, e)
            except ChainFetchError as error:
                self.call_from_thread(self._handle_error, ticket, error)
                return
        else:
            compiled = self._coordinator.complete(ticket, raw)

        if compiled is not None:
            self.call_from_thread(self._apply_result, compiled)

    def _apply_result(self, compiled: CompiledChain) -> None:
        """Display a worker result unless a newer retrieval has started."""
        if not self._coordinator.is_latest(compiled):
            logger.info(
                "Dropping superseded result for %s (generation %d)",
                compiled.domain, compiled.generation,
            )
            return
        self._set_compiled(compiled)

    def _handle_error(self, ticket: RetrievalTicket, error: ChainFetchError) -> None:
        if not self._coordinator.is_current(ticket):
            return
        logger.error("Retrieval for %s failed: %s", ticket.domain, error)
        self.query_one("#status-bar", StatusBar).set_loading(None)
        self.notify(str(error), severity="error", timeout=5)
        result = self.query_one("#result-display", Static)
        result.update(f"Error:\n\n{error}")
        result.remove_class("hidden")
        for v in VIEWS:
            self.query_one(f"#{v}-view").add_class("hidden")

    def _set_loading(self, domain: str) -> None:
        self.query_one("#status-bar", StatusBar).set_loading(domain)
        result = self.query_one("#result-display", Static)
        result.update(f"⏳ Querying {domain}...")
        result.remove_class("hidden")
        for v in VIEWS:
            self.query_one(f"#{v}-view").add_class("hidden")

    def _set_compiled(self, compiled: CompiledChain, notify: bool = True) -> None:
        self._current = compiled
        self._current_domain = compiled.domain

        self.query_one("#diagram-view", DiagramView).set_compiled(compiled)
        self.query_one("#tree-view", TreeView).set_compiled(compiled)
        self.query_one("#nodes-view", NodeInspector).set_compiled(compiled)
        status_bar = self.query_one("#status-bar", StatusBar)
        status_bar.set_loading(None)
        status_bar.set_compiled(compiled)

        if compiled.graph.is_empty:
            self.query_one("#result-display", Static).update(
                f"No chain levels returned for {compiled.domain}"
            )
        self._switch_view(self._current_view)
        self.query_one("#history-panel", HistoryPanel).add_entry(compiled)

        if notify:
            if compiled.degraded:
                self.notify(
                    f"{compiled.domain}: retrieval failed, showing sample data",
                    severity="warning",
                    timeout=6,
                )
            else:
                self.notify(
                    f"{compiled.domain}: {compiled.overall_status.upper()}",
                    severity="information" if compiled.overall_status == "secure" else "warning",
                    timeout=4,
                )
        self.set_focus(None)

    def _switch_view(self, view_name: str) -> None:
        self._current_view = view_name
        self.query_one("#status-bar", StatusBar).set_view_mode(view_name)
        if self._current.graph.is_empty:
            return
        self.query_one("#result-display").add_class("hidden")
        for v in VIEWS:
            widget = self.query_one(f"#{v}-view")
            if v == view_name:
                widget.remove_class("hidden")
            else:
                widget.add_class("hidden")

    def action_unfocus(self) -> None:
        self.set_focus(None)

    def action_view_diagram(self) -> None:
        self._switch_view("diagram")

    def action_view_tree(self) -> None:
        self._switch_view("tree")

    def action_view_nodes(self) -> None:
        self._switch_view("nodes")

    def action_refresh(self) -> None:
        if not self._current_domain:
            self.notify("Nothing to refresh", severity="warning")
            return
        self.query_domain(self._current_domain)

    def action_export(self) -> None:
        if self._current.graph.is_empty:
            self.notify("No data to export", severity="warning")
            return
        self.push_screen(
            ExportModal(self._current),
            lambda r: self.notify(f"Exported: {r}") if r else None,
        )

    def action_focus_input(self) -> None:
        self.query_one("#domain-input").focus()

    def on_history_panel_history_selected(self, event: HistoryPanel.HistorySelected) -> None:
        self._set_compiled(event.compiled, notify=False)
