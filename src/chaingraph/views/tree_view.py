"""Tree view of the compiled graph: clusters, their nodes and outgoing edges."""

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text
from rich.tree import Tree
from textual.widgets import Static

from chaingraph.compiler.pipeline import CompiledChain
from chaingraph.models.graph import Cluster, Edge, EdgeClass, Node, NodeKind
from chaingraph.views.common import chain_header, degraded_notice, status_color

KIND_ICONS = {
    NodeKind.ZONE: "🌐",
    NodeKind.DNSKEY: "🔑",
    NodeKind.KEYS: "🗝",
    NodeKind.DS: "🔗",
    NodeKind.DELEGATION_SIGNER: "✍",
    NodeKind.MISSING_DS: "⛔",
}


class TreeView(Static):
    """Tree visualization of the graph description."""

    DEFAULT_CSS = """
    TreeView {
        height: auto;
        padding: 1;
    }
    """

    def __init__(self, compiled: CompiledChain | None = None, **kwargs):
        super().__init__(**kwargs)
        self._compiled = compiled

    def set_compiled(self, compiled: CompiledChain) -> None:
        """Set the compiled chain to display."""
        self._compiled = compiled
        self.refresh()

    def _format_node(self, node: Node) -> Text:
        """Format a node with its fields."""
        text = Text()
        text.append(f"{KIND_ICONS.get(node.kind, '·')} ")
        text.append(node.label.replace("\n", " "), style="bold")
        text.append(f"  {node.id}", style="dim")
        for name, value in node.fields:
            if not value:
                continue
            text.append("\n   ")
            text.append(f"{name}: ", style="cyan")
            text.append(value, style="white")
        return text

    def _format_edge(self, edge: Edge) -> Text:
        """Format an outgoing edge."""
        color = edge.style_class.color
        text = Text()
        text.append("→ " if edge.style_class is not EdgeClass.INVALID else "⇢ ", style=color)
        text.append(edge.label or edge.kind.value, style=color)
        text.append(" ")
        source, target = edge.endpoints
        text.append(target, style="dim")
        if edge.source_port:
            text.append(f" (from {source})", style="dim")
        return text

    def _build_cluster_branch(self, tree: Tree, cluster: Cluster) -> Tree:
        node_class = cluster.style_class
        label = Text()
        label.append(cluster.label, style="bold white")
        label.append(" ")
        label.append(f"[{node_class.symbol} {node_class.value.upper()}]", style=node_class.color)
        branch = tree.add(label)

        level = self._compiled.index.zone(cluster.level_index)
        if level and level.chain_break.has_chain_break:
            branch.add(Text(f"⚠ {level.chain_break.break_reason or 'chain break'}", style="dim yellow"))

        for node in cluster.nodes:
            node_branch = branch.add(self._format_node(node))
            for edge in self._compiled.graph.edges_from(node.id):
                node_branch.add(self._format_edge(edge))
        return branch

    def render(self) -> RenderableType:
        """Render the tree view."""
        if not self._compiled or self._compiled.graph.is_empty:
            return Panel(
                Text("Enter a domain to analyze", style="dim"),
                title="Chain of Trust - Tree View",
                border_style="dim",
            )

        tree = Tree(Text("Chain of Trust", style="bold white"), guide_style="dim")
        for cluster in self._compiled.graph.clusters:
            self._build_cluster_branch(tree, cluster)

        parts: list[RenderableType] = [chain_header(self._compiled)]
        notice = degraded_notice(self._compiled)
        if notice is not None:
            parts.append(notice)
        parts.extend([Text(""), tree])

        return Panel(
            Group(*parts),
            title="[bold]Chain of Trust - Tree View[/bold]",
            subtitle=f"[dim]{self._compiled.chain.summary.message}[/dim]",
            border_style=status_color(self._compiled.overall_status),
            padding=(1, 2),
        )
