"""Box diagram of the compiled chain of trust."""

from typing import Optional

from rich.columns import Columns
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from textual.widgets import Static

from chaingraph.compiler.index import DelegationSigner
from chaingraph.compiler.pipeline import CompiledChain
from chaingraph.models.chain import ZoneLevel
from chaingraph.models.graph import Cluster, EdgeClass, EdgeKind, Node, NodeKind
from chaingraph.views.common import chain_header, degraded_notice, status_color

DELEGATION_KINDS = (NodeKind.DELEGATION_SIGNER, NodeKind.MISSING_DS)


def delegation_node(cluster: Cluster) -> Optional[Node]:
    """Return the DS-for or missing-DS node hanging off a cluster."""
    for node in cluster.nodes:
        if node.kind in DELEGATION_KINDS:
            return node
    return None


class DiagramView(Static):
    """Box diagram of zones joined by their delegation signers."""

    DEFAULT_CSS = """
    DiagramView {
        height: auto;
        padding: 1;
    }
    """

    BOX_TL = "┌"
    BOX_TR = "┐"
    BOX_BL = "└"
    BOX_BR = "┘"
    BOX_H = "─"
    BOX_V = "│"

    def __init__(self, compiled: CompiledChain | None = None, **kwargs):
        super().__init__(**kwargs)
        self._compiled = compiled

    def set_compiled(self, compiled: CompiledChain) -> None:
        """Set the compiled chain to display."""
        self._compiled = compiled
        self.refresh()

    def _level(self, cluster: Cluster) -> Optional[ZoneLevel]:
        return self._compiled.index.zone(cluster.level_index)

    def _box_row(self, text: str, width: int, color: str, style: str) -> Text:
        row = Text()
        row.append(self.BOX_V, style=color)
        row.append(" ")
        row.append(text.center(width - 4), style=style)
        row.append(" ")
        row.append(self.BOX_V, style=color)
        return row

    def _create_zone_box(self, cluster: Cluster, width: int = 24) -> Text:
        """Create a box for a zone cluster."""
        node_class = cluster.style_class
        color = node_class.color
        level = self._level(cluster)

        name = level.display_name if level else cluster.label
        if name == ".":
            name = ". (root)"
        if len(name) > width - 4:
            name = name[:width - 7] + "..."

        lines = [Text(f"{self.BOX_TL}{self.BOX_H * (width - 2)}{self.BOX_TR}", style=color)]
        lines.append(self._box_row(name, width, color, "bold white"))
        lines.append(Text(f"{self.BOX_V}{self.BOX_H * (width - 2)}{self.BOX_V}", style=color))
        lines.append(self._box_row(
            f"{node_class.symbol} {node_class.value.upper()}", width, color, f"bold {color}"
        ))

        if level and level.has_keys:
            lines.append(self._box_row(
                f"KSK:{level.ksk_count} ZSK:{level.zsk_count}", width, color, "cyan"
            ))
            keys = level.ksk_keys + level.zsk_keys
            tags = [str(k.key_tag) for k in keys[:3] if k.key_tag is not None]
            if len(keys) > 3:
                tags.append("...")
            tags_str = ",".join(tags)
            if len(tags_str) > width - 6:
                tags_str = tags_str[:width - 9] + "..."
            lines.append(self._box_row(tags_str, width, color, "dim cyan"))
        else:
            lines.append(self._box_row("No keys", width, color, "dim"))

        lines.append(Text(f"{self.BOX_BL}{self.BOX_H * (width - 2)}{self.BOX_BR}", style=color))

        result = Text()
        for i, line in enumerate(lines):
            result.append_text(line)
            if i < len(lines) - 1:
                result.append("\n")
        return result

    def _delegation(self, cluster: Cluster) -> tuple[str, EdgeClass]:
        """Return the arrow label and class for the delegation out of a cluster."""
        node = delegation_node(cluster)
        if node is None or node.kind is NodeKind.MISSING_DS:
            return "No DS", EdgeClass.INVALID

        entity = self._compiled.index.get(node.id)
        tag = "?"
        if isinstance(entity, DelegationSigner) and entity.ds is not None and entity.ds.key_tag is not None:
            tag = str(entity.ds.key_tag)

        edge_class = EdgeClass.INVALID
        for edge in self._compiled.graph.edges_from(node.id):
            if edge.kind is EdgeKind.VALIDATES:
                edge_class = edge.style_class
        return f"DS:{tag}", edge_class

    def _create_arrow(self, cluster: Cluster) -> Text:
        label, edge_class = self._delegation(cluster)
        color = edge_class.color
        line = "══" if edge_class is EdgeClass.VALID else "┄┄"
        arrow = Text()
        arrow.append(line, style=color)
        arrow.append(label, style=f"bold {color}")
        arrow.append(line + "▶", style=color)
        return arrow

    def _build_horizontal_chain(self) -> RenderableType:
        """Build horizontal chain diagram (for few zones)."""
        clusters = self._compiled.graph.clusters
        elements = []
        for i, cluster in enumerate(clusters):
            elements.append(Panel(self._create_zone_box(cluster, 22), border_style="dim", padding=0))
            if i < len(clusters) - 1:
                arrow_panel = Text("\n\n")
                arrow_panel.append_text(self._create_arrow(cluster))
                elements.append(arrow_panel)
        return Columns(elements, padding=0, expand=False)

    def _build_vertical_chain(self) -> RenderableType:
        """Build vertical chain diagram (for many zones)."""
        clusters = self._compiled.graph.clusters
        content = []
        for i, cluster in enumerate(clusters):
            content.append(self._create_zone_box(cluster, 32))
            if i < len(clusters) - 1:
                label, edge_class = self._delegation(cluster)
                color = edge_class.color
                stem = "│" if edge_class is EdgeClass.VALID else "┆"
                arrow_text = Text()
                arrow_text.append(f"        {stem}\n", style=color)
                arrow_text.append(f"        {stem} {label}\n", style=color)
                arrow_text.append("        ▼\n", style=color)
                content.append(arrow_text)
        return Group(*content)

    def _build_summary_table(self) -> Table:
        """Build a summary table of the chain."""
        table = Table(
            title=None,
            show_header=True,
            header_style="bold",
            border_style="dim",
            padding=(0, 1),
        )

        table.add_column("Zone", style="bold")
        table.add_column("Class", justify="center")
        table.add_column("Keys", justify="center")
        table.add_column("DS→KSK", justify="center")
        table.add_column("Break")

        clusters = self._compiled.graph.clusters
        for i, cluster in enumerate(clusters):
            level = self._level(cluster)
            node_class = cluster.style_class
            status = Text(f"{node_class.symbol} {node_class.value}", style=node_class.color)

            if level and level.has_keys:
                keys = Text(f"{level.ksk_count}K/{level.zsk_count}Z", style="cyan")
            else:
                keys = Text("-", style="dim")

            if i == 0:
                ds_val = Text("Trust Anchor", style="magenta")
            else:
                _, edge_class = self._delegation(clusters[i - 1])
                if edge_class is EdgeClass.VALID:
                    ds_val = Text("✓ valid", style="green")
                else:
                    ds_val = Text("✗ invalid", style="red")

            reason = "-"
            if node_class.value == "broken" and level:
                reason = level.chain_break.break_reason or "chain break"
                if len(reason) > 40:
                    reason = reason[:37] + "..."

            table.add_row(cluster.label, status, keys, ds_val, reason)

        return table

    def render(self) -> RenderableType:
        """Render the diagram view."""
        if not self._compiled or self._compiled.graph.is_empty:
            return Panel(
                Text("Enter a domain to analyze", style="dim"),
                title="Chain of Trust - Diagram View",
                border_style="dim",
            )

        if len(self._compiled.graph.clusters) <= 4:
            chain_viz = self._build_horizontal_chain()
        else:
            chain_viz = self._build_vertical_chain()

        parts: list[RenderableType] = [chain_header(self._compiled)]
        notice = degraded_notice(self._compiled)
        if notice is not None:
            parts.extend([Text(""), notice])
        parts.extend([
            Text(""),
            Text("Trust Chain Flow:", style="bold underline"),
            Text(""),
            chain_viz,
            Text(""),
            Text("Chain Summary:", style="bold underline"),
            Text(""),
            self._build_summary_table(),
        ])

        return Panel(
            Group(*parts),
            title="[bold]Chain of Trust - Diagram View[/bold]",
            subtitle=f"[dim]{self._compiled.chain.summary.message}[/dim]",
            border_style=status_color(self._compiled.overall_status),
            padding=(1, 2),
        )
