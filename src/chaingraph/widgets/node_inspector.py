"""Node inspector: pick a node id, see the entity it was drawn from."""

from typing import Optional

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from chaingraph.compiler.index import DelegationSigner, EntityRef, KeySet
from chaingraph.compiler.pipeline import CompiledChain
from chaingraph.models.chain import KeyDescriptor, ZoneLevel


def _key_line(key: KeyDescriptor) -> Text:
    text = Text()
    text.append(key.role.value, style="bold magenta" if key.role.value == "KSK" else "bold blue")
    text.append(" ")
    text.append(key.summary, style="cyan")
    return text


def _describe_level(level: ZoneLevel) -> list[RenderableType]:
    lines: list[RenderableType] = []
    header = Text()
    header.append(level.display_name, style="bold white")
    header.append(f"  {level.domain_type.value}", style="dim")
    lines.append(header)

    status = Text("Status: ", style="bold")
    status.append(level.status.value, style="green" if level.status.value == "signed" else "yellow")
    if level.status_message:
        status.append(f" - {level.status_message}", style="dim")
    lines.append(status)

    lines.append(Text(
        f"DNSKEY: {level.dnskey_count}  KSK: {level.ksk_count}  ZSK: {level.zsk_count}",
        style="cyan",
    ))
    for key in level.ksk_keys + level.zsk_keys:
        lines.append(_key_line(key))

    if level.ds_records:
        lines.append(Text(f"DS records at this level: {len(level.ds_records)}", style="bold"))
        for ds in level.ds_records:
            owner = f" for {ds.owner}" if ds.owner else ""
            lines.append(Text(f"  tag={ds.key_tag} {ds.digest_type} {ds.digest_prefix}{owner}", style="dim"))

    if level.ns_records:
        lines.append(Text("NS: " + ", ".join(level.ns_records), style="dim"))
    if level.soa_ttl is not None:
        lines.append(Text(f"SOA TTL: {level.soa_ttl}", style="dim"))

    if level.chain_break.has_chain_break:
        lines.append(Text(f"⚠ {level.chain_break.break_reason or 'chain break'}", style="bold red"))
    return lines


def _describe_keys(keys: KeySet) -> list[RenderableType]:
    lines: list[RenderableType] = [Text(f"Keys of {keys.level.display_name}", style="bold white")]
    if not keys.ksk_keys and not keys.zsk_keys:
        lines.append(Text("No keys published", style="dim"))
    for key in keys.ksk_keys + keys.zsk_keys:
        lines.append(_key_line(key))
    return lines


def _describe_signer(signer: DelegationSigner) -> list[RenderableType]:
    lines: list[RenderableType] = [
        Text(f"Delegation signer for {signer.level.display_name}", style="bold white")
    ]
    ds = signer.ds
    if ds is None:
        lines.append(Text("✗ No DS record published for this delegation", style="bold red"))
        return lines

    lines.append(Text(f"Key tag: {ds.key_tag if ds.key_tag is not None else '?'}", style="cyan"))
    if ds.algorithm:
        lines.append(Text(f"Algorithm: {ds.algorithm}", style="yellow"))
    lines.append(Text(f"Digest type: {ds.digest_type or '?'}", style="dim"))
    if ds.digest:
        lines.append(Text(f"Digest: {ds.digest}", style="dim"))
    if ds.last_validated:
        lines.append(Text(f"Last validated: {ds.last_validated}", style="dim"))
    return lines


def describe_entity(entity: Optional[EntityRef]) -> RenderableType:
    """Render the entity behind a node id for the detail panel."""
    if entity is None:
        return Text("No details for this node", style="dim")
    if isinstance(entity, ZoneLevel):
        lines = _describe_level(entity)
    elif isinstance(entity, KeySet):
        lines = _describe_keys(entity)
    else:
        lines = _describe_signer(entity)
    return Group(*lines)


class NodeInspector(Horizontal):
    """List of node ids beside the details of the highlighted one."""

    DEFAULT_CSS = """
    NodeInspector {
        height: auto;
        min-height: 12;
        padding: 1;
    }

    NodeInspector #node-list {
        width: 32;
        height: auto;
        max-height: 30;
        border: solid #333;
        background: #111;
    }

    NodeInspector #node-detail {
        width: 1fr;
        height: auto;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._compiled: CompiledChain | None = None

    def compose(self) -> ComposeResult:
        yield OptionList(id="node-list")
        yield Static(Text("Select a node", style="dim"), id="node-detail")

    def set_compiled(self, compiled: CompiledChain) -> None:
        """Fill the node list from a compiled chain."""
        self._compiled = compiled
        option_list = self.query_one("#node-list", OptionList)
        option_list.clear_options()
        option_list.add_options(
            Option(Text.assemble(node.id, (f"  {node.kind.value}", "dim")), id=node.id)
            for node in compiled.graph.iter_nodes()
        )
        self.query_one("#node-detail", Static).update(Text("Select a node", style="dim"))

    def show(self, node_id: str) -> None:
        """Show the details for a node id."""
        if not self._compiled:
            return
        entity = self._compiled.index.get(node_id)
        self.query_one("#node-detail", Static).update(
            Panel(describe_entity(entity), title=node_id, border_style="dim")
        )

    def on_option_list_option_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        if event.option.id:
            self.show(event.option.id)
