"""Pieces shared by the chain views."""

from typing import Optional

from rich.console import RenderableType
from rich.table import Table
from rich.text import Text

from chaingraph.compiler.pipeline import CompiledChain

STATUS_COLORS = {
    "secure": "green",
    "partial": "yellow",
    "insecure": "yellow",
    "broken": "red",
    "bogus": "red",
    "unsigned": "grey50",
}


def status_color(status: str) -> str:
    """Return the Rich color for an overall status string."""
    return STATUS_COLORS.get(status.lower(), "white")


def chain_header(compiled: CompiledChain) -> RenderableType:
    """Build the domain / status / origin line at the top of a view."""
    header = Table.grid(padding=(0, 2))
    header.add_column()
    header.add_column()
    header.add_column()

    status = compiled.overall_status
    status_text = Text(status.upper(), style=f"bold {status_color(status)}")

    origin = compiled.origin
    origin_text = Text(f"Data: {origin.value}", style=origin.color)
    if compiled.generation:
        origin_text.append(f"  #{compiled.generation}", style="dim")

    header.add_row(
        Text(f"Domain: {compiled.domain}", style="bold"),
        status_text,
        origin_text,
    )
    return header


def degraded_notice(compiled: CompiledChain) -> Optional[Text]:
    """Return a warning line when sample data stands in for a real result."""
    if not compiled.degraded:
        return None
    text = Text()
    text.append("⚠ Sample data: ", style="bold yellow")
    text.append(f"retrieval for {compiled.domain} failed", style="yellow")
    if compiled.error:
        text.append(f" ({compiled.error})", style="dim yellow")
    return text
