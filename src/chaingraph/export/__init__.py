"""Export functionality for compiled chains."""

from chaingraph.export.json_export import export_json
from chaingraph.export.dot_export import export_dot

__all__ = ["export_json", "export_dot"]
