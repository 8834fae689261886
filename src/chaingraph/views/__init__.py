"""Visualization views for compiled chains."""

from chaingraph.views.tree_view import TreeView
from chaingraph.views.diagram_view import DiagramView

__all__ = ["TreeView", "DiagramView"]
