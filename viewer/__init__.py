"""
Viewer Contracts

Responsibility:
Renderer-facing, read-only contracts derived from engine state.

PRINCIPLES:
1. Immutable (Frozen)
2. No Business Logic (filtering happens in the engine)
3. No Rendering (the external graph engine draws)
"""

from .mapper import ViewMapper, LayoutConfig
from .visualization.graph import GraphNode, GraphEdge, NetworkGraphView
from .presentation.viewmodels import (
    KeyFigureEntryViewModel, SidebarViewModel, NodeDetailViewModel,
    LoadingStateViewModel,
)

__all__ = [
    'ViewMapper', 'LayoutConfig',
    'GraphNode', 'GraphEdge', 'NetworkGraphView',
    'KeyFigureEntryViewModel', 'SidebarViewModel', 'NodeDetailViewModel',
    'LoadingStateViewModel',
]
