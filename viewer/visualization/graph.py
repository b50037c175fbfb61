"""
Graph Visualization Contracts

Responsibility:
Deterministic transformation of a FilteredView into renderable hints.
Positions here are initial anchors only; the physics layout owns the rest.
"""

from dataclasses import dataclass
from typing import Tuple

from jokbo.contracts import LoadState


# Node styling
NODE_COLOR_SELECTED = "red"
NODE_COLOR_KEY_FIGURE = "yellow"
NODE_COLOR_DEFAULT = "orange"
NODE_RADIUS_KEY_FIGURE = 6.0
NODE_RADIUS_DEFAULT = 4.0

# Link styling
LINK_COLOR_PARENT_CHILD = "rgba(0, 150, 255, 0.6)"
LINK_COLOR_AFFILIATION = "rgba(255, 0, 0, 0.6)"
LINK_WIDTH = 0.7
LINK_DASH_UNCONFIRMED = (2, 2)
PARENT_CHILD_PARTICLES = 4


@dataclass(frozen=True)
class GraphNode:
    """Renderable graph node."""
    node_id: str
    label: str
    x: float
    y: float
    radius: float
    color: str
    cluster_index: int
    is_key_figure: bool
    is_selected: bool


@dataclass(frozen=True)
class GraphEdge:
    """Renderable graph edge."""
    edge_id: str
    source_id: str
    target_id: str
    kind: str
    color: str
    width: float
    style: str  # solid, dashed
    dash_pattern: Tuple[int, ...]
    directional_particles: int


@dataclass(frozen=True)
class NetworkGraphView:
    """
    Renderable network for one selection.
    Same dataset and selection always yield the same view.
    """
    view_id: str
    nodes: Tuple[GraphNode, ...]
    edges: Tuple[GraphEdge, ...]
    availability: LoadState
