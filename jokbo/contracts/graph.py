"""
Graph Contracts

Immutable people, relationships and the derived structures built from them.

IDENTITY RULES:
===============
- A Node is identified by its node_id ONLY (equality and hashing)
- A ResolvedLink is identified by its position in the input edge list
- Sets and maps are keyed by identifiers, never by object identity
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, FrozenSet, Mapping, Optional, Tuple

from .base import Error, RelationshipKind

if TYPE_CHECKING:
    import networkx as nx


# =============================================================================
# PEOPLE AND RELATIONSHIPS
# =============================================================================

@dataclass(frozen=True)
class Node:
    """A person in the genealogical graph."""
    node_id: str
    name_hangeul: str = field(compare=False)
    name_hanja: Optional[str] = field(default=None, compare=False)
    clan: Optional[str] = field(default=None, compare=False)
    gye_pa: Optional[str] = field(default=None, compare=False)
    remarks: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        if not self.node_id or not isinstance(self.node_id, str):
            raise ValueError("Node node_id must be a non-empty string")


@dataclass(frozen=True)
class RawEdge:
    """Directed relationship with endpoints given as identifiers."""
    source_id: str
    target_id: str
    kind: RelationshipKind

    @property
    def key(self) -> Tuple[str, str]:
        return (self.source_id, self.target_id)

    @property
    def mirrored_key(self) -> Tuple[str, str]:
        return (self.target_id, self.source_id)


@dataclass(frozen=True)
class ResolvedLink:
    """
    Indexed relationship with both endpoints resolved to Nodes.

    position is the index of the originating edge in the input edge list.
    """
    position: int
    source: Node
    target: Node
    kind: RelationshipKind
    is_reciprocal: bool = False

    def __post_init__(self):
        if self.is_reciprocal and self.kind is not RelationshipKind.POTENTIAL_AFFILIATION:
            raise ValueError("Only POTENTIAL_AFFILIATION links can be reciprocal")

    @property
    def source_id(self) -> str:
        return self.source.node_id

    @property
    def target_id(self) -> str:
        return self.target.node_id

    @property
    def is_self_loop(self) -> bool:
        return self.source_id == self.target_id


# =============================================================================
# DERIVED STRUCTURES (built once per load)
# =============================================================================

@dataclass(frozen=True)
class GraphIndex:
    """
    Identifier lookup plus resolved links.

    rejected holds one data-integrity Error per edge that could not be
    indexed; rejected edges never appear in links.
    """
    nodes: Tuple[Node, ...]
    links: Tuple[ResolvedLink, ...]
    nodes_by_id: Mapping[str, Node] = field(compare=False, repr=False)
    rejected: Tuple[Error, ...] = field(default_factory=tuple)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def link_count(self) -> int:
        return len(self.links)

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.nodes_by_id.get(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self.nodes_by_id


@dataclass(frozen=True)
class ClusterAssignment:
    """
    Partition of all nodes into connected clusters.

    clusters[i] lists the member ids of cluster i in discovery order.
    Indices follow first discovery while scanning nodes in input order.
    """
    clusters: Tuple[Tuple[str, ...], ...]
    cluster_of: Mapping[str, int] = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        lookup = {}
        for index, members in enumerate(self.clusters):
            if not members:
                raise ValueError(f"Cluster {index} is empty")
            for node_id in members:
                if node_id in lookup:
                    raise ValueError(
                        f"Node {node_id} assigned to clusters {lookup[node_id]} and {index}"
                    )
                lookup[node_id] = index
        object.__setattr__(self, 'cluster_of', MappingProxyType(lookup))

    @property
    def cluster_count(self) -> int:
        return len(self.clusters)

    def cluster_index(self, node_id: str) -> int:
        """Cluster index of a node. Raises KeyError for unknown ids."""
        return self.cluster_of[node_id]

    def members(self, index: int) -> Tuple[str, ...]:
        return self.clusters[index]


@dataclass(frozen=True)
class NetworkDataset:
    """
    Everything derived once per load.

    key_figure_ids is the configured registry (may name absent people);
    key_figures holds only those resolved against the index, in registry order.
    """
    index: GraphIndex
    graph: "nx.Graph" = field(compare=False, repr=False)
    clusters: ClusterAssignment = field(compare=False)
    key_figure_ids: Tuple[str, ...] = field(default_factory=tuple)
    key_figures: Tuple[Node, ...] = field(default_factory=tuple)

    def is_key_figure(self, node_id: str) -> bool:
        return node_id in self.key_figure_ids


# =============================================================================
# SELECTION AND FILTERED VIEW (replaced wholesale on every change)
# =============================================================================

@dataclass(frozen=True)
class SelectionState:
    """
    Parameters of the current filtered view.

    hop_bound must be a positive integer; the upper limit is a selection
    boundary policy enforced by the controller, not here.
    """
    active_figure_ids: FrozenSet[str] = field(default_factory=frozenset)
    hop_bound: int = 1
    hidden_kinds: FrozenSet[RelationshipKind] = field(default_factory=frozenset)
    selected_node_id: Optional[str] = None

    def __post_init__(self):
        validate_hop_bound(self.hop_bound)

    def is_active(self, figure_id: str) -> bool:
        return figure_id in self.active_figure_ids

    def is_kind_visible(self, kind: RelationshipKind) -> bool:
        return kind not in self.hidden_kinds

    def with_toggled_figure(self, figure_id: str) -> SelectionState:
        return replace(self, active_figure_ids=self.active_figure_ids ^ {figure_id})

    def with_active_figures(self, figure_ids) -> SelectionState:
        return replace(self, active_figure_ids=frozenset(figure_ids))

    def with_hop_bound(self, hop_bound: int) -> SelectionState:
        return replace(self, hop_bound=hop_bound)

    def with_toggled_kind(self, kind: RelationshipKind) -> SelectionState:
        return replace(self, hidden_kinds=self.hidden_kinds ^ {kind})

    def with_selected_node(self, node_id: Optional[str]) -> SelectionState:
        return replace(self, selected_node_id=node_id)


@dataclass(frozen=True)
class FilteredView:
    """
    Induced subgraph handed to the renderer.

    Every link has both endpoints among nodes.
    """
    nodes: Tuple[Node, ...] = field(default_factory=tuple)
    links: Tuple[ResolvedLink, ...] = field(default_factory=tuple)

    def __post_init__(self):
        shown = self.node_ids
        for link in self.links:
            if link.source_id not in shown or link.target_id not in shown:
                raise ValueError(
                    f"Link {link.position} ({link.source_id}->{link.target_id}) "
                    "has an endpoint outside the view"
                )

    @property
    def node_ids(self) -> FrozenSet[str]:
        return frozenset(node.node_id for node in self.nodes)

    @property
    def link_positions(self) -> FrozenSet[int]:
        return frozenset(link.position for link in self.links)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    @staticmethod
    def empty() -> FilteredView:
        return FilteredView(nodes=(), links=())


def validate_hop_bound(hop_bound: object) -> int:
    """Raise ValueError unless hop_bound is a positive integer."""
    if isinstance(hop_bound, bool) or not isinstance(hop_bound, int):
        raise ValueError(f"hop_bound must be an integer, got {hop_bound!r}")
    if hop_bound < 1:
        raise ValueError(f"hop_bound must be positive, got {hop_bound}")
    return hop_bound
