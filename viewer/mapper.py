"""
Engine to View Mapper

Converts engine state into renderer-facing view contracts.

MAPPING BOUNDARY:
=================
This is the ONLY place where engine entities become view contracts.
All conversion happens here, nowhere else.

MAPPING RULES:
==============
1. Preserve engine ordering (input order of nodes and links)
2. Absent attributes are shown as N/A, never guessed
3. Styling depends only on kind, reciprocity, key-figure and selection status
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import hashlib
import math

from jokbo.contracts import (
    Error, FilteredView, LoadState, NetworkDataset, Node, RelationshipKind,
    ResolvedLink, SelectionState
)
from jokbo.core import SelectionConfig

from viewer.visualization.graph import (
    GraphNode, GraphEdge, NetworkGraphView,
    NODE_COLOR_SELECTED, NODE_COLOR_KEY_FIGURE, NODE_COLOR_DEFAULT,
    NODE_RADIUS_KEY_FIGURE, NODE_RADIUS_DEFAULT,
    LINK_COLOR_PARENT_CHILD, LINK_COLOR_AFFILIATION, LINK_WIDTH,
    LINK_DASH_UNCONFIRMED, PARENT_CHILD_PARTICLES,
)
from viewer.presentation.viewmodels import (
    KeyFigureEntryViewModel, SidebarViewModel, NodeDetailViewModel,
    LoadingStateViewModel, MISSING_VALUE,
)


SIDEBAR_TITLE = "주요 인물"
LOADING_MESSAGE = "데이터 로딩 중..."
LOAD_FAILED_MESSAGE = "데이터를 불러오지 못했습니다"


@dataclass
class LayoutConfig:
    """Configuration for initial cluster placement."""
    cluster_radius: float = 300.0


class ViewMapper:
    """
    Maps engine state to view contracts.

    SINGLE POINT OF CONVERSION:
    ===========================
    All engine -> renderer conversion goes through this class.
    """

    def __init__(self, layout: Optional[LayoutConfig] = None):
        self._layout = layout or LayoutConfig()

    # =========================================================================
    # GRAPH MAPPING
    # =========================================================================

    def cluster_anchor(self, cluster_index: int, cluster_count: int) -> Tuple[float, float]:
        """
        Fixed starting point for a cluster.

        Clusters sit evenly on a circle in index order; a lone cluster is
        centred at the origin.
        """
        if cluster_count <= 1:
            return (0.0, 0.0)
        angle = 2 * math.pi * cluster_index / cluster_count
        radius = self._layout.cluster_radius
        return (radius * math.cos(angle), radius * math.sin(angle))

    def map_graph(
        self,
        dataset: NetworkDataset,
        view: FilteredView,
        selection: SelectionState
    ) -> NetworkGraphView:
        nodes = tuple(self.map_node(dataset, node, selection) for node in view.nodes)
        edges = tuple(self.map_edge(link) for link in view.links)

        fingerprint = "|".join(node.node_id for node in view.nodes)
        fingerprint += "#" + ",".join(str(link.position) for link in view.links)
        view_id = hashlib.sha256(fingerprint.encode('utf-8')).hexdigest()[:16]

        return NetworkGraphView(
            view_id=f"view_{view_id}",
            nodes=nodes,
            edges=edges,
            availability=LoadState.READY
        )

    def map_node(
        self,
        dataset: NetworkDataset,
        node: Node,
        selection: SelectionState
    ) -> GraphNode:
        is_key_figure = dataset.is_key_figure(node.node_id)
        is_selected = selection.selected_node_id == node.node_id

        if is_selected:
            color = NODE_COLOR_SELECTED
        elif is_key_figure:
            color = NODE_COLOR_KEY_FIGURE
        else:
            color = NODE_COLOR_DEFAULT

        cluster_index = dataset.clusters.cluster_index(node.node_id)
        x, y = self.cluster_anchor(cluster_index, dataset.clusters.cluster_count)

        return GraphNode(
            node_id=node.node_id,
            label=node.name_hangeul,
            x=x,
            y=y,
            radius=NODE_RADIUS_KEY_FIGURE if is_key_figure else NODE_RADIUS_DEFAULT,
            color=color,
            cluster_index=cluster_index,
            is_key_figure=is_key_figure,
            is_selected=is_selected
        )

    def map_edge(self, link: ResolvedLink) -> GraphEdge:
        is_parent_child = link.kind is RelationshipKind.PARENT_CHILD
        # One-sided affiliation claims are drawn dashed
        dashed = link.kind is RelationshipKind.POTENTIAL_AFFILIATION and not link.is_reciprocal

        return GraphEdge(
            edge_id=f"link_{link.position}",
            source_id=link.source_id,
            target_id=link.target_id,
            kind=link.kind.value,
            color=LINK_COLOR_PARENT_CHILD if is_parent_child else LINK_COLOR_AFFILIATION,
            width=LINK_WIDTH,
            style="dashed" if dashed else "solid",
            dash_pattern=LINK_DASH_UNCONFIRMED if dashed else (),
            directional_particles=PARENT_CHILD_PARTICLES if is_parent_child else 0
        )

    # =========================================================================
    # PANELS
    # =========================================================================

    def map_sidebar(
        self,
        dataset: NetworkDataset,
        selection: SelectionState,
        config: Optional[SelectionConfig] = None
    ) -> SidebarViewModel:
        config = config or SelectionConfig()
        entries = tuple(
            KeyFigureEntryViewModel(
                figure_id=figure.node_id,
                element_id=f"figure-{figure.node_id}",
                label=figure.name_hangeul,
                is_checked=selection.is_active(figure.node_id)
            )
            for figure in dataset.key_figures
        )
        return SidebarViewModel(
            title=SIDEBAR_TITLE,
            entries=entries,
            hop_bound=selection.hop_bound,
            min_hop_bound=config.min_hop_bound,
            max_hop_bound=config.max_hop_bound,
            hidden_kinds=tuple(sorted(kind.value for kind in selection.hidden_kinds))
        )

    def map_node_detail(
        self,
        dataset: NetworkDataset,
        selection: SelectionState
    ) -> Optional[NodeDetailViewModel]:
        """Info panel contents, None while nothing is selected (panel hidden)."""
        if selection.selected_node_id is None:
            return None
        node = dataset.index.get_node(selection.selected_node_id)
        if node is None:
            return None

        return NodeDetailViewModel(
            node_id=node.node_id,
            title=node.name_hangeul,
            fields=(
                ("한자", node.name_hanja or MISSING_VALUE),
                ("성관", node.clan or MISSING_VALUE),
                ("계파", node.gye_pa or MISSING_VALUE),
                ("고유번호", node.node_id),
                ("비고", node.remarks or MISSING_VALUE),
            )
        )

    def map_loading(
        self,
        load_state: LoadState,
        error: Optional[Error] = None
    ) -> Optional[LoadingStateViewModel]:
        """Loading overlay, None once the dataset is ready."""
        if load_state is LoadState.READY:
            return None
        if load_state is LoadState.FAILED:
            detail = f": {error.message}" if error is not None else ""
            return LoadingStateViewModel(
                message=f"{LOAD_FAILED_MESSAGE}{detail}",
                is_blocking=True,
                is_failed=True
            )
        return LoadingStateViewModel(
            message=LOADING_MESSAGE,
            is_blocking=True,
            is_failed=False
        )
