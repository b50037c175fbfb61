"""
Core Network Engine

RESPONSIBILITY: Indexing, clustering, reachability filtering, re-filter policy
ALLOWED INPUTS: Typed nodes and raw edges from the ingestion layer
OUTPUTS: GraphIndex, ClusterAssignment, FilteredView (all immutable)

WHAT THIS LAYER MUST NOT DO:
============================
- Parse documents or touch files (ingestion layer's job)
- Mutate nodes, links or the adjacency graph after construction
- Patch a previous view instead of recomputing it
- Decide how anything is drawn
"""

from .index import GraphIndexer, IndexConfig, UnresolvedEdgeError
from .topology import TopologyEngine, build_adjacency
from .reachability import ReachabilityFilter
from .orchestrator import (
    FilterOrchestrator, SelectionController, SelectionConfig,
    RenderSink, compute_filtered_view
)

__all__ = [
    'GraphIndexer', 'IndexConfig', 'UnresolvedEdgeError',
    'TopologyEngine', 'build_adjacency',
    'ReachabilityFilter',
    'FilterOrchestrator', 'SelectionController', 'SelectionConfig',
    'RenderSink', 'compute_filtered_view',
]
