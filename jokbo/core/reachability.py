"""
Reachability Filter
===================

Bounded multi-source breadth-first search over the undirected adjacency.

SEMANTICS:
==========
- Every resolvable seed starts at distance 0; unknown seeds are skipped
- A distance is assigned once, at first discovery, so it is the shortest
  hop count to the nearest seed
- Nodes at exactly hop_bound are shown but not expanded
- The link set is the induced subgraph: every link whose endpoints are
  both shown, whether or not the traversal used it
"""

from __future__ import annotations
from itertools import islice
from typing import Dict, Iterable

import networkx as nx

from ..contracts.graph import FilteredView, GraphIndex, validate_hop_bound


class ReachabilityFilter:
    """Computes the induced subgraph within hop_bound of a seed set."""

    def __init__(self, index: GraphIndex, graph: nx.Graph):
        self._index = index
        self._graph = graph

    def distances(self, seed_ids: Iterable[str], hop_bound: int) -> Dict[str, int]:
        """Shortest hop count from the nearest seed, for nodes within bound."""
        validate_hop_bound(hop_bound)

        seeds = [seed_id for seed_id in dict.fromkeys(seed_ids) if seed_id in self._graph]
        distance: Dict[str, int] = {}
        if not seeds:
            return distance

        # Layer k holds the nodes first reached after k hops
        for hops, layer in enumerate(islice(nx.bfs_layers(self._graph, seeds), hop_bound + 1)):
            for node_id in layer:
                distance[node_id] = hops
        return distance

    def filter(self, seed_ids: Iterable[str], hop_bound: int) -> FilteredView:
        """
        Induced subgraph of everything within hop_bound of a seed.

        Nodes and links keep their input order. An empty seed set yields
        an empty view.
        """
        distance = self.distances(seed_ids, hop_bound)
        if not distance:
            return FilteredView.empty()

        nodes = tuple(node for node in self._index.nodes if node.node_id in distance)
        links = tuple(
            link for link in self._index.links
            if link.source_id in distance and link.target_id in distance
        )
        return FilteredView(nodes=nodes, links=links)
