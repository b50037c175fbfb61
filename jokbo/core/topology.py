"""
Topology Engine
===============

Undirected adjacency and connected-component clustering.

The adjacency graph is built once from the indexed links and frozen;
every consumer reads it, none mutates it. Direction and relationship kind
are irrelevant here: a link is a structural connection.

Cluster indices follow first discovery while scanning nodes in input
order, and members are listed in breadth-first discovery order, so the
assignment is reproducible for a fixed input.
"""

from __future__ import annotations
from typing import List, Sequence, Set, Tuple
import networkx as nx

from ..contracts.graph import ClusterAssignment, Node, ResolvedLink
from ..contracts.events import AuditEventType, AuditLogEntry
from ..observability import LogCollector


def build_adjacency(nodes: Sequence[Node], links: Sequence[ResolvedLink]) -> nx.Graph:
    """
    Build the read-only undirected adjacency graph.

    Node insertion order equals input order. Parallel links collapse into
    one adjacency entry; self-loops are kept.
    """
    graph = nx.Graph()
    for node in nodes:
        graph.add_node(node.node_id)
    for link in links:
        graph.add_edge(link.source_id, link.target_id)
    return nx.freeze(graph)


class TopologyEngine:
    """
    Cluster finder over the frozen adjacency graph.

    Wraps NetworkX so callers only see identifier-keyed results.
    """

    def __init__(self, nodes: Sequence[Node], links: Sequence[ResolvedLink]):
        self._graph = build_adjacency(nodes, links)
        self._audit = LogCollector('topology')

    @property
    def graph(self) -> nx.Graph:
        return self._graph

    def assign_clusters(self) -> ClusterAssignment:
        """Partition every node into its connected component."""
        assigned: Set[str] = set()
        clusters: List[Tuple[str, ...]] = []

        for node_id in self._graph:
            if node_id in assigned:
                continue
            members = [node_id]
            members.extend(child for _, child in nx.bfs_edges(self._graph, node_id))
            assigned.update(members)
            clusters.append(tuple(members))

        assignment = ClusterAssignment(clusters=tuple(clusters))
        self._audit.record(
            AuditEventType.TOPOLOGY,
            "clusters_assigned",
            entity_type="graph",
            clusters=assignment.cluster_count,
            nodes=self._graph.number_of_nodes()
        )
        return assignment

    def get_audit_log(self) -> List[AuditLogEntry]:
        """Return copy of audit log entries."""
        return self._audit.get_entries()
