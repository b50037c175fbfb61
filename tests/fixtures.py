"""
Network Fixtures

Explicit, hand-built graphs shared by the test suite.

RULES:
======
1. All fixtures are EXPLICIT, not random
2. Each scenario documents the structure it encodes
3. Builders go through the real layers (index, topology), never stubs
"""

from __future__ import annotations
from typing import Iterable, Optional, Sequence, Tuple

from jokbo.contracts import (
    Node, RawEdge, RelationshipKind, NetworkDataset, GraphIndex
)
from jokbo.core import GraphIndexer, TopologyEngine


PC = RelationshipKind.PARENT_CHILD
PA = RelationshipKind.POTENTIAL_AFFILIATION


# =============================================================================
# BUILDERS
# =============================================================================

def create_node(node_id: str, name: Optional[str] = None, **attrs) -> Node:
    return Node(node_id=node_id, name_hangeul=name or f"이름{node_id}", **attrs)


def create_edge(source: str, target: str, kind: RelationshipKind = PC) -> RawEdge:
    return RawEdge(source_id=source, target_id=target, kind=kind)


def create_index(nodes: Sequence[Node], edges: Sequence[RawEdge]) -> GraphIndex:
    return GraphIndexer().build(nodes, edges)


def create_dataset(
    nodes: Sequence[Node],
    edges: Sequence[RawEdge],
    key_figure_ids: Iterable[str] = ()
) -> NetworkDataset:
    """Run the real index and topology layers over explicit records."""
    index = create_index(nodes, edges)
    topology = TopologyEngine(index.nodes, index.links)
    key_figure_ids = tuple(key_figure_ids)
    return NetworkDataset(
        index=index,
        graph=topology.graph,
        clusters=topology.assign_clusters(),
        key_figure_ids=key_figure_ids,
        key_figures=tuple(
            index.get_node(figure_id) for figure_id in key_figure_ids
            if index.has_node(figure_id)
        )
    )


# =============================================================================
# SCENARIOS
# =============================================================================

def chain_scenario() -> Tuple[Tuple[Node, ...], Tuple[RawEdge, ...]]:
    """
    A -PC-> B -PC-> C, C -PA-> D, D -PA-> C, plus isolated E.

    Expected: {A, B, C, D} is one cluster and E a singleton;
    C-D and D-C are the only reciprocal links.
    Link positions: 0 A-B, 1 B-C, 2 C-D, 3 D-C.
    """
    nodes = tuple(create_node(node_id) for node_id in "ABCDE")
    edges = (
        create_edge("A", "B", PC),
        create_edge("B", "C", PC),
        create_edge("C", "D", PA),
        create_edge("D", "C", PA),
    )
    return nodes, edges


def four_node_scenario() -> Tuple[Tuple[Node, ...], Tuple[RawEdge, ...]]:
    """
    The chain without the isolated E: A -PC-> B -PC-> C, C -PA-> D, D -PA-> C.

    Expected: exactly one cluster holding all four nodes.
    """
    nodes, edges = chain_scenario()
    return nodes[:4], edges


def chain_dataset(key_figure_ids: Iterable[str] = ("A",)) -> NetworkDataset:
    nodes, edges = chain_scenario()
    return create_dataset(nodes, edges, key_figure_ids)


def chain_document() -> dict:
    """The chain scenario as the JSON document the loader reads."""
    return {
        "nodes": [
            {
                "id": "A",
                "name_hangeul": "김갑",
                "name_hanja": "金甲",
                "clan": "김해",
                "gyePa": "삼현파",
                "remarks": "시조",
            },
            {"id": "B", "name_hangeul": "김을"},
            {"id": "C", "name_hangeul": "김병", "name_hanja": "", "clan": None},
            {"id": "D", "name_hangeul": "이정"},
            {"id": "E", "name_hangeul": "박무"},
        ],
        "edges": [
            {"source": "A", "target": "B", "type": "PARENT_CHILD"},
            {"source": "B", "target": "C", "type": "PARENT_CHILD"},
            {"source": "C", "target": "D", "type": "POTENTIAL_AFFILIATION"},
            {"source": "D", "target": "C", "type": "POTENTIAL_AFFILIATION"},
        ],
    }
