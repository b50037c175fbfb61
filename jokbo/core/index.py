"""
Graph Index
===========

Identifier lookup, endpoint resolution and reciprocity detection.

A POTENTIAL_AFFILIATION edge is reciprocal when the mirrored edge
(target -> source, same kind) exists in the input edge set.
No other kind is ever reciprocal.

Edges naming an unknown endpoint are rejected and reported; the index never
holds a half-resolved link.
"""

from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Optional, Sequence, Set, Tuple
import logging

from ..contracts.base import Error, ErrorCode, RelationshipKind
from ..contracts.graph import GraphIndex, Node, RawEdge, ResolvedLink
from ..contracts.events import AuditEventType, AuditLogEntry
from ..observability import LogCollector


logger = logging.getLogger(__name__)


@dataclass
class IndexConfig:
    """Configuration for the graph index."""
    fail_fast_on_unresolved: bool = False  # raise UnresolvedEdgeError instead of rejecting


class UnresolvedEdgeError(ValueError):
    """Raised in fail-fast mode; carries the data-integrity Error."""

    def __init__(self, error: Error):
        super().__init__(error.message)
        self.error = error


class GraphIndexer:
    """Builds a GraphIndex from typed nodes and raw edges."""

    def __init__(self, config: Optional[IndexConfig] = None):
        self._config = config or IndexConfig()
        self._audit = LogCollector('index')

    def build(self, nodes: Sequence[Node], edges: Sequence[RawEdge]) -> GraphIndex:
        """
        Index nodes and resolve edges.

        Raises ValueError on duplicate node ids and, in fail-fast mode,
        UnresolvedEdgeError on the first unresolved endpoint.
        """
        nodes_by_id = {}
        for node in nodes:
            if node.node_id in nodes_by_id:
                raise ValueError(f"Duplicate node id {node.node_id}")
            nodes_by_id[node.node_id] = node

        affiliation_keys = self._affiliation_keys(edges)

        links: List[ResolvedLink] = []
        rejected: List[Error] = []
        for position, edge in enumerate(edges):
            source = nodes_by_id.get(edge.source_id)
            target = nodes_by_id.get(edge.target_id)

            if source is None or target is None:
                error = self._unresolved(position, edge, source is None, target is None)
                if self._config.fail_fast_on_unresolved:
                    raise UnresolvedEdgeError(error)
                rejected.append(error)
                continue

            links.append(ResolvedLink(
                position=position,
                source=source,
                target=target,
                kind=edge.kind,
                is_reciprocal=(
                    edge.kind is RelationshipKind.POTENTIAL_AFFILIATION
                    and edge.mirrored_key in affiliation_keys
                )
            ))

        self._audit.record(
            AuditEventType.INDEX,
            "index_built",
            entity_type="graph",
            nodes=len(nodes_by_id),
            links=len(links),
            rejected=len(rejected)
        )

        return GraphIndex(
            nodes=tuple(nodes),
            links=tuple(links),
            nodes_by_id=MappingProxyType(nodes_by_id),
            rejected=tuple(rejected)
        )

    def get_audit_log(self) -> List[AuditLogEntry]:
        """Return copy of audit log entries."""
        return self._audit.get_entries()

    @staticmethod
    def _affiliation_keys(edges: Sequence[RawEdge]) -> Set[Tuple[str, str]]:
        return {
            edge.key for edge in edges
            if edge.kind is RelationshipKind.POTENTIAL_AFFILIATION
        }

    def _unresolved(
        self,
        position: int,
        edge: RawEdge,
        source_missing: bool,
        target_missing: bool
    ) -> Error:
        missing = [
            endpoint_id for endpoint_id, is_missing in (
                (edge.source_id, source_missing),
                (edge.target_id, target_missing),
            ) if is_missing
        ]
        error = Error.create(
            ErrorCode.UNRESOLVED_EDGE_ENDPOINT,
            f"Edge {position} ({edge.source_id}->{edge.target_id}) references "
            f"unknown node(s): {', '.join(missing)}",
            position=str(position),
            source=edge.source_id,
            target=edge.target_id
        )
        logger.warning("Rejecting edge %d: %s", position, error.message)
        self._audit.record(
            AuditEventType.ERROR,
            "edge_rejected",
            entity_id=str(position),
            entity_type="edge",
            code=error.code.name
        )
        return error
