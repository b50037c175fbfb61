"""
Dataset Ingestion Layer

RESPONSIBILITY: Turn the one-shot network document into typed records
ALLOWED INPUTS: A mapping, a JSON string, or a path to a JSON file
OUTPUTS: Result wrapping a DatasetDocument, or a MALFORMED_DATASET error

WHAT THIS LAYER MUST NOT DO:
============================
- Resolve edge endpoints (that's the index's job)
- Build adjacency or clusters
- Retry a failed load

DOCUMENT SHAPE:
===============
{
  "nodes": [{"id", "name_hangeul", "name_hanja"?, "clan"?, "gyePa"?, "remarks"?}],
  "edges": [{"source", "target", "type"}]
}
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple, Union
import json
import logging

from ..contracts.base import Error, ErrorCode, Result, RelationshipKind
from ..contracts.graph import Node, RawEdge
from ..contracts.events import AuditEventType, AuditLogEntry
from ..observability import LogCollector


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetDocument:
    """Structurally valid document, ready for indexing."""
    nodes: Tuple[Node, ...]
    edges: Tuple[RawEdge, ...]
    rejected: Tuple[Error, ...] = field(default_factory=tuple)


class MalformedDataset(Exception):
    """Internal signal; converted to a Result failure at the layer boundary."""

    def __init__(self, message: str, **context: str):
        super().__init__(message)
        self.context = context


@dataclass
class IngestionConfig:
    """Configuration for dataset ingestion."""
    encoding: str = "utf-8"


class DatasetLoader:
    """
    Parse and structurally validate a network document.

    Node-level or collection-level defects are fatal (MALFORMED_DATASET).
    Edges with an unknown relationship type are dropped one by one and
    reported as UNKNOWN_RELATIONSHIP_KIND.
    """

    def __init__(self, config: Optional[IngestionConfig] = None):
        self._config = config or IngestionConfig()
        self._audit = LogCollector('ingestion')

    def load_path(self, path: Union[str, Path]) -> Result:
        path = Path(path)
        try:
            text = path.read_text(encoding=self._config.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            return self._fail(Error.create(
                ErrorCode.DATASET_UNREADABLE,
                f"Cannot read dataset: {exc}",
                path=str(path)
            ))

        result = self.load_json(text)
        if result.is_failure:
            return Result.failure(result.error.with_context("path", str(path)))
        return result

    def load_json(self, text: str) -> Result:
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            return self._fail(Error.create(
                ErrorCode.MALFORMED_DATASET,
                f"Dataset is not valid JSON: {exc.msg}",
                line=str(exc.lineno)
            ))
        return self.parse_document(document)

    def parse_document(self, document: Any) -> Result:
        """Validate a decoded document and convert it to typed records."""
        try:
            nodes = self._parse_nodes(document)
            edges, rejected = self._parse_edges(document)
        except MalformedDataset as exc:
            return self._fail(Error.create(ErrorCode.MALFORMED_DATASET, str(exc), **exc.context))

        self._audit.record(
            AuditEventType.LOAD,
            "document_parsed",
            entity_type="dataset",
            nodes=len(nodes),
            edges=len(edges),
            rejected=len(rejected)
        )
        return Result.success(DatasetDocument(nodes=nodes, edges=edges, rejected=rejected))

    def get_audit_log(self) -> List[AuditLogEntry]:
        """Return copy of audit log entries."""
        return self._audit.get_entries()

    # =========================================================================
    # PARSING
    # =========================================================================

    def _collection(self, document: Any, name: str) -> list:
        if not isinstance(document, Mapping):
            raise MalformedDataset("Dataset must be a JSON object")
        if name not in document:
            raise MalformedDataset(f"Dataset is missing the '{name}' collection", collection=name)
        items = document[name]
        if not isinstance(items, list):
            raise MalformedDataset(f"'{name}' must be a list", collection=name)
        return items

    def _parse_nodes(self, document: Any) -> Tuple[Node, ...]:
        nodes = []
        seen = set()
        for position, item in enumerate(self._collection(document, 'nodes')):
            if not isinstance(item, Mapping):
                raise MalformedDataset("Node entry must be an object", position=str(position))

            node_id = item.get('id')
            if not isinstance(node_id, str) or not node_id:
                raise MalformedDataset("Node is missing a string 'id'", position=str(position))
            if node_id in seen:
                raise MalformedDataset(f"Duplicate node id {node_id}", node_id=node_id)

            name = item.get('name_hangeul')
            if not isinstance(name, str):
                raise MalformedDataset(
                    f"Node {node_id} is missing 'name_hangeul'", node_id=node_id
                )

            seen.add(node_id)
            nodes.append(Node(
                node_id=node_id,
                name_hangeul=name,
                name_hanja=_optional_text(item, 'name_hanja', node_id),
                clan=_optional_text(item, 'clan', node_id),
                gye_pa=_optional_text(item, 'gyePa', node_id),
                remarks=_optional_text(item, 'remarks', node_id),
            ))
        return tuple(nodes)

    def _parse_edges(self, document: Any) -> Tuple[Tuple[RawEdge, ...], Tuple[Error, ...]]:
        edges = []
        rejected = []
        for position, item in enumerate(self._collection(document, 'edges')):
            if not isinstance(item, Mapping):
                raise MalformedDataset("Edge entry must be an object", position=str(position))
            for key in ('source', 'target', 'type'):
                if not isinstance(item.get(key), str):
                    raise MalformedDataset(
                        f"Edge {position} is missing a string '{key}'", position=str(position)
                    )

            kind = RelationshipKind.parse(item['type'])
            if kind is None:
                error = Error.create(
                    ErrorCode.UNKNOWN_RELATIONSHIP_KIND,
                    f"Edge {position} has unknown type {item['type']!r}",
                    position=str(position),
                    type=item['type']
                )
                rejected.append(error)
                logger.warning("Dropping edge %d: unknown relationship type %r", position, item['type'])
                self._audit.record(
                    AuditEventType.ERROR,
                    "edge_rejected",
                    entity_id=str(position),
                    entity_type="edge",
                    code=error.code.name
                )
                continue

            edges.append(RawEdge(source_id=item['source'], target_id=item['target'], kind=kind))
        return tuple(edges), tuple(rejected)

    def _fail(self, error: Error) -> Result:
        logger.error("Dataset load failed: %s", error.message)
        self._audit.record(
            AuditEventType.ERROR,
            "load_failed",
            entity_type="dataset",
            code=error.code.name
        )
        return Result.failure(error)


def _optional_text(item: Mapping, key: str, node_id: str) -> Optional[str]:
    """
    Read an optional display attribute.

    Numbers are shown as text. Blank strings and nulls are absent; any other
    value is dropped with a warning.
    """
    value = item.get(key)
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if value is not None:
        logger.warning("Node %s: ignoring non-text %r value %r", node_id, key, value)
    return None
