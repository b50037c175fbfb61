"""
Engine Orchestration Module

This module provides the unified interface for coordinating all
layers while maintaining strict boundary separation.

DESIGN PRINCIPLES:
==================
1. Layers communicate ONLY through contracts
2. The dataset is loaded once and is immutable afterwards
3. All operations are traceable through observability
4. A failed load is an explicit state, never an exception to the caller
5. The render sink sees the first view only once the dataset is READY
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
import os

from .contracts.base import Error, ErrorCode, LoadState, Result
from .contracts.graph import FilteredView, NetworkDataset
from .contracts.events import AuditEventType, AuditLogEntry
from .ingestion import DatasetLoader, IngestionConfig
from .core import (
    GraphIndexer, IndexConfig, TopologyEngine, UnresolvedEdgeError,
    FilterOrchestrator, SelectionController, SelectionConfig, RenderSink
)
from .observability import AuditCollector, LogCollector


DEFAULT_DATASET_FILENAME = "jokbo_network.json"


def default_dataset_path() -> str:
    """JOKBO_DATASET_PATH, else the default file in the working directory."""
    return os.environ.get(
        "JOKBO_DATASET_PATH", os.path.join(os.getcwd(), DEFAULT_DATASET_FILENAME)
    )


@dataclass
class ExplorerConfig:
    """Unified configuration for the network explorer."""
    dataset_path: Optional[str] = None
    key_figure_ids: Sequence[str] = ()
    ingestion: IngestionConfig = None
    index: IndexConfig = None
    selection: SelectionConfig = None

    def __post_init__(self):
        self.dataset_path = self.dataset_path or default_dataset_path()
        self.key_figure_ids = tuple(dict.fromkeys(self.key_figure_ids))
        self.ingestion = self.ingestion or IngestionConfig()
        self.index = self.index or IndexConfig()
        self.selection = self.selection or SelectionConfig()


class NetworkExplorer:
    """
    Unified facade for the genealogy network engine.

    LAYER FLOW:
    ===========
    1. Ingestion: document -> typed nodes and raw edges
    2. Index: raw edges -> resolved links + reciprocity
    3. Topology: links -> frozen adjacency + clusters
    4. Selection/Filter: selection changes -> recomputed FilteredView
    5. Observability: records all layer activity

    One explorer performs exactly one load. Every load failure ends in
    FAILED with load_error set. An exception raised by the render sink
    propagates to the caller, but the explorer is already READY by then.
    """

    def __init__(self, config: Optional[ExplorerConfig] = None, sink: Optional[RenderSink] = None):
        self._config = config or ExplorerConfig()
        self._sink = sink

        self._loader = DatasetLoader(self._config.ingestion)
        self._indexer = GraphIndexer(self._config.index)
        self._audit = LogCollector('engine')
        self._observability = AuditCollector()

        self._load_state = LoadState.LOADING
        self._load_error: Optional[Error] = None
        self._warnings: Tuple[Error, ...] = ()
        self._topology: Optional[TopologyEngine] = None
        self._dataset: Optional[NetworkDataset] = None
        self._orchestrator: Optional[FilterOrchestrator] = None
        self._controller: Optional[SelectionController] = None

    # =========================================================================
    # LOADING
    # =========================================================================

    def load(self) -> LoadState:
        """Load from the configured dataset path."""
        return self.load_path(self._config.dataset_path)

    def load_path(self, path: Union[str, Path]) -> LoadState:
        self._require_unloaded()
        return self._complete_load(self._loader.load_path(path))

    def load_document(self, document: Any) -> LoadState:
        """Load from an already-decoded document (mapping)."""
        self._require_unloaded()
        return self._complete_load(self._loader.parse_document(document))

    def _require_unloaded(self):
        if self._load_state is not LoadState.LOADING:
            raise RuntimeError(f"Dataset load already finished ({self._load_state.value})")

    def _complete_load(self, result: Result) -> LoadState:
        if result.is_failure:
            return self._fail(result.error)

        document = result.value
        try:
            index = self._indexer.build(document.nodes, document.edges)
        except UnresolvedEdgeError as exc:
            return self._fail(exc.error)
        except ValueError as exc:
            return self._fail(Error.create(ErrorCode.MALFORMED_DATASET, str(exc)))

        topology = TopologyEngine(index.nodes, index.links)
        key_figure_ids = tuple(self._config.key_figure_ids)
        dataset = NetworkDataset(
            index=index,
            graph=topology.graph,
            clusters=topology.assign_clusters(),
            key_figure_ids=key_figure_ids,
            key_figures=tuple(
                index.get_node(figure_id) for figure_id in key_figure_ids
                if index.has_node(figure_id)
            )
        )

        # The sink is connected after READY; the initial view is computed silently
        orchestrator = FilterOrchestrator(dataset)
        try:
            controller = SelectionController(dataset, orchestrator, self._config.selection)
        except ValueError as exc:
            return self._fail(Error.create(ErrorCode.INVALID_CONFIGURATION, str(exc)))

        self._topology = topology
        self._dataset = dataset
        self._orchestrator = orchestrator
        self._controller = controller
        self._warnings = document.rejected + index.rejected

        self._load_state = LoadState.READY
        self._audit.record(
            AuditEventType.LOAD, "load_ready", entity_type="dataset",
            nodes=index.node_count,
            links=index.link_count,
            clusters=dataset.clusters.cluster_count,
            warnings=len(self._warnings)
        )

        if self._sink is not None:
            orchestrator.connect(self._sink)
        return self._load_state

    def _fail(self, error: Error) -> LoadState:
        self._load_state = LoadState.FAILED
        self._load_error = error
        self._audit.record(
            AuditEventType.LOAD, "load_failed", entity_type="dataset",
            code=error.code.name
        )
        return self._load_state

    # =========================================================================
    # STATE INTROSPECTION
    # =========================================================================

    @property
    def load_state(self) -> LoadState:
        return self._load_state

    @property
    def load_error(self) -> Optional[Error]:
        return self._load_error

    @property
    def warnings(self) -> Tuple[Error, ...]:
        """Data-integrity errors for edges dropped during the load."""
        return self._warnings

    @property
    def dataset(self) -> NetworkDataset:
        self._require_ready()
        return self._dataset

    @property
    def controller(self) -> SelectionController:
        self._require_ready()
        return self._controller

    @property
    def current_view(self) -> FilteredView:
        """Latest view; empty until the dataset is ready."""
        if self._orchestrator is None:
            return FilteredView.empty()
        return self._orchestrator.current_view

    def _require_ready(self):
        if self._load_state is not LoadState.READY:
            raise RuntimeError(f"Dataset is not ready ({self._load_state.value})")

    # =========================================================================
    # OBSERVABILITY INTERFACE
    # =========================================================================

    def get_audit_log(self, layers: Optional[List[str]] = None) -> List[AuditLogEntry]:
        """Get unified audit log."""
        self._sync_audit_logs()
        return self._observability.get_unified_log(layers)

    def get_audit_report(self) -> Dict:
        self._sync_audit_logs()
        return self._observability.generate_audit_report()

    def _sync_audit_logs(self):
        """Sync audit logs from all layers to observability."""
        layers = [self._loader, self._indexer, self._topology, self._orchestrator, self._controller]
        for layer in layers:
            if layer is not None:
                self._observability.collect_all(layer.get_audit_log())
        self._observability.collect_all(self._audit.get_entries())
