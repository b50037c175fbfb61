"""
Filter Orchestration
====================

Re-invocation policy for the reachability filter.

Every change to the selection produces a NEW SelectionState and a full
recomputation of the filtered view. Nothing is patched or diffed; the
previous view is simply replaced.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Union

from ..contracts.base import RelationshipKind
from ..contracts.graph import FilteredView, NetworkDataset, SelectionState, validate_hop_bound
from ..contracts.events import AuditEventType, AuditLogEntry
from ..observability import LogCollector
from .reachability import ReachabilityFilter


RenderSink = Callable[[FilteredView], None]


def compute_filtered_view(dataset: NetworkDataset, selection: SelectionState) -> FilteredView:
    """
    Pure derivation of the view for a selection.

    Reachability runs over every relationship kind; hidden kinds only
    remove links afterwards, they never cut traversal.
    """
    reachable = ReachabilityFilter(dataset.index, dataset.graph).filter(
        sorted(selection.active_figure_ids), selection.hop_bound
    )
    if not selection.hidden_kinds:
        return reachable
    return FilteredView(
        nodes=reachable.nodes,
        links=tuple(link for link in reachable.links if selection.is_kind_visible(link.kind))
    )


class FilterOrchestrator:
    """Recomputes the view on demand and hands it to the render sink."""

    def __init__(self, dataset: NetworkDataset, sink: Optional[RenderSink] = None):
        self._dataset = dataset
        self._sink = sink
        self._current = FilteredView.empty()
        self._audit = LogCollector('filter')

    def recompute(self, selection: SelectionState) -> FilteredView:
        view = compute_filtered_view(self._dataset, selection)
        self._current = view
        self._audit.record(
            AuditEventType.FILTER,
            "view_recomputed",
            entity_type="view",
            seeds=len(selection.active_figure_ids),
            hop_bound=selection.hop_bound,
            nodes=len(view.nodes),
            links=len(view.links)
        )
        if self._sink is not None:
            self._sink(view)
        return view

    def connect(self, sink: RenderSink) -> FilteredView:
        """Attach the render sink and hand it the current view."""
        self._sink = sink
        sink(self._current)
        return self._current

    @property
    def current_view(self) -> FilteredView:
        return self._current

    def get_audit_log(self) -> List[AuditLogEntry]:
        """Return copy of audit log entries."""
        return self._audit.get_entries()


# =============================================================================
# SELECTION STATE OWNER
# =============================================================================

@dataclass
class SelectionConfig:
    """Configuration for the selection boundary."""
    default_hop_bound: int = 1
    min_hop_bound: int = 1
    max_hop_bound: Optional[int] = 10  # None = unbounded
    select_all_on_load: bool = True


class SelectionController:
    """
    UI-facing owner of the SelectionState.

    Validates every request before it reaches the filter. A rejected
    request raises ValueError and leaves state and view untouched.
    """

    def __init__(
        self,
        dataset: NetworkDataset,
        orchestrator: FilterOrchestrator,
        config: Optional[SelectionConfig] = None
    ):
        self._dataset = dataset
        self._orchestrator = orchestrator
        self._config = config or SelectionConfig()
        self._audit = LogCollector('selection')

        active = dataset.key_figure_ids if self._config.select_all_on_load else ()
        self._state = SelectionState(
            active_figure_ids=frozenset(active),
            hop_bound=self._check_hop_bound(self._config.default_hop_bound)
        )
        self._orchestrator.recompute(self._state)

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def current_view(self) -> FilteredView:
        return self._orchestrator.current_view

    # =========================================================================
    # UI INTERFACE
    # =========================================================================

    def toggle(self, figure_id: str) -> FilteredView:
        """Flip one key figure between active and inactive."""
        if not self._dataset.is_key_figure(figure_id):
            raise ValueError(f"{figure_id} is not a registered key figure")
        return self._transition(
            self._state.with_toggled_figure(figure_id),
            "figure_toggled",
            entity_id=figure_id,
            active=figure_id not in self._state.active_figure_ids
        )

    def set_hop_bound(self, hop_bound: int) -> FilteredView:
        self._check_hop_bound(hop_bound)
        return self._transition(
            self._state.with_hop_bound(hop_bound),
            "hop_bound_set",
            hop_bound=hop_bound
        )

    def toggle_edge_kind(self, kind: Union[RelationshipKind, str]) -> FilteredView:
        """Show or hide links of one relationship kind."""
        if not isinstance(kind, RelationshipKind):
            parsed = RelationshipKind.parse(kind)
            if parsed is None:
                raise ValueError(f"Unknown relationship kind {kind!r}")
            kind = parsed
        return self._transition(
            self._state.with_toggled_kind(kind),
            "edge_kind_toggled",
            entity_id=kind.value,
            visible=not self._state.is_kind_visible(kind)
        )

    def select_all(self, selected: bool) -> FilteredView:
        """Activate every key figure, or none."""
        figure_ids: Iterable[str] = self._dataset.key_figure_ids if selected else ()
        return self._transition(
            self._state.with_active_figures(figure_ids),
            "select_all",
            selected=selected
        )

    def select_node(self, node_id: str) -> SelectionState:
        """Mark a clicked node as selected. Does not refilter."""
        if not self._dataset.index.has_node(node_id):
            raise ValueError(f"Unknown node {node_id}")
        self._state = self._state.with_selected_node(node_id)
        self._audit.record(AuditEventType.SELECTION, "node_selected", entity_id=node_id)
        return self._state

    def clear_selected_node(self) -> SelectionState:
        """Background click: drop the node selection. Does not refilter."""
        self._state = self._state.with_selected_node(None)
        self._audit.record(AuditEventType.SELECTION, "node_cleared")
        return self._state

    def get_audit_log(self) -> List[AuditLogEntry]:
        """Return copy of audit log entries."""
        return self._audit.get_entries()

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _check_hop_bound(self, hop_bound: int) -> int:
        validate_hop_bound(hop_bound)
        if hop_bound < self._config.min_hop_bound:
            raise ValueError(
                f"hop_bound {hop_bound} is below the minimum {self._config.min_hop_bound}"
            )
        if self._config.max_hop_bound is not None and hop_bound > self._config.max_hop_bound:
            raise ValueError(
                f"hop_bound {hop_bound} exceeds the maximum {self._config.max_hop_bound}"
            )
        return hop_bound

    def _transition(
        self,
        new_state: SelectionState,
        action: str,
        entity_id: Optional[str] = None,
        **metadata: object
    ) -> FilteredView:
        self._state = new_state
        self._audit.record(
            AuditEventType.SELECTION,
            action,
            entity_id=entity_id,
            entity_type="selection",
            **metadata
        )
        return self._orchestrator.recompute(new_state)
