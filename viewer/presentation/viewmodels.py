"""
Presentation Contracts

Responsibility:
Define ViewModel contracts for pure UI components.
Strictly decoupled from business logic.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


MISSING_VALUE = "N/A"


@dataclass(frozen=True)
class KeyFigureEntryViewModel:
    """One checkbox row in the key-figure sidebar."""
    figure_id: str
    element_id: str  # e.g., "figure-P001"
    label: str
    is_checked: bool


@dataclass(frozen=True)
class SidebarViewModel:
    """Key-figure selection panel."""
    title: str
    entries: Tuple[KeyFigureEntryViewModel, ...]
    hop_bound: int
    min_hop_bound: int
    max_hop_bound: Optional[int]
    hidden_kinds: Tuple[str, ...]

    @property
    def all_checked(self) -> bool:
        return bool(self.entries) and all(e.is_checked for e in self.entries)


@dataclass(frozen=True)
class NodeDetailViewModel:
    """Info panel for the clicked person. Absent attributes read N/A."""
    node_id: str
    title: str
    fields: Tuple[Tuple[str, str], ...]  # (label, value) in display order


@dataclass(frozen=True)
class LoadingStateViewModel:
    """Unified loading state."""
    message: str
    is_blocking: bool
    is_failed: bool
