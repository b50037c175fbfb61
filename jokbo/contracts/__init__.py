"""
Contracts Module

This module defines the explicit interfaces and data transfer objects
that form the contracts between layers. All inter-layer communication
MUST use these contracts. No layer may import implementation details
from another layer.

DESIGN PRINCIPLES:
==================
1. All contract types are immutable (frozen dataclasses)
2. All contracts include explicit error states
3. Identity is by identifier, never by object reference
4. Derived structures are built once per load and never patched
"""

from .base import ErrorCode, Error, Result, RelationshipKind, LoadState
from .graph import (
    Node, RawEdge, ResolvedLink, GraphIndex, ClusterAssignment,
    NetworkDataset, SelectionState, FilteredView, validate_hop_bound
)
from .events import AuditEventType, AuditLogEntry

__all__ = [
    'ErrorCode', 'Error', 'Result', 'RelationshipKind', 'LoadState',
    'Node', 'RawEdge', 'ResolvedLink', 'GraphIndex', 'ClusterAssignment',
    'NetworkDataset', 'SelectionState', 'FilteredView', 'validate_hop_bound',
    'AuditEventType', 'AuditLogEntry',
]
