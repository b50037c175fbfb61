"""
Base Contracts and Shared Types

These are the foundational types used across all layers.
All types here are IMMUTABLE and represent pure data.
No behavior, no side effects, no dependencies.

BOUNDARY ENFORCEMENT:
=====================
- This module is READ-ONLY from all layers
- Layers may import types but MUST NOT modify this module
- All types are frozen dataclasses for immutability guarantee
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple
from enum import Enum, auto


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for deterministic error handling.
    No silent fallbacks - every error state is enumerated.
    """
    # Load errors (fatal for the load step)
    MALFORMED_DATASET = auto()
    DATASET_UNREADABLE = auto()

    # Data-integrity errors (edge rejected, load continues)
    UNRESOLVED_EDGE_ENDPOINT = auto()
    UNKNOWN_RELATIONSHIP_KIND = auto()

    # Configuration errors (fatal for the load step)
    INVALID_CONFIGURATION = auto()


@dataclass(frozen=True)
class Error:
    """
    Immutable error representation with full context.
    Errors are data, not exceptions - they can be stored and queried.
    """
    code: ErrorCode
    message: str
    timestamp: datetime
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    @staticmethod
    def create(code: ErrorCode, message: str, **context: str) -> Error:
        """Build an error stamped with the current UTC time."""
        return Error(
            code=code,
            message=message,
            timestamp=datetime.now(timezone.utc),
            context=tuple(sorted((k, str(v)) for k, v in context.items()))
        )

    def with_context(self, key: str, value: str) -> Error:
        """Return new Error with additional context (immutable)."""
        return Error(
            code=self.code,
            message=self.message,
            timestamp=self.timestamp,
            context=self.context + ((key, value),)
        )

    def context_value(self, key: str) -> Optional[str]:
        for k, v in self.context:
            if k == key:
                return v
        return None


@dataclass(frozen=True)
class Result:
    """
    Generic result type for operations that can fail.
    Either contains a value OR an error, never both.
    """
    value: Optional[object] = None
    error: Optional[Error] = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @staticmethod
    def success(value: object) -> Result:
        return Result(value=value, error=None)

    @staticmethod
    def failure(error: Error) -> Result:
        return Result(value=None, error=error)


# =============================================================================
# RELATIONSHIP KINDS (Closed set, extensible by adding members)
# =============================================================================

class RelationshipKind(Enum):
    """
    Typed relationship between two people.

    Algorithms never enumerate members; adding a kind here needs no
    change in the index, topology or reachability code.
    """
    PARENT_CHILD = "PARENT_CHILD"
    POTENTIAL_AFFILIATION = "POTENTIAL_AFFILIATION"

    @classmethod
    def parse(cls, raw: str) -> Optional[RelationshipKind]:
        """Map a dataset `type` string to a kind, None if unknown."""
        try:
            return cls(raw)
        except ValueError:
            return None


# =============================================================================
# LOAD STATES (Explicit, no implicit transitions)
# =============================================================================

class LoadState(Enum):
    """
    One-shot dataset load lifecycle.

    LOADING -> READY on success, LOADING -> FAILED on a fatal load error.
    FAILED is terminal for that load; there is no automatic retry.
    """
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"
