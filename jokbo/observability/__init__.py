"""
Observability & Audit Layer

RESPONSIBILITY: Audit logging for every layer
ALLOWED INPUTS: AuditLogEntry records from other layers
OUTPUTS: Unified audit log, audit report

WHAT THIS LAYER MUST NOT DO:
============================
- Modify system behavior
- Filter or interpret events (only record them)
- Make decisions based on logged data

BOUNDARY ENFORCEMENT:
=====================
- Entries are immutable; collectors are append-only
- Read access always returns copies
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional
import hashlib

from ..contracts.events import AuditLogEntry, AuditEventType


# =============================================================================
# LOG COLLECTORS (One per layer)
# =============================================================================

class LogCollector:
    """
    Append-only audit log owned by a single layer.

    Layers call record(); the audit collector reads copies via get_entries().
    """

    def __init__(self, layer_name: str):
        self._layer_name = layer_name
        self._entries: List[AuditLogEntry] = []
        self._sequence: int = 0

    def collect(self, entry: AuditLogEntry):
        """Collect an audit entry (append-only)."""
        self._entries.append(entry)
        self._sequence += 1

    def record(
        self,
        event_type: AuditEventType,
        action: str,
        entity_id: Optional[str] = None,
        entity_type: Optional[str] = None,
        **metadata: object
    ) -> AuditLogEntry:
        """Build an entry stamped with this layer and collect it."""
        now = datetime.now(timezone.utc)
        entry_id = hashlib.sha256(
            f"{self._layer_name}_{action}|{self._sequence}|{now.timestamp()}".encode()
        ).hexdigest()[:16]

        entry = AuditLogEntry(
            entry_id=f"audit_{entry_id}",
            event_type=event_type,
            timestamp=now,
            layer=self._layer_name,
            action=action,
            entity_id=entity_id,
            entity_type=entity_type,
            metadata=tuple((key, str(value)) for key, value in metadata.items())
        )
        self.collect(entry)
        return entry

    def get_entries(self) -> List[AuditLogEntry]:
        """Copy of every entry, oldest first."""
        return list(self._entries)


# =============================================================================
# UNIFIED AUDIT
# =============================================================================

class AuditCollector:
    """
    Merges layer logs into one read-only view.

    Entries are de-duplicated by entry_id so repeated syncs are harmless.
    """

    def __init__(self):
        self._entries: Dict[str, AuditLogEntry] = {}

    def collect_all(self, entries: Iterable[AuditLogEntry]):
        for entry in entries:
            self._entries.setdefault(entry.entry_id, entry)

    def get_unified_log(
        self,
        layers: Optional[List[str]] = None
    ) -> List[AuditLogEntry]:
        """Get unified log from all or specified layers, oldest first."""
        entries = [
            e for e in self._entries.values()
            if layers is None or e.layer in layers
        ]
        entries.sort(key=lambda e: e.timestamp)
        return entries

    def generate_audit_report(self) -> Dict:
        """Aggregate entry counts by layer and event type."""
        entries = self.get_unified_log()

        by_layer = {}
        by_type = {}
        for entry in entries:
            by_layer[entry.layer] = by_layer.get(entry.layer, 0) + 1
            by_type[entry.event_type.value] = by_type.get(entry.event_type.value, 0) + 1

        return {
            'total_entries': len(entries),
            'by_layer': by_layer,
            'by_event_type': by_type,
            'time_range': {
                'start': entries[0].timestamp.isoformat() if entries else None,
                'end': entries[-1].timestamp.isoformat() if entries else None,
            },
            'generated_at': datetime.now(timezone.utc).isoformat()
        }
