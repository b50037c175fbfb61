"""
Jokbo Network Engine

Preprocessing and filtering engine for a genealogical relationship network
(jokbo). The dataset is loaded once; every selection change re-derives the
visible subgraph from scratch.

LAYER STRUCTURE:
================

1. INGESTION LAYER (ingestion/)
   - Responsibility: Parse and structurally validate the network document
   - Outputs: DatasetDocument (typed nodes and raw edges) or a load Error
   - MUST NOT: Resolve endpoints, build adjacency, retry

2. CORE ENGINE (core/)
   - Graph Index: identifier lookup, endpoint resolution, reciprocity
   - Topology: frozen undirected adjacency, connected-component clusters
   - Reachability: bounded multi-source BFS, induced subgraph
   - Orchestrator: selection state owner and re-filter policy
   - MUST NOT: Mutate the dataset, patch previous views, draw anything

3. OBSERVABILITY & AUDIT LAYER (observability/)
   - Responsibility: Append-only audit logs per layer, unified view
   - MUST NOT: Modify system behavior

CONSTRAINTS ENFORCED:
=====================
- Immutability-first: All data structures are frozen/immutable
- Identifier keys: No set or map relies on object identity
- Deterministic: Identical inputs always produce identical outputs
- Explicit errors: Rejected edges and failed loads are queryable data
"""

from .engine import NetworkExplorer, ExplorerConfig

__all__ = ['NetworkExplorer', 'ExplorerConfig']
