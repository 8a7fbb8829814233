"""
Information Flow Timeline Engine

Derives the layout and slice view models of an information-flow
(event-modelling) document. Renderers and exporters consume these models
and never re-derive lanes, positions or slices themselves.

LAYER STRUCTURE:
================

1. CONTRACTS (contracts/)
   - Responsibility: Immutable document and view-model types
   - Outputs: TimelineDocument, LaneConfig, LayoutModel, SliceModel
   - MUST NOT: Contain behaviour beyond serialization to dicts

2. INGESTION LAYER (ingestion/)
   - Responsibility: Schema validation and loading of raw documents
   - Allowed inputs: Parsed JSON values, document files
   - Outputs: TimelineDocument, ValidationIssue, Result with explicit Error
   - MUST NOT: Derive views or resolve references

3. CORE DERIVATION ENGINE (core/)
   - Responsibility: Lanes, positions, tick groups, cross references,
     slice deduplication and scenario synthesis, summary
   - Allowed inputs: TimelineDocument
   - Outputs: View models (pure functions, no state between calls)
   - MUST NOT: Read files, fail on dangling references

4. OUTPUT (domain/serialization.py, cli.py)
   - Responsibility: Deterministic JSON export and the command line
   - MUST NOT: Alter the derived models

CONSTRAINTS ENFORCED:
=====================
- Immutability-first: All data structures are frozen/immutable
- Deterministic: Identical documents always produce identical views
- Lenient links: Unresolved references are reported, never raised
- Explicit errors: Loading failures are typed Error values
"""

from .config import EngineConfig, LayoutConfig, SliceConfig
from .engine import InformationFlowEngine, TimelineViews, compute_views
from .ingestion import load_document, load_document_file, validate_document

__version__ = "0.1.0"

__all__ = [
    'EngineConfig',
    'LayoutConfig',
    'SliceConfig',
    'InformationFlowEngine',
    'TimelineViews',
    'compute_views',
    'load_document',
    'load_document_file',
    'validate_document',
]
