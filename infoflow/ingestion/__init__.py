"""
Ingestion Layer

RESPONSIBILITY: Turn a raw information-flow document into contracts
ALLOWED INPUTS: Parsed JSON values, document files
OUTPUTS: TimelineDocument, ValidationIssue list, Result with explicit Error

WHAT THIS LAYER MUST NOT DO:
============================
- Derive lanes, layouts or slices
- Resolve references between elements
- Interpret example payloads

BOUNDARY ENFORCEMENT:
=====================
The ONLY shared dependency is the contracts module.
"""

from .validation import ValidationIssue, validate_document, load_schema, SCHEMA_FILE
from .loader import (
    load_document, load_document_file, read_document_file, parse_element, parse_specification,
    parse_command_scenario, parse_state_scenario,
)

__all__ = [
    'ValidationIssue',
    'validate_document',
    'load_schema',
    'SCHEMA_FILE',
    'load_document',
    'load_document_file',
    'read_document_file',
    'parse_element',
    'parse_specification',
    'parse_command_scenario',
    'parse_state_scenario',
]
