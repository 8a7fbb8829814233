"""
Schema Validation

Validates a raw document against the bundled JSON Schema before it is
loaded. Every problem is reported as a (path, message) pair; nothing is
raised for invalid input.
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from jsonschema import Draft7Validator

logger = logging.getLogger(__name__)

SCHEMA_FILE = Path(__file__).with_name("schema.json")

ROOT_PATH = "(root)"


@dataclass(frozen=True)
class ValidationIssue:
    """One schema violation: a JSON-pointer style path and a message."""
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"

    def to_dict(self) -> dict:
        return {'path': self.path, 'message': self.message}


def load_schema(schema_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the document schema (the bundled one by default)."""
    with open(schema_path or SCHEMA_FILE, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _pointer(parts) -> str:
    if not parts:
        return ROOT_PATH
    return "/" + "/".join(str(part) for part in parts)


def validate_document(
    data: Any,
    schema: Optional[Dict[str, Any]] = None,
) -> Tuple[ValidationIssue, ...]:
    """
    Validate a raw document.

    Returns the issues sorted by path, then message; an empty tuple means
    the document is valid.
    """
    validator = Draft7Validator(schema if schema is not None else load_schema())
    issues = sorted(
        {
            ValidationIssue(path=_pointer(error.absolute_path), message=error.message)
            for error in validator.iter_errors(data)
        },
        key=lambda issue: (issue.path, issue.message),
    )

    for issue in issues:
        logger.debug("schema violation %s", issue)
    return tuple(issues)
