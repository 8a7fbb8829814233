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
from typing import Optional, Tuple
from enum import Enum, auto


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for the ingestion boundary.

    The derivation engine itself has no error states: dangling references
    and unknown lane tags degrade to empty links and lane 0.
    """
    # Loading errors
    SOURCE_UNREACHABLE = auto()
    MALFORMED_PAYLOAD = auto()

    # Validation errors
    SCHEMA_VIOLATION = auto()


@dataclass(frozen=True)
class Error:
    """
    Immutable error representation with full context.
    Errors are data, not exceptions - they can be stored and queried.
    """
    code: ErrorCode
    message: str
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def with_context(self, key: str, value: str) -> Error:
        """Return new Error with additional context (immutable)."""
        return Error(
            code=self.code,
            message=self.message,
            context=self.context + ((key, value),)
        )


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
# ELEMENT KINDS
# =============================================================================

class ElementType(Enum):
    """Discriminator of the timeline element union, as written in documents."""
    EVENT = "event"
    STATE = "state"
    COMMAND = "command"
    ACTOR = "actor"


# The untagged lane. Always addressable, never named.
DEFAULT_LANE = ""

# Given-event of a state view step when no source event precedes it.
INITIAL_EVENT = "(initial)"


def occurrence_key(name: str, tick: int) -> str:
    """
    Synthetic key of one command occurrence: "{name}-{tick}".

    Events link to the occurrence that produced them through this key.
    """
    return f"{name}-{tick}"
