"""
Contracts Module

This module defines the immutable data types exchanged between layers:
the loaded document (timeline.py), the derived view models (views.py) and
the shared error/result types (base.py). No layer may import
implementation details from another layer.

DESIGN PRINCIPLES:
==================
1. All contract types are immutable (frozen dataclasses, tuples)
2. Errors are values at the ingestion boundary
3. Optional document fields are explicit None / empty tuple
4. Nothing here depends on wall-clock time
"""

from .base import (
    ErrorCode,
    Error,
    Result,
    ElementType,
    DEFAULT_LANE,
    INITIAL_EVENT,
    occurrence_key,
)

from .timeline import (
    EventReference,
    CommandOutcome,
    CommandScenario,
    StateViewScenario,
    ProjectionStep,
    StateTimelineScenario,
    RowKind,
    CommandInvocation,
    TimelineScenarioRow,
    TimelineScenario,
    Scenario,
    Attachment,
    TimelineElement,
    Event,
    StateView,
    Command,
    Actor,
    Specification,
    TimelineDocument,
    sort_by_tick,
)

from .views import (
    LanePosition,
    LaneConfig,
    LayoutItem,
    TickGroup,
    LayoutModel,
    ReferenceKind,
    DanglingReference,
    EventRef,
    StateOccurrence,
    CommandOccurrence,
    Slice,
    SliceModel,
    SliceExample,
    GroupedActor,
    SummaryItem,
    SummaryModel,
)

__all__ = [
    # Base
    'ErrorCode',
    'Error',
    'Result',
    'ElementType',
    'DEFAULT_LANE',
    'INITIAL_EVENT',
    'occurrence_key',
    # Scenarios
    'EventReference',
    'CommandOutcome',
    'CommandScenario',
    'StateViewScenario',
    'ProjectionStep',
    'StateTimelineScenario',
    'RowKind',
    'CommandInvocation',
    'TimelineScenarioRow',
    'TimelineScenario',
    'Scenario',
    'Attachment',
    # Timeline
    'TimelineElement',
    'Event',
    'StateView',
    'Command',
    'Actor',
    'Specification',
    'TimelineDocument',
    'sort_by_tick',
    # Layout
    'LanePosition',
    'LaneConfig',
    'LayoutItem',
    'TickGroup',
    'LayoutModel',
    # Cross references
    'ReferenceKind',
    'DanglingReference',
    # Slices
    'EventRef',
    'StateOccurrence',
    'CommandOccurrence',
    'Slice',
    'SliceModel',
    'SliceExample',
    'GroupedActor',
    # Summary
    'SummaryItem',
    'SummaryModel',
]
