"""
Timeline Contracts

Immutable representation of an information-flow document: the authored
timeline elements, their worked-example scenarios and the optional
specification entries.

DESIGN PRINCIPLES:
==================
1. Elements are identified by (type, name, tick); names repeat across ticks
2. Example payloads are opaque - never inspected, only passed through
3. Missing optional fields are empty tuples or None, never absent
4. to_dict() emits the document's own camelCase vocabulary
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Tuple, Union
from enum import Enum

from .base import ElementType


def _compact(data: dict) -> dict:
    """Drop keys whose value is None so exports mirror the authored shape."""
    return {k: v for k, v in data.items() if v is not None}


# =============================================================================
# SCENARIO BUILDING BLOCKS
# =============================================================================

@dataclass(frozen=True)
class EventReference:
    """A reference to an event by name, with optional example data."""
    event: str
    data: Any = field(default=None, hash=False)

    def to_dict(self) -> dict:
        return _compact({'event': self.event, 'data': self.data})


@dataclass(frozen=True)
class CommandOutcome:
    """Then-part of a command scenario: produced events or a failure."""
    produces: Tuple[EventReference, ...] = ()
    fails: Optional[str] = None

    def to_dict(self) -> dict:
        if self.fails is not None:
            return {'fails': self.fails}
        return {'produces': [ref.to_dict() for ref in self.produces]}


@dataclass(frozen=True)
class CommandScenario:
    """Author-written Given/When/Then example for a command."""
    name: str
    given: Tuple[EventReference, ...] = ()
    when: Any = field(default=None, hash=False)
    then: CommandOutcome = field(default_factory=CommandOutcome)

    def to_dict(self) -> dict:
        return _compact({
            'name': self.name,
            'given': [ref.to_dict() for ref in self.given],
            'when': self.when,
            'then': self.then.to_dict(),
        })


@dataclass(frozen=True)
class StateViewScenario:
    """Author-written Given/Then example for a state view."""
    name: str
    given: Tuple[EventReference, ...] = ()
    then: Any = field(default=None, hash=False)

    def to_dict(self) -> dict:
        return _compact({
            'name': self.name,
            'given': [ref.to_dict() for ref in self.given],
            'then': self.then,
        })


@dataclass(frozen=True)
class ProjectionStep:
    """One state view occurrence: the event it was projected from and the result."""
    given: EventReference
    then: Any = field(default=None, hash=False)

    def to_dict(self) -> dict:
        return _compact({'given': self.given.to_dict(), 'then': self.then})


@dataclass(frozen=True)
class StateTimelineScenario:
    """Synthesized state view scenario: one step per occurrence, in tick order."""
    name: str
    steps: Tuple[ProjectionStep, ...] = ()

    def to_dict(self) -> dict:
        return {'name': self.name, 'steps': [step.to_dict() for step in self.steps]}


class RowKind(Enum):
    """Kinds of rows in a synthesized command trace."""
    EVENTS_ONLY = "events-only"
    COMMAND = "command"


@dataclass(frozen=True)
class CommandInvocation:
    """The command part of a trace row."""
    name: str
    data: Any = field(default=None, hash=False)

    def to_dict(self) -> dict:
        return _compact({'name': self.name, 'data': self.data})


@dataclass(frozen=True)
class TimelineScenarioRow:
    """
    One row of a synthesized command trace.

    EVENTS_ONLY rows carry context events; COMMAND rows carry the command
    payload and what that occurrence produced (or its failure).
    """
    kind: RowKind
    events: Tuple[EventReference, ...] = ()
    command: Optional[CommandInvocation] = None
    produced_events: Tuple[EventReference, ...] = ()
    fails: Optional[str] = None

    def to_dict(self) -> dict:
        if self.kind is RowKind.EVENTS_ONLY:
            return {'type': self.kind.value, 'events': [ref.to_dict() for ref in self.events]}
        return _compact({
            'type': self.kind.value,
            'command': self.command.to_dict() if self.command else None,
            'producedEvents': [ref.to_dict() for ref in self.produced_events],
            'fails': self.fails,
        })


@dataclass(frozen=True)
class TimelineScenario:
    """Synthesized command scenario built from raw timeline order."""
    name: str
    rows: Tuple[TimelineScenarioRow, ...] = ()

    def to_dict(self) -> dict:
        return {'name': self.name, 'rows': [row.to_dict() for row in self.rows]}


Scenario = Union[CommandScenario, StateViewScenario, StateTimelineScenario, TimelineScenario]


@dataclass(frozen=True)
class Attachment:
    """Supporting material for a slice (image, link, note, file)."""
    kind: str
    label: str
    path: Optional[str] = None
    url: Optional[str] = None
    content: Optional[str] = None

    def to_dict(self) -> dict:
        return _compact({
            'type': self.kind,
            'label': self.label,
            'path': self.path,
            'url': self.url,
            'content': self.content,
        })


# =============================================================================
# TIMELINE ELEMENTS
# =============================================================================

@dataclass(frozen=True)
class TimelineElement:
    """Common part of every element: a non-unique name placed at a tick."""
    element_type: ClassVar[ElementType]

    name: str
    tick: int

    def to_dict(self) -> dict:
        return {'type': self.element_type.value, 'name': self.name, 'tick': self.tick}


@dataclass(frozen=True)
class Event(TimelineElement):
    """Something that happened. Lives in an event-system lane."""
    element_type: ClassVar[ElementType] = ElementType.EVENT

    produced_by: Optional[str] = None
    external_source: Optional[str] = None
    system: Optional[str] = None
    example: Any = field(default=None, hash=False)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(_compact({
            'producedBy': self.produced_by,
            'externalSource': self.external_source,
            'system': self.system,
            'example': self.example,
        }))
        return data


@dataclass(frozen=True)
class StateView(TimelineElement):
    """Read model projected from events."""
    element_type: ClassVar[ElementType] = ElementType.STATE

    sourced_from: Tuple[str, ...] = ()
    example: Any = field(default=None, hash=False)
    scenarios: Tuple[StateViewScenario, ...] = ()
    attachments: Tuple[Attachment, ...] = ()

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['sourcedFrom'] = list(self.sourced_from)
        if self.example is not None:
            data['example'] = self.example
        if self.scenarios:
            data['scenarios'] = [s.to_dict() for s in self.scenarios]
        if self.attachments:
            data['attachments'] = [a.to_dict() for a in self.attachments]
        return data


@dataclass(frozen=True)
class Command(TimelineElement):
    """Intent sent by an actor."""
    element_type: ClassVar[ElementType] = ElementType.COMMAND

    example: Any = field(default=None, hash=False)
    scenarios: Tuple[CommandScenario, ...] = ()
    attachments: Tuple[Attachment, ...] = ()

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.example is not None:
            data['example'] = self.example
        if self.scenarios:
            data['scenarios'] = [s.to_dict() for s in self.scenarios]
        if self.attachments:
            data['attachments'] = [a.to_dict() for a in self.attachments]
        return data


@dataclass(frozen=True)
class Actor(TimelineElement):
    """Someone reading a view and sending a command. Lives in a role lane."""
    element_type: ClassVar[ElementType] = ElementType.ACTOR

    reads_view: str = ""
    sends_command: str = ""
    role: Optional[str] = None
    wireframes: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['readsView'] = self.reads_view
        data['sendsCommand'] = self.sends_command
        if self.role is not None:
            data['role'] = self.role
        if self.wireframes:
            data['wireframes'] = list(self.wireframes)
        return data


# =============================================================================
# DOCUMENT
# =============================================================================

@dataclass(frozen=True)
class Specification:
    """Author scenarios keyed by the (type, name) identity of a slice."""
    name: str
    type: ElementType
    scenarios: Tuple[Union[CommandScenario, StateViewScenario], ...] = ()

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'type': self.type.value,
            'scenarios': [s.to_dict() for s in self.scenarios],
        }


@dataclass(frozen=True)
class TimelineDocument:
    """
    The loaded, immutable document.

    The engine treats one instance as a consistent snapshot for the
    duration of a computation.
    """
    name: str
    timeline: Tuple[TimelineElement, ...] = ()
    description: Optional[str] = None
    version: Optional[str] = None
    specifications: Tuple[Specification, ...] = ()

    @property
    def events(self) -> Tuple[Event, ...]:
        return tuple(el for el in self.timeline if isinstance(el, Event))

    @property
    def state_views(self) -> Tuple[StateView, ...]:
        return tuple(el for el in self.timeline if isinstance(el, StateView))

    @property
    def commands(self) -> Tuple[Command, ...]:
        return tuple(el for el in self.timeline if isinstance(el, Command))

    @property
    def actors(self) -> Tuple[Actor, ...]:
        return tuple(el for el in self.timeline if isinstance(el, Actor))


def sort_by_tick(elements):
    """Stable tick order: ties keep document order."""
    return tuple(sorted(elements, key=lambda el: el.tick))
