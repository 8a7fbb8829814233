"""
View Model Contracts

Read-only outputs of the derivation engine. Every renderer (interactive
UI, terminal text, document exporters) consumes these and nothing else.

DETERMINISTIC:
==============
Same document = identical view models. No wall-clock values, no random
identifiers, no dict-order dependence beyond first-seen document order.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple
from enum import Enum

from .base import ElementType
from .timeline import (
    Actor, Attachment, Command, Event, Scenario, StateView, TimelineElement,
)


# =============================================================================
# LAYOUT MODEL
# =============================================================================

class LanePosition(Enum):
    """Lane group of an element: events left, commands/views centre, actors right."""
    EVENT_LANE = "event-lane"
    CENTER = "center"
    ACTOR_LANE = "actor-lane"


@dataclass(frozen=True)
class LaneConfig:
    """
    Ordered swimlanes.

    Lane index directly determines column position in every renderer,
    so the ordering of both tuples is part of the output contract.
    """
    event_systems: Tuple[str, ...]
    actor_roles: Tuple[str, ...]
    lane_width: int = 24

    @property
    def event_lane_count(self) -> int:
        return len(self.event_systems)

    @property
    def actor_lane_count(self) -> int:
        return len(self.actor_roles)

    @property
    def total_lanes(self) -> int:
        # +1 for the centre lane
        return self.event_lane_count + 1 + self.actor_lane_count

    def to_dict(self) -> dict:
        return {
            'eventSystems': list(self.event_systems),
            'actorRoles': list(self.actor_roles),
            'eventLaneCount': self.event_lane_count,
            'actorLaneCount': self.actor_lane_count,
            'totalLanes': self.total_lanes,
            'laneWidth': self.lane_width,
        }


@dataclass(frozen=True)
class LayoutItem:
    """An element placed in a lane."""
    element: TimelineElement
    position: LanePosition
    lane_index: int

    @property
    def tick(self) -> int:
        return self.element.tick

    def to_dict(self) -> dict:
        return {
            'element': self.element.to_dict(),
            'position': self.position.value,
            'laneIndex': self.lane_index,
        }


@dataclass(frozen=True)
class TickGroup:
    """All items sharing one tick, in timeline order."""
    tick: int
    items: Tuple[LayoutItem, ...]
    spacing_after: int = 0

    def to_dict(self) -> dict:
        return {
            'tick': self.tick,
            'items': [item.to_dict() for item in self.items],
            'spacingAfter': self.spacing_after,
        }


@dataclass(frozen=True)
class LayoutModel:
    """Positioned items in tick order plus the lanes they refer to."""
    items: Tuple[LayoutItem, ...]
    lane_config: LaneConfig

    @property
    def count(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict:
        return {
            'laneConfig': self.lane_config.to_dict(),
            'items': [item.to_dict() for item in self.items],
            'count': self.count,
        }


# =============================================================================
# CROSS-REFERENCE DIAGNOSTICS
# =============================================================================

class ReferenceKind(Enum):
    """Typed links between timeline elements."""
    PRODUCED_BY = "producedBy"
    SOURCED_FROM = "sourcedFrom"
    READS_VIEW = "readsView"
    SENDS_COMMAND = "sendsCommand"


@dataclass(frozen=True)
class DanglingReference:
    """A link that names something the timeline does not contain."""
    kind: ReferenceKind
    source: str       # occurrence key of the referring element
    target: str       # the name or key that did not resolve

    def to_dict(self) -> dict:
        return {'kind': self.kind.value, 'source': self.source, 'target': self.target}


# =============================================================================
# SLICE MODEL
# =============================================================================

@dataclass(frozen=True)
class EventRef:
    """An event name with every tick it occurs at (deduplicated by name)."""
    name: str
    ticks: Tuple[int, ...]
    system: Optional[str] = None

    def to_dict(self) -> dict:
        data = {'name': self.name, 'ticks': list(self.ticks)}
        if self.system is not None:
            data['system'] = self.system
        return data


@dataclass(frozen=True)
class StateOccurrence:
    tick: int
    state: StateView

    def to_dict(self) -> dict:
        return {'tick': self.tick, 'state': self.state.to_dict()}


@dataclass(frozen=True)
class CommandOccurrence:
    tick: int
    command: Command
    produced_events: Tuple[Event, ...] = ()

    def to_dict(self) -> dict:
        return {
            'tick': self.tick,
            'command': self.command.to_dict(),
            'producedEvents': [evt.to_dict() for evt in self.produced_events],
        }


@dataclass(frozen=True)
class Slice:
    """
    Deduplicated documentation unit for one named command or state view.

    Identity is (type, name). Scenario 0 is always the synthesized one;
    author scenarios follow in authored order, so a scenario index stays a
    stable address across re-renders of unchanged input.
    """
    name: str
    type: ElementType
    ticks: Tuple[int, ...]
    example: Any = field(default=None, hash=False)
    attachments: Tuple[Attachment, ...] = ()
    sourced_from: Tuple[EventRef, ...] = ()
    state_occurrences: Tuple[StateOccurrence, ...] = ()
    produces: Tuple[EventRef, ...] = ()
    command_occurrences: Tuple[CommandOccurrence, ...] = ()
    scenarios: Tuple[Scenario, ...] = ()
    author_scenario_count: int = 0
    read_by: Tuple[Actor, ...] = ()
    triggered_by: Tuple[Actor, ...] = ()

    @property
    def key(self) -> str:
        return f"{self.type.value}:{self.name}"

    def to_dict(self) -> dict:
        data = {
            'name': self.name,
            'type': self.type.value,
            'ticks': list(self.ticks),
        }
        if self.example is not None:
            data['example'] = self.example
        data.update({
            'attachments': [a.to_dict() for a in self.attachments],
            'sourcedFrom': [ref.to_dict() for ref in self.sourced_from],
            'stateOccurrences': [occ.to_dict() for occ in self.state_occurrences],
            'produces': [ref.to_dict() for ref in self.produces],
            'commandOccurrences': [occ.to_dict() for occ in self.command_occurrences],
            'scenarios': [s.to_dict() for s in self.scenarios],
            'specScenarioCount': self.author_scenario_count,
            'readBy': [actor.to_dict() for actor in self.read_by],
            'triggeredBy': [actor.to_dict() for actor in self.triggered_by],
        })
        return data


@dataclass(frozen=True)
class SliceModel:
    """All slices in first-seen order, plus the actors and external events."""
    slices: Tuple[Slice, ...]
    actors: Tuple[Actor, ...] = ()
    external_events: Tuple[Event, ...] = ()

    def to_dict(self) -> dict:
        return {
            'slices': [s.to_dict() for s in self.slices],
            'actors': [a.to_dict() for a in self.actors],
            'externalEvents': [e.to_dict() for e in self.external_events],
        }


@dataclass(frozen=True)
class SliceExample:
    """One example payload of a slice, with the tick it was authored at."""
    tick: int
    data: Any = field(default=None, hash=False)


@dataclass(frozen=True)
class GroupedActor:
    """An actor name with all its ticks and its (first-seen) role."""
    name: str
    ticks: Tuple[int, ...]
    role: Optional[str] = None


# =============================================================================
# SUMMARY (TABLE) MODEL
# =============================================================================

@dataclass(frozen=True)
class SummaryItem:
    """An element name with its sorted ticks and occurrence count."""
    name: str
    ticks: Tuple[int, ...]
    sourced_from: Tuple[str, ...] = ()

    @property
    def count(self) -> int:
        return len(self.ticks)

    def to_dict(self) -> dict:
        return {'name': self.name, 'ticks': list(self.ticks), 'count': self.count}


@dataclass(frozen=True)
class SummaryModel:
    events: Tuple[SummaryItem, ...] = ()
    states: Tuple[SummaryItem, ...] = ()
    commands: Tuple[SummaryItem, ...] = ()
    actors: Tuple[SummaryItem, ...] = ()
    total_events: int = 0
    total_states: int = 0
    total_commands: int = 0
    total_actors: int = 0

    def to_dict(self) -> dict:
        states = []
        for item in self.states:
            entry = item.to_dict()
            entry['sourcedFrom'] = list(item.sourced_from)
            states.append(entry)
        return {
            'events': [item.to_dict() for item in self.events],
            'states': states,
            'commands': [item.to_dict() for item in self.commands],
            'actors': [item.to_dict() for item in self.actors],
            'totalEvents': self.total_events,
            'totalStates': self.total_states,
            'totalCommands': self.total_commands,
            'totalActors': self.total_actors,
        }
