"""
Slice Deduplication & Scenario Synthesis Engine
===============================================

Collapses repeated command and state view names into one slice per
(type, name), merges their cross references and synthesizes a worked
example from raw timeline order.

PIPELINE:
=========
1. Group commands and state views by (type, name) in first-seen tick order
2. State views: one (given, then) step per occurrence, the given being the
   last source event strictly after the previous occurrence
3. Commands: context rows for events between occurrences, then one row per
   occurrence with the events produced by exactly that occurrence
4. Author scenarios are appended after the synthesized one
5. Attachments are concatenated in occurrence order
6. Actors and produced events are resolved through the cross-reference index

DETERMINISTIC:
==============
No randomness, no wall-clock input, no set iteration in output order.
Identical (timeline, specifications) input gives an identical slice list.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import SliceConfig
from ..contracts.base import ElementType
from ..contracts.timeline import (
    Actor, Command, CommandInvocation, Event, EventReference, ProjectionStep,
    RowKind, Scenario, Specification, StateTimelineScenario, StateView,
    TimelineDocument, TimelineScenario, TimelineScenarioRow, sort_by_tick,
)
from ..contracts.views import (
    CommandOccurrence, EventRef, GroupedActor, Slice, SliceExample, SliceModel,
    StateOccurrence,
)
from .topology import CrossReferenceIndex

logger = logging.getLogger(__name__)


# =============================================================================
# GROUPING
# =============================================================================

def group_occurrences(document: TimelineDocument) -> Dict[Tuple[ElementType, str], List]:
    """
    Group commands and state views by (type, name).

    Groups appear in first-seen tick order; occurrences within a group are
    in ascending tick order (ties keep document order).
    """
    centre = sort_by_tick(
        el for el in document.timeline if isinstance(el, (Command, StateView))
    )
    groups: Dict[Tuple[ElementType, str], List] = {}
    for element in centre:
        groups.setdefault((element.element_type, element.name), []).append(element)
    return groups


def _unique(names: Iterable[str]) -> Tuple[str, ...]:
    seen = []
    for name in names:
        if name not in seen:
            seen.append(name)
    return tuple(seen)


def _event_refs(names: Sequence[str], events: Sequence[Event]) -> Tuple[EventRef, ...]:
    """One EventRef per name with the sorted ticks of the given events."""
    refs = []
    for name in names:
        matching = [evt for evt in events if evt.name == name]
        system = next((evt.system for evt in matching if evt.system), None)
        refs.append(EventRef(
            name=name,
            ticks=tuple(sorted(evt.tick for evt in matching)),
            system=system,
        ))
    return tuple(refs)


def _first_example(occurrences: Sequence) -> Any:
    return next((occ.example for occ in occurrences if occ.example is not None), None)


# =============================================================================
# SYNTHESIS
# =============================================================================

def synthesize_state_scenario(
    occurrences: Sequence[StateView],
    sourced_from: Sequence[str],
    events: Sequence[Event],
    config: SliceConfig,
) -> StateTimelineScenario:
    """
    One step per state view occurrence.

    The given event is the last event (in tick order) strictly between the
    previous occurrence's tick (0 for the first) and this occurrence's
    tick whose name is one of the view's sources. Without one, the step
    starts from the initial sentinel and carries no data.
    """
    steps = []
    previous_tick = 0
    for occurrence in occurrences:
        given = EventReference(event=config.initial_event_name)
        for evt in events:
            if previous_tick < evt.tick < occurrence.tick and evt.name in sourced_from:
                given = EventReference(event=evt.name, data=evt.example)
        steps.append(ProjectionStep(given=given, then=occurrence.example))
        previous_tick = occurrence.tick
    return StateTimelineScenario(name=config.timeline_scenario_name, steps=tuple(steps))


def synthesize_command_scenario(
    occurrences: Sequence[CommandOccurrence],
    events: Sequence[Event],
    config: SliceConfig,
) -> TimelineScenario:
    """
    Trace of every command occurrence with the events around it.

    Events strictly between the window end and the next occurrence become
    an events-only context row. The window end advances past each
    occurrence and the events it produced, so no event is attributed twice.
    """
    rows = []
    window_end = 0
    for occurrence in occurrences:
        context = [evt for evt in events if window_end < evt.tick < occurrence.tick]
        if context:
            rows.append(TimelineScenarioRow(
                kind=RowKind.EVENTS_ONLY,
                events=tuple(EventReference(event=evt.name, data=evt.example) for evt in context),
            ))

        # Timeline commands carry no failure marker; only author scenarios do
        rows.append(TimelineScenarioRow(
            kind=RowKind.COMMAND,
            command=CommandInvocation(name=occurrence.command.name, data=occurrence.command.example),
            produced_events=tuple(
                EventReference(event=evt.name, data=evt.example)
                for evt in occurrence.produced_events
            ),
        ))

        produced_ticks = [evt.tick for evt in occurrence.produced_events]
        window_end = max([window_end, occurrence.tick] + produced_ticks)
    return TimelineScenario(name=config.timeline_scenario_name, rows=tuple(rows))


def _author_scenarios(
    occurrences: Sequence,
    specification: Optional[Specification],
) -> Tuple[Scenario, ...]:
    """Inline scenarios in occurrence order, then the specification's, as authored."""
    scenarios: List[Scenario] = []
    for occurrence in occurrences:
        scenarios.extend(occurrence.scenarios)
    if specification is not None:
        scenarios.extend(specification.scenarios)
    return tuple(scenarios)


# =============================================================================
# SLICE BUILDERS
# =============================================================================

def build_state_slice(
    occurrences: Sequence[StateView],
    events: Sequence[Event],
    index: CrossReferenceIndex,
    specification: Optional[Specification],
    config: SliceConfig,
) -> Slice:
    name = occurrences[0].name
    sourced_from = _unique(src for occ in occurrences for src in occ.sourced_from)
    author = _author_scenarios(occurrences, specification)

    return Slice(
        name=name,
        type=ElementType.STATE,
        ticks=tuple(occ.tick for occ in occurrences),
        example=_first_example(occurrences),
        attachments=tuple(att for occ in occurrences for att in occ.attachments),
        sourced_from=_event_refs(sourced_from, events),
        state_occurrences=tuple(StateOccurrence(tick=occ.tick, state=occ) for occ in occurrences),
        scenarios=(synthesize_state_scenario(occurrences, sourced_from, events, config),) + author,
        author_scenario_count=len(author),
        read_by=index.reading_actors(name),
    )


def build_command_slice(
    occurrences: Sequence[Command],
    events: Sequence[Event],
    index: CrossReferenceIndex,
    specification: Optional[Specification],
    config: SliceConfig,
) -> Slice:
    name = occurrences[0].name
    command_occurrences = tuple(
        CommandOccurrence(tick=cmd.tick, command=cmd, produced_events=index.produced_events(cmd))
        for cmd in occurrences
    )
    produced = [evt for occ in command_occurrences for evt in occ.produced_events]
    author = _author_scenarios(occurrences, specification)

    return Slice(
        name=name,
        type=ElementType.COMMAND,
        ticks=tuple(cmd.tick for cmd in occurrences),
        example=_first_example(occurrences),
        attachments=tuple(att for cmd in occurrences for att in cmd.attachments),
        produces=_event_refs(_unique(evt.name for evt in produced), produced),
        command_occurrences=command_occurrences,
        scenarios=(synthesize_command_scenario(command_occurrences, events, config),) + author,
        author_scenario_count=len(author),
        triggered_by=index.triggering_actors(name),
    )


def build_slice_model(
    document: TimelineDocument,
    config: Optional[SliceConfig] = None,
    index: Optional[CrossReferenceIndex] = None,
) -> SliceModel:
    """
    Build the slice model from a loaded document.

    A cross-reference index built over the same timeline may be passed in
    to share it with other views; otherwise one is built here.
    """
    config = config or SliceConfig()
    index = index or CrossReferenceIndex(document.timeline)
    events = sort_by_tick(document.events)

    specifications: Dict[Tuple[ElementType, str], Specification] = {}
    for spec in document.specifications:
        specifications.setdefault((spec.type, spec.name), spec)

    slices = []
    for (element_type, name), occurrences in group_occurrences(document).items():
        specification = specifications.pop((element_type, name), None)
        if element_type is ElementType.STATE:
            slices.append(build_state_slice(occurrences, events, index, specification, config))
        else:
            slices.append(build_command_slice(occurrences, events, index, specification, config))

    for element_type, name in specifications:
        logger.warning("specification %s:%s matches no slice", element_type.value, name)

    logger.debug("slices: %d built from %d elements", len(slices), len(document.timeline))
    return SliceModel(
        slices=tuple(slices),
        actors=document.actors,
        external_events=tuple(evt for evt in events if evt.external_source),
    )


# =============================================================================
# ADDRESSING HELPERS
# =============================================================================

def slice_key(slice_: Slice) -> str:
    """Unique key of a slice: "type:name"."""
    return slice_.key


def find_slice(model: SliceModel, element_type: ElementType, name: str) -> Optional[Slice]:
    """Look up a slice by its (type, name) identity."""
    return next(
        (s for s in model.slices if s.type is element_type and s.name == name),
        None,
    )


def scenario_at(slice_: Slice, position: int) -> Optional[Scenario]:
    """Scenario by index; None for an index that no longer exists."""
    if 0 <= position < len(slice_.scenarios):
        return slice_.scenarios[position]
    return None


def slice_examples(slice_: Slice) -> Tuple[SliceExample, ...]:
    """Example payloads of every occurrence that has one, with its tick."""
    if slice_.type is ElementType.STATE:
        sources = [(occ.tick, occ.state.example) for occ in slice_.state_occurrences]
    else:
        sources = [(occ.tick, occ.command.example) for occ in slice_.command_occurrences]
    return tuple(SliceExample(tick=tick, data=data) for tick, data in sources if data is not None)


def group_actors_by_name(actors: Iterable[Actor]) -> Tuple[GroupedActor, ...]:
    """Group actors by name in first-seen order; the first occurrence sets the role."""
    grouped: Dict[str, Tuple[List[int], Optional[str]]] = {}
    for actor in actors:
        if actor.name not in grouped:
            grouped[actor.name] = ([], actor.role)
        grouped[actor.name][0].append(actor.tick)
    return tuple(
        GroupedActor(name=name, ticks=tuple(ticks), role=role)
        for name, (ticks, role) in grouped.items()
    )
