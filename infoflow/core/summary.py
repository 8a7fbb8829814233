"""
Summary Model

Deduplicated per-type overview of a timeline: every name once, with its
sorted ticks and occurrence count, ordered by name.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Tuple

from ..contracts.timeline import Actor, Command, Event, StateView, TimelineElement
from ..contracts.views import SummaryItem, SummaryModel


def _deduplicate(items: Iterable[TimelineElement]) -> Tuple[SummaryItem, ...]:
    ticks: Dict[str, List[int]] = {}
    sources: Dict[str, Tuple[str, ...]] = {}
    for item in items:
        ticks.setdefault(item.name, []).append(item.tick)
        if isinstance(item, StateView):
            # The first occurrence's sources describe the view
            sources.setdefault(item.name, item.sourced_from)

    return tuple(
        SummaryItem(name=name, ticks=tuple(sorted(ticks[name])), sourced_from=sources.get(name, ()))
        for name in sorted(ticks)
    )


def build_summary_model(timeline: Iterable[TimelineElement]) -> SummaryModel:
    elements = tuple(timeline)
    events = [el for el in elements if isinstance(el, Event)]
    states = [el for el in elements if isinstance(el, StateView)]
    commands = [el for el in elements if isinstance(el, Command)]
    actors = [el for el in elements if isinstance(el, Actor)]

    return SummaryModel(
        events=_deduplicate(events),
        states=_deduplicate(states),
        commands=_deduplicate(commands),
        actors=_deduplicate(actors),
        total_events=len(events),
        total_states=len(states),
        total_commands=len(commands),
        total_actors=len(actors),
    )
