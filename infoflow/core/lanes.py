"""
Lane Assignment Engine
======================

Computes the ordered event-system and actor-role swimlanes.

Layout (dynamic lanes):
    [System B][System A][Default] | [Commands/States] | [Default][Role A][Role B]

ORDERING CONTRACT:
==================
- Event lanes: named systems sorted descending, outermost first; the
  untagged lane is innermost (last).
- Actor lanes: untagged lane innermost (first); named roles sorted
  ascending, outermost last.
- The untagged lane exists when an untagged element exists, or when no
  named lane exists at all, so each side always has at least one lane.

Lane index is a column position downstream; this ordering must be
reproducible bit for bit.
"""

from __future__ import annotations
import logging
from typing import Iterable, Optional, Tuple

from ..config import LayoutConfig
from ..contracts.base import DEFAULT_LANE
from ..contracts.timeline import Actor, Event, TimelineElement
from ..contracts.views import LaneConfig

logger = logging.getLogger(__name__)


def _collect_tags(tags: Iterable[Optional[str]]) -> Tuple[set, bool]:
    """Split lane tags into the named set and an 'any untagged' flag."""
    named = set()
    has_untagged = False
    for tag in tags:
        if tag:
            named.add(tag)
        else:
            has_untagged = True
    return named, has_untagged


def event_lanes(events: Iterable[Event]) -> Tuple[str, ...]:
    """Event system lanes: named descending, untagged appended."""
    named, has_untagged = _collect_tags(evt.system for evt in events)
    systems = tuple(sorted(named, reverse=True))
    if has_untagged or not systems:
        systems = systems + (DEFAULT_LANE,)
    return systems


def actor_lanes(actors: Iterable[Actor]) -> Tuple[str, ...]:
    """Actor role lanes: untagged prepended, named ascending."""
    named, has_untagged = _collect_tags(actor.role for actor in actors)
    roles = tuple(sorted(named))
    if has_untagged or not roles:
        roles = (DEFAULT_LANE,) + roles
    return roles


def build_lane_config(
    timeline: Iterable[TimelineElement],
    config: Optional[LayoutConfig] = None,
) -> LaneConfig:
    """Build the lane configuration for a timeline."""
    config = config or LayoutConfig()
    elements = tuple(timeline)

    lane_config = LaneConfig(
        event_systems=event_lanes(el for el in elements if isinstance(el, Event)),
        actor_roles=actor_lanes(el for el in elements if isinstance(el, Actor)),
        lane_width=config.lane_width,
    )
    logger.debug(
        "lanes: %d event, %d actor",
        lane_config.event_lane_count, lane_config.actor_lane_count,
    )
    return lane_config
