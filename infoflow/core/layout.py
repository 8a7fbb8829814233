"""
Tick Grouping & Position Resolver
=================================

Places every timeline element in a lane and orders the result by tick.

MAPPING (total, never raises):
==============================
- Event   -> EVENT_LANE, index of its system in event_systems, else 0
- Actor   -> ACTOR_LANE, index of its role in actor_roles, else 0
- Command / StateView -> CENTER, index 0; simultaneous centre elements
  stack in timeline order

Tick grouping is re-derived by each consumer through group_by_tick();
nothing here is cached.
"""

from __future__ import annotations
import logging
from itertools import groupby
from typing import Iterable, Optional, Sequence, Tuple

from ..config import LayoutConfig
from ..contracts.base import DEFAULT_LANE
from ..contracts.timeline import Actor, Event, TimelineElement, sort_by_tick
from ..contracts.views import LaneConfig, LanePosition, LayoutItem, LayoutModel, TickGroup
from .lanes import build_lane_config

logger = logging.getLogger(__name__)


def element_position(element: TimelineElement) -> LanePosition:
    """Lane group of an element."""
    if isinstance(element, Event):
        return LanePosition.EVENT_LANE
    if isinstance(element, Actor):
        return LanePosition.ACTOR_LANE
    return LanePosition.CENTER


def _index_or_zero(lanes: Tuple[str, ...], tag: Optional[str]) -> int:
    # Tags missing from the config (e.g. after external filtering) land in lane 0
    try:
        return lanes.index(tag or DEFAULT_LANE)
    except ValueError:
        return 0


def element_lane_index(element: TimelineElement, lane_config: LaneConfig) -> int:
    """Lane index of an element within its position group."""
    if isinstance(element, Event):
        return _index_or_zero(lane_config.event_systems, element.system)
    if isinstance(element, Actor):
        return _index_or_zero(lane_config.actor_roles, element.role)
    return 0


def build_layout_model(
    timeline: Iterable[TimelineElement],
    lane_config: Optional[LaneConfig] = None,
    config: Optional[LayoutConfig] = None,
) -> LayoutModel:
    """
    Build the layout model.

    Items are stable-sorted by tick, so ties keep document order.
    """
    elements = tuple(timeline)
    lane_config = lane_config or build_lane_config(elements, config)

    items = tuple(
        LayoutItem(
            element=element,
            position=element_position(element),
            lane_index=element_lane_index(element, lane_config),
        )
        for element in sort_by_tick(elements)
    )
    logger.debug("layout: %d items", len(items))
    return LayoutModel(items=items, lane_config=lane_config)


def spacing_for_distance(distance: int, tick_unit: int = 10) -> int:
    """Extra spacer rows a renderer inserts for a gap of `distance` ticks."""
    return max(0, distance // tick_unit - 1)


def group_by_tick(
    items: Sequence[LayoutItem],
    config: Optional[LayoutConfig] = None,
) -> Tuple[TickGroup, ...]:
    """
    Group layout items by tick, in tick order.

    Expects items as produced by build_layout_model (already tick-ordered);
    unordered input is re-sorted stably first.
    """
    config = config or LayoutConfig()
    ordered = sorted(items, key=lambda item: item.tick)

    grouped = [
        (tick, tuple(group))
        for tick, group in groupby(ordered, key=lambda item: item.tick)
    ]

    groups = []
    for index, (tick, group_items) in enumerate(grouped):
        spacing = 0
        if index + 1 < len(grouped):
            spacing = spacing_for_distance(grouped[index + 1][0] - tick, config.spacing_tick_unit)
        groups.append(TickGroup(tick=tick, items=group_items, spacing_after=spacing))
    return tuple(groups)


def centre_stack(group: TickGroup) -> Tuple[LayoutItem, ...]:
    """Centre-lane items of one tick, in stacking order."""
    return tuple(item for item in group.items if item.position is LanePosition.CENTER)
