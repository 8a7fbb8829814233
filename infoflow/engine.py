"""
Engine Orchestration Module

Single canonical entry point for every renderer and exporter: one pure
function from (timeline, specifications) to the layout and slice models.

DESIGN PRINCIPLES:
==================
1. Renderers never re-derive lanes, positions or slices themselves
2. Every call recomputes from the given snapshot; nothing is cached
3. The input document is never mutated, so independent views may be
   computed concurrently over the same snapshot without coordination
4. Dangling references are reported, never raised
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import EngineConfig
from .contracts.timeline import TimelineDocument
from .contracts.views import (
    DanglingReference, LaneConfig, LayoutModel, SliceModel, SummaryModel, TickGroup,
)
from .core.lanes import build_lane_config
from .core.layout import build_layout_model, group_by_tick
from .core.slices import build_slice_model
from .core.summary import build_summary_model
from .core.topology import CrossReferenceIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimelineViews:
    """Everything derived from one document snapshot."""
    lane_config: LaneConfig
    layout: LayoutModel
    slices: SliceModel
    summary: SummaryModel
    tick_groups: Tuple[TickGroup, ...] = ()
    dangling_references: Tuple[DanglingReference, ...] = ()

    def to_dict(self) -> dict:
        return {
            'layout': self.layout.to_dict(),
            'slices': self.slices.to_dict(),
            'summary': self.summary.to_dict(),
            'danglingReferences': [ref.to_dict() for ref in self.dangling_references],
        }


class InformationFlowEngine:
    """
    Derivation engine for information-flow documents.

    Holds configuration only; every method is a pure function of its
    document argument.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self._config = config or EngineConfig()

    @property
    def config(self) -> EngineConfig:
        return self._config

    def lane_config(self, document: TimelineDocument) -> LaneConfig:
        return build_lane_config(document.timeline, self._config.layout)

    def layout(self, document: TimelineDocument) -> LayoutModel:
        return build_layout_model(document.timeline, self.lane_config(document))

    def tick_groups(self, document: TimelineDocument) -> Tuple[TickGroup, ...]:
        return group_by_tick(self.layout(document).items, self._config.layout)

    def slices(self, document: TimelineDocument) -> SliceModel:
        return build_slice_model(document, self._config.slices)

    def summary(self, document: TimelineDocument) -> SummaryModel:
        return build_summary_model(document.timeline)

    def cross_references(self, document: TimelineDocument) -> CrossReferenceIndex:
        return CrossReferenceIndex(document.timeline)

    def compute(self, document: TimelineDocument) -> TimelineViews:
        """Derive every view model from one snapshot."""
        index = CrossReferenceIndex(document.timeline)
        lane_config = self.lane_config(document)
        dangling = index.unresolved_references()
        if dangling:
            logger.info("%s: %d unresolved reference(s)", document.name or "(unnamed)", len(dangling))

        layout = build_layout_model(document.timeline, lane_config)
        return TimelineViews(
            lane_config=lane_config,
            layout=layout,
            slices=build_slice_model(document, self._config.slices, index),
            summary=build_summary_model(document.timeline),
            tick_groups=group_by_tick(layout.items, self._config.layout),
            dangling_references=dangling,
        )


def compute_views(
    document: TimelineDocument,
    config: Optional[EngineConfig] = None,
) -> TimelineViews:
    """Convenience wrapper: InformationFlowEngine(config).compute(document)."""
    return InformationFlowEngine(config).compute(document)
