"""
Core Derivation Engine

RESPONSIBILITY: Derive the layout and slice view models from a document
ALLOWED INPUTS: TimelineDocument / timeline elements (contracts only)
OUTPUTS: LaneConfig, LayoutModel, SliceModel, SummaryModel

WHAT THIS LAYER MUST NOT DO:
============================
- Read files, parse JSON or validate schemas (ingestion does that)
- Mutate its input or keep state between calls
- Fail on dangling references or unknown lane tags
- Render anything
"""

from .lanes import build_lane_config, event_lanes, actor_lanes
from .layout import (
    build_layout_model, element_position, element_lane_index, group_by_tick,
    centre_stack, spacing_for_distance,
)
from .topology import CrossReferenceIndex, node_id
from .slices import (
    build_slice_model, group_occurrences, synthesize_state_scenario,
    synthesize_command_scenario, slice_key, find_slice, scenario_at,
    slice_examples, group_actors_by_name,
)
from .summary import build_summary_model

__all__ = [
    'build_lane_config',
    'event_lanes',
    'actor_lanes',
    'build_layout_model',
    'element_position',
    'element_lane_index',
    'group_by_tick',
    'centre_stack',
    'spacing_for_distance',
    'CrossReferenceIndex',
    'node_id',
    'build_slice_model',
    'group_occurrences',
    'synthesize_state_scenario',
    'synthesize_command_scenario',
    'slice_key',
    'find_slice',
    'scenario_at',
    'slice_examples',
    'group_actors_by_name',
    'build_summary_model',
]
