"""
View Model Invariant Tests

Structural properties that must hold for any document, checked over the
fixture documents and over generated timelines.
"""

import pytest
from hypothesis import given, strategies as st
from hypothesis.strategies import composite

from infoflow.contracts import (
    Actor, Command, ElementType, Event, LanePosition, StateTimelineScenario, StateView,
    TimelineDocument, TimelineScenario, occurrence_key,
)
from infoflow.core.lanes import build_lane_config
from infoflow.domain.serialization import to_json
from infoflow.engine import compute_views

from tests.integration.fixtures import (
    actor, checkout_document, command, document, event, hotel_document, state,
)


def _sparse_document():
    """Elements missing every optional field."""
    return document(
        event("Lonely", 3),
        state("Empty", 1),
        actor("Ghost", 2),
        command("Orphan", 2),
    )


DOCUMENTS = [hotel_document, checkout_document, _sparse_document]


@pytest.fixture(params=DOCUMENTS, ids=["hotel", "checkout", "sparse"])
def views(request):
    return compute_views(request.param())


class TestLayoutInvariants:

    def test_every_element_placed_once(self, views):
        assert views.layout.count == views.summary.total_events + views.summary.total_states \
            + views.summary.total_commands + views.summary.total_actors

    def test_lane_indexes_in_range(self, views):
        lanes = views.lane_config
        for item in views.layout.items:
            if item.position is LanePosition.EVENT_LANE:
                assert 0 <= item.lane_index < lanes.event_lane_count
            elif item.position is LanePosition.ACTOR_LANE:
                assert 0 <= item.lane_index < lanes.actor_lane_count
            else:
                assert item.lane_index == 0

    def test_each_side_has_a_lane(self, views):
        assert views.lane_config.event_lane_count >= 1
        assert views.lane_config.actor_lane_count >= 1

    def test_tick_groups_cover_all_items(self, views):
        groups = views.tick_groups
        assert sum(len(group.items) for group in groups) == views.layout.count
        assert [group.tick for group in groups] == sorted({item.tick for item in views.layout.items})


class TestSliceInvariants:

    def test_slice_identity_unique(self, views):
        keys = [s.key for s in views.slices.slices]
        assert len(keys) == len(set(keys))

    def test_ticks_ascending(self, views):
        for slice_ in views.slices.slices:
            assert list(slice_.ticks) == sorted(slice_.ticks)

    def test_synthesized_scenario_first(self, views):
        for slice_ in views.slices.slices:
            expected = StateTimelineScenario if slice_.type is ElementType.STATE else TimelineScenario
            assert isinstance(slice_.scenarios[0], expected)
            assert len(slice_.scenarios) == 1 + slice_.author_scenario_count

    def test_one_step_or_command_row_per_occurrence(self, views):
        for slice_ in views.slices.slices:
            synthesized = slice_.scenarios[0]
            if slice_.type is ElementType.STATE:
                assert len(synthesized.steps) == len(slice_.ticks)
            else:
                command_rows = [row for row in synthesized.rows if row.command is not None]
                assert len(command_rows) == len(slice_.ticks)


# =============================================================================
# STRATEGIES (Generators)
# =============================================================================

NAMES = ["Alpha", "Beta", "Gamma"]
TAGS = [None, "", "A", "B", "C"]


@composite
def timeline_elements(draw):
    """Generates one element of any type with a small shared name pool."""
    kind = draw(st.sampled_from(ElementType))
    name = draw(st.sampled_from(NAMES))
    tick = draw(st.integers(min_value=0, max_value=60))

    if kind is ElementType.EVENT:
        produced_by = draw(st.one_of(
            st.none(),
            st.builds(occurrence_key, st.sampled_from(NAMES), st.integers(min_value=0, max_value=60)),
        ))
        return Event(name=name, tick=tick, produced_by=produced_by,
                     system=draw(st.sampled_from(TAGS)), example=draw(st.none() | st.integers()))
    if kind is ElementType.STATE:
        return StateView(name=name, tick=tick,
                         sourced_from=tuple(draw(st.lists(st.sampled_from(NAMES), max_size=2))))
    if kind is ElementType.COMMAND:
        return Command(name=name, tick=tick)
    return Actor(name=name, tick=tick, reads_view=draw(st.sampled_from(NAMES)),
                 sends_command=draw(st.sampled_from(NAMES)), role=draw(st.sampled_from(TAGS)))


@composite
def timeline_documents(draw):
    elements = draw(st.lists(timeline_elements(), max_size=25))
    return TimelineDocument(name="Generated", timeline=tuple(elements))


class TestGeneratedTimelines:

    @given(timeline_documents())
    def test_lane_ordering(self, doc):
        systems = build_lane_config(doc.timeline).event_systems
        named = [s for s in systems if s]
        assert named == sorted(named, reverse=True)
        assert "" not in systems[:-1]
        assert (systems[-1] == "") == (any(not e.system for e in doc.events) or not named)

        roles = build_lane_config(doc.timeline).actor_roles
        named_roles = [r for r in roles if r]
        assert named_roles == sorted(named_roles)
        assert "" not in roles[1:]

    @given(timeline_documents())
    def test_idempotent(self, doc):
        assert to_json(compute_views(doc)) == to_json(compute_views(doc))

    @given(timeline_documents())
    def test_layout_total(self, doc):
        views = compute_views(doc)
        assert views.layout.count == len(doc.timeline)

    @given(timeline_documents())
    def test_slices_cover_every_centre_name(self, doc):
        slices = compute_views(doc).slices.slices
        expected = {(el.element_type, el.name) for el in doc.commands + doc.state_views}
        assert {(s.type, s.name) for s in slices} == expected

        for slice_ in slices:
            assert list(slice_.ticks) == sorted(slice_.ticks)
            assert slice_.author_scenario_count == 0
