"""
Position Resolver and Tick Grouping Tests
"""

from infoflow.config import LayoutConfig
from infoflow.contracts import Actor, Event, LaneConfig, LanePosition
from infoflow.core.layout import (
    build_layout_model, centre_stack, element_lane_index, group_by_tick, spacing_for_distance,
)

from tests.integration.fixtures import command, document, event, hotel_document, state


def _by_name_tick(model):
    return {(item.element.name, item.tick): item for item in model.items}


class TestPositions:

    def test_hotel_positions(self):
        model = build_layout_model(hotel_document().timeline)
        items = _by_name_tick(model)

        assert items[("RoomAdded", 10)].position is LanePosition.EVENT_LANE
        assert items[("RoomAdded", 10)].lane_index == 0
        assert items[("RoomBooked", 30)].lane_index == 1
        assert items[("PaymentReceived", 40)].lane_index == 2

        assert items[("Guest", 20)].position is LanePosition.ACTOR_LANE
        assert items[("Guest", 20)].lane_index == 1
        assert items[("Clerk", 60)].lane_index == 0

        assert items[("BookRoom", 25)].position is LanePosition.CENTER
        assert items[("AvailableRooms", 15)].lane_index == 0

    def test_unknown_tag_falls_back_to_lane_zero(self):
        """A tag missing from the lane config never raises."""
        lanes = LaneConfig(event_systems=("A", ""), actor_roles=("", "a"))
        assert element_lane_index(Event(name="x", tick=1, system="Filtered"), lanes) == 0
        assert element_lane_index(Actor(name="p", tick=1, role="gone"), lanes) == 0

    def test_untagged_event_uses_default_lane_index(self):
        lanes = LaneConfig(event_systems=("B", "A", ""), actor_roles=("",))
        assert element_lane_index(Event(name="x", tick=1), lanes) == 2

    def test_items_sorted_by_tick(self):
        model = build_layout_model(hotel_document().timeline)
        ticks = [item.tick for item in model.items]
        assert ticks == sorted(ticks)
        assert model.count == 11


class TestTickGrouping:

    def test_ties_keep_document_order(self):
        """Simultaneous centre elements stack in timeline order."""
        doc = document(
            command("Second", 5),
            event("Early", 1),
            state("First", 5),
            command("Third", 5),
        )
        groups = group_by_tick(build_layout_model(doc.timeline).items)

        assert [group.tick for group in groups] == [1, 5]
        stack = centre_stack(groups[1])
        assert [item.element.name for item in stack] == ["Second", "First", "Third"]

    def test_spacing_after(self):
        doc = document(event("A", 0), event("B", 30), event("C", 35), event("D", 55))
        groups = group_by_tick(build_layout_model(doc.timeline).items)

        assert [group.spacing_after for group in groups] == [2, 0, 1, 0]

    def test_spacing_uses_configured_unit(self):
        doc = document(event("A", 0), event("B", 30))
        groups = group_by_tick(
            build_layout_model(doc.timeline).items, LayoutConfig(spacing_tick_unit=5),
        )
        assert groups[0].spacing_after == 5

    def test_spacing_for_distance(self):
        assert spacing_for_distance(0) == 0
        assert spacing_for_distance(9) == 0
        assert spacing_for_distance(19) == 0
        assert spacing_for_distance(20) == 1
        assert spacing_for_distance(100) == 9

    def test_unsorted_items_are_regrouped(self):
        model = build_layout_model(document(event("A", 3), event("B", 1)).timeline)
        groups = group_by_tick(tuple(reversed(model.items)))
        assert [group.tick for group in groups] == [1, 3]

    def test_empty_timeline(self):
        model = build_layout_model(())
        assert model.count == 0
        assert group_by_tick(model.items) == ()
        assert model.lane_config.event_systems == ("",)
