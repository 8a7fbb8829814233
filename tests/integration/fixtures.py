"""
Integration Test Fixtures

Explicit, hand-written documents for deterministic testing.
All fixtures are explicit - no random generation.
"""

import copy
from typing import Any, Dict

from infoflow.ingestion import load_document
from infoflow.contracts import TimelineDocument


# =============================================================================
# HOTEL BOOKING MODEL (raw JSON shape)
# =============================================================================

HOTEL_MODEL: Dict[str, Any] = {
    "name": "Hotel Booking",
    "description": "Guests book rooms that the front desk has added.",
    "version": "1.0",
    "timeline": [
        {"type": "event", "name": "RoomAdded", "tick": 10, "system": "Inventory",
         "example": {"room": "101"}},
        {"type": "state", "name": "AvailableRooms", "tick": 15,
         "sourcedFrom": ["RoomAdded", "RoomBooked"], "example": {"rooms": ["101"]},
         "attachments": [{"type": "image", "label": "Room list", "path": "rooms.png"}]},
        {"type": "actor", "name": "Guest", "tick": 20, "readsView": "AvailableRooms",
         "sendsCommand": "BookRoom", "role": "Customer"},
        {"type": "command", "name": "BookRoom", "tick": 25, "example": {"room": "101"},
         "attachments": [{"type": "note", "label": "Rule", "content": "One room per guest"}]},
        {"type": "event", "name": "RoomBooked", "tick": 30, "producedBy": "BookRoom-25",
         "system": "Booking", "example": {"room": "101"}},
        {"type": "state", "name": "AvailableRooms", "tick": 35,
         "sourcedFrom": ["RoomAdded", "RoomBooked"], "example": {"rooms": []},
         "attachments": [{"type": "link", "label": "Wiki", "url": "https://example.org"}]},
        {"type": "event", "name": "PaymentReceived", "tick": 40, "externalSource": "Stripe"},
        {"type": "actor", "name": "Guest", "tick": 45, "readsView": "AvailableRooms",
         "sendsCommand": "BookRoom", "role": "Customer"},
        {"type": "command", "name": "BookRoom", "tick": 50, "example": {"room": "102"},
         "attachments": [{"type": "note", "label": "Rule", "content": "One room per guest"}]},
        {"type": "event", "name": "BookingRejected", "tick": 55, "producedBy": "BookRoom-50",
         "system": "Booking"},
        {"type": "actor", "name": "Clerk", "tick": 60, "readsView": "AvailableRooms",
         "sendsCommand": "CancelBooking"},
    ],
    "specifications": [
        {
            "name": "BookRoom",
            "type": "command",
            "scenarios": [
                {
                    "name": "Book a free room",
                    "given": [{"event": "RoomAdded", "data": {"room": "101"}}],
                    "when": {"room": "101"},
                    "then": {"produces": [{"event": "RoomBooked", "data": {"room": "101"}}]},
                },
                {
                    "name": "Room already booked",
                    "given": [{"event": "RoomBooked", "data": {"room": "101"}}],
                    "when": {"room": "101"},
                    "then": {"fails": "Room unavailable"},
                },
            ],
        },
        {
            "name": "Ghost",
            "type": "state",
            "scenarios": [{"name": "Never shown", "given": [], "then": {}}],
        },
    ],
}


def hotel_model() -> Dict[str, Any]:
    """A fresh deep copy of the raw hotel document."""
    return copy.deepcopy(HOTEL_MODEL)


def hotel_document() -> TimelineDocument:
    """The hotel document, loaded."""
    return load_document(hotel_model())


# =============================================================================
# SMALL DOCUMENT BUILDERS
# =============================================================================

def event(name: str, tick: int, **extra) -> Dict[str, Any]:
    return {"type": "event", "name": name, "tick": tick, **extra}


def command(name: str, tick: int, **extra) -> Dict[str, Any]:
    return {"type": "command", "name": name, "tick": tick, **extra}


def state(name: str, tick: int, sourced_from=(), **extra) -> Dict[str, Any]:
    return {"type": "state", "name": name, "tick": tick, "sourcedFrom": list(sourced_from), **extra}


def actor(name: str, tick: int, reads_view: str = "", sends_command: str = "", **extra) -> Dict[str, Any]:
    return {"type": "actor", "name": name, "tick": tick,
            "readsView": reads_view, "sendsCommand": sends_command, **extra}


def document(*elements, specifications=None, name: str = "Fixture") -> TimelineDocument:
    """Load a document from raw element dicts."""
    raw = {"name": name, "timeline": list(elements)}
    if specifications is not None:
        raw["specifications"] = specifications
    return load_document(raw)


# =============================================================================
# CONTEXT WINDOW FIXTURE
# =============================================================================

def checkout_document() -> TimelineDocument:
    """
    Commands at ticks 1 and 10 producing events at 2 and 11, with an
    unrelated event at tick 5 between them.
    """
    return document(
        command("Checkout", 1, example={"cart": 1}),
        event("OrderPlaced", 2, producedBy="Checkout-1"),
        event("PriceChanged", 5),
        command("Checkout", 10, example={"cart": 2}),
        event("OrderPlaced", 11, producedBy="Checkout-10"),
    )
