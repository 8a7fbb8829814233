"""
Document Loader Tests

The loader never raises on missing optional fields; file loading
failures come back as typed errors.
"""

import json
import logging

from infoflow.contracts import (
    Actor, Command, ElementType, ErrorCode, Event, StateView, TimelineDocument,
)
from infoflow.ingestion.loader import (
    load_document, load_document_file, parse_element, parse_specification, read_document_file,
)

from tests.integration.fixtures import hotel_model


class TestParseElement:

    def test_event_fields(self):
        element = parse_element({
            "type": "event", "name": "Paid", "tick": 4, "producedBy": "Pay-3",
            "externalSource": "Bank", "system": "Billing", "example": {"amount": 5},
        })
        assert element == Event(
            name="Paid", tick=4, produced_by="Pay-3", external_source="Bank",
            system="Billing", example={"amount": 5},
        )

    def test_missing_optional_fields(self):
        view = parse_element({"type": "state", "name": "V", "tick": 1})
        assert isinstance(view, StateView)
        assert view.sourced_from == ()
        assert view.scenarios == ()
        assert view.attachments == ()
        assert view.example is None

        actor = parse_element({"type": "actor", "name": "A", "tick": 2})
        assert isinstance(actor, Actor)
        assert actor.reads_view == ""
        assert actor.role is None

    def test_missing_tick_defaults_to_zero(self):
        assert parse_element({"type": "command", "name": "C"}).tick == 0

    def test_integral_float_tick(self):
        assert parse_element({"type": "command", "name": "C", "tick": 7.0}).tick == 7

    def test_command_scenarios(self):
        command = parse_element({
            "type": "command", "name": "Pay", "tick": 1,
            "scenarios": [{
                "name": "Declined",
                "given": [{"event": "CardAdded"}, {"data": "no event name"}],
                "when": {"amount": 5},
                "then": {"fails": "Declined"},
            }],
        })
        assert isinstance(command, Command)
        scenario = command.scenarios[0]
        assert [ref.event for ref in scenario.given] == ["CardAdded"]
        assert scenario.when == {"amount": 5}
        assert scenario.then.fails == "Declined"

    def test_attachment_defaults(self):
        command = parse_element({
            "type": "command", "name": "Pay", "tick": 1,
            "attachments": [{"label": "Untyped"}],
        })
        assert command.attachments[0].kind == "note"

    def test_unknown_type_skipped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="infoflow.ingestion.loader"):
            assert parse_element({"type": "policy", "name": "P", "tick": 1}) is None
        assert "policy" in caplog.text


class TestParseSpecification:

    def test_state_specification(self):
        spec = parse_specification({
            "name": "Rooms", "type": "state",
            "scenarios": [{"name": "Empty", "given": [], "then": {"rooms": []}}],
        })
        assert spec.type is ElementType.STATE
        assert spec.scenarios[0].then == {"rooms": []}

    def test_unknown_type(self):
        assert parse_specification({"name": "X", "type": "actor", "scenarios": []}) is None


class TestLoadDocument:

    def test_hotel(self):
        doc = load_document(hotel_model())
        assert isinstance(doc, TimelineDocument)
        assert len(doc.timeline) == 11
        assert len(doc.events) == 4
        assert len(doc.state_views) == 2
        assert len(doc.commands) == 2
        assert len(doc.actors) == 3
        assert [spec.name for spec in doc.specifications] == ["BookRoom", "Ghost"]

    def test_bare_document(self):
        doc = load_document({"name": "Bare"})
        assert doc.timeline == ()
        assert doc.specifications == ()
        assert doc.description is None

    def test_non_object(self):
        assert load_document(None) == TimelineDocument(name="")


class TestLoadDocumentFile:

    def test_success(self, tmp_path):
        path = tmp_path / "hotel.giraflow.json"
        path.write_text(json.dumps(hotel_model()), encoding="utf-8")

        result = load_document_file(path)
        assert result.is_success
        assert result.value.name == "Hotel Booking"

    def test_missing_file(self, tmp_path):
        result = load_document_file(tmp_path / "missing.json")
        assert result.is_failure
        assert result.error.code is ErrorCode.SOURCE_UNREACHABLE

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        result = load_document_file(path)
        assert result.error.code is ErrorCode.MALFORMED_PAYLOAD

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "latin.json"
        path.write_bytes(b'{"name": "caf\xe9"}')

        result = load_document_file(path)
        assert result.error.code is ErrorCode.MALFORMED_PAYLOAD

    def test_schema_violation_carries_issues(self, tmp_path):
        raw = hotel_model()
        raw["timeline"][0]["tick"] = "ten"
        path = tmp_path / "invalid.json"
        path.write_text(json.dumps(raw), encoding="utf-8")

        result = load_document_file(path)
        assert result.error.code is ErrorCode.SCHEMA_VIOLATION
        assert result.error.context == (("issue", "/timeline/0/tick: 'ten' is not of type 'integer'"),)

    def test_skip_validation(self, tmp_path):
        raw = hotel_model()
        raw["timeline"][0]["tick"] = "ten"
        path = tmp_path / "invalid.json"
        path.write_text(json.dumps(raw), encoding="utf-8")

        result = load_document_file(path, validate=False)
        assert result.is_success
        assert result.value.timeline[0].tick == 0

    def test_unreadable_file(self, tmp_path, monkeypatch):
        path = tmp_path / "locked.json"
        path.write_text(json.dumps(hotel_model()), encoding="utf-8")

        def deny(*args, **kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr("infoflow.ingestion.loader.open", deny, raising=False)
        result = load_document_file(path)
        assert result.is_failure
        assert result.error.code is ErrorCode.SOURCE_UNREACHABLE
        assert result.error.message == f"Cannot read {path}: Permission denied"


class TestReadDocumentFile:

    def test_returns_raw_json(self, tmp_path):
        path = tmp_path / "raw.json"
        path.write_text('{"name": "Raw", "timeline": [{"type": "mystery"}]}', encoding="utf-8")

        result = read_document_file(path)
        assert result.value == {"name": "Raw", "timeline": [{"type": "mystery"}]}

    def test_directory_is_not_a_file(self, tmp_path):
        result = read_document_file(tmp_path)
        assert result.error.code is ErrorCode.SOURCE_UNREACHABLE
