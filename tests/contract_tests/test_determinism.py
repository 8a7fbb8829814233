"""
Determinism Contract Tests

Identical (timeline, specifications) input must always yield identical
view models, down to the serialized bytes, so exports can be diffed and
golden-file tested.
"""

import pytest

from infoflow.domain.serialization import export_slices_to_json, to_json
from infoflow.engine import InformationFlowEngine, compute_views
from infoflow.ingestion import load_document

from tests.integration.fixtures import checkout_document, hotel_document, hotel_model


class TestIdempotence:

    def test_views_equal_across_runs(self):
        first = compute_views(load_document(hotel_model()))
        second = compute_views(load_document(hotel_model()))

        assert first.lane_config == second.lane_config
        assert first.layout == second.layout
        assert first.slices == second.slices
        assert first.summary == second.summary

    @pytest.mark.parametrize("build", [hotel_document, checkout_document])
    def test_slice_export_byte_identical(self, build):
        doc = build()

        outputs = {
            export_slices_to_json(InformationFlowEngine().slices(doc).slices)
            for _ in range(3)
        }
        assert len(outputs) == 1

    def test_full_views_serialize_identically(self):
        doc = load_document(hotel_model())
        engine = InformationFlowEngine()

        assert to_json(engine.compute(doc)) == to_json(engine.compute(doc))

    def test_input_not_mutated(self):
        raw = hotel_model()
        doc = load_document(raw)
        compute_views(doc)

        assert raw == hotel_model()
        assert doc == load_document(hotel_model())
