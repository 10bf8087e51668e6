"""
Unit tests for the Feedback Normalizer.

Covers pass-through of valid responses and the single-item fallback
for everything else.
"""

import json

import pytest

from cvlens.agents.normalization import FeedbackNormalizer
from cvlens.models.feedback import AnalysisResult, PAPER_SCHEMA, RESUME_SCHEMA


EXAMPLE_RESPONSE = (
    '{"items":[{"id":1,"title":"Good summary","details":"Clear and concise",'
    '"type":"strength","location":{"pageNumber":1,"coordinates":{"startY":100,"endY":140,"x":50}}}],'
    '"summary":"Solid resume"}'
)


@pytest.fixture
def normalizer():
    return FeedbackNormalizer()


def _response(items, **extra):
    data = {"items": items}
    data.update(extra)
    return json.dumps(data)


def test_normalize_example_response(normalizer):
    """Test the documented example passes through with its location."""
    result = normalizer.normalize(EXAMPLE_RESPONSE)

    assert len(result.items) == 1
    item = result.items[0]
    assert item.id == 1
    assert item.title == "Good summary"
    assert item.kind == "strength"
    assert item.location.page_number == 1
    assert item.coordinates.start_y == 100
    assert item.coordinates.end_y == 140
    assert item.coordinates.x == 50
    assert result.summary == "Solid resume"
    assert result.schema_version == RESUME_SCHEMA


def test_valid_input_passes_through_unchanged(normalizer):
    """Test normalize(to_json(normalize(s))) == normalize(s)."""
    raw = _response(
        [
            {"id": 3, "section": "Skills", "title": "Lists tools", "details": "Good", "type": "strength"},
            {"id": 1, "title": "No dates", "details": "Add dates", "type": "missing",
             "location": {"pageNumber": 2}},
            {"id": 2, "title": "Typos", "details": "Fix typos", "type": "warning",
             "location": {"pageNumber": 1, "coordinates": {"startY": 10.5, "endY": 30}}},
        ],
        summary="Decent",
        recommendations=["Quantify results", "Add a summary"],
        language="fr - French",
    )

    first = normalizer.normalize(raw)
    second = normalizer.normalize(first.to_json())

    assert second == first
    assert first.item_ids == [3, 1, 2]  # presentation order kept
    assert first.recommendations == ("Quantify results", "Add a summary")


@pytest.mark.parametrize("raw", [
    "invalid json{{{",
    "",
    "[]",
    '"just a string"',
    '{"summary": "no items"}',
    '{"items": {"id": 1}}',
    '{"items": [{"id": "1", "title": "t", "details": "d", "type": "info"}]}',
    '{"items": [{"id": true, "title": "t", "details": "d", "type": "info"}]}',
    '{"items": [{"id": 1, "details": "d", "type": "info"}]}',
    '{"items": [{"id": 1, "title": "t", "details": "d"}]}',
    '{"items": [1, 2]}',
    '{"items": [], "recommendations": "one string"}',
    "[" * 100000,
    '{"items": [{"id": ' + "1" * 5000 + ', "title": "t", "details": "d", "type": "info"}]}',
])
def test_fallback_for_unreadable_responses(normalizer, raw):
    """Test any non-conforming text yields exactly one raw item."""
    result = normalizer.normalize(raw)

    assert len(result.items) == 1
    item = result.items[0]
    assert item.id == 1
    assert item.title == "Raw Analysis Result"
    assert item.details == raw
    assert item.kind == "info"
    assert item.location is None


def test_duplicate_ids_fall_back(normalizer):
    """Test a response violating id uniqueness is treated as a mismatch."""
    raw = _response([
        {"id": 1, "title": "A", "details": "a", "type": "info"},
        {"id": 1, "title": "B", "details": "b", "type": "info"},
    ])

    outcome = normalizer.parse(raw)

    assert not outcome.ok
    assert "Duplicate item id" in outcome.failure.reason
    assert normalizer.normalize(raw).items[0].details == raw


def test_fallback_is_idempotent(normalizer):
    """Test the same bad input always produces the same fallback."""
    assert normalizer.normalize("not json") == normalizer.normalize("not json")


def test_none_response_falls_back_to_empty_details(normalizer):
    """Test a missing response still renders one item."""
    result = normalizer.normalize(None)

    assert len(result.items) == 1
    assert result.items[0].details == ""


def test_unknown_type_is_kept(normalizer):
    """Test an unrecognized kind is not a schema mismatch."""
    raw = _response([{"id": 7, "title": "Odd", "details": "x", "type": "praise"}])

    result = normalizer.normalize(raw)

    assert result.items[0].id == 7
    assert result.items[0].kind == "praise"


def test_invalid_page_number_drops_location_only(normalizer):
    """Test bad location data removes the marker, not the item."""
    raw = _response([
        {"id": 1, "title": "A", "details": "a", "type": "info",
         "location": {"pageNumber": 0, "coordinates": {"startY": 1, "endY": 2}}},
        {"id": 2, "title": "B", "details": "b", "type": "info", "location": "top of page"},
    ])

    result = normalizer.normalize(raw)

    assert result.item_ids == [1, 2]
    assert result.items[0].location is None
    assert result.items[1].location is None


def test_invalid_coordinates_keep_page(normalizer):
    """Test unusable coordinates are dropped while the page survives."""
    raw = _response([
        {"id": 1, "title": "A", "details": "a", "type": "info",
         "location": {"pageNumber": 2, "coordinates": {"startY": "top", "endY": 40}}},
        {"id": 2, "title": "B", "details": "b", "type": "info",
         "location": {"pageNumber": 1, "coordinates": {"startY": 10}}},
    ])

    result = normalizer.normalize(raw)

    assert result.items[0].location.page_number == 2
    assert result.items[0].coordinates is None
    assert result.items[1].location.page_number == 1
    assert result.items[1].coordinates is None


def test_paper_schema_via_discriminator(normalizer):
    """Test the academic variant is selected explicitly, not guessed."""
    raw = _response(
        [{"id": 1, "title": "Weak baseline", "details": "Compare to X", "type": "error", "score": 6}],
        schemaVersion=PAPER_SCHEMA,
    )

    result = normalizer.normalize(raw)

    assert result.schema_version == PAPER_SCHEMA
    assert result.items[0].score == "6"
    assert "error" in result.kinds


def test_unknown_schema_version_falls_back(normalizer):
    """Test an unknown discriminator is a mismatch."""
    raw = _response([{"id": 1, "title": "t", "details": "d", "type": "info"}], schemaVersion="v9")

    outcome = normalizer.parse(raw)

    assert not outcome.ok
    assert outcome.unwrap_or_fallback().items[0].details == raw


def test_default_schema_version_applies():
    """Test responses without a discriminator use the configured schema."""
    normalizer = FeedbackNormalizer(default_schema_version=PAPER_SCHEMA)

    result = normalizer.normalize(_response([{"id": 1, "title": "t", "details": "d", "type": "success"}]))
    fallback = normalizer.normalize("oops")

    assert result.schema_version == PAPER_SCHEMA
    assert fallback.schema_version == PAPER_SCHEMA


def test_parse_success_outcome(normalizer):
    """Test parse() exposes the result without applying a fallback."""
    outcome = normalizer.parse(EXAMPLE_RESPONSE)

    assert outcome.ok
    assert outcome.failure is None
    assert isinstance(outcome.result, AnalysisResult)
    assert outcome.unwrap_or_fallback() is outcome.result


def test_parse_failure_outcome_keeps_raw(normalizer):
    """Test parse() reports why and keeps the raw text."""
    outcome = normalizer.parse("{broken")

    assert not outcome.ok
    assert outcome.result is None
    assert outcome.failure.raw == "{broken"
    assert outcome.failure.reason.startswith("invalid JSON")


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
