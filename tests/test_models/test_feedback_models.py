"""
Basic unit tests for the feedback, annotation and outcome models.
"""

import pytest

from cvlens.models.annotation import ClickRegion, PageGeometry, annotation_id_for
from cvlens.models.feedback import (
    AnalysisResult,
    Coordinates,
    FeedbackItem,
    Location,
    PAPER_SCHEMA,
)
from cvlens.models.outcome import AnalysisOutcome, ParseOutcome


def _item(item_id, **kwargs):
    return FeedbackItem(id=item_id, title=f"Item {item_id}", details="details", kind="info", **kwargs)


def test_feedback_item_validation():
    """Test FeedbackItem type validation."""
    item = _item(1)
    assert item.kind == "info"

    with pytest.raises(TypeError):
        FeedbackItem(id="1", title="t", details="d", kind="info")

    with pytest.raises(TypeError):
        FeedbackItem(id=False, title="t", details="d", kind="info")

    with pytest.raises(TypeError):
        FeedbackItem(id=1, title=None, details="d", kind="info")


def test_location_page_number_must_be_positive():
    """Test pages are 1-based."""
    assert Location(page_number=1).page_number == 1

    with pytest.raises(ValueError):
        Location(page_number=0)


def test_coordinates_reject_non_finite():
    """Test NaN/inf coordinates are rejected."""
    with pytest.raises(ValueError):
        Coordinates(start_y=float("nan"), end_y=10)

    with pytest.raises(TypeError):
        Coordinates(start_y=True, end_y=10)


def test_feedback_item_serialization():
    """Test FeedbackItem to/from dict conversion."""
    item = FeedbackItem(
        id=4,
        title="Quantify impact",
        details="Add numbers to achievements",
        kind="improvement",
        section="Work Experience",
        location=Location(page_number=2, coordinates=Coordinates(start_y=120, end_y=180)),
    )

    data = item.to_dict()
    restored = FeedbackItem.from_dict(data)

    assert data["type"] == "improvement"
    assert "score" not in data
    assert data["location"] == {"pageNumber": 2, "coordinates": {"startY": 120, "endY": 180}}
    assert restored == item


def test_result_rejects_duplicate_ids():
    """Test id uniqueness within one result."""
    with pytest.raises(ValueError):
        AnalysisResult(items=(_item(1), _item(1)))


def test_result_is_immutable():
    """Test results cannot be mutated after creation."""
    result = AnalysisResult(items=[_item(1)], recommendations=["a"])

    assert isinstance(result.items, tuple)
    assert isinstance(result.recommendations, tuple)
    with pytest.raises(Exception):
        result.summary = "changed"


def test_result_lookup():
    """Test item lookup by id."""
    result = AnalysisResult(items=(_item(2), _item(5)))

    assert result.get_item(5).title == "Item 5"
    assert result.get_item(9) is None
    assert result.has_item(2)
    assert result.item_ids == [2, 5]


def test_fallback_result_shape():
    """Test the fallback wraps the raw text in one info item."""
    result = AnalysisResult.fallback("raw text", schema_version=PAPER_SCHEMA)

    assert result.item_ids == [1]
    assert result.items[0].details == "raw text"
    assert result.items[0].location is None
    assert result.schema_version == PAPER_SCHEMA


def test_annotation_id_is_derived_from_item_id():
    assert annotation_id_for(12) == "annotation-12"


def test_page_geometry_layout_state():
    """Test pages of zero size count as not laid out."""
    assert PageGeometry(page_number=1, width=600, height=800).is_laid_out
    assert not PageGeometry(page_number=1, width=0, height=800).is_laid_out
    assert not PageGeometry(page_number=1, width=600, height=0).is_laid_out


def test_click_region_contains_edges():
    region = ClickRegion(left=0, top=10, right=20, bottom=30)

    assert region.contains(0, 10)
    assert region.contains(20, 30)
    assert not region.contains(21, 20)


def test_parse_outcome_requires_exactly_one_side():
    """Test a ParseOutcome is either a result or a failure."""
    with pytest.raises(ValueError):
        ParseOutcome()

    outcome = ParseOutcome.failed("bad", "raw")
    assert outcome.unwrap_or_fallback().items[0].details == "raw"


def test_analysis_outcome_constructors():
    """Test outcome helpers set the error taxonomy."""
    ok = AnalysisOutcome.ok("{}")
    config_error = AnalysisOutcome.configuration_error("no key")
    transport_error = AnalysisOutcome.transport_error("timeout")

    assert ok.success and ok.analysis == "{}" and ok.error_type is None
    assert not config_error.success and config_error.error_type == "configuration"
    assert not transport_error.success and transport_error.error_type == "transport"

    with pytest.raises(ValueError):
        AnalysisOutcome(success=False, error="x", error_type="other")
