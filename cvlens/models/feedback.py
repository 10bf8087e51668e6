"""
Feedback data model.

Represents the structured feedback returned by the analysis model:
individual feedback items, their page locations, and the aggregate result.
Field names follow Python conventions; from_dict/to_dict speak the
camelCase wire format the model is asked to produce.
"""

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


RESUME_SCHEMA = "resume-v1"
PAPER_SCHEMA = "paper-v1"

# Closed kind set per schema version (presentation only)
SCHEMA_KINDS = {
    RESUME_SCHEMA: ("strength", "improvement", "missing", "warning", "info"),
    PAPER_SCHEMA: ("error", "warning", "info", "success"),
}

NEUTRAL_KIND = "info"
FALLBACK_ITEM_ID = 1
FALLBACK_TITLE = "Raw Analysis Result"


def _require_int(value: Any, name: str) -> int:
    # bool is an int subclass, but True is not an id
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {value!r}")
    return value


def _require_number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return value


def _require_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string, got {value!r}")
    return value


def _optional_str(value: Any, name: str) -> Optional[str]:
    if value is None:
        return None
    return _require_str(value, name)


@dataclass(frozen=True)
class Coordinates:
    """
    Vertical span of a feedback item on a rendered page.

    Values are page-relative pixels at the viewer's current scale,
    not PDF points, so they only hold for the render pass that produced them.
    """
    start_y: float
    end_y: float
    x: Optional[float] = None

    def __post_init__(self):
        _require_number(self.start_y, "startY")
        _require_number(self.end_y, "endY")
        if self.x is not None:
            _require_number(self.x, "x")

    @classmethod
    def from_dict(cls, data: dict) -> "Coordinates":
        if not isinstance(data, dict):
            raise TypeError(f"coordinates must be an object, got {data!r}")
        return cls(start_y=data["startY"], end_y=data["endY"], x=data.get("x"))

    def to_dict(self) -> dict:
        data = {"startY": self.start_y, "endY": self.end_y}
        if self.x is not None:
            data["x"] = self.x
        return data


@dataclass(frozen=True)
class Location:
    """Page (1-based) and optional coordinates of a feedback item."""
    page_number: int
    coordinates: Optional[Coordinates] = None

    def __post_init__(self):
        _require_int(self.page_number, "pageNumber")
        if self.page_number < 1:
            raise ValueError(f"Invalid pageNumber: {self.page_number}. Must be >= 1")

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {"pageNumber": self.page_number}
        if self.coordinates is not None:
            data["coordinates"] = self.coordinates.to_dict()
        return data


def _parse_location(data: Any, item_id: int) -> Optional[Location]:
    """
    Parse an item's location, dropping whatever part of it is invalid.

    Bad location data never invalidates the item: an unusable page number
    drops the whole location, unusable coordinates drop only the coordinates.
    Either way the item simply gets no overlay marker.
    """
    if data is None:
        return None
    if not isinstance(data, dict):
        logger.warning(f"Ignoring non-object location on item {item_id}: {data!r}")
        return None

    coordinates = None
    if data.get("coordinates") is not None:
        try:
            coordinates = Coordinates.from_dict(data["coordinates"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring invalid coordinates on item {item_id}: {e}")

    try:
        return Location(page_number=data.get("pageNumber"), coordinates=coordinates)
    except (TypeError, ValueError) as e:
        logger.warning(f"Ignoring invalid location on item {item_id}: {e}")
        return None


@dataclass(frozen=True)
class FeedbackItem:
    """
    One atomic piece of AI-generated commentary about the document.

    `id` is the only join key between a feedback card and its overlay marker.
    `kind` travels as "type" on the wire and only drives color and icon.
    """
    id: int
    title: str
    details: str
    kind: str
    section: Optional[str] = None
    score: Optional[str] = None
    location: Optional[Location] = None

    def __post_init__(self):
        _require_int(self.id, "id")
        _require_str(self.title, "title")
        _require_str(self.details, "details")
        _require_str(self.kind, "type")
        _optional_str(self.section, "section")
        _optional_str(self.score, "score")

    @property
    def coordinates(self) -> Optional[Coordinates]:
        """Coordinates of the item, or None when it cannot be drawn."""
        if self.location is None:
            return None
        return self.location.coordinates

    @classmethod
    def from_dict(cls, data: dict) -> "FeedbackItem":
        """
        Create FeedbackItem from a wire-format dict.

        Raises:
            KeyError: If a required field is missing
            TypeError: If a field has the wrong type
        """
        if not isinstance(data, dict):
            raise TypeError(f"item must be an object, got {data!r}")

        item_id = _require_int(data["id"], "id")

        # Score is display-only; numeric grades keep their printed form
        score = data.get("score")
        if isinstance(score, (int, float)) and not isinstance(score, bool):
            score = str(score)

        return cls(
            id=item_id,
            title=data["title"],
            details=data["details"],
            kind=data["type"],
            section=data.get("section"),
            score=score,
            location=_parse_location(data.get("location"), item_id),
        )

    def to_dict(self) -> dict:
        """Convert to the wire format."""
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "details": self.details,
            "type": self.kind,
        }
        if self.section is not None:
            data["section"] = self.section
        if self.score is not None:
            data["score"] = self.score
        if self.location is not None:
            data["location"] = self.location.to_dict()
        return data


@dataclass(frozen=True)
class AnalysisResult:
    """
    Aggregate feedback for one document.

    Created once per successful analysis and never mutated afterwards;
    a new analysis replaces it wholesale.
    """
    items: Tuple[FeedbackItem, ...]
    summary: Optional[str] = None
    recommendations: Optional[Tuple[str, ...]] = None
    language: Optional[str] = None
    schema_version: str = RESUME_SCHEMA

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))
        if self.recommendations is not None:
            object.__setattr__(self, "recommendations", tuple(self.recommendations))

        if self.schema_version not in SCHEMA_KINDS:
            raise ValueError(
                f"Unknown schemaVersion: {self.schema_version}. "
                f"Must be one of {sorted(SCHEMA_KINDS)}"
            )

        seen = set()
        for item in self.items:
            if item.id in seen:
                raise ValueError(f"Duplicate item id: {item.id}")
            seen.add(item.id)

        _optional_str(self.summary, "summary")
        _optional_str(self.language, "language")
        for recommendation in self.recommendations or ():
            _require_str(recommendation, "recommendations[]")

    @property
    def item_ids(self) -> List[int]:
        return [item.id for item in self.items]

    @property
    def kinds(self) -> Tuple[str, ...]:
        """Known kind tags for this result's schema version."""
        return SCHEMA_KINDS[self.schema_version]

    def get_item(self, item_id: int) -> Optional[FeedbackItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def has_item(self, item_id: int) -> bool:
        return self.get_item(item_id) is not None

    @classmethod
    def fallback(cls, raw: str, schema_version: str = RESUME_SCHEMA) -> "AnalysisResult":
        """
        Single-item result wrapping an unparseable model response.

        The item carries the whole raw text and no location, so the
        list always has something to show and the overlay stays empty.
        """
        item = FeedbackItem(
            id=FALLBACK_ITEM_ID,
            title=FALLBACK_TITLE,
            details=raw,
            kind=NEUTRAL_KIND,
        )
        return cls(items=(item,), schema_version=schema_version)

    @classmethod
    def from_dict(cls, data: dict, default_schema_version: str = RESUME_SCHEMA) -> "AnalysisResult":
        """
        Create AnalysisResult from a wire-format dict.

        Raises:
            KeyError: If "items" or a required item field is missing
            TypeError: If a field has the wrong type
            ValueError: On duplicate ids or an unknown schema version
        """
        if not isinstance(data, dict):
            raise TypeError(f"analysis must be an object, got {type(data).__name__}")

        raw_items = data["items"]
        if not isinstance(raw_items, list):
            raise TypeError(f"items must be an array, got {type(raw_items).__name__}")

        recommendations = data.get("recommendations")
        if recommendations is not None and not isinstance(recommendations, list):
            raise TypeError(
                f"recommendations must be an array, got {type(recommendations).__name__}"
            )

        schema_version = data.get("schemaVersion") or default_schema_version

        return cls(
            items=tuple(FeedbackItem.from_dict(item) for item in raw_items),
            summary=data.get("summary"),
            recommendations=tuple(recommendations) if recommendations is not None else None,
            language=data.get("language"),
            schema_version=schema_version,
        )

    def to_dict(self) -> dict:
        """Convert to the wire format."""
        data: Dict[str, Any] = {
            "schemaVersion": self.schema_version,
            "items": [item.to_dict() for item in self.items],
        }
        if self.summary is not None:
            data["summary"] = self.summary
        if self.recommendations is not None:
            data["recommendations"] = list(self.recommendations)
        if self.language is not None:
            data["language"] = self.language
        return data

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)
