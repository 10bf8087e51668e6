"""
Annotation data model.

Derived, ephemeral view entities for the PDF overlay: bracket annotations
projected from feedback items, the geometry of a rendered page, and the
markers actually drawn on it.
"""

from dataclasses import dataclass

ANNOTATION_ID_PREFIX = "annotation-"


def annotation_id_for(item_id: int) -> str:
    """Stable, re-derivable annotation id for a feedback item."""
    return f"{ANNOTATION_ID_PREFIX}{item_id}"


@dataclass(frozen=True)
class BracketAnnotation:
    """
    A bracket callout linking a region of a page to a feedback item.
    Never persisted; recomputed whenever the analysis result changes.
    """
    id: str
    page_number: int
    start_y: float
    end_y: float
    x: float
    color: str
    linked_item: int  # FeedbackItem.id this bracket points at

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "pageNumber": self.page_number,
            "startY": self.start_y,
            "endY": self.end_y,
            "x": self.x,
            "color": self.color,
            "linkedItem": self.linked_item,
        }


@dataclass(frozen=True)
class PageGeometry:
    """Rendered size of one page in pixels, as reported by the PDF viewer."""
    page_number: int
    width: float
    height: float

    @property
    def is_laid_out(self) -> bool:
        # Pages report zero size until layout has finished
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class ClickRegion:
    """Axis-aligned rectangle in page-local pixels."""
    left: float
    top: float
    right: float
    bottom: float

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


@dataclass(frozen=True)
class OverlayMarker:
    """One drawn bracket with its numbered badge and click region."""
    annotation_id: str
    linked_item: int
    color: str
    path: str  # SVG path data of the bracket
    badge_cx: float
    badge_cy: float
    badge_radius: float
    region: ClickRegion

    @property
    def label(self) -> str:
        return str(self.linked_item)


@dataclass(frozen=True)
class PagePoint:
    """A click resolved to a page: page number plus page-local coordinates."""
    page_number: int
    x: float
    y: float

    def to_dict(self) -> dict:
        return {"pageNumber": self.page_number, "x": self.x, "y": self.y}

