"""
Annotation Deriver.

Projects feedback items that carry coordinates into bracket annotations,
grouped by page.
"""

import logging
from typing import Dict, List

from cvlens.models.annotation import BracketAnnotation, annotation_id_for
from cvlens.models.feedback import AnalysisResult, FeedbackItem, NEUTRAL_KIND
import config.settings as settings

logger = logging.getLogger(__name__)


KIND_COLORS = {
    # resume-v1
    "strength": "#22c55e",
    "improvement": "#f59e0b",
    "missing": "#ef4444",
    "warning": "#f97316",
    "info": "#3b82f6",
    # paper-v1 (warning and info shared)
    "error": "#dc2626",
    "success": "#16a34a",
}

DEFAULT_COLOR = KIND_COLORS[NEUTRAL_KIND]


def color_for_kind(kind: str) -> str:
    """Color for a kind tag; anything unrecognized gets the info color."""
    return KIND_COLORS.get(kind, DEFAULT_COLOR)


class AnnotationDeriver:
    """
    Derives overlay annotations from an analysis result.

    Pure projection: the same result always yields the same annotations,
    in ascending page order and, within a page, in item order.
    """

    def __init__(self, default_x: float = settings.DEFAULT_ANNOTATION_X):
        self.default_x = default_x

    def derive(self, result: AnalysisResult) -> Dict[int, List[BracketAnnotation]]:
        """
        Build the page number -> annotations mapping for a result.

        Items without coordinates are skipped; they still render as
        feedback cards, just without a marker.
        """
        by_page: Dict[int, List[BracketAnnotation]] = {}
        skipped = 0

        for item in result.items:
            annotation = self._annotation_for(item)
            if annotation is None:
                skipped += 1
                continue
            by_page.setdefault(annotation.page_number, []).append(annotation)

        logger.debug(
            f"Derived {len(result.items) - skipped} annotations on {len(by_page)} pages "
            f"({skipped} items without coordinates)"
        )
        return {page: by_page[page] for page in sorted(by_page)}

    def _annotation_for(self, item: FeedbackItem):
        coordinates = item.coordinates
        if coordinates is None:
            return None

        return BracketAnnotation(
            id=annotation_id_for(item.id),
            page_number=item.location.page_number,
            start_y=coordinates.start_y,
            end_y=coordinates.end_y,
            x=coordinates.x if coordinates.x is not None else self.default_x,
            color=color_for_kind(item.kind),
            linked_item=item.id,
        )


def annotations_for_page(
    annotations: Dict[int, List[BracketAnnotation]],
    page_number: int
) -> List[BracketAnnotation]:
    """Annotations to hand the overlay of the currently displayed page."""
    return list(annotations.get(page_number, []))
