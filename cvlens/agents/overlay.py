"""
Overlay Renderer.

Draws bracket markers for one rendered page and turns clicks on them
into item ids.
"""

import logging
from typing import Callable, List, Optional
from xml.sax.saxutils import quoteattr

from cvlens.models.annotation import BracketAnnotation, ClickRegion, OverlayMarker, PageGeometry
import config.settings as settings

logger = logging.getLogger(__name__)


class OverlayRenderer:
    """
    Renders bracket annotations on top of a page.

    Each annotation becomes a bracket opening to the right at x, spanning
    startY..endY, with a numbered badge to its left. The renderer keeps no
    selection state: a click on a marker only calls on_marker_click with
    the linked item id.
    """

    def __init__(
        self,
        on_marker_click: Optional[Callable[[int], None]] = None,
        arm_width: float = settings.BRACKET_ARM_WIDTH,
        badge_offset: float = settings.BADGE_OFFSET,
        badge_radius: float = settings.BADGE_RADIUS,
        stroke_width: float = settings.BRACKET_STROKE_WIDTH
    ):
        """
        Initialize renderer.

        Args:
            on_marker_click: Called with FeedbackItem.id when a marker is clicked
            arm_width: Horizontal length of the bracket arms (px)
            badge_offset: Distance from x to the badge center (px)
            badge_radius: Badge circle radius (px)
            stroke_width: Bracket line width (px)
        """
        self.on_marker_click = on_marker_click
        self.arm_width = arm_width
        self.badge_offset = badge_offset
        self.badge_radius = badge_radius
        self.stroke_width = stroke_width

    def render(
        self,
        geometry: PageGeometry,
        annotations: List[BracketAnnotation]
    ) -> List[OverlayMarker]:
        """
        Build the markers to draw on one page.

        Args:
            geometry: Rendered size of the page
            annotations: Annotations for this page (others are ignored)

        Returns:
            Markers in draw order; empty before the page is laid out
        """
        if not annotations:
            return []

        if not geometry.is_laid_out:
            logger.debug(f"Page {geometry.page_number} not laid out yet, skipping overlay")
            return []

        markers = [
            self._marker_for(annotation)
            for annotation in annotations
            if annotation.page_number == geometry.page_number
        ]

        logger.debug(f"Rendered {len(markers)} markers on page {geometry.page_number}")
        return markers

    def _marker_for(self, annotation: BracketAnnotation) -> OverlayMarker:
        x = annotation.x
        start_y = annotation.start_y
        end_y = annotation.end_y
        arm_x = x - self.arm_width
        middle_y = (start_y + end_y) / 2
        badge_cx = x - self.badge_offset

        path = (
            f"M {x} {start_y} "
            f"L {arm_x} {start_y} "
            f"L {arm_x} {end_y} "
            f"L {x} {end_y}"
        )

        # The clickable area covers both the bracket and its badge
        region = ClickRegion(
            left=min(badge_cx - self.badge_radius, arm_x),
            top=min(start_y, end_y, middle_y - self.badge_radius),
            right=max(x, badge_cx + self.badge_radius),
            bottom=max(start_y, end_y, middle_y + self.badge_radius),
        )

        return OverlayMarker(
            annotation_id=annotation.id,
            linked_item=annotation.linked_item,
            color=annotation.color,
            path=path,
            badge_cx=badge_cx,
            badge_cy=middle_y,
            badge_radius=self.badge_radius,
            region=region,
        )

    def hit_test(self, markers: List[OverlayMarker], x: float, y: float) -> Optional[OverlayMarker]:
        """Topmost marker under a page-local point, if any."""
        for marker in reversed(markers):
            if marker.region.contains(x, y):
                return marker
        return None

    def click(self, markers: List[OverlayMarker], x: float, y: float) -> Optional[int]:
        """
        Dispatch a click at a page-local point.

        Returns:
            The linked item id of the clicked marker, or None on a miss
        """
        marker = self.hit_test(markers, x, y)
        if marker is None:
            return None

        logger.debug(f"Marker {marker.annotation_id} clicked")
        if self.on_marker_click is not None:
            self.on_marker_click(marker.linked_item)
        return marker.linked_item

    def to_svg(self, geometry: PageGeometry, markers: List[OverlayMarker]) -> str:
        """Serialize the overlay layer of one page as an SVG document."""
        width = max(geometry.width, 0)
        height = max(geometry.height, 0)

        lines = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
            f'data-page-number="{geometry.page_number}">'
        ]
        for marker in markers:
            color = quoteattr(marker.color)
            lines.extend([
                f'  <g id={quoteattr(marker.annotation_id)} data-linked-item="{marker.linked_item}">',
                f'    <path d="{marker.path}" stroke={color} stroke-width="{self.stroke_width}" fill="none"/>',
                f'    <circle cx="{marker.badge_cx}" cy="{marker.badge_cy}" r="{marker.badge_radius}" fill={color}/>',
                f'    <text x="{marker.badge_cx}" y="{marker.badge_cy + 5}" text-anchor="middle" '
                f'fill="white" font-size="12" font-weight="bold">{marker.label}</text>',
                '  </g>',
            ])
        lines.append('</svg>')
        return "\n".join(lines) + "\n"
