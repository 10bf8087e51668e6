"""
Coordinates utility.

Maps clicks in the viewer container, where pages are stacked vertically,
to page numbers and page-local coordinates.
"""

import logging
from typing import Dict, Optional

from cvlens.models.annotation import PageGeometry, PagePoint
import config.settings as settings

logger = logging.getLogger(__name__)


class PageLayout:
    """
    Vertical stack of rendered pages.

    Every page gets half the page gap as margin above and below it, and is
    centered horizontally when a container width is known.
    """

    def __init__(self, page_gap: float = settings.PAGE_GAP_PX, container_width: Optional[float] = None):
        self.page_gap = page_gap
        self.container_width = container_width
        self.pages: Dict[int, PageGeometry] = {}  # page_number -> geometry

    def update(self, geometry: PageGeometry) -> None:
        """Record the latest rendered geometry of a page."""
        self.pages[geometry.page_number] = geometry

    def page_top(self, page_number: int) -> Optional[float]:
        """Container Y of the top edge of a page, or None if unknown."""
        if page_number not in self.pages:
            return None

        top = self.page_gap / 2
        for number in sorted(self.pages):
            if number == page_number:
                return top
            top += self.pages[number].height + self.page_gap
        return None

    def page_left(self, page_number: int) -> float:
        geometry = self.pages.get(page_number)
        if geometry is None or self.container_width is None:
            return 0.0
        return max((self.container_width - geometry.width) / 2, 0.0)

    def locate(self, x: float, y: float) -> Optional[PagePoint]:
        """
        Resolve a container-relative click to a page.

        Returns:
            PagePoint with page-local coordinates, or None for a click
            between pages or outside every page
        """
        for number in sorted(self.pages):
            geometry = self.pages[number]
            top = self.page_top(number)
            if top <= y <= top + geometry.height:
                left = self.page_left(number)
                if not left <= x <= left + geometry.width:
                    return None
                return PagePoint(page_number=number, x=x - left, y=y - top)

        logger.debug(f"Click at ({x}, {y}) is not on any page")
        return None
