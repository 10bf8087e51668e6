"""
Selection Controller - Single source of truth for the active feedback item.

Shared by the feedback list and the PDF overlay: both write through
named methods and both read (or subscribe to) the same state.
"""

import logging
from typing import Callable, List, Optional

from cvlens.models.feedback import AnalysisResult
import config.settings as settings

logger = logging.getLogger(__name__)


ORIGIN_LIST = "list"
ORIGIN_OVERLAY = "overlay"
ORIGIN_RESET = "reset"

# (active_item_id, origin)
SelectionListener = Callable[[Optional[int], str], None]


def anchor_for(item_id: int) -> str:
    """Stable anchor of an item's entry in the feedback list."""
    return f"{settings.LIST_ANCHOR_PREFIX}{item_id}"


class SelectionController:
    """
    Holds the active item id for one viewer session.

    States are no-selection (active_item_id is None) and selected(id).
    Both select methods set the same value; the origin only decides the
    side effect. Selecting from the overlay scrolls the list entry into
    view. Selecting from the list does not move the PDF.
    """

    def __init__(self, scroll_to_anchor: Optional[Callable[[str], None]] = None):
        """
        Initialize controller.

        Args:
            scroll_to_anchor: Scrolls the feedback list to an anchor, e.g.
                "analysis-item-3"
        """
        self.scroll_to_anchor = scroll_to_anchor
        self.result: Optional[AnalysisResult] = None
        self.active_item_id: Optional[int] = None
        self._listeners: List[SelectionListener] = []

    @property
    def has_selection(self) -> bool:
        return self.active_item_id is not None

    def is_active(self, item_id: int) -> bool:
        return self.active_item_id is not None and self.active_item_id == item_id

    def subscribe(self, listener: SelectionListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: SelectionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def replace_result(self, result: Optional[AnalysisResult]) -> None:
        """
        Install a new analysis result.

        Always resets to no-selection, even when the new result reuses the
        active id: ids from the old result mean nothing against new data.
        """
        self.result = result
        had_selection = self.has_selection
        self.active_item_id = None

        item_count = len(result.items) if result is not None else 0
        logger.info(f"Analysis result replaced ({item_count} items), selection cleared")

        if had_selection:
            self._notify(ORIGIN_RESET)

    def select_from_list(self, item_id: int) -> bool:
        """
        Select an item clicked in the feedback list.

        Returns:
            True if the selection was applied, False for an unknown id
        """
        return self._select(item_id, ORIGIN_LIST)

    def select_from_overlay(self, item_id: int) -> bool:
        """
        Select an item whose overlay marker was clicked, and scroll its
        list entry into view.

        Returns:
            True if the selection was applied, False for an unknown id
        """
        if not self._select(item_id, ORIGIN_OVERLAY):
            return False

        if self.scroll_to_anchor is not None:
            self.scroll_to_anchor(anchor_for(item_id))
        return True

    def _select(self, item_id: int, origin: str) -> bool:
        # Unknown ids leave the current selection untouched
        if isinstance(item_id, bool) or not isinstance(item_id, int):
            logger.debug(f"Ignoring selection of non-integer id {item_id!r} from {origin}")
            return False
        if self.result is None or not self.result.has_item(item_id):
            logger.debug(f"Ignoring selection of unknown item {item_id} from {origin}")
            return False

        self.active_item_id = item_id
        logger.debug(f"Selected item {item_id} from {origin}")
        self._notify(origin)
        return True

    def _notify(self, origin: str) -> None:
        for listener in list(self._listeners):
            listener(self.active_item_id, origin)
