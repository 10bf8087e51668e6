"""
Analysis Session Orchestrator.

Coordinates one viewer session: the analysis call, normalization,
annotation derivation, overlay rendering and the shared selection.
"""

import logging
from typing import Callable, Dict, List, Optional

from cvlens.agents.analysis import DocumentAnalysisAgent
from cvlens.agents.annotation import AnnotationDeriver, annotations_for_page
from cvlens.agents.normalization import FeedbackNormalizer
from cvlens.agents.overlay import OverlayRenderer
from cvlens.models.annotation import BracketAnnotation, OverlayMarker, PageGeometry
from cvlens.models.feedback import AnalysisResult
from cvlens.models.outcome import AnalysisOutcome
from cvlens.registry.selection import SelectionController
from cvlens.utils.coordinates import PageLayout
import config.settings as settings

logger = logging.getLogger(__name__)


class AnalysisSession:
    """
    State of one document being viewed with its feedback.

    Flow:
    1. analyze() → raw response → normalize → replace result
    2. derive annotations → render markers for every laid-out page
    3. clicks on markers / cards → SelectionController

    Re-entrancy is the caller's obligation: keep the analyze trigger
    disabled while is_analyzing is True.
    """

    def __init__(
        self,
        analysis_agent: Optional[DocumentAnalysisAgent] = None,
        scroll_to_anchor: Optional[Callable[[str], None]] = None,
        schema_version: str = settings.DEFAULT_SCHEMA_VERSION,
        deriver: Optional[AnnotationDeriver] = None,
        renderer: Optional[OverlayRenderer] = None,
        layout: Optional[PageLayout] = None
    ):
        """
        Initialize session.

        Args:
            analysis_agent: Collaborator performing the AI call
            scroll_to_anchor: Scrolls the feedback list to an item anchor
            schema_version: Schema assumed for responses without a discriminator
            deriver: Annotation deriver (default: settings geometry)
            renderer: Overlay renderer; its click callback is rewired to the selection
            layout: Stacked page layout of the viewer
        """
        self.analysis_agent = analysis_agent
        if analysis_agent is not None:
            schema_version = analysis_agent.schema_version

        self.normalizer = FeedbackNormalizer(default_schema_version=schema_version)
        self.deriver = deriver or AnnotationDeriver()
        self.selection = SelectionController(scroll_to_anchor=scroll_to_anchor)
        self.renderer = renderer or OverlayRenderer()
        self.renderer.on_marker_click = self.selection.select_from_overlay
        self.layout = layout or PageLayout()

        self.raw_analysis: Optional[str] = None
        self.annotations: Dict[int, List[BracketAnnotation]] = {}
        self.markers: Dict[int, List[OverlayMarker]] = {}
        self.error: Optional[str] = None
        self.error_type: Optional[str] = None
        self.is_analyzing = False

    @property
    def result(self) -> Optional[AnalysisResult]:
        return self.selection.result

    @property
    def active_item_id(self) -> Optional[int]:
        return self.selection.active_item_id

    def analyze(self, document_url: str) -> AnalysisOutcome:
        """
        Run the analysis for a document and install its result.

        Configuration and transport failures are kept in `error` for the
        user; a malformed response still yields a (fallback) result.
        """
        if self.analysis_agent is None:
            raise RuntimeError("AnalysisSession has no analysis agent")

        self.is_analyzing = True
        self.error = None
        self.error_type = None
        self._install(None, None)

        try:
            outcome = self.analysis_agent.analyze(document_url)
        finally:
            self.is_analyzing = False

        if not outcome.success:
            self.error = outcome.error or "Failed to analyze PDF"
            self.error_type = outcome.error_type
            logger.error(f"Analysis failed ({self.error_type}): {self.error}")
            return outcome

        self.apply_response(outcome.analysis)
        return outcome

    def apply_response(self, raw: str) -> AnalysisResult:
        """Normalize a raw response and make it the current result."""
        result = self.normalizer.normalize(raw)
        self._install(raw, result)
        return result

    def _install(self, raw: Optional[str], result: Optional[AnalysisResult]) -> None:
        self.raw_analysis = raw
        self.selection.replace_result(result)
        self.annotations = self.deriver.derive(result) if result is not None else {}

        # Geometry of pages already laid out is still valid
        self.markers = {
            number: self.renderer.render(geometry, self.annotations_for_page(number))
            for number, geometry in self.layout.pages.items()
        }

    def annotations_for_page(self, page_number: int) -> List[BracketAnnotation]:
        return annotations_for_page(self.annotations, page_number)

    def on_page_rendered(self, page_number: int, width: float, height: float) -> List[OverlayMarker]:
        """
        Handle a render completion event from the PDF viewer.

        Returns:
            Markers to draw on that page (empty before layout completes)
        """
        geometry = PageGeometry(page_number=page_number, width=width, height=height)
        self.layout.update(geometry)

        markers = self.renderer.render(geometry, self.annotations_for_page(page_number))
        self.markers[page_number] = markers
        return markers

    def click_overlay(self, page_number: int, x: float, y: float) -> Optional[int]:
        """Click at page-local coordinates; returns the selected item id on a hit."""
        return self.renderer.click(self.markers.get(page_number, []), x, y)

    def click_viewer(self, x: float, y: float) -> Optional[int]:
        """Click at viewer-container coordinates."""
        point = self.layout.locate(x, y)
        if point is None:
            return None
        return self.click_overlay(point.page_number, point.x, point.y)

    def select_from_list(self, item_id: int) -> bool:
        return self.selection.select_from_list(item_id)
