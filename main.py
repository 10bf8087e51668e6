"""
CVLens - AI feedback for PDF documents

CLI entry point for analyzing documents and rendering feedback overlays.
"""

import argparse
import logging
import os
import sys
from urllib.parse import urlparse

from cvlens.agents.analysis import DocumentAnalysisAgent
from cvlens.models.feedback import SCHEMA_KINDS
from cvlens.orchestrator import AnalysisSession
from cvlens.utils.storage import StorageManager
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def report_name_for(url: str) -> str:
    """Default report name: the PDF file name without extension."""
    name = os.path.splitext(os.path.basename(urlparse(url).path))[0]
    return name or "analysis"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="CVLens - AI feedback for PDF documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Analyze a resume and save the report
  python main.py analyze --url https://example.com/resume.pdf

  # Review an academic paper instead
  python main.py analyze --url https://example.com/paper.pdf --schema paper-v1

  # Draw the feedback overlay of page 1 as SVG
  python main.py render --name resume --page 1 --width 714 --height 1010

  # Export the feedback items as CSV
  python main.py export --name resume

Note: Set GOOGLE_API_KEY environment variable before running analyze.
        """
    )
    parser.add_argument(
        "--output-root",
        default=str(settings.OUTPUT_ROOT),
        help=f"Output directory (default: {settings.OUTPUT_ROOT})"
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze a PDF with Gemini")
    analyze.add_argument("--url", required=True, help="URL of the PDF document")
    analyze.add_argument("--name", help="Report name (default: PDF file name)")
    analyze.add_argument(
        "--schema",
        default=settings.DEFAULT_SCHEMA_VERSION,
        choices=sorted(SCHEMA_KINDS),
        help=f"Feedback schema (default: {settings.DEFAULT_SCHEMA_VERSION})"
    )

    default_width = round(settings.DEFAULT_PAGE_WIDTH_PT * settings.VIEWER_SCALE)
    default_height = round(settings.DEFAULT_PAGE_HEIGHT_PT * settings.VIEWER_SCALE)

    render = subparsers.add_parser("render", help="Render the overlay of one page as SVG")
    render.add_argument("--name", required=True, help="Report name")
    render.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    render.add_argument("--width", type=float, default=default_width, help="Rendered page width in px")
    render.add_argument("--height", type=float, default=default_height, help="Rendered page height in px")
    render.add_argument("--raw", action="store_true", help="Read the saved raw response instead of the result")

    export = subparsers.add_parser("export", help="Export feedback items as CSV")
    export.add_argument("--name", required=True, help="Report name")
    export.add_argument("--raw", action="store_true", help="Read the saved raw response instead of the result")

    return parser


def run_analyze(args, storage: StorageManager) -> int:
    logger = logging.getLogger(__name__)
    name = args.name or report_name_for(args.url)

    print("=" * 60)
    print("CVLens - AI feedback for PDF documents")
    print("=" * 60)
    print(f"Document: {args.url}")
    print(f"Schema: {args.schema}")
    print(f"Model: {settings.ANALYSIS_MODEL}")
    print("=" * 60)
    print()

    agent = DocumentAnalysisAgent(
        api_key=settings.GOOGLE_API_KEY,
        model_name=settings.ANALYSIS_MODEL,
        temperature=settings.LLM_TEMPERATURE,
        schema_version=args.schema,
        fetch_timeout_seconds=settings.PDF_FETCH_TIMEOUT_SECONDS
    )
    session = AnalysisSession(analysis_agent=agent)

    outcome = session.analyze(args.url)
    if not outcome.success:
        print(f"\n❌ Analysis failed: {outcome.error}")
        return 1

    storage.save_raw_response(session.raw_analysis, name)
    result_path = storage.save_result(session.result, name)
    csv_path = storage.export_items_csv(session.result, name)

    pages = sorted(session.annotations)
    print()
    print("=" * 60)
    print("✅ Analysis completed successfully!")
    print("=" * 60)
    print(f"Items: {len(session.result.items)}")
    print(f"Pages with annotations: {', '.join(map(str, pages)) or 'none'}")
    print(f"Result: {result_path}")
    print(f"Table: {csv_path}")
    print("=" * 60)

    logger.info("CVLens analysis completed successfully")
    return 0


def _load_session(args, storage: StorageManager):
    text = storage.load_raw_response(args.name) if args.raw else storage.load_result_text(args.name)
    if text is None:
        print(f"\n❌ No saved report named '{args.name}' in {storage.reports_dir}")
        return None

    session = AnalysisSession()
    session.apply_response(text)
    return session


def run_render(args, storage: StorageManager) -> int:
    session = _load_session(args, storage)
    if session is None:
        return 1

    markers = session.on_page_rendered(args.page, args.width, args.height)
    geometry = session.layout.pages[args.page]
    svg = session.renderer.to_svg(geometry, markers)
    path = storage.save_overlay_svg(svg, args.name, args.page)

    print(f"Page {args.page}: {len(markers)} markers → {path}")
    return 0


def run_export(args, storage: StorageManager) -> int:
    session = _load_session(args, storage)
    if session is None:
        return 1

    path = storage.export_items_csv(session.result, args.name)
    print(f"Exported {len(session.result.items)} items → {path}")
    return 0


COMMANDS = {
    "analyze": run_analyze,
    "render": run_render,
    "export": run_export,
}


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        storage = StorageManager(args.output_root)
        exit_code = COMMANDS[args.command](args, storage)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        print("\n⚠️  Interrupted")
        exit_code = 1
    except Exception as e:
        logger.error(f"{args.command} failed: {e}", exc_info=True)
        print(f"\n❌ {args.command} failed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
