"""
Configuration settings for CVLens.

Centralized configuration for the analysis agent, the overlay and the CLI.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
OUTPUT_ROOT = PROJECT_ROOT / "output"

# API Configuration
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")

# LLM Model
ANALYSIS_MODEL = "gemini-2.0-flash"

# Temperature settings (0.0 for deterministic)
LLM_TEMPERATURE = 0.0

# Feedback schema
DEFAULT_SCHEMA_VERSION = "resume-v1"  # "resume-v1" or "paper-v1"

# Document fetching
PDF_FETCH_TIMEOUT_SECONDS = 60

# Overlay geometry (page-relative pixels)
DEFAULT_ANNOTATION_X = 50
BRACKET_ARM_WIDTH = 10
BADGE_OFFSET = 25
BADGE_RADIUS = 14
BRACKET_STROKE_WIDTH = 2

# Feedback list
LIST_ANCHOR_PREFIX = "analysis-item-"

# Viewer
VIEWER_SCALE = 1.2
DEFAULT_PAGE_WIDTH_PT = 595  # A4, used when no rendered geometry is given
DEFAULT_PAGE_HEIGHT_PT = 842
PAGE_GAP_PX = 32  # vertical margin between stacked pages

# Logging
LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "cvlens.log"
