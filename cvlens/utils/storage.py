"""
Storage utility.

File I/O helpers for analysis reports: raw responses, normalized results,
CSV item tables and overlay SVGs.
"""

import json
import os
import logging
from typing import Optional

import pandas as pd

from cvlens.models.feedback import AnalysisResult

logger = logging.getLogger(__name__)


ITEM_COLUMNS = [
    "id", "section", "title", "type", "score", "details",
    "page_number", "start_y", "end_y", "x",
]


class StorageManager:
    """
    Manages file I/O for analysis reports.

    Handles:
    - Raw model responses (reports/<name>_raw.txt)
    - Normalized results (reports/<name>.json)
    - Item tables (reports/<name>.csv)
    - Overlay layers (overlays/<name>_page<N>.svg)
    """

    def __init__(self, data_root: str):
        """
        Initialize storage manager.

        Args:
            data_root: Root output directory (e.g., /path/to/output)
        """
        self.data_root = data_root
        self.reports_dir = os.path.join(data_root, "reports")
        self.overlays_dir = os.path.join(data_root, "overlays")

        os.makedirs(self.reports_dir, exist_ok=True)
        os.makedirs(self.overlays_dir, exist_ok=True)

        logger.info(f"Initialized StorageManager with data_root={data_root}")

    def save_raw_response(self, raw: str, name: str) -> str:
        """Save the raw model response exactly as received."""
        filepath = os.path.join(self.reports_dir, f"{name}_raw.txt")

        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                f.write(raw)
            logger.info(f"Saved raw response to {filepath}")
        except Exception as e:
            logger.error(f"Failed to save raw response for {name}: {e}")
            raise
        return filepath

    def load_raw_response(self, name: str) -> Optional[str]:
        filepath = os.path.join(self.reports_dir, f"{name}_raw.txt")

        if not os.path.exists(filepath):
            logger.warning(f"No raw response found for {name}")
            return None

        with open(filepath, 'r', encoding='utf-8') as f:
            return f.read()

    def save_result(self, result: AnalysisResult, name: str) -> str:
        """
        Save a normalized result in wire format.

        Args:
            result: Analysis result
            name: Report name

        Returns:
            Path to the written JSON file
        """
        filepath = os.path.join(self.reports_dir, f"{name}.json")

        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
            logger.info(f"Saved {len(result.items)} items to {filepath}")
        except Exception as e:
            logger.error(f"Failed to save result for {name}: {e}")
            raise
        return filepath

    def load_result_text(self, name: str) -> Optional[str]:
        """
        Load a saved result as text, to be run through the normalizer.

        Returns:
            JSON text, or None if the report doesn't exist
        """
        filepath = os.path.join(self.reports_dir, f"{name}.json")

        if not os.path.exists(filepath):
            logger.warning(f"No saved result found for {name}")
            return None

        with open(filepath, 'r', encoding='utf-8') as f:
            return f.read()

    def export_items_csv(self, result: AnalysisResult, name: str) -> str:
        """
        Export feedback items as a flat table, one row per item.

        Returns:
            Path to the written CSV file
        """
        rows = []
        for item in result.items:
            coordinates = item.coordinates
            rows.append({
                "id": item.id,
                "section": item.section,
                "title": item.title,
                "type": item.kind,
                "score": item.score,
                "details": item.details,
                "page_number": item.location.page_number if item.location else None,
                "start_y": coordinates.start_y if coordinates else None,
                "end_y": coordinates.end_y if coordinates else None,
                "x": coordinates.x if coordinates else None,
            })

        df = pd.DataFrame(rows, columns=ITEM_COLUMNS)
        filepath = os.path.join(self.reports_dir, f"{name}.csv")
        df.to_csv(filepath, index=False)

        logger.info(f"Exported {len(df)} items to {filepath}")
        return filepath

    def save_overlay_svg(self, svg: str, name: str, page_number: int) -> str:
        """Save the overlay layer of one page."""
        filepath = os.path.join(self.overlays_dir, f"{name}_page{page_number}.svg")

        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(svg)
        logger.info(f"Saved overlay for page {page_number} to {filepath}")
        return filepath
