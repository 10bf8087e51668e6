"""
Feedback Normalizer.

Turns the raw text returned by the analysis model into an AnalysisResult,
falling back to a single synthetic item when the text cannot be read.
"""

import json
import logging
from typing import Optional

from cvlens.models.feedback import AnalysisResult, RESUME_SCHEMA
from cvlens.models.outcome import ParseOutcome

logger = logging.getLogger(__name__)


class FeedbackNormalizer:
    """
    Converts raw model responses into analysis results.

    Two steps:
    1. parse(): JSON decode and structural validation, as a ParseOutcome
    2. normalize(): parse() resolved to a usable result, fallback included

    Malformed output is never an error for the caller. It is logged and
    wrapped so the feedback list always has something to render.
    """

    def __init__(self, default_schema_version: str = RESUME_SCHEMA):
        """
        Initialize normalizer.

        Args:
            default_schema_version: Schema assumed when a response carries
                no "schemaVersion" discriminator
        """
        self.default_schema_version = default_schema_version

    def parse(self, raw: Optional[str]) -> ParseOutcome:
        """
        Parse a raw response without applying the fallback.

        Args:
            raw: Raw response text from the analysis model

        Returns:
            ParseOutcome holding either the result or the failure reason
        """
        raw = raw or ""

        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as e:
            # JSONDecodeError, oversized integer literals, pathological nesting
            logger.warning(f"Analysis response is not valid JSON: {e}")
            return ParseOutcome.failed(f"invalid JSON: {e}", raw, self.default_schema_version)

        try:
            result = AnalysisResult.from_dict(data, default_schema_version=self.default_schema_version)
        except KeyError as e:
            logger.warning(f"Analysis response missing field {e}")
            return ParseOutcome.failed(f"missing field {e}", raw, self.default_schema_version)
        except (TypeError, ValueError) as e:
            logger.warning(f"Analysis response does not match schema: {e}")
            return ParseOutcome.failed(f"schema mismatch: {e}", raw, self.default_schema_version)

        for item in result.items:
            if item.kind not in result.kinds:
                logger.debug(f"Item {item.id} has unknown type '{item.kind}', keeping it")

        logger.debug(f"Parsed analysis with {len(result.items)} items ({result.schema_version})")
        return ParseOutcome.success(result)

    def normalize(self, raw: Optional[str]) -> AnalysisResult:
        """
        Convert a raw response into an AnalysisResult.

        Args:
            raw: Raw response text from the analysis model

        Returns:
            The parsed result, or the single-item fallback wrapping `raw`
        """
        outcome = self.parse(raw)
        if not outcome.ok:
            logger.info("Using fallback result for unparseable analysis response")
        return outcome.unwrap_or_fallback()
