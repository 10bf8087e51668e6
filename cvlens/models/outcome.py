"""
Outcome data model.

Settled results of the two fallible steps: calling the analysis model,
and parsing its response.
"""

from dataclasses import dataclass
from typing import Optional

from cvlens.models.feedback import AnalysisResult, RESUME_SCHEMA

CONFIGURATION_ERROR = "configuration"
TRANSPORT_ERROR = "transport"


@dataclass(frozen=True)
class ParseFailure:
    """Why a raw response could not be read as an AnalysisResult."""
    reason: str
    raw: str


@dataclass(frozen=True)
class ParseOutcome:
    """
    Either a parsed AnalysisResult or a ParseFailure, never both.

    unwrap_or_fallback() always yields something renderable: on failure
    the raw text is wrapped in the single-item fallback result.
    """
    result: Optional[AnalysisResult] = None
    failure: Optional[ParseFailure] = None
    schema_version: str = RESUME_SCHEMA

    def __post_init__(self):
        if (self.result is None) == (self.failure is None):
            raise ValueError("ParseOutcome needs exactly one of result or failure")

    @classmethod
    def success(cls, result: AnalysisResult) -> "ParseOutcome":
        return cls(result=result, schema_version=result.schema_version)

    @classmethod
    def failed(cls, reason: str, raw: str, schema_version: str = RESUME_SCHEMA) -> "ParseOutcome":
        return cls(failure=ParseFailure(reason=reason, raw=raw), schema_version=schema_version)

    @property
    def ok(self) -> bool:
        return self.failure is None

    def unwrap_or_fallback(self) -> AnalysisResult:
        if self.result is not None:
            return self.result
        return AnalysisResult.fallback(self.failure.raw, schema_version=self.schema_version)


@dataclass(frozen=True)
class AnalysisOutcome:
    """
    Settled outcome of one call to the analysis model.

    On success `analysis` holds the raw response text (expected to be JSON);
    on failure `error` holds a user-facing message and `error_type` says
    whether it was a configuration or a transport problem.
    """
    success: bool
    analysis: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    def __post_init__(self):
        if self.error_type not in (None, CONFIGURATION_ERROR, TRANSPORT_ERROR):
            raise ValueError(
                f"Invalid error_type: {self.error_type}. "
                f"Must be '{CONFIGURATION_ERROR}' or '{TRANSPORT_ERROR}'"
            )

    @classmethod
    def ok(cls, analysis: str) -> "AnalysisOutcome":
        return cls(success=True, analysis=analysis)

    @classmethod
    def configuration_error(cls, message: str) -> "AnalysisOutcome":
        return cls(success=False, error=message, error_type=CONFIGURATION_ERROR)

    @classmethod
    def transport_error(cls, message: str) -> "AnalysisOutcome":
        return cls(success=False, error=message, error_type=TRANSPORT_ERROR)
