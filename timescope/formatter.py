"""
Result record construction.
"""

from .exceptions import AnalysisError
from .models import (
    AnalysisFailure,
    AnalysisMetrics,
    AnalysisSuccess,
    ComplexityClass,
    ParsedSnippet,
)

INTERNAL_ERROR_MESSAGE = "Internal analysis error"


def build_success(
    complexity: ComplexityClass,
    metrics: AnalysisMetrics,
    tips: tuple[str, ...],
    snippet: ParsedSnippet,
) -> AnalysisSuccess:
    return AnalysisSuccess(
        complexity=complexity,
        metrics=metrics,
        tips=tips,
        dialect=snippet.dialect,
        language=snippet.language,
    )


def build_failure(error: Exception) -> AnalysisFailure:
    """
    Convert an exception into a failure record.

    Analysis errors keep their message; anything else is reported with a
    generic reason so internals never reach the caller.
    """
    if isinstance(error, AnalysisError):
        return AnalysisFailure(reason=error.message, error_type=error.error_type)
    return AnalysisFailure(reason=INTERNAL_ERROR_MESSAGE, error_type="internal_error")
