"""
TimeScope - heuristic time-complexity estimation for code snippets.
"""

from .analyzer import ComplexityAnalyzer, analyze
from .classifier import classify
from .exceptions import AnalysisError, EmptyInputError, ParseError, SourceTooLargeError
from .grammars import SUPPORTED_LANGUAGES
from .metrics import collect_metrics, is_self_recursive, loop_count, loop_depth
from .models import (
    AnalysisFailure,
    AnalysisMetrics,
    AnalysisResult,
    AnalysisSuccess,
    ComplexityClass,
    ComplexityKind,
    Dialect,
    FunctionMetrics,
    ParsedSnippet,
    ParserLimits,
    SourceUnit,
)
from .parser import detect_dialect, parse, parse_snippet
from .recommendations import generate_tips

__version__ = "1.0.0"

__all__ = [
    "ComplexityAnalyzer",
    "analyze",
    "classify",
    "collect_metrics",
    "detect_dialect",
    "generate_tips",
    "is_self_recursive",
    "loop_count",
    "loop_depth",
    "parse",
    "parse_snippet",
    "AnalysisError",
    "EmptyInputError",
    "ParseError",
    "SourceTooLargeError",
    "AnalysisFailure",
    "AnalysisMetrics",
    "AnalysisResult",
    "AnalysisSuccess",
    "ComplexityClass",
    "ComplexityKind",
    "Dialect",
    "FunctionMetrics",
    "ParsedSnippet",
    "ParserLimits",
    "SourceUnit",
    "SUPPORTED_LANGUAGES",
]
