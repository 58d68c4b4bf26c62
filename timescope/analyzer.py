"""
Complexity-estimation engine.

Parses a snippet, measures loop nesting and self-recursion, and turns the
result into a complexity class with optimization tips. Analysis is pure:
no state is kept between calls, so one analyzer can serve any number of
threads.
"""

import logging
from typing import Optional, Union

from .classifier import classify
from .exceptions import AnalysisError, ParseError
from .formatter import build_failure, build_success
from .metrics import collect_metrics
from .models import AnalysisFailure, AnalysisSuccess, Dialect, ParserLimits, SourceUnit
from .parser import parse_snippet
from .recommendations import generate_tips

logger = logging.getLogger(__name__)


class ComplexityAnalyzer:
    """
    Heuristic time-complexity analyzer.

    Takes source code as input, returns an AnalysisSuccess or AnalysisFailure.
    """

    def __init__(
        self,
        limits: Optional[ParserLimits] = None,
        default_dialect: Union[Dialect, str] = Dialect.AUTO,
        default_language: Optional[str] = None,
    ):
        self.limits = limits or ParserLimits()
        self.default_dialect = Dialect(default_dialect)
        self.default_language = default_language

    def estimate(
        self,
        code: str,
        dialect: Union[Dialect, str, None] = None,
        language: Optional[str] = None,
    ) -> AnalysisSuccess:
        """
        Analyze code complexity, raising on failure.

        Args:
            code: Source code string to analyze
            dialect: Grammar family to parse with; defaults to the analyzer's
            language: Tree-sitter grammar to try first (e.g. "java");
                defaults to the analyzer's

        Returns:
            AnalysisSuccess with class, metrics and tips

        Raises:
            EmptyInputError: If code is blank
            SourceTooLargeError: If code exceeds the configured limit
            ParseError: If code cannot be parsed or the dialect is unknown
        """
        if dialect is None:
            chosen = self.default_dialect
        else:
            try:
                chosen = Dialect(dialect)
            except ValueError:
                raise ParseError(f"unsupported dialect: {dialect!r}") from None
        source = SourceUnit(text=code, dialect=chosen, language=language or self.default_language)

        snippet = parse_snippet(source, self.limits)
        metrics = collect_metrics(snippet.nodes)
        complexity = classify(metrics.any_recursion, metrics.max_loop_depth)
        tips = generate_tips(complexity, metrics)
        return build_success(complexity, metrics, tips, snippet)

    def analyze(
        self,
        code: str,
        dialect: Union[Dialect, str, None] = None,
        language: Optional[str] = None,
    ) -> Union[AnalysisSuccess, AnalysisFailure]:
        """
        Analyze code complexity. Never raises.

        User errors (blank, oversized or unparsable input) become a failure
        carrying their message; anything else is logged and reported as a
        generic internal error.
        """
        try:
            return self.estimate(code, dialect, language)
        except AnalysisError as e:
            logger.info("Analysis rejected input: %s", e.message)
            return build_failure(e)
        except Exception as e:
            logger.exception("Internal analysis error")
            return build_failure(e)


def analyze(
    source_text: str,
    dialect: Union[Dialect, str] = Dialect.AUTO,
    *,
    language: Optional[str] = None,
    limits: Optional[ParserLimits] = None,
) -> Union[AnalysisSuccess, AnalysisFailure]:
    """Analyze a snippet with a one-off analyzer. See `ComplexityAnalyzer.analyze`."""
    return ComplexityAnalyzer(limits=limits).analyze(source_text, dialect, language)
