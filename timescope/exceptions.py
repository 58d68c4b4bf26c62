"""
Exceptions raised by the complexity-estimation engine.
"""

from typing import Optional


class AnalysisError(Exception):
    """Base exception for all analysis errors."""

    error_type = "internal_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ParseError(AnalysisError):
    """Raised when source text cannot be structurally parsed."""

    error_type = "parse_error"

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)


class EmptyInputError(ParseError):
    """Raised when the submitted source is blank or whitespace-only."""

    error_type = "empty_input"

    def __init__(self, message: str = "empty source"):
        super().__init__(message)


class SourceTooLargeError(AnalysisError):
    """Raised when the submitted source exceeds the configured size limit."""

    error_type = "source_too_large"

    def __init__(self, length: int, limit: int):
        self.length = length
        self.limit = limit
        super().__init__(
            f"source is {length} characters long (maximum is {limit})"
        )
