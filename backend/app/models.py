"""
Pydantic models for the TimeScope API.
"""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from timescope import Dialect

# Language names the web UI may send: (grammar family, grammar tried first).
LANGUAGES: dict[str, tuple[Dialect, Optional[str]]] = {
    "": (Dialect.AUTO, None),
    "auto": (Dialect.AUTO, None),
    "python": (Dialect.PYTHON, "python"),
    "py": (Dialect.PYTHON, "python"),
    "brace": (Dialect.BRACE, None),
    "javascript": (Dialect.BRACE, "javascript"),
    "js": (Dialect.BRACE, "javascript"),
    "typescript": (Dialect.BRACE, "typescript"),
    "ts": (Dialect.BRACE, "typescript"),
    "java": (Dialect.BRACE, "java"),
    "c": (Dialect.BRACE, "c"),
    "cpp": (Dialect.BRACE, "cpp"),
    "c++": (Dialect.BRACE, "cpp"),
    "csharp": (Dialect.BRACE, "csharp"),
    "c#": (Dialect.BRACE, "csharp"),
    "go": (Dialect.BRACE, "go"),
    "golang": (Dialect.BRACE, "go"),
    "rust": (Dialect.BRACE, "rust"),
    "rs": (Dialect.BRACE, "rust"),
    # No grammar of their own: tried against every brace grammar.
    "kotlin": (Dialect.BRACE, None),
    "swift": (Dialect.BRACE, None),
    "php": (Dialect.BRACE, None),
    "scala": (Dialect.BRACE, None),
    "dart": (Dialect.BRACE, None),
}


class AnalyzeRequest(BaseModel):
    """Request payload for code analysis."""
    code: str = Field(..., description="Source code to analyze")
    language: str = Field(default="auto", description="Language name, or auto")

    @field_validator("language", mode="before")
    @classmethod
    def validate_language(cls, v: object) -> object:
        if v is None:
            return "auto"
        if not isinstance(v, str):
            return v
        v = v.strip().lower()
        if v not in LANGUAGES:
            raise ValueError(f"Unsupported language: {v}")
        return v

    @property
    def dialect(self) -> Dialect:
        return LANGUAGES[self.language][0]

    @property
    def grammar(self) -> Optional[str]:
        return LANGUAGES[self.language][1]


class AnalysisDetails(BaseModel):
    """Structural metrics behind a classification."""
    loops: int = Field(..., ge=0, description="Number of loop blocks")
    recursion: bool = Field(..., description="Whether any function calls itself")
    functions: int = Field(..., ge=0, description="Number of function definitions")
    maxLoopDepth: int = Field(..., ge=0, description="Deepest loop nesting")


class AnalyzeResponse(BaseModel):
    """Successful analysis."""
    success: Literal[True] = True
    complexity: str = Field(..., description="Big-O label (e.g. O(n), O(n²))")
    rating: Literal["Excellent", "Good", "Fair", "Poor", "Critical"]
    description: str = Field(..., description="One-line verdict")
    dialect: Dialect = Field(..., description="Grammar family the code was parsed with")
    language: Optional[str] = Field(default=None, description="Tree-sitter grammar used")
    details: AnalysisDetails
    tips: list[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error response."""
    success: Literal[False] = False
    error: str = Field(..., description="Error message")
    code: Optional[str] = Field(default=None, description="Machine-readable error type")
