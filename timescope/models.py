"""
Data models for code complexity analysis.

Every model is frozen: a structural tree, its metrics and the final
result are built once per analysis and never mutated afterwards.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Dialect(str, Enum):
    """Grammar used to parse a snippet."""

    AUTO = "auto"
    PYTHON = "python"
    BRACE = "brace"


class SourceUnit(BaseModel):
    """Raw snippet text plus its declared dialect."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Submitted source code")
    dialect: Dialect = Field(default=Dialect.AUTO, description="Declared grammar family")
    language: Optional[str] = Field(
        default=None, description="Preferred tree-sitter grammar, tried first"
    )


class ParserLimits(BaseModel):
    """Resource bounds applied while parsing a single snippet."""

    model_config = ConfigDict(frozen=True)

    max_source_length: int = Field(default=50_000, gt=0)
    max_nesting_depth: int = Field(default=64, gt=0)
    max_syntax_depth: int = Field(
        default=150, gt=0, description="Deepest syntax tree the parser will walk"
    )


# ---------------------------------------------------------------------------
# Structural tree
# ---------------------------------------------------------------------------


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int = Field(default=1, ge=1, description="First source line of the node")


class CallExpr(_Node):
    """Call of `target`, optionally through `receiver` (``self.fib(...)``)."""

    node_type: Literal["call"] = "call"
    target: str
    receiver: Optional[str] = None
    arguments: tuple[str, ...] = ()
    nested: tuple["CallExpr", ...] = Field(
        default=(), description="Calls made inside the argument list"
    )


class OtherStatement(_Node):
    """Any statement that is neither a block nor a call."""

    node_type: Literal["statement"] = "statement"
    text: str = ""


class LoopBlock(_Node):
    node_type: Literal["loop"] = "loop"
    kind: Literal["for", "while"]
    header: tuple[CallExpr, ...] = ()
    body: tuple["StructuralNode", ...] = ()


class ConditionalBlock(_Node):
    node_type: Literal["conditional"] = "conditional"
    header: tuple[CallExpr, ...] = ()
    body: tuple["StructuralNode", ...] = ()


class FunctionDef(_Node):
    node_type: Literal["function"] = "function"
    name: str
    params: tuple[str, ...] = ()
    body: tuple["StructuralNode", ...] = ()


StructuralNode = Annotated[
    Union[FunctionDef, LoopBlock, ConditionalBlock, CallExpr, OtherStatement],
    Field(discriminator="node_type"),
]

for _model in (CallExpr, LoopBlock, ConditionalBlock, FunctionDef):
    _model.model_rebuild()


class ParsedSnippet(BaseModel):
    """A structural forest and the grammar that produced it."""

    model_config = ConfigDict(frozen=True)

    language: str
    dialect: Dialect
    nodes: tuple[StructuralNode, ...] = ()


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

MODULE_SCOPE = "<module>"


class FunctionMetrics(BaseModel):
    """Metrics for one function, or for module-level code (`<module>`)."""

    model_config = ConfigDict(frozen=True)

    name: str
    max_loop_depth: int = Field(default=0, ge=0)
    loop_count: int = Field(default=0, ge=0)
    is_recursive: bool = False
    calls_outbound: frozenset[str] = frozenset()
    line: int = Field(default=1, ge=1)

    @property
    def is_module(self) -> bool:
        return self.name == MODULE_SCOPE


class AnalysisMetrics(BaseModel):
    """Aggregate metrics over every scope of a snippet."""

    model_config = ConfigDict(frozen=True)

    total_loops: int = Field(default=0, ge=0)
    total_functions: int = Field(default=0, ge=0)
    any_recursion: bool = False
    max_loop_depth: int = Field(
        default=0, ge=0, description="Deepest loop nesting across all scopes"
    )
    functions: tuple[FunctionMetrics, ...] = ()


# ---------------------------------------------------------------------------
# Complexity classes
# ---------------------------------------------------------------------------


class ComplexityKind(str, Enum):
    """Complexity families, declared from least to most severe."""

    CONSTANT = "constant"
    LINEAR = "linear"
    QUADRATIC = "quadratic"
    POLYNOMIAL = "polynomial"
    EXPONENTIAL = "exponential"

    @property
    def rank(self) -> int:
        return list(ComplexityKind).index(self)


Rating = Literal["Excellent", "Good", "Fair", "Poor", "Critical"]

_RATINGS: dict[ComplexityKind, Rating] = {
    ComplexityKind.CONSTANT: "Excellent",
    ComplexityKind.LINEAR: "Good",
    ComplexityKind.QUADRATIC: "Fair",
    ComplexityKind.POLYNOMIAL: "Poor",
    ComplexityKind.EXPONENTIAL: "Critical",
}

_DESCRIPTIONS: dict[ComplexityKind, str] = {
    ComplexityKind.CONSTANT: "Excellent! Constant time complexity.",
    ComplexityKind.LINEAR: "Good! Linear time complexity.",
    ComplexityKind.QUADRATIC: "Consider optimization. Quadratic time complexity.",
    ComplexityKind.POLYNOMIAL: "High complexity. Consider algorithm optimization.",
    ComplexityKind.EXPONENTIAL: "High complexity. Consider algorithm optimization.",
}

_EXPECTED_DEGREE = {
    ComplexityKind.CONSTANT: 0,
    ComplexityKind.LINEAR: 1,
    ComplexityKind.QUADRATIC: 2,
    ComplexityKind.EXPONENTIAL: 0,
}


class ComplexityClass(BaseModel):
    """
    A coarse growth-rate label.

    `degree` is the polynomial exponent; it is only free for the
    polynomial kind, where it must be greater than two.
    """

    model_config = ConfigDict(frozen=True)

    kind: ComplexityKind
    degree: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_degree(self) -> "ComplexityClass":
        if self.kind is ComplexityKind.POLYNOMIAL:
            if self.degree <= 2:
                raise ValueError("polynomial degree must be greater than 2")
        elif self.degree != _EXPECTED_DEGREE[self.kind]:
            raise ValueError(
                f"{self.kind.value} complexity must have degree "
                f"{_EXPECTED_DEGREE[self.kind]}"
            )
        return self

    @property
    def label(self) -> str:
        if self.kind is ComplexityKind.CONSTANT:
            return "O(1)"
        if self.kind is ComplexityKind.LINEAR:
            return "O(n)"
        if self.kind is ComplexityKind.QUADRATIC:
            return "O(n²)"
        if self.kind is ComplexityKind.POLYNOMIAL:
            return f"O(n^{self.degree})"
        return "O(2^n)"

    @property
    def rating(self) -> Rating:
        return _RATINGS[self.kind]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self.kind]

    def _sort_key(self) -> tuple[int, int]:
        return (self.kind.rank, self.degree)

    def __lt__(self, other: "ComplexityClass") -> bool:
        if not isinstance(other, ComplexityClass):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __le__(self, other: "ComplexityClass") -> bool:
        if not isinstance(other, ComplexityClass):
            return NotImplemented
        return self._sort_key() <= other._sort_key()

    def __gt__(self, other: "ComplexityClass") -> bool:
        if not isinstance(other, ComplexityClass):
            return NotImplemented
        return self._sort_key() > other._sort_key()

    def __ge__(self, other: "ComplexityClass") -> bool:
        if not isinstance(other, ComplexityClass):
            return NotImplemented
        return self._sort_key() >= other._sort_key()

    def __str__(self) -> str:
        return self.label


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

ErrorType = Literal["empty_input", "source_too_large", "parse_error", "internal_error"]


class AnalysisSuccess(BaseModel):
    """Successful analysis: class, supporting metrics and tips."""

    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    complexity: ComplexityClass
    metrics: AnalysisMetrics
    tips: tuple[str, ...] = ()
    dialect: Dialect
    language: Optional[str] = Field(default=None, description="Grammar the code parsed with")

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "complexity": self.complexity.label,
            "details": {
                "loops": self.metrics.total_loops,
                "recursion": self.metrics.any_recursion,
                "functions": self.metrics.total_functions,
                "maxLoopDepth": self.metrics.max_loop_depth,
            },
            "tips": list(self.tips),
        }


class AnalysisFailure(BaseModel):
    """Failed analysis. Carries no metrics."""

    model_config = ConfigDict(frozen=True)

    status: Literal["failure"] = "failure"
    reason: str = Field(..., min_length=1, description="Human-readable reason")
    error_type: ErrorType = "internal_error"

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.reason}


AnalysisResult = Annotated[
    Union[AnalysisSuccess, AnalysisFailure],
    Field(discriminator="status"),
]
