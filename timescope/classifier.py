"""
Complexity classification from structural metrics.
"""

import logging

from .models import ComplexityClass, ComplexityKind

logger = logging.getLogger(__name__)


def classify(any_recursion: bool, max_loop_depth: int) -> ComplexityClass:
    """
    Map recursion and loop nesting to a complexity class.

    Recursion dominates: naive self-recursion is treated as exponential
    whatever the loop depth. Otherwise the class is the polynomial degree
    given by the deepest loop nesting.

    Raises:
        ValueError: If `max_loop_depth` is negative
    """
    if max_loop_depth < 0:
        raise ValueError(f"loop depth cannot be negative: {max_loop_depth}")

    if any_recursion:
        result = ComplexityClass(kind=ComplexityKind.EXPONENTIAL)
    elif max_loop_depth == 0:
        result = ComplexityClass(kind=ComplexityKind.CONSTANT)
    elif max_loop_depth == 1:
        result = ComplexityClass(kind=ComplexityKind.LINEAR, degree=1)
    elif max_loop_depth == 2:
        result = ComplexityClass(kind=ComplexityKind.QUADRATIC, degree=2)
    else:
        result = ComplexityClass(kind=ComplexityKind.POLYNOMIAL, degree=max_loop_depth)

    logger.debug(
        "Classified recursion=%s depth=%d as %s", any_recursion, max_loop_depth, result
    )
    return result
