"""Tests for complexity classification and the complexity class model."""

import pytest
from pydantic import ValidationError

from timescope import ComplexityClass, ComplexityKind, classify


class TestClassify:
    """Mapping of recursion and depth to a class."""

    @pytest.mark.parametrize(
        "depth, label",
        [(0, "O(1)"), (1, "O(n)"), (2, "O(n²)"), (3, "O(n^3)"), (7, "O(n^7)")],
    )
    def test_depth_without_recursion(self, depth, label):
        assert classify(False, depth).label == label

    @pytest.mark.parametrize("depth", [0, 1, 2, 5])
    def test_recursion_dominates(self, depth):
        result = classify(True, depth)

        assert result.kind is ComplexityKind.EXPONENTIAL
        assert result.label == "O(2^n)"

    def test_polynomial_keeps_degree(self):
        result = classify(False, 4)

        assert result.kind is ComplexityKind.POLYNOMIAL
        assert result.degree == 4

    def test_negative_depth(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            classify(False, -1)


class TestComplexityClass:
    """Ordering, ratings and validation."""

    def test_ordering(self):
        ordered = [classify(False, 0), classify(False, 1), classify(False, 2),
                   classify(False, 3), classify(False, 9), classify(True, 0)]

        assert sorted(reversed(ordered)) == ordered
        assert classify(False, 3) < classify(False, 4)
        assert classify(True, 0) >= classify(False, 9)

    def test_ratings(self):
        assert [classify(False, d).rating for d in range(4)] == ["Excellent", "Good", "Fair", "Poor"]
        assert classify(True, 0).rating == "Critical"

    def test_description(self):
        assert classify(False, 0).description == "Excellent! Constant time complexity."

    def test_str_is_label(self):
        assert str(classify(False, 2)) == "O(n²)"

    def test_polynomial_degree_must_exceed_two(self):
        with pytest.raises(ValidationError):
            ComplexityClass(kind=ComplexityKind.POLYNOMIAL, degree=2)

    def test_fixed_degree_kinds(self):
        with pytest.raises(ValidationError):
            ComplexityClass(kind=ComplexityKind.LINEAR, degree=3)

    def test_immutable(self):
        result = classify(False, 1)

        with pytest.raises(ValidationError):
            result.degree = 5
