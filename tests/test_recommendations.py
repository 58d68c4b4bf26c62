"""Tests for the optimization tip rules."""

from timescope import AnalysisMetrics, classify, generate_tips
from timescope.recommendations import (
    DATA_STRUCTURES_TIP,
    ITERATIONS_TIP,
    MEMOIZATION_TIP,
    NESTED_LOOPS_TIP,
    PROFILING_TIP,
)


def _tips(recursion: bool, depth: int, loops: int) -> tuple[str, ...]:
    metrics = AnalysisMetrics(
        total_loops=loops, any_recursion=recursion, max_loop_depth=depth
    )
    return generate_tips(classify(recursion, depth), metrics)


class TestGenerateTips:
    """Rule table."""

    def test_generic_tips_always_close_the_list(self):
        assert _tips(False, 0, 0) == (PROFILING_TIP, DATA_STRUCTURES_TIP)

    def test_exponential_also_gets_nested_loop_advice(self):
        """Exponential ranks above quadratic, so both rules fire."""
        assert _tips(True, 0, 0) == (
            MEMOIZATION_TIP,
            NESTED_LOOPS_TIP,
            PROFILING_TIP,
            DATA_STRUCTURES_TIP,
        )

    def test_polynomial(self):
        tips = _tips(False, 4, 4)

        assert NESTED_LOOPS_TIP in tips
        assert MEMOIZATION_TIP not in tips

    def test_linear_gets_no_nested_loop_advice(self):
        assert NESTED_LOOPS_TIP not in _tips(False, 1, 1)

    def test_quadratic(self):
        assert _tips(False, 2, 2) == (NESTED_LOOPS_TIP, PROFILING_TIP, DATA_STRUCTURES_TIP)

    def test_many_sibling_loops(self):
        tips = _tips(False, 1, 3)

        assert ITERATIONS_TIP in tips
        assert NESTED_LOOPS_TIP not in tips

    def test_all_rules_in_order(self):
        assert _tips(True, 3, 4) == (
            MEMOIZATION_TIP,
            NESTED_LOOPS_TIP,
            ITERATIONS_TIP,
            PROFILING_TIP,
            DATA_STRUCTURES_TIP,
        )

    def test_threshold_is_exclusive(self):
        assert ITERATIONS_TIP not in _tips(False, 1, 2)
