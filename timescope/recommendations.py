"""
Static optimization tips.
"""

from .models import AnalysisMetrics, ComplexityClass, ComplexityKind

MEMOIZATION_TIP = "Consider memoization or dynamic programming"
NESTED_LOOPS_TIP = "Look for opportunities to reduce nested loops"
ITERATIONS_TIP = "Consider algorithmic improvements to reduce iterations"
PROFILING_TIP = "Profile your code with real data to verify performance"
DATA_STRUCTURES_TIP = "Consider data structure optimizations"

# More loops than this, nested or not, earns the iterations tip.
ITERATIONS_THRESHOLD = 2

QUADRATIC = ComplexityClass(kind=ComplexityKind.QUADRATIC, degree=2)


def generate_tips(
    complexity: ComplexityClass, metrics: AnalysisMetrics
) -> tuple[str, ...]:
    """
    Build the ordered tip list for an analysis.

    Rules are applied in order and are not exclusive; the two generic tips
    always close the list.
    """
    tips: list[str] = []
    if complexity.kind is ComplexityKind.EXPONENTIAL:
        tips.append(MEMOIZATION_TIP)
    if complexity >= QUADRATIC:
        tips.append(NESTED_LOOPS_TIP)
    if metrics.total_loops > ITERATIONS_THRESHOLD:
        tips.append(ITERATIONS_TIP)
    tips.append(PROFILING_TIP)
    tips.append(DATA_STRUCTURES_TIP)
    return tuple(tips)
