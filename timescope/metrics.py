"""
Nesting and recursion metrics over a structural tree.

Each function definition is its own scope: loops inside a nested function
count towards that function, not towards the one that encloses it.
Statements outside any function form the `<module>` scope.
"""

import logging
from typing import Iterable, Iterator, Sequence

from .models import (
    MODULE_SCOPE,
    AnalysisMetrics,
    CallExpr,
    ConditionalBlock,
    FunctionDef,
    FunctionMetrics,
    LoopBlock,
    StructuralNode,
)
from .parser import is_self_receiver

logger = logging.getLogger(__name__)


def _children(node: StructuralNode) -> Iterator[StructuralNode]:
    if isinstance(node, (LoopBlock, ConditionalBlock)):
        yield from node.header
        yield from node.body
    elif isinstance(node, FunctionDef):
        yield from node.body
    elif isinstance(node, CallExpr):
        yield from node.nested


def _scope_nodes(nodes: Iterable[StructuralNode]) -> Iterator[StructuralNode]:
    """Every node of the current scope, not entering nested functions."""
    stack = list(nodes)
    stack.reverse()
    while stack:
        node = stack.pop()
        yield node
        if not isinstance(node, FunctionDef):
            children = list(_children(node))
            children.reverse()
            stack.extend(children)


def loop_depth(nodes: Sequence[StructuralNode]) -> int:
    """Length of the longest chain of loops nested inside one another."""
    deepest = 0
    stack = [(node, 0) for node in nodes]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, FunctionDef):
            continue
        if isinstance(node, LoopBlock):
            depth += 1
            deepest = max(deepest, depth)
        stack.extend((child, depth) for child in _children(node))
    return deepest


def loop_count(nodes: Sequence[StructuralNode]) -> int:
    """Number of loop blocks in the scope, nested or not."""
    return sum(1 for node in _scope_nodes(nodes) if isinstance(node, LoopBlock))


def _calls(nodes: Iterable[StructuralNode], shadowed: str) -> Iterator[CallExpr]:
    """
    Every call reachable from `nodes`, including calls made from nested
    functions, except inside nested definitions named `shadowed`.
    """
    stack = list(nodes)
    while stack:
        node = stack.pop()
        if isinstance(node, FunctionDef) and node.name == shadowed:
            continue
        if isinstance(node, CallExpr):
            yield node
        stack.extend(_children(node))


def is_self_recursive(fn: FunctionDef) -> bool:
    """
    Whether `fn` calls itself directly.

    Calls through `self`, `this`, `cls` or `Self` count; calls on any other
    receiver (``other.fib(n)``) resolve elsewhere and do not.
    """
    return any(
        call.target == fn.name and is_self_receiver(call.receiver)
        for call in _calls(fn.body, fn.name)
    )


def outbound_calls(fn: FunctionDef) -> frozenset[str]:
    """Names called from the body of `fn`, itself included."""
    return frozenset(call.target for call in _calls(fn.body, fn.name))


def _functions(nodes: Iterable[StructuralNode]) -> Iterator[FunctionDef]:
    """Every function definition in the forest, nested ones included."""
    stack = list(nodes)
    stack.reverse()
    while stack:
        node = stack.pop()
        if isinstance(node, FunctionDef):
            yield node
        children = list(_children(node))
        children.reverse()
        stack.extend(children)


def function_metrics(fn: FunctionDef) -> FunctionMetrics:
    return FunctionMetrics(
        name=fn.name,
        max_loop_depth=loop_depth(fn.body),
        loop_count=loop_count(fn.body),
        is_recursive=is_self_recursive(fn),
        calls_outbound=outbound_calls(fn),
        line=fn.line,
    )


def module_metrics(forest: Sequence[StructuralNode]) -> FunctionMetrics:
    """Metrics for the statements that sit outside every function."""
    calls = frozenset(
        node.target for node in _scope_nodes(forest) if isinstance(node, CallExpr)
    )
    return FunctionMetrics(
        name=MODULE_SCOPE,
        max_loop_depth=loop_depth(forest),
        loop_count=loop_count(forest),
        calls_outbound=calls,
    )


def collect_metrics(forest: Sequence[StructuralNode]) -> AnalysisMetrics:
    """
    Aggregate metrics for a parsed snippet.

    Args:
        forest: Top-level nodes returned by `parse()`

    Returns:
        AnalysisMetrics with one FunctionMetrics per function plus the
        `<module>` scope listed first
    """
    scopes = [module_metrics(forest)]
    scopes.extend(function_metrics(fn) for fn in _functions(forest))

    metrics = AnalysisMetrics(
        total_loops=sum(scope.loop_count for scope in scopes),
        total_functions=len(scopes) - 1,
        any_recursion=any(scope.is_recursive for scope in scopes),
        max_loop_depth=max(scope.max_loop_depth for scope in scopes),
        functions=tuple(scopes),
    )
    logger.debug(
        "Collected metrics: %d loops, %d functions, depth %d, recursion=%s",
        metrics.total_loops,
        metrics.total_functions,
        metrics.max_loop_depth,
        metrics.any_recursion,
    )
    return metrics
