"""Tests for nesting depth and recursion detection."""

from tests.helpers import parse_brace, parse_python
from timescope import collect_metrics, is_self_recursive, loop_count, loop_depth
from timescope.models import MODULE_SCOPE, CallExpr, FunctionDef, LoopBlock


def _nested_loops(levels: int) -> str:
    code = ""
    for depth in range(levels):
        code += "    " * depth + f"for i{depth} in range(n):\n"
    return code + "    " * levels + "total += 1\n"


class TestLoopDepth:
    """Nesting analyzer."""

    def test_no_loops(self):
        assert loop_depth(parse_python("x = 1")) == 0

    def test_sibling_loops_do_not_add_depth(self):
        nodes = parse_python(
            """
            for a in xs:
                pass
            for b in ys:
                pass
            """
        )

        assert loop_depth(nodes) == 1
        assert loop_count(nodes) == 2

    def test_nested_loops(self):
        assert loop_depth(parse_python(_nested_loops(3))) == 3

    def test_wrapping_adds_exactly_one_level(self):
        for levels in range(1, 6):
            inner = loop_depth(parse_python(_nested_loops(levels)))
            outer = loop_depth(parse_python(_nested_loops(levels + 1)))
            assert outer == inner + 1

    def test_loops_inside_conditionals_still_nest(self):
        nodes = parse_python(
            """
            for x in xs:
                if x:
                    while x > 0:
                        x -= 1
            """
        )

        assert loop_depth(nodes) == 2

    def test_nested_function_is_its_own_scope(self):
        nodes = parse_python(
            """
            def outer(xs):
                for x in xs:
                    def inner(ys):
                        for y in ys:
                            print(y)
                    inner(x)
            """
        )

        (outer,) = nodes
        assert loop_depth(outer.body) == 1
        assert loop_count(outer.body) == 1

    def test_depth_over_hand_built_tree(self):
        tree = (
            LoopBlock(kind="for", body=(LoopBlock(kind="while"), LoopBlock(kind="for"))),
            LoopBlock(kind="while"),
        )

        assert loop_depth(tree) == 2
        assert loop_count(tree) == 4


class TestRecursion:
    """Recursion detector."""

    def test_direct_recursion(self):
        (fn,) = parse_python(
            """
            def fact(n):
                return 1 if n <= 1 else n * fact(n - 1)
            """
        )

        assert is_self_recursive(fn)

    def test_call_in_loop_header(self):
        (fn,) = parse_python(
            """
            def walk(node):
                for child in walk(node.left):
                    yield child
            """
        )

        assert is_self_recursive(fn)

    def test_call_nested_in_arguments(self):
        (fn,) = parse_python(
            """
            def depth(node):
                return 1 + max(depth(node.left), depth(node.right))
            """
        )

        assert is_self_recursive(fn)

    def test_other_function_with_same_call_site_text(self):
        nodes = parse_python(
            """
            def helper(x):
                return x + 1

            def main(n):
                return helper(n)
            """
        )

        assert not any(is_self_recursive(fn) for fn in nodes)

    def test_self_receiver_counts(self):
        (method,) = parse_python(
            """
            class Solver:
                def solve(self, n):
                    if n == 0:
                        return 0
                    return self.solve(n - 1)
            """
        )

        assert is_self_recursive(method)

    def test_foreign_receiver_does_not_count(self):
        (method,) = parse_python(
            """
            class Proxy:
                def solve(self, n):
                    return self.backend.solve(n)
            """
        )

        assert not is_self_recursive(method)

    def test_this_receiver_in_brace_dialect(self):
        (method,) = parse_brace(
            """
            class Tree {
                int depth(Node node) {
                    if (node == null) return 0;
                    return 1 + Math.max(this.depth(node.left), depth(node.right));
                }
            }
            """
        )

        assert is_self_recursive(method)

    def test_shadowing_definition_is_skipped(self):
        (outer,) = parse_python(
            """
            def outer(n):
                def outer(m):
                    return outer(m - 1)
                return n
            """
        )

        assert not is_self_recursive(outer)
        assert is_self_recursive(outer.body[0])

    def test_closure_calling_enclosing_function(self):
        (walk,) = parse_python(
            """
            def walk(node):
                def visit(child):
                    return walk(child)
                return visit(node)
            """
        )

        assert is_self_recursive(walk)
        assert not is_self_recursive(walk.body[0])

    def test_mutual_recursion_is_not_detected(self):
        nodes = parse_python(
            """
            def is_even(n):
                return True if n == 0 else is_odd(n - 1)

            def is_odd(n):
                return False if n == 0 else is_even(n - 1)
            """
        )

        assert not any(is_self_recursive(fn) for fn in nodes)

    def test_hand_built_tree(self):
        fn = FunctionDef(
            name="f",
            body=(LoopBlock(kind="for", header=(CallExpr(target="f"),)),),
        )

        assert is_self_recursive(fn)


class TestCollectMetrics:
    """Aggregation over every scope."""

    def test_module_scope_is_listed_first(self):
        metrics = collect_metrics(parse_python("for x in xs:\n    print(x)\n"))

        assert metrics.functions[0].name == MODULE_SCOPE
        assert metrics.functions[0].is_module
        assert metrics.functions[0].calls_outbound == frozenset({"print"})
        assert metrics.total_functions == 0
        assert metrics.total_loops == 1
        assert metrics.max_loop_depth == 1

    def test_counts_nested_functions(self):
        metrics = collect_metrics(
            parse_python(
                """
                def outer(xs):
                    for x in xs:
                        def inner(ys):
                            for y in ys:
                                print(y)
                        inner(x)
                """
            )
        )

        assert metrics.total_functions == 2
        assert metrics.total_loops == 2
        assert metrics.max_loop_depth == 1
        assert [scope.name for scope in metrics.functions] == [MODULE_SCOPE, "outer", "inner"]

    def test_outbound_calls(self):
        metrics = collect_metrics(
            parse_python(
                """
                def solve(xs):
                    ys = sorted(xs)
                    return helper(ys) + solve(ys[1:])
                """
            )
        )

        solve = metrics.functions[1]
        assert solve.calls_outbound == frozenset({"sorted", "helper", "solve"})
        assert solve.is_recursive

    def test_any_recursion_matches_functions(self):
        forest = parse_python(
            """
            def a(n):
                return n

            def b(n):
                return b(n - 1)
            """
        )
        metrics = collect_metrics(forest)

        assert metrics.any_recursion == any(scope.is_recursive for scope in metrics.functions)
        assert metrics.any_recursion

    def test_max_depth_across_functions(self):
        metrics = collect_metrics(
            parse_python(
                """
                def flat(xs):
                    for x in xs:
                        pass

                def square(xs):
                    for x in xs:
                        for y in xs:
                            pass
                """
            )
        )

        assert metrics.max_loop_depth == 2
        assert [scope.max_loop_depth for scope in metrics.functions] == [0, 1, 2]
