"""
Structural parser.

Parses a snippet with tree-sitter and folds the concrete syntax tree into
a forest of structural nodes (functions, loops, conditionals, calls).
Nesting comes from the grammar, so sibling and nested loops are told
apart by containment, never by line layout.

When the language of a snippet is not known, every grammar of its
dialect is tried in turn and the first one that parses it without
errors wins.
"""

import logging
from typing import Optional, Sequence

from .exceptions import EmptyInputError, ParseError, SourceTooLargeError
from .grammars import (
    COMMENT_TYPES,
    IDENTIFIER_TYPES,
    MEMBER_NAME_FIELDS,
    MEMBER_RECEIVER_FIELDS,
    SUPPORTED_LANGUAGES,
    candidate_languages,
    dialect_of,
    get_node_types,
    new_parser,
)
from .models import (
    CallExpr,
    ConditionalBlock,
    Dialect,
    FunctionDef,
    LoopBlock,
    OtherStatement,
    ParsedSnippet,
    ParserLimits,
    SourceUnit,
    StructuralNode,
)

logger = logging.getLogger(__name__)

ANONYMOUS = "<anonymous>"
_SELF_RECEIVERS = frozenset({"self", "this", "cls", "Self"})
_STATEMENT_TEXT_LIMIT = 80
_STATEMENT_SUFFIXES = ("_statement", "declaration", "_definition", "_item")
_HEADER_FIELDS = ("condition", "value", "subject")
_QUALIFIED_NAMES = frozenset({"qualified_identifier", "scoped_identifier"})
_GENERIC_CALLEES = frozenset({"template_function", "generic_function"})
_DECLARATOR_NAMES = IDENTIFIER_TYPES | {"destructor_name", "operator_name"}


# ---------------------------------------------------------------------------
# Node helpers
# ---------------------------------------------------------------------------


def _text(node) -> str:
    return node.text.decode("utf-8", errors="replace")


def _line(node) -> int:
    return node.start_point[0] + 1


def _field(node, names: Sequence[str]):
    """First of the named fields present on `node`."""
    for name in names:
        child = node.child_by_field_name(name)
        if child is not None:
            return child
    return None


def _partition(nodes: list) -> tuple[tuple[CallExpr, ...], list]:
    calls = tuple(n for n in nodes if isinstance(n, CallExpr))
    others = [n for n in nodes if not isinstance(n, CallExpr)]
    return calls, others


def _statement(node) -> OtherStatement:
    text = " ".join(_text(node).split())
    if len(text) > _STATEMENT_TEXT_LIMIT:
        text = text[: _STATEMENT_TEXT_LIMIT - 3] + "..."
    return OtherStatement(text=text, line=_line(node))


def _function_name(node) -> str:
    name = node.child_by_field_name("name")
    if name is not None:
        return _text(name)
    # C and C++ bury the name in a chain of declarators.
    declarator = node.child_by_field_name("declarator")
    while declarator is not None:
        if declarator.type in _DECLARATOR_NAMES:
            return _text(declarator)
        if declarator.type in _QUALIFIED_NAMES:
            declarator = declarator.child_by_field_name("name")
            continue
        declarator = declarator.child_by_field_name("declarator")
    return ANONYMOUS


def _parameters(node) -> tuple[str, ...]:
    current = node
    while current is not None:
        params = current.child_by_field_name("parameters")
        if params is not None:
            return tuple(
                _text(child) for child in params.named_children
                if child.type not in COMMENT_TYPES
            )
        single = current.child_by_field_name("parameter")
        if single is not None:
            return (_text(single),)
        current = current.child_by_field_name("declarator")
    return ()


def _receiver_name(receiver) -> Optional[str]:
    """``self`` for ``self.f()``, ``items`` for ``self.items.append()``."""
    if receiver is None:
        return None
    if receiver.type in IDENTIFIER_TYPES or receiver.named_child_count == 0:
        return _text(receiver)
    member = _field(receiver, MEMBER_NAME_FIELDS)
    if member is not None and member.type in IDENTIFIER_TYPES:
        return _text(member)
    return "<expr>"


def is_self_receiver(receiver: Optional[str]) -> bool:
    """True for calls that can only resolve to the enclosing function."""
    return receiver is None or receiver in _SELF_RECEIVERS


def _syntax_errors(root) -> list:
    """ERROR and MISSING nodes of a tree, in source order."""
    errors = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_missing or node.type == "ERROR":
            errors.append(node)
            continue
        if node.has_error:
            stack.extend(reversed(node.children))
    return errors


# ---------------------------------------------------------------------------
# Tree folding
# ---------------------------------------------------------------------------


class _TreeBuilder:
    """Folds one tree-sitter tree into structural nodes."""

    def __init__(self, language: str, limits: ParserLimits):
        self.limits = limits
        self.functions = get_node_types(language, "functions")
        self.anonymous = get_node_types(language, "anonymous_functions")
        self.loops = get_node_types(language, "loops")
        self.conditionals = get_node_types(language, "conditionals")
        self.calls = get_node_types(language, "calls")
        self.comprehensions = get_node_types(language, "comprehensions")
        self.clauses = get_node_types(language, "comprehension_clauses")
        self.assignments = get_node_types(language, "assignments")
        self._level = 0

    def build(self, root) -> tuple[StructuralNode, ...]:
        return tuple(self._visit_all(root.named_children, 0))

    def _check_depth(self, depth: int, node) -> None:
        if depth > self.limits.max_nesting_depth:
            raise ParseError("nesting too deep", _line(node))

    def _visit_all(self, nodes, depth: int) -> list:
        result: list = []
        for node in nodes:
            result.extend(self._visit(node, depth))
        return result

    def _visit(self, node, depth: int) -> list:
        if node is None or node.type in COMMENT_TYPES:
            return []
        self._level += 1
        try:
            if self._level > self.limits.max_syntax_depth:
                raise ParseError("expression nesting too deep", _line(node))
            return self._dispatch(node, depth)
        finally:
            self._level -= 1

    def _dispatch(self, node, depth: int) -> list:
        kind = node.type
        if kind in self.functions:
            return [self._function(node, depth)]
        if kind in self.loops:
            return self._loop(node, self.loops[kind], depth)
        if kind in self.conditionals:
            return self._conditional(node, depth)
        if kind in self.calls:
            return self._call(node, depth)
        if kind in self.comprehensions:
            return self._comprehension(node, depth)
        if kind in self.assignments:
            function = self._assigned_function(node, depth)
            if function is not None:
                return [function]
        if kind in self.anonymous:
            # Callbacks and inline lambdas belong to the enclosing scope.
            self._check_depth(depth + 1, node)
            return self._visit(node.child_by_field_name("body"), depth + 1)

        nodes = self._visit_all(node.named_children, depth)
        if not nodes and kind.endswith(_STATEMENT_SUFFIXES):
            return [_statement(node)]
        return nodes

    # -- blocks ------------------------------------------------------------

    def _function(self, node, depth: int, name: Optional[str] = None) -> FunctionDef:
        self._check_depth(depth + 1, node)
        return FunctionDef(
            name=name or _function_name(node),
            params=_parameters(node),
            body=tuple(self._visit(node.child_by_field_name("body"), depth + 1)),
            line=_line(node),
        )

    def _assigned_function(self, node, depth: int) -> Optional[FunctionDef]:
        """``square = lambda x: ...``, ``const f = (n) => ...``."""
        target_field, value_field = self.assignments[node.type]
        target = node.child_by_field_name(target_field)
        value = node.child_by_field_name(value_field)
        if target is None or value is None:
            return None
        if target.type not in IDENTIFIER_TYPES or value.type not in self.anonymous:
            return None
        return self._function(value, depth, name=_text(target))

    def _loop(self, node, kind: str, depth: int) -> list:
        self._check_depth(depth + 1, node)
        body = node.child_by_field_name("body")
        alternative = node.child_by_field_name("alternative")
        header = [c for c in node.named_children if c != body and c != alternative]
        calls, outside = _partition(self._visit_all(header, depth))
        # Initializers and updates (`int i = 0`, `i++`) are not statements of their own.
        outside = [n for n in outside if not isinstance(n, OtherStatement)]
        loop = LoopBlock(
            kind=kind,
            header=calls,
            body=tuple(self._visit(body, depth + 1)),
            line=_line(node),
        )
        # A loop's `else` suite runs once, after the loop.
        trailing = []
        if alternative is not None:
            trailing = self._visit_all(alternative.named_children, depth)
        return outside + [loop] + trailing

    def _conditional(self, node, depth: int) -> list:
        self._check_depth(depth + 1, node)
        alternatives = node.children_by_field_name("alternative")
        header = _field(node, _HEADER_FIELDS)
        rest = [c for c in node.named_children if c != header and c not in alternatives]
        calls, outside = _partition(self._visit(header, depth))
        block = ConditionalBlock(
            header=calls,
            body=tuple(self._visit_all(rest, depth + 1)),
            line=_line(node),
        )
        nodes = outside + [block]
        for alternative in alternatives:
            nodes.extend(self._alternative(alternative, depth))
        return nodes

    def _alternative(self, node, depth: int) -> list:
        """An `else` branch, kept beside its `if` so `else if` chains stay flat."""
        if node.type in self.conditionals:
            return self._visit(node, depth)
        inner = [c for c in node.named_children if c.type not in COMMENT_TYPES]
        if node.type == "else_clause":
            if len(inner) == 1 and inner[0].type in self.conditionals:
                return self._visit(inner[0], depth)
        else:
            inner = [node]
        self._check_depth(depth + 1, node)
        return [ConditionalBlock(body=tuple(self._visit_all(inner, depth + 1)), line=_line(node))]

    def _comprehension(self, node, depth: int) -> list:
        """Each `for` clause is a loop wrapping the clauses after it."""
        clauses = [c for c in node.named_children if c.type in self.clauses]
        inner_depth = depth + len(clauses)
        self._check_depth(inner_depth, node)
        nodes: list = []
        for child in node.named_children:
            parts = child.named_children if child.type in self.clauses else [child]
            nodes.extend(self._visit_all(parts, inner_depth))
        for clause in reversed(clauses):
            nodes = [LoopBlock(kind="for", body=tuple(nodes), line=_line(clause))]
        return nodes

    # -- calls -------------------------------------------------------------

    def _callee(self, node):
        """Name and receiver nodes of a call, or (None, None)."""
        function = _field(node, ("function", "constructor"))
        if function is None:
            return node.child_by_field_name("name"), node.child_by_field_name("object")
        while function.type in _GENERIC_CALLEES:
            function = _field(function, ("name", "function"))
            if function is None:
                return None, None
        if function.type in IDENTIFIER_TYPES:
            return function, None
        if function.type in self.anonymous:
            return None, None
        name = _field(function, MEMBER_NAME_FIELDS)
        if name is None:
            return None, None
        return name, _field(function, MEMBER_RECEIVER_FIELDS)

    def _arguments(self, node) -> tuple[str, ...]:
        if node is None:
            return ()
        if node.type in self.comprehensions:
            return (_text(node),)
        return tuple(
            _text(child) for child in node.named_children if child.type not in COMMENT_TYPES
        )

    def _call(self, node, depth: int) -> list:
        name, receiver = self._callee(node)
        arguments = node.child_by_field_name("arguments")
        inner = self._visit(arguments, depth)
        if name is None:
            # ``f(x)(y)``, ``(lambda: x)()``: nothing to resolve by name.
            return self._visit(_field(node, ("function", "constructor")), depth) + inner

        before: list = []
        if receiver is not None and receiver.named_child_count:
            before = self._visit(receiver, depth)
        nested, others = _partition(inner)
        call = CallExpr(
            target=_text(name),
            receiver=_receiver_name(receiver),
            arguments=self._arguments(arguments),
            nested=nested,
            line=_line(node),
        )
        return before + others + [call]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _check_source(source: SourceUnit, limits: ParserLimits) -> None:
    text = source.text
    if not text or not text.strip():
        raise EmptyInputError()
    if len(text) > limits.max_source_length:
        raise SourceTooLargeError(len(text), limits.max_source_length)
    if source.language is not None and source.language not in SUPPORTED_LANGUAGES:
        raise ParseError(f"unsupported language: {source.language!r}")


def _select_grammar(source: SourceUnit):
    """The first candidate grammar that parses the snippet cleanly."""
    data = source.text.encode("utf-8")
    best = None
    for language in candidate_languages(source.dialect, source.language):
        tree = new_parser(language).parse(data)
        if not tree.root_node.has_error:
            return language, tree
        errors = _syntax_errors(tree.root_node)
        if best is None or len(errors) < len(best[1]):
            best = (language, errors)

    language, errors = best
    logger.debug("No grammar parsed the snippet; closest was %s", language)
    if not errors:
        raise ParseError("invalid syntax")
    node = errors[0]
    if node.is_missing:
        raise ParseError(f"expected '{node.type}'", _line(node))
    raise ParseError("invalid syntax", _line(node))


def detect_dialect(text: str) -> Dialect:
    """Dialect of the first grammar that parses `text` cleanly; Python if none does."""
    data = text.encode("utf-8")
    for language in SUPPORTED_LANGUAGES:
        if not new_parser(language).parse(data).root_node.has_error:
            return dialect_of(language)
    return Dialect.PYTHON


def parse_snippet(
    source: SourceUnit, limits: Optional[ParserLimits] = None
) -> ParsedSnippet:
    """
    Parse a snippet into a structural forest.

    Args:
        source: Snippet, its dialect (`auto` is resolved here) and an
            optional preferred grammar
        limits: Resource bounds; defaults to `ParserLimits()`

    Returns:
        ParsedSnippet with the grammar used and the top-level nodes

    Raises:
        EmptyInputError: If the text is blank
        SourceTooLargeError: If the text exceeds `limits.max_source_length`
        ParseError: If no candidate grammar parses the text, or its nesting
            exceeds the limits
    """
    limits = limits or ParserLimits()
    _check_source(source, limits)

    language, tree = _select_grammar(source)
    nodes = _TreeBuilder(language, limits).build(tree.root_node)

    logger.debug("Parsed %d top-level nodes with the %s grammar", len(nodes), language)
    return ParsedSnippet(language=language, dialect=dialect_of(language), nodes=nodes)


def parse(
    source: SourceUnit, limits: Optional[ParserLimits] = None
) -> tuple[StructuralNode, ...]:
    """Top-level structural nodes of a snippet. See `parse_snippet`."""
    return parse_snippet(source, limits).nodes
