"""
Tree-sitter grammars and the node types that carry structure in each.

Every supported language maps its grammar's node types onto the few
categories the structural tree cares about: functions, loops,
conditionals and calls. Anything not listed is walked through.
"""

from typing import Any, Optional

from tree_sitter_language_pack import get_parser

from .models import Dialect

# Grammars tried, in order, when a snippet's language is not known.
PYTHON_LANGUAGES = ("python",)
BRACE_LANGUAGES = ("javascript", "typescript", "java", "c", "cpp", "csharp", "go", "rust")
SUPPORTED_LANGUAGES = PYTHON_LANGUAGES + BRACE_LANGUAGES

# Bare names: a callee or receiver of one of these types is a plain name.
IDENTIFIER_TYPES = frozenset({
    "identifier",
    "field_identifier",
    "property_identifier",
    "type_identifier",
    "shorthand_property_identifier",
    "namespace_identifier",
    "this",
    "self",
    "super",
})

# Fields naming the member in ``receiver.member`` callees, per grammar
# (attribute: python, property: javascript, field: c/go/rust, name: java/c#).
MEMBER_NAME_FIELDS = ("attribute", "property", "field", "name")
MEMBER_RECEIVER_FIELDS = ("object", "operand", "argument", "value", "expression", "scope", "path")

COMMENT_TYPES = frozenset({"comment", "line_comment", "block_comment"})

_C_LOOPS = {
    "for_statement": "for",
    "while_statement": "while",
    "do_statement": "while",
}

# Multi-language structural node type mappings
NODE_TYPES: dict[str, dict[str, Any]] = {
    "python": {
        "functions": {"function_definition"},
        "anonymous_functions": {"lambda"},
        "loops": {"for_statement": "for", "while_statement": "while"},
        "conditionals": {"if_statement", "elif_clause", "match_statement", "case_clause"},
        "calls": {"call"},
        "comprehensions": {
            "list_comprehension",
            "set_comprehension",
            "dictionary_comprehension",
            "generator_expression",
        },
        "comprehension_clauses": {"for_in_clause"},
        "assignments": {"assignment": ("left", "right")},
    },
    "javascript": {
        "functions": {
            "function_declaration",
            "generator_function_declaration",
            "method_definition",
        },
        "anonymous_functions": {
            "function_expression",
            "function",
            "generator_function",
            "arrow_function",
        },
        "loops": {**_C_LOOPS, "for_in_statement": "for"},
        "conditionals": {"if_statement", "switch_statement"},
        "calls": {"call_expression"},
        "assignments": {
            "variable_declarator": ("name", "value"),
            "assignment_expression": ("left", "right"),
        },
    },
    "java": {
        "functions": {"method_declaration", "constructor_declaration"},
        "anonymous_functions": {"lambda_expression"},
        "loops": {**_C_LOOPS, "enhanced_for_statement": "for"},
        "conditionals": {"if_statement", "switch_expression", "switch_statement"},
        "calls": {"method_invocation"},
        "assignments": {
            "variable_declarator": ("name", "value"),
            "assignment_expression": ("left", "right"),
        },
    },
    "c": {
        "functions": {"function_definition"},
        "loops": dict(_C_LOOPS),
        "conditionals": {"if_statement", "switch_statement"},
        "calls": {"call_expression"},
    },
    "cpp": {
        "functions": {"function_definition"},
        "anonymous_functions": {"lambda_expression"},
        "loops": {**_C_LOOPS, "for_range_loop": "for"},
        "conditionals": {"if_statement", "switch_statement"},
        "calls": {"call_expression"},
        "assignments": {
            "init_declarator": ("declarator", "value"),
            "assignment_expression": ("left", "right"),
        },
    },
    "csharp": {
        "functions": {
            "method_declaration",
            "constructor_declaration",
            "local_function_statement",
        },
        "anonymous_functions": {"lambda_expression", "anonymous_method_expression"},
        "loops": {**_C_LOOPS, "foreach_statement": "for"},
        "conditionals": {"if_statement", "switch_statement", "switch_expression"},
        "calls": {"invocation_expression"},
    },
    "go": {
        "functions": {"function_declaration", "method_declaration"},
        "anonymous_functions": {"func_literal"},
        "loops": {"for_statement": "for"},
        "conditionals": {
            "if_statement",
            "switch_statement",
            "expression_switch_statement",
            "type_switch_statement",
            "select_statement",
        },
        "calls": {"call_expression"},
    },
    "rust": {
        "functions": {"function_item"},
        "anonymous_functions": {"closure_expression"},
        "loops": {
            "for_expression": "for",
            "while_expression": "while",
            "loop_expression": "while",
        },
        "conditionals": {"if_expression", "match_expression"},
        "calls": {"call_expression"},
        "assignments": {"let_declaration": ("pattern", "value")},
    },
}
NODE_TYPES["typescript"] = NODE_TYPES["javascript"]

_EMPTY: dict = {}


def get_node_types(language: str, category: str) -> Any:
    """
    Get the tree-sitter node types of one structural category.

    Args:
        language: Grammar name (e.g. "python", "java")
        category: "functions", "loops", "calls", ...

    Returns:
        The set (or type -> detail mapping) for this language/category,
        empty when the grammar has no such construct.

    Examples:
        >>> get_node_types("rust", "loops")["loop_expression"]
        'while'
    """
    return NODE_TYPES.get(language, _EMPTY).get(category, _EMPTY)


def dialect_of(language: str) -> Dialect:
    return Dialect.PYTHON if language in PYTHON_LANGUAGES else Dialect.BRACE


def candidate_languages(dialect: Dialect, hint: Optional[str] = None) -> tuple[str, ...]:
    """Grammars to try for a snippet, the hinted one first."""
    if dialect is Dialect.PYTHON:
        family = PYTHON_LANGUAGES
    elif dialect is Dialect.BRACE:
        family = BRACE_LANGUAGES
    else:
        family = SUPPORTED_LANGUAGES
    if hint is None:
        return family
    return (hint,) + tuple(name for name in family if name != hint)


def new_parser(name: str):
    """
    A fresh tree-sitter parser for `name`.

    Parsers are never shared, so concurrent analyses do not touch the
    same parser object.
    """
    return get_parser(name)
