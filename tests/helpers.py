"""Helpers shared by the test modules."""

import textwrap

from timescope import Dialect, SourceUnit, parse


def dedent(code: str) -> str:
    return textwrap.dedent(code).strip("\n") + "\n"


def parse_python(code: str):
    return parse(SourceUnit(text=dedent(code), dialect=Dialect.PYTHON))


def parse_brace(code: str, language=None):
    return parse(SourceUnit(text=dedent(code), dialect=Dialect.BRACE, language=language))
