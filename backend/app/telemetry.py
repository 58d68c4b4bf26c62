"""
In-process request counters.

Routes run in the worker thread pool, so every update takes the lock.
Per-grammar counters (``grammar_python``, ``grammar_java``, ...) appear
the first time a snippet parses with that grammar.
"""
from __future__ import annotations

import threading

_lock = threading.Lock()
_counters: dict[str, int] = {
    "requests_total": 0,
    "requests_failed": 0,
    "parse_errors": 0,
    "internal_errors": 0,
}


def increment(name: str, amount: int = 1) -> None:
    with _lock:
        _counters[name] = _counters.get(name, 0) + amount


def record_grammar(language: str) -> None:
    increment(f"grammar_{language}")


def snapshot() -> dict[str, int]:
    with _lock:
        return dict(_counters)


def reset() -> None:
    with _lock:
        for name in list(_counters):
            if name.startswith("grammar_"):
                del _counters[name]
            else:
                _counters[name] = 0
