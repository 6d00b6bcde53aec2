"""
registry.py - ordered list of test functions added by test scripts.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Awaitable, Callable, List, Union

TestFunction = Callable[[], Union[Awaitable[Any], Any]]


class RunState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


def task_name(func: TestFunction) -> str:
    """Name used for SUBTEST markers; lambdas keep Python's default '<lambda>'."""
    return getattr(func, "__name__", None) or repr(func)


class TestRegistry:
    """
    Append-only sequence of test functions.

    Insertion order is execution order. The runner takes everything with
    ``drain_all`` and clears whatever is left once it finishes.
    """

    __test__ = False  # not a pytest class

    def __init__(self):
        self._tests: List[TestFunction] = []

    def register(self, func: TestFunction) -> TestFunction:
        if not callable(func):
            raise TypeError(f"Test must be callable, got {type(func).__name__}")
        self._tests.append(func)
        return func

    def drain_all(self) -> List[TestFunction]:
        tests, self._tests = self._tests, []
        return tests

    def clear(self) -> None:
        self._tests.clear()

    def __len__(self) -> int:
        return len(self._tests)

    def __iter__(self):
        return iter(list(self._tests))
