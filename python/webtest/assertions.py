"""
assertions.py - checks that turn into PASS/FAIL log entries.

None of these raise. A failed check is logged and execution continues; a test
that cannot go on after a failure has to return on its own.
"""

from __future__ import annotations

import math
import traceback
from typing import Any

from webtest.log_channel import LogChannel, LogKind, as_text


def same_value(a: Any, b: Any) -> bool:
    """
    Strict equality with same-value rules for numbers.

    NaN equals NaN, 0.0 and -0.0 differ, and a bool never equals a number.
    Other values are the same when identical or equal. An ``==`` that raises,
    or whose result has no truth value, means they differ.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a is b

    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
            return True
        if a == 0 and b == 0:
            return math.copysign(1.0, a) == math.copysign(1.0, b)
        return a == b

    if a is b:
        return True
    try:
        return bool(a == b)
    except Exception:
        return False


def pass_(channel: LogChannel, msg: Any) -> None:
    channel.append(LogKind.PASS, msg)


def fail(channel: LogChannel, msg: Any) -> None:
    channel.append(LogKind.FAIL, msg)
    # Caller's stack, without this frame
    channel.append(LogKind.STACK, "".join(traceback.format_stack()[:-1]))


def info(channel: LogChannel, msg: Any) -> None:
    channel.append(LogKind.INFO, msg)


def _truthy(value: Any) -> bool:
    try:
        return bool(value)
    except Exception:
        return False


def ok(channel: LogChannel, condition: Any, msg: Any) -> None:
    if _truthy(condition):
        pass_(channel, msg)
    else:
        fail(channel, msg)


def is_(channel: LogChannel, actual: Any, expected: Any, msg: Any) -> None:
    if same_value(actual, expected):
        pass_(channel, msg)
    else:
        fail(channel, f"{as_text(msg)} - Got {as_text(actual)}, expected {as_text(expected)}")


def isnot(channel: LogChannel, a: Any, b: Any, msg: Any) -> None:
    if same_value(a, b):
        fail(channel, f"{as_text(msg)} - Didn't expect {as_text(a)}, but got it")
    else:
        pass_(channel, msg)
