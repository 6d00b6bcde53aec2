"""
log_channel.py - append/drain buffer of structured harness log entries.

This is the only write path for results. Every other part of the harness
appends here, and the driver drains it by polling.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Tuple

from webtest import ui_log


class LogKind(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    INFO = "INFO"
    STACK = "STACK"
    SUBTEST = "SUBTEST"
    TEST_START = "TEST_START"
    TEST_END = "TEST_END"


@dataclass(frozen=True)
class LogEntry:
    kind: LogKind
    message: str

    def as_pair(self) -> List[str]:
        """Wire form handed to the driver: [kind, message]."""
        return [self.kind.value, self.message]


def as_text(message: Any) -> str:
    try:
        return f"{message}"
    except Exception:
        return object.__repr__(message)


class LogChannel:
    """
    Ordered, unbounded buffer of LogEntry.

    Entries keep strict emission order. ``drain`` hands back everything
    accumulated so far and empties the buffer in the same step, so no entry
    is ever returned twice. Nothing here awaits, which keeps append and drain
    atomic on the single event loop.
    """

    def __init__(self, mirror: bool = True):
        self._entries: List[LogEntry] = []
        self.mirror = mirror

    def append(self, kind: LogKind, message: Any) -> LogEntry:
        entry = LogEntry(kind=LogKind(kind), message=as_text(message))
        self._entries.append(entry)
        if self.mirror:
            try:
                ui_log.emit(entry.kind.value, entry.message)
            except Exception as e:
                # The entry is already buffered; the driver still gets it.
                print(f"ui_log mirror failed: {type(e).__name__}: {e}")
        return entry

    def drain(self) -> Tuple[LogEntry, ...]:
        entries, self._entries = tuple(self._entries), []
        return entries

    def __len__(self) -> int:
        return len(self._entries)
