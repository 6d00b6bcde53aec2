"""
report.py - fold a drained log stream into per-script results.

Used on the driver side. Entries arrive as (kind, message) pairs in emission
order, possibly spread over many getLogs() polls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from webtest.config import UNSUPPORTED_PATH
from webtest.log_channel import LogEntry, LogKind


@dataclass
class ScriptReport:
    path: str
    ended: bool = False
    passed: int = 0
    subtests: List[str] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        # A missing TEST_END means the script never loaded or never finished.
        return self.ended and not self.failures


def _pair(entry) -> Tuple[str, str]:
    if isinstance(entry, LogEntry):
        return entry.kind.value, entry.message
    kind, message = entry
    return str(kind), str(message)


class ReportBuilder:
    """
    Incremental report state; feed it every polled batch.

    FAIL entries logged outside any TEST_START are kept in
    ``orphan_failures``. Paths the harness refused to load are also listed in
    ``rejected``; they never get a TEST_START or TEST_END.
    """

    def __init__(self):
        self.reports: List[ScriptReport] = []
        self.orphan_failures: List[Tuple[str, str]] = []
        self.rejected: List[str] = []
        self._current: Optional[ScriptReport] = None
        self._last_fail: Optional[int] = None

    def feed(self, entries: Iterable) -> None:
        for entry in entries:
            self._feed_one(*_pair(entry))

    def _feed_one(self, kind: str, message: str) -> None:
        current = self._current

        if kind == LogKind.TEST_START.value:
            self._current = ScriptReport(path=message)
            self.reports.append(self._current)
            self._last_fail = None
            return

        if kind == LogKind.FAIL.value:
            target = current.failures if current is not None else self.orphan_failures
            target.append((message, ""))
            if current is None and message.startswith(UNSUPPORTED_PATH):
                self.rejected.append(message[len(UNSUPPORTED_PATH):])
            self._last_fail = len(target) - 1
            return

        if kind == LogKind.STACK.value:
            target = current.failures if current is not None else self.orphan_failures
            if self._last_fail is not None and self._last_fail < len(target):
                text, _ = target[self._last_fail]
                target[self._last_fail] = (text, message)
            self._last_fail = None
            return

        if current is None:
            return

        if kind == LogKind.PASS.value:
            current.passed += 1
        elif kind == LogKind.SUBTEST.value:
            current.subtests.append(message)
        elif kind == LogKind.TEST_END.value:
            current.ended = True
            self._current = None
            self._last_fail = None

    def finished(self, path: str) -> bool:
        """True once ``path`` ended, or was refused without ever starting."""
        if path in self.rejected:
            return True
        return any(r.path == path and r.ended for r in self.reports)

    @property
    def ok(self) -> bool:
        return not self.orphan_failures and all(r.ok for r in self.reports)


def build_reports(entries: Sequence) -> List[ScriptReport]:
    builder = ReportBuilder()
    builder.feed(entries)
    return builder.reports
