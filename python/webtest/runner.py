"""
runner.py - sequential runner for registered test functions.

The runner drains the TestRegistry and hands the tests to a TestRunnerDoer
scheduled by WebDoist. Each scheduling cycle runs exactly ONE test and then
yields back to the event loop before the next one starts.
"""

from __future__ import annotations

import inspect
import traceback
from typing import List

from webtest.config import RUNNER_TOCK
from webtest.hio_bridge import AsyncRecurDoer, WebDoist
from webtest.log_channel import LogChannel, LogKind
from webtest.registry import RunState, TestFunction, TestRegistry, task_name


def format_stack(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


class TestRunnerDoer(AsyncRecurDoer):
    """
    Doer that runs injected test functions one per cycle.

    Parameters:
        channel: LogChannel receiving progress and failure entries.
        tests: Test functions in execution order.

    The first error raised by a test is logged as FAIL + STACK and ends the
    run; the remaining tests are dropped without any entry of their own.
    """

    __test__ = False

    def __init__(self, channel: LogChannel, tests: List[TestFunction], **kwa):
        super().__init__(**kwa)
        self.channel = channel
        self.tests = list(tests)
        self.current_index = 0
        self.state = RunState.RUNNING

    async def recur_async(self):
        if self.current_index >= len(self.tests):
            self.state = RunState.COMPLETED
            return True

        func = self.tests[self.current_index]
        self.current_index += 1
        name = task_name(func)

        self.channel.append(LogKind.SUBTEST, name)
        self.channel.append(LogKind.INFO, f"Entering test {name}")
        try:
            result = func()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            self.channel.append(LogKind.FAIL, str(e) or type(e).__name__)
            self.channel.append(LogKind.STACK, format_stack(e))
            self.state = RunState.ABORTED
            return True
        self.channel.append(LogKind.INFO, f"Leaving test {name}")

        if self.current_index >= len(self.tests):
            self.state = RunState.COMPLETED
            return True
        return False


class TestRunner:
    """Runs everything registered so far, strictly in registration order."""

    __test__ = False

    def __init__(self, channel: LogChannel, registry: TestRegistry, tock: float = RUNNER_TOCK):
        self.channel = channel
        self.registry = registry
        self.tock = tock
        self.state = RunState.IDLE

    async def run(self) -> RunState:
        tests = self.registry.drain_all()
        self.state = RunState.RUNNING

        # tock=0 means the doer is ready every cycle
        doer = TestRunnerDoer(channel=self.channel, tests=tests, tock=0.0)
        web_doist = WebDoist(doers=[doer], tock=self.tock)
        try:
            await web_doist.do()
        finally:
            # Tests added while running are dropped with the rest.
            self.registry.clear()

        self.state = doer.state
        return self.state
