"""
harness.py - the harness facade the driver and test scripts talk to.

TestHarness owns one HarnessContext and ties the pieces together:

  - load(path): validate, load the script (phase 1), run its tests (phase 2)
  - get_logs(): drain the log channel
  - script_globals(): the unqualified names a test script can call

In the browser, install() exposes a small bridge as ``window.TestHarness`` so
the driver can call ``TestHarness.load(path)`` and ``TestHarness.getLogs()``.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional, Tuple

try:
    import js
    from pyodide.ffi import create_proxy, to_js
except ImportError:  # pragma: no cover - non-browser usage
    js = None

from webtest import assertions, sync
from webtest.config import UNSUPPORTED_PATH, HarnessConfig
from webtest.context import HarnessContext
from webtest.loader import FetchLoader, LoadResult, SourceLoader
from webtest.log_channel import LogEntry, LogKind
from webtest.page import BrowserPage
from webtest.registry import TestFunction
from webtest.runner import TestRunner


class TestUtils:
    """Assertion and wait helpers bound to one harness context."""

    __test__ = False

    def __init__(self, ctx: HarnessContext):
        self.ctx = ctx

    def ok(self, condition, msg):
        assertions.ok(self.ctx.channel, condition, msg)

    def is_(self, actual, expected, msg):
        assertions.is_(self.ctx.channel, actual, expected, msg)

    def isnot(self, a, b, msg):
        assertions.isnot(self.ctx.channel, a, b, msg)

    def info(self, msg):
        assertions.info(self.ctx.channel, msg)

    def sleep(self, ms):
        return sync.sleep(ms)

    def wait_for_condition(self, condition, msg, interval=None, max_tries=None):
        return sync.wait_for_condition(self.ctx, condition, msg, interval, max_tries)

    def is_shown(self, elem) -> bool:
        return sync.is_shown(self.ctx, elem)

    def wait_for_shown(self, elem, *args):
        return sync.wait_for_shown(self.ctx, elem, *args)

    def wait_for_load(self):
        return sync.wait_for_load(self.ctx)

    def load_path(self, path):
        return sync.load_path(self.ctx, path)

    def set_text(self, elem, text):
        sync.set_text(self.ctx, elem, text)

    def click_checkbox(self, elem):
        sync.click_checkbox(self.ctx, elem)

    def click(self, elem):
        sync.click(self.ctx, elem)

    def frame(self):
        return self.ctx.page.frame()


_SCRIPT_UTILS = (
    "ok",
    "is_",
    "isnot",
    "info",
    "sleep",
    "wait_for_condition",
    "wait_for_shown",
    "wait_for_load",
    "load_path",
    "is_shown",
    "set_text",
    "click_checkbox",
    "click",
    "frame",
)


class TestHarness:
    """Loads test scripts, runs what they register, and buffers results."""

    __test__ = False

    def __init__(
        self,
        ctx: HarnessContext,
        loader: SourceLoader,
        runner: Optional[TestRunner] = None,
    ):
        self.ctx = ctx
        self.loader = loader
        self.runner = runner or TestRunner(
            ctx.channel, ctx.registry, tock=ctx.config.runner_tock
        )
        self.utils = TestUtils(ctx)
        self._globals = self._build_globals()

    @classmethod
    def for_browser(cls, config: Optional[HarnessConfig] = None) -> "TestHarness":
        config = config or HarnessConfig()
        ctx = HarnessContext(page=BrowserPage(config.frame_selector), config=config)
        return cls(ctx, FetchLoader(config.base_url))

    @property
    def channel(self):
        return self.ctx.channel

    @property
    def registry(self):
        return self.ctx.registry

    def add_task(self, func: TestFunction) -> TestFunction:
        """Register an async test function; usable as a decorator."""
        return self.registry.register(func)

    def get_logs(self) -> Tuple[LogEntry, ...]:
        """Return the entries logged since the last call, and clear them."""
        return self.channel.drain()

    def _build_globals(self) -> Dict[str, Any]:
        bindings: Dict[str, Any] = {name: getattr(self.utils, name) for name in _SCRIPT_UTILS}
        bindings["add_task"] = self.add_task
        bindings["TestHarness"] = self
        bindings["TestUtils"] = self.utils
        return bindings

    def script_globals(self) -> Dict[str, Any]:
        """Fresh namespace for one test script, pre-filled with the bindings."""
        return dict(self._globals)

    def load(self, path: str) -> Optional[asyncio.Future]:
        """
        Load the test script at ``path`` and run the tests it registers.

        ``path`` must start with the configured prefix ("tests/webtest/").
        Anything else is logged as a single FAIL and nothing else happens.
        Returns the future of the load-then-run task, or None if rejected.
        """
        if not self.ctx.config.accepts(path):
            self.channel.append(LogKind.FAIL, f"{UNSUPPORTED_PATH}{path}")
            return None

        self.ctx.reset()
        self.channel.append(LogKind.TEST_START, path)
        return asyncio.ensure_future(self._load_and_run(path))

    async def _load_and_run(self, path: str) -> LoadResult:
        result = await self.loader.load(path, self.script_globals())
        if not result.ok:
            # No TEST_END: the driver treats its absence as a load failure.
            self.channel.append(LogKind.FAIL, result.error)
            self.registry.clear()
            return result

        if result.error is not None:
            # Raised at top level; what it registered before that still runs.
            self.channel.append(LogKind.FAIL, result.error)

        await self.runner.run()
        self.channel.append(LogKind.TEST_END, path)
        return result

    def install(self, window=None) -> "JsBridge":
        """Expose the driver bridge on ``window.TestHarness``."""
        if window is None:
            window = js.window
        bridge = JsBridge(self)
        window.TestHarness = create_proxy(bridge)
        return bridge


class JsBridge:
    """What the driver sees as ``window.TestHarness``."""

    def __init__(self, harness: TestHarness):
        self.harness = harness

    def load(self, path) -> None:
        self.harness.load(str(path))

    def getLogs(self):
        pairs = [entry.as_pair() for entry in self.harness.get_logs()]
        return to_js(pairs)
