"""
hio_bridge.py - Browser-compatible hio integration for the harness runner.

WebDoist wraps hio's Doist scheduler so each scheduling cycle yields back to
the event loop (Pyodide's webloop in the browser), keeping the page
responsive while tests run. AsyncRecurDoer lets a Doer drive one coroutine
per cycle.
"""

import asyncio
import inspect

from hio.base import doing


class WebDoist:
    """
    Browser-compatible wrapper around hio.Doist.

    Uses asyncio.sleep() instead of time.sleep() to yield to the
    JavaScript event loop between scheduling cycles.
    """

    def __init__(self, doers=None, tock=0.03125):
        """
        Initialize WebDoist.

        Args:
            doers: List of Doer instances to schedule.
            tock: Time increment per cycle in seconds (default 1/32 second).
                  Each cycle sleeps this long; 0 still yields to JS.

        There is no run limit: do() returns once every doer is done.
        """
        # Inner Doist runs with real=False; timing is handled here
        self.doist = doing.Doist(real=False, doers=doers, tock=tock)
        self.tock = tock

    async def do(self):
        """Async version of Doist.do() that yields to the event loop."""
        try:
            self.doist.enter()

            while self.doist.deeds:
                self.doist.recur()

                await asyncio.sleep(self.tock)

            self.doist.done = True

        except Exception:
            self.doist.done = False
            raise

        finally:
            self.doist.exit()


class AsyncRecurDoer(doing.Doer):
    """
    Adapter for async recur semantics in hio.

    Subclass this and implement ``async def recur_async(self)``. The sync
    ``recur`` schedules one coroutine, polls it on later cycles, and once it
    finishes either reports done (truthy result) or schedules the next one.
    """

    def __init__(self, **kwa):
        super().__init__(**kwa)
        self._async_task = None
        self._async_result = None

    async def recur_async(self):
        """Override in subclasses. Return truthy when done."""
        return True

    def recur(self, tyme):
        if self._async_task is None:
            if not inspect.iscoroutinefunction(self.recur_async):
                raise TypeError("recur_async must be an async def coroutine function")
            self._async_task = asyncio.ensure_future(self.recur_async())
            return False

        if not self._async_task.done():
            return False

        task, self._async_task = self._async_task, None
        self._async_result = task.result()
        return bool(self._async_result)

    def close(self):
        if self._async_task and not self._async_task.done():
            self._async_task.cancel()
        super().close()


__all__ = ["WebDoist", "AsyncRecurDoer"]
