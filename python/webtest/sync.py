"""
sync.py - time and DOM synchronization helpers for test bodies.

Every helper takes the HarnessContext first; progress goes to its channel and
DOM access goes through its page adapter.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

from webtest import assertions
from webtest.context import HarnessContext


async def sleep(ms: float) -> None:
    """Suspend the caller for ``ms`` milliseconds."""
    await asyncio.sleep(ms / 1000)


async def wait_for_condition(
    ctx: HarnessContext,
    condition: Callable[[], Any],
    msg: str,
    interval: Optional[float] = None,
    max_tries: Optional[int] = None,
) -> None:
    """
    Poll ``condition`` until it returns something truthy.

    Args:
        condition: Called with no arguments on every poll. Exceptions it
            raises propagate to the caller.
        msg: Message for the PASS/FAIL entry.
        interval: Milliseconds between polls. Defaults to 100.
        max_tries: Polls before giving up. Defaults to 50 (~5 seconds for
            100ms intervals).

    A timeout is only logged as FAIL; it never raises.
    """
    if interval is None:
        interval = ctx.config.interval_ms
    if max_tries is None:
        max_tries = ctx.config.max_tries

    assertions.info(ctx.channel, f"Waiting for condition: {msg}")

    for _ in range(max_tries):
        if condition():
            assertions.pass_(ctx.channel, msg)
            return

        await sleep(interval)

    assertions.fail(ctx.channel, f"{msg} - timed out after {max_tries} tries.")


def is_shown(ctx: HarnessContext, elem) -> bool:
    """Returns True if the element's computed display is not 'none'."""
    return ctx.page.is_shown(elem)


async def wait_for_shown(ctx: HarnessContext, elem, *args) -> None:
    """Wait until ``elem`` is shown; extra args go to wait_for_condition."""
    await wait_for_condition(ctx, lambda: is_shown(ctx, elem), *args)


def _resolve(future: asyncio.Future) -> None:
    if not future.done():
        future.set_result(None)


def wait_for_load(ctx: HarnessContext) -> Awaitable[Any]:
    """
    Wait for the next page load in the frame, including its pageshow.

    The listeners are registered when this is called, not when the result is
    awaited, so a navigation can be started in between. The returned
    awaitable resolves once the frame fired ``load`` and, after that, its
    content window fired ``pageshow``. There is no timeout.
    """
    assertions.info(ctx.channel, "Waiting for load")

    page = ctx.page
    loop = asyncio.get_running_loop()
    load_event = loop.create_future()
    pageshow_event = loop.create_future()

    def on_pageshow(_event=None):
        assertions.info(ctx.channel, "Observed pageshow event")
        _resolve(pageshow_event)

    def on_load(_event=None):
        assertions.info(ctx.channel, "Observed load event")
        page.once(page.frame_window(), "pageshow", on_pageshow)
        _resolve(load_event)

    page.once(page.frame(), "load", on_load)
    return asyncio.gather(load_event, pageshow_event)


async def load_path(ctx: HarnessContext, path: str) -> None:
    """Point the frame at ``path`` and wait for it to load."""
    waiter = wait_for_load(ctx)

    assertions.info(ctx.channel, f"Loading {path}")
    ctx.page.navigate(path)

    await waiter


def set_text(ctx: HarnessContext, elem, text: str) -> None:
    """Emulate typing: set the value and dispatch a bubbling input event."""
    assertions.info(ctx.channel, f"Setting text {text}")

    elem.value = text
    ctx.page.dispatch(elem, "input", "InputEvent")


def click_checkbox(ctx: HarnessContext, elem) -> None:
    """Toggle a checkbox and dispatch a bubbling change event."""
    assertions.info(ctx.channel, "Clicking checkbox")

    elem.checked = not elem.checked
    ctx.page.dispatch(elem, "change", "Event")


def click(ctx: HarnessContext, elem) -> None:
    assertions.info(ctx.channel, "Clicking")

    ctx.page.dispatch(elem, "click", "MouseEvent")
