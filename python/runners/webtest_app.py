"""
webtest_app.py - PyScript entry point for pages/webtest.html.

Creates the process-wide harness, routes its console mirror into the
#output element and publishes ``window.TestHarness`` for the driver.
"""

from __future__ import annotations

from typing import Any, Dict

from pyscript import document

from webtest import ui_log
from webtest.config import HarnessConfig
from webtest.harness import TestHarness

_LOG_CAP = 4000
_rendered = 0

harness = None


def _render_entry(entry: Dict[str, Any]) -> None:
    global _rendered

    output = document.querySelector(harness.ctx.config.output_selector)
    if output is None:
        print(f"{entry['kind']} - {entry['msg']}")
        return

    if _rendered >= _LOG_CAP:
        output.removeChild(output.firstChild)
        output.removeChild(output.firstChild)
        _rendered -= 1

    span = document.createElement("span")
    span.className = entry["css"]
    span.textContent = f"[{entry['time']}] {entry['kind']} - {entry['msg']}"
    output.appendChild(span)
    output.appendChild(document.createTextNode("\n"))
    output.scrollTop = output.scrollHeight
    _rendered += 1


def _set_status(text: str) -> None:
    badge = document.getElementById("statusBadge")
    if badge is not None:
        badge.textContent = text


def _boot() -> None:
    global harness

    harness = TestHarness.for_browser(HarnessConfig())
    ui_log.set_sinks(entry_sink=_render_entry)
    harness.install()
    _set_status("Ready")


_boot()
