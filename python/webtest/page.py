"""
page.py - DOM surface the harness observes and manipulates.

BrowserPage talks to the real page through Pyodide's ``js`` module. Anything
that only needs "the frame", "is this element shown" or "dispatch an event"
goes through this class, so the rest of the harness never touches ``js``.
"""

from __future__ import annotations

from typing import Any, Callable

try:
    import js
    from pyodide.ffi import create_once_callable, to_js
except ImportError:  # pragma: no cover - non-browser usage
    js = None

from webtest.config import FRAME_SELECTOR


def _js_options(**options):
    return to_js(options, dict_converter=js.Object.fromEntries)


class BrowserPage:
    """Page adapter backed by the live browser document."""

    def __init__(self, frame_selector: str = FRAME_SELECTOR):
        if js is None:
            raise RuntimeError("BrowserPage requires the Pyodide runtime")
        self.frame_selector = frame_selector

    @property
    def document(self):
        return js.document

    def frame(self):
        frame = self.document.querySelector(self.frame_selector)
        if frame is None:
            raise LookupError(f"No frame matching {self.frame_selector!r}")
        return frame

    def frame_window(self):
        return self.frame().contentWindow

    def navigate(self, path: str) -> None:
        self.frame().src = path

    def is_shown(self, elem) -> bool:
        return js.window.getComputedStyle(elem).display != "none"

    def dispatch(self, elem, event_type: str, event_class: str = "Event") -> None:
        """Dispatch a bubbling DOM event of ``event_class`` on ``elem``."""
        constructor = getattr(js, event_class)
        event = constructor.new(event_type, _js_options(bubbles=True))
        elem.dispatchEvent(event)

    def once(self, target, event_type: str, handler: Callable[[Any], None]) -> None:
        target.addEventListener(
            event_type, create_once_callable(handler), _js_options(once=True)
        )
