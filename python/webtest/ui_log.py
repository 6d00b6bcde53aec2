"""
ui_log.py - console mirror for harness log entries.

Every entry appended to the LogChannel is also emitted here so a person
watching the harness page (or a terminal, outside the browser) can follow the
run. The driver never reads this output; it pulls from the LogChannel.

A controller can register a custom entry sink to take over rendering.
"""

from __future__ import annotations

import datetime
import html
from typing import Any, Callable, Dict, Optional

# Optional browser document bridge.
try:
    from pyscript import document
except ImportError:  # pragma: no cover - non-browser usage
    document = None

from webtest.config import OUTPUT_SELECTOR


MirrorEntry = Dict[str, Any]
EntrySink = Callable[[MirrorEntry], None]


_ALLOWED_CSS = {"info", "success", "fail", "loading"}
_CSS_BY_KIND = {"PASS": "success", "FAIL": "fail", "STACK": "fail"}
_entry_sink: Optional[EntrySink] = None


def _now() -> str:
    return datetime.datetime.now().strftime("%H:%M:%S.%f")[:-3]


def css_for_kind(kind: str) -> str:
    return _CSS_BY_KIND.get(kind, "info")


def _normalize_css(css_class: str) -> str:
    return css_class if css_class in _ALLOWED_CSS else "info"


def _normalize_entry(entry: MirrorEntry) -> MirrorEntry:
    kind = str(entry.get("kind") or "INFO")
    css = entry.get("css") or css_for_kind(kind)
    return {
        "time": str(entry.get("time") or _now()),
        "css": _normalize_css(str(css)),
        "kind": kind,
        "msg": str(entry.get("msg") or ""),
    }


def set_sinks(entry_sink: Optional[EntrySink] = None) -> None:
    """Register a sink for app-level rendering."""
    global _entry_sink
    _entry_sink = entry_sink


def clear_sinks() -> None:
    """Remove the registered sink and fall back to the default output."""
    global _entry_sink
    _entry_sink = None


def emit(kind: str, msg: Any, *, time: Optional[str] = None) -> None:
    entry = _normalize_entry({"time": time, "kind": kind, "msg": msg})
    if _entry_sink is not None:
        _entry_sink(entry)
        return
    _default_emit(entry)


def _format(entry: MirrorEntry) -> str:
    # Same shape as the line the driver-side console shows: "KIND - message"
    return f"{entry['kind']} - {entry['msg']}"


def _default_emit(entry: MirrorEntry) -> None:
    line = _format(entry)
    if document is None:
        print(line)
        return

    output = document.querySelector(OUTPUT_SELECTOR)
    if output is None:
        print(line)
        return

    text = html.escape(f"[{entry['time']}] {line}")
    output.innerHTML += f'<span class="{entry["css"]}">{text}</span>\n'
    output.scrollTop = output.scrollHeight
