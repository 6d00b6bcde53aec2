"""Pytest configuration for webtest harness tests."""
import sys
from pathlib import Path

# Add python/ to path for flat-layout imports
_PYTHON_ROOT = Path(__file__).parent.parent
if str(_PYTHON_ROOT) not in sys.path:
    sys.path.insert(0, str(_PYTHON_ROOT))

import pytest

from webtest import ui_log
from webtest.config import HarnessConfig
from webtest.context import HarnessContext
from webtest.loader import FileLoader
from webtest.harness import TestHarness


class FakeElement:
    """Just enough of a DOM element: value, checked, display and listeners."""

    def __init__(self, name="elem", display="block"):
        self.name = name
        self.display = display
        self.value = ""
        self.checked = False
        self.textContent = ""
        self.listeners = {}
        self.events = []

    def fire(self, event_type, event=None):
        handlers = self.listeners.pop(event_type, [])
        for handler in handlers:
            handler(event)
        return len(handlers)


class FakePage:
    """Page adapter double with a frame element and its content window."""

    def __init__(self):
        self.frame_elem = FakeElement("frame")
        self.window = FakeElement("contentWindow")
        self.frame_elem.contentWindow = self.window
        self.navigations = []

    def frame(self):
        return self.frame_elem

    def frame_window(self):
        return self.window

    def navigate(self, path):
        self.navigations.append(path)

    def is_shown(self, elem):
        return elem.display != "none"

    def dispatch(self, elem, event_type, event_class="Event"):
        elem.events.append((event_type, event_class, True))

    def once(self, target, event_type, handler):
        target.listeners.setdefault(event_type, []).append(handler)


@pytest.fixture(autouse=True)
def quiet_mirror():
    """Collect console mirror output instead of printing it."""
    mirrored = []
    ui_log.set_sinks(entry_sink=mirrored.append)
    yield mirrored
    ui_log.clear_sinks()


@pytest.fixture
def page():
    return FakePage()


@pytest.fixture
def config():
    return HarnessConfig(runner_tock=0.001)


@pytest.fixture
def ctx(page, config):
    return HarnessContext(page=page, config=config)


@pytest.fixture
def channel(ctx):
    return ctx.channel


@pytest.fixture
def script_root(tmp_path):
    """Directory standing in for the server root; scripts go under tests/webtest/."""
    (tmp_path / "tests" / "webtest").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def write_script(script_root):
    def _write(name, source):
        path = f"tests/webtest/{name}"
        (script_root / path).write_text(source, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def harness(ctx, script_root):
    return TestHarness(ctx, FileLoader(script_root))


@pytest.fixture
def make_element():
    return FakeElement
