"""End-to-end tests for TestHarness.load with scripts read from disk."""
from __future__ import annotations

import asyncio
import textwrap

import pytest

from webtest.log_channel import LogKind


def pairs(entries):
    return [(e.kind.value, e.message) for e in entries]


def kinds(entries):
    return [e.kind.value for e in entries]


class TestPathValidation:
    def test_unsupported_path_logs_single_fail(self, harness):
        assert harness.load("not/allowed/path") is None

        assert pairs(harness.get_logs()) == [("FAIL", "Unsupported test path not/allowed/path")]

    def test_unsupported_path_never_reaches_loader(self, harness):
        calls = []

        async def load(path, namespace):
            calls.append(path)

        harness.loader.load = load
        harness.load("webtest/tests/x.py")
        assert calls == []


class TestLoadAndRun:
    @pytest.mark.asyncio
    async def test_markers_bracket_the_run(self, harness, write_script):
        path = write_script(
            "basic.py",
            textwrap.dedent(
                """
                async def test_first():
                    ok(True, "first assertion")

                async def test_second():
                    is_(2 * 2, 4, "arithmetic")

                add_task(test_first)
                add_task(test_second)
                """
            ),
        )

        await harness.load(path)

        assert pairs(harness.get_logs()) == [
            ("TEST_START", path),
            ("SUBTEST", "test_first"),
            ("INFO", "Entering test test_first"),
            ("PASS", "first assertion"),
            ("INFO", "Leaving test test_first"),
            ("SUBTEST", "test_second"),
            ("INFO", "Entering test test_second"),
            ("PASS", "arithmetic"),
            ("INFO", "Leaving test test_second"),
            ("TEST_END", path),
        ]
        assert harness.get_logs() == ()

    @pytest.mark.asyncio
    async def test_decorator_registration_and_waits(self, harness, write_script):
        path = write_script(
            "waits.py",
            textwrap.dedent(
                """
                state = {"ready": False}

                @add_task
                async def test_waits():
                    async def flip():
                        await sleep(10)
                        state["ready"] = True

                    import asyncio
                    task = asyncio.ensure_future(flip())
                    await wait_for_condition(lambda: state["ready"], "became ready", 5, 20)
                    await task
                    info("done waiting")
                """
            ),
        )

        await harness.load(path)

        entries = pairs(harness.get_logs())
        assert ("PASS", "became ready") in entries
        assert ("INFO", "done waiting") in entries
        assert entries[-1] == ("TEST_END", path)

    @pytest.mark.asyncio
    async def test_error_aborts_and_still_ends(self, harness, write_script):
        path = write_script(
            "aborts.py",
            textwrap.dedent(
                """
                async def test_boom():
                    raise Exception("boom")

                async def test_never():
                    ok(True, "should not run")

                add_task(test_boom)
                add_task(test_never)
                """
            ),
        )

        await harness.load(path)

        entries = harness.get_logs()
        assert kinds(entries) == [
            "TEST_START", "SUBTEST", "INFO", "FAIL", "STACK", "TEST_END",
        ]
        assert entries[3].message == "boom"
        assert "test_never" not in [e.message for e in entries]
        assert len(harness.registry) == 0

    @pytest.mark.asyncio
    async def test_top_level_error_still_runs_registered_tests(self, harness, write_script):
        path = write_script(
            "late_error.py",
            textwrap.dedent(
                """
                async def test_registered_first():
                    ok(True, "registered test ran")

                add_task(test_registered_first)
                raise RuntimeError("script failed while loading")
                """
            ),
        )

        await harness.load(path)

        assert pairs(harness.get_logs()) == [
            ("TEST_START", path),
            ("FAIL", "RuntimeError: script failed while loading"),
            ("SUBTEST", "test_registered_first"),
            ("INFO", "Entering test test_registered_first"),
            ("PASS", "registered test ran"),
            ("INFO", "Leaving test test_registered_first"),
            ("TEST_END", path),
        ]
        assert len(harness.registry) == 0

    @pytest.mark.asyncio
    async def test_syntax_error_means_no_test_end(self, harness, write_script):
        path = write_script("unparsable.py", "add_task(\n")

        await harness.load(path)

        entries = harness.get_logs()
        assert kinds(entries) == ["TEST_START", "FAIL"]
        assert entries[1].message.startswith("SyntaxError")
        assert len(harness.registry) == 0

    @pytest.mark.asyncio
    async def test_missing_script_means_no_test_end(self, harness):
        await harness.load("tests/webtest/nope.py")

        entries = harness.get_logs()
        assert kinds(entries) == ["TEST_START", "FAIL"]

    @pytest.mark.asyncio
    async def test_load_resets_stale_registrations(self, harness, write_script):
        path = write_script("empty.py", "info('nothing registered')\n")

        async def stale():
            harness.utils.ok(False, "stale test ran")

        harness.add_task(stale)
        await harness.load(path)

        entries = pairs(harness.get_logs())
        assert ("SUBTEST", "stale") not in entries
        assert entries == [
            ("TEST_START", path),
            ("INFO", "nothing registered"),
            ("TEST_END", path),
        ]

    @pytest.mark.asyncio
    async def test_logs_persist_across_loads_until_drained(self, harness, write_script):
        first = write_script("one.py", "add_task(lambda: info('one'))\n")
        second = write_script("two.py", "add_task(lambda: info('two'))\n")

        await harness.load(first)
        await harness.load(second)

        entries = pairs(harness.get_logs())
        assert entries.count(("TEST_START", first)) == 1
        assert entries.count(("TEST_END", second)) == 1
        assert entries.index(("TEST_END", first)) < entries.index(("TEST_START", second))
        assert ("SUBTEST", "<lambda>") in entries

    @pytest.mark.asyncio
    async def test_load_returns_before_tests_run(self, harness, write_script):
        path = write_script("later.py", "add_task(lambda: info('ran'))\n")

        future = harness.load(path)

        assert kinds(harness.get_logs()) == ["TEST_START"]
        await asyncio.wait_for(future, 5)
        assert kinds(harness.get_logs())[-1] == "TEST_END"


class TestScriptGlobals:
    def test_bindings_exposed_to_scripts(self, harness):
        names = harness.script_globals()
        for name in (
            "add_task", "ok", "is_", "isnot", "info", "sleep",
            "wait_for_condition", "wait_for_shown", "wait_for_load",
            "load_path", "is_shown", "set_text", "click_checkbox", "click",
            "frame", "TestHarness", "TestUtils",
        ):
            assert name in names

    def test_each_script_gets_a_fresh_namespace(self, harness):
        first = harness.script_globals()
        first["leftover"] = 1
        assert "leftover" not in harness.script_globals()

    def test_frame_binding_returns_page_frame(self, harness, page):
        assert harness.script_globals()["frame"]() is page.frame_elem

    def test_utils_write_to_harness_channel(self, harness):
        bindings = harness.script_globals()
        bindings["isnot"](1, 2, "differ")
        bindings["info"]("hello")
        assert pairs(harness.get_logs()) == [("PASS", "differ"), ("INFO", "hello")]


class TestJsBridge:
    @pytest.fixture
    def bridge(self, harness, monkeypatch):
        from types import SimpleNamespace

        from webtest import harness as harness_module

        monkeypatch.setattr(harness_module, "create_proxy", lambda obj: obj, raising=False)
        monkeypatch.setattr(harness_module, "to_js", lambda obj: obj, raising=False)
        window = SimpleNamespace()
        bridge = harness.install(window)
        assert window.TestHarness is bridge
        return bridge

    def test_get_logs_returns_pairs_and_drains(self, bridge):
        bridge.load("elsewhere/x.py")
        assert bridge.getLogs() == [["FAIL", "Unsupported test path elsewhere/x.py"]]
        assert bridge.getLogs() == []

    @pytest.mark.asyncio
    async def test_load_starts_a_run(self, bridge, harness, write_script):
        path = write_script("bridged.py", "add_task(lambda: ok(True, 'via bridge'))\n")

        assert bridge.load(path) is None

        logs = []
        for _ in range(500):
            logs += bridge.getLogs()
            if ["TEST_END", path] in logs:
                break
            await asyncio.sleep(0.01)

        assert ["PASS", "via bridge"] in logs
        assert logs[-1] == ["TEST_END", path]
