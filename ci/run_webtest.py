#!/usr/bin/env python3
"""Drive the in-page webtest harness with Playwright and report results.

Usage: run_webtest.py tests/webtest/<script>.py [...]

Each path is handed to ``window.TestHarness.load`` one at a time; logs are
pulled with ``window.TestHarness.getLogs`` until the script's TEST_END
arrives. A script that never reaches TEST_END counts as a load failure.
"""

from __future__ import annotations

import os
import sys
import time
import urllib.error
import urllib.request

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from webtest.report import ReportBuilder

BASE_URL = os.environ.get("WEBTEST_BASE_URL", "http://127.0.0.1:8000").rstrip("/")
HARNESS_PAGE = "/pages/webtest.html"
SERVER_WAIT_SECONDS = 90
HARNESS_WAIT_SECONDS = int(os.environ.get("WEBTEST_HARNESS_WAIT", "300"))
SCRIPT_WAIT_SECONDS = int(os.environ.get("WEBTEST_SCRIPT_WAIT", "600"))
LOG_POLL_SECONDS = 0.25
HEARTBEAT_SECONDS = 15


def log_step(message: str) -> None:
    print(f"[webtest] {message}", flush=True)


def wait_for_server(url: str, timeout_s: int) -> None:
    log_step(f"Waiting for local server at {url} (timeout={timeout_s}s)")
    start = time.time()
    deadline = time.time() + timeout_s
    last_error = "server did not respond"

    while time.time() < deadline:
        try:
            with urllib.request.urlopen(f"{url}{HARNESS_PAGE}", timeout=5) as resp:
                if resp.status == 200:
                    elapsed = int(time.time() - start)
                    log_step(f"Server is reachable after {elapsed}s")
                    return
                last_error = f"unexpected status {resp.status}"
        except (urllib.error.URLError, TimeoutError) as exc:
            last_error = str(exc)

        time.sleep(1)

    raise RuntimeError(f"Timed out waiting for server at {url}: {last_error}")


def wait_for_harness(page, timeout_s: int) -> None:
    log_step(f"Waiting for window.TestHarness (timeout={timeout_s}s)")
    page.wait_for_function(
        "() => window.TestHarness !== undefined", timeout=timeout_s * 1000
    )
    log_step("Harness is ready")


def fetch_logs(page) -> list:
    return page.evaluate("() => window.TestHarness.getLogs()") or []


def print_entry(kind: str, message: str) -> None:
    first, *rest = str(message).splitlines() or [""]
    print(f"  {kind} - {first}", flush=True)
    if kind == "STACK":
        for line in rest:
            print(f"      {line}", flush=True)


def run_script(page, builder: ReportBuilder, path: str) -> None:
    log_step(f"Loading {path}")
    page.evaluate("(path) => window.TestHarness.load(path)", path)

    start = time.monotonic()
    deadline = start + SCRIPT_WAIT_SECONDS
    next_heartbeat = start + HEARTBEAT_SECONDS

    while True:
        batch = fetch_logs(page)
        for kind, message in batch:
            print_entry(kind, message)
        builder.feed(batch)

        if builder.finished(path):
            if path in builder.rejected:
                log_step(f"Harness rejected {path}")
            return

        now = time.monotonic()
        if now >= deadline:
            log_step(f"No TEST_END for {path} after {SCRIPT_WAIT_SECONDS}s")
            return

        if now >= next_heartbeat:
            log_step(f"Still running {path}... elapsed={int(now - start)}s")
            next_heartbeat = now + HEARTBEAT_SECONDS

        time.sleep(LOG_POLL_SECONDS)


def summarize(builder: ReportBuilder) -> int:
    log_step("=" * 48)
    for report in builder.reports:
        status = "OK" if report.ok else "FAILED"
        suffix = "" if report.ended else " (no TEST_END)"
        log_step(
            f"{status}: {report.path} - {report.passed} passed, "
            f"{report.failed} failed, {len(report.subtests)} subtests{suffix}"
        )
        for message, _stack in report.failures:
            log_step(f"    FAIL {message}")

    for message, _stack in builder.orphan_failures:
        log_step(f"FAIL {message}")

    return 0 if builder.ok else 1


def main(argv: list[str]) -> int:
    paths = argv[1:]
    if not paths:
        print(__doc__)
        return 2

    wait_for_server(BASE_URL, SERVER_WAIT_SECONDS)
    log_step("Launching headless Chromium")
    builder = ReportBuilder()

    with sync_playwright() as playwright:
        browser = playwright.chromium.launch(headless=True)
        page = browser.new_page()
        page_errors: list[str] = []
        page.on("pageerror", lambda exc: page_errors.append(str(exc)))

        try:
            page.goto(
                f"{BASE_URL}{HARNESS_PAGE}",
                wait_until="domcontentloaded",
                timeout=180_000,
            )
            wait_for_harness(page, HARNESS_WAIT_SECONDS)
            for path in paths:
                run_script(page, builder, path)

        except PlaywrightTimeoutError as exc:
            log_step(f"Playwright timeout: {exc}")
            return 1
        except Exception as exc:
            log_step(f"Webtest run failed: {type(exc).__name__}: {exc}")
            return 1
        finally:
            browser.close()

        if page_errors:
            log_step("Detected browser page errors:")
            for err in page_errors:
                log_step(f"- {err}")

    return summarize(builder)


if __name__ == "__main__":
    sys.exit(main(sys.argv))
