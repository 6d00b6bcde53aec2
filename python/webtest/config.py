"""
config.py - Harness configuration.

Values the browser harness needs at runtime. Defaults match the page layout in
pages/webtest.html and the path convention used by the driver.
"""

from __future__ import annotations

from dataclasses import dataclass

TEST_PATH_PREFIX = "tests/webtest/"
FRAME_SELECTOR = "#frame"
OUTPUT_SELECTOR = "#output"

# FAIL message for a path outside TEST_PATH_PREFIX, followed by the path
UNSUPPORTED_PATH = "Unsupported test path "

DEFAULT_INTERVAL_MS = 100
DEFAULT_MAX_TRIES = 50

# tock=0.01 means 10ms between runner cycles
RUNNER_TOCK = 0.01


@dataclass(frozen=True)
class HarnessConfig:
    test_path_prefix: str = TEST_PATH_PREFIX
    frame_selector: str = FRAME_SELECTOR
    output_selector: str = OUTPUT_SELECTOR
    interval_ms: int = DEFAULT_INTERVAL_MS
    max_tries: int = DEFAULT_MAX_TRIES
    runner_tock: float = RUNNER_TOCK
    base_url: str = ""

    def accepts(self, path: str) -> bool:
        return path.startswith(self.test_path_prefix)
