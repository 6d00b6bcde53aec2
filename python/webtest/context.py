"""
context.py - the state one harness instance owns.

Holds the log channel, the test registry, the page adapter and the config.
Assertions, waits and the runner all receive this object instead of reaching
for module-level globals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from webtest.config import HarnessConfig
from webtest.log_channel import LogChannel
from webtest.registry import TestRegistry


@dataclass
class HarnessContext:
    page: Any
    config: HarnessConfig = field(default_factory=HarnessConfig)
    channel: LogChannel = field(default_factory=LogChannel)
    registry: TestRegistry = field(default_factory=TestRegistry)

    def reset(self) -> None:
        """Start a new load cycle.

        Only the registry is cleared. Undrained log entries belong to the
        driver and survive across loads.
        """
        self.registry.clear()
