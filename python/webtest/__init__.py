# -*- encoding: utf-8 -*-
"""
webtest package - in-page harness that runs test scripts against a content
frame and buffers structured results for an external driver to pull.
"""

__version__ = '0.1.0'

from .log_channel import LogChannel, LogEntry, LogKind
from .harness import TestHarness, TestUtils
