"""Event-loop helpers for tests that cross the worker thread."""
from __future__ import annotations

import time
from typing import Callable

from PySide6.QtCore import QCoreApplication


def wait_until(predicate: Callable[[], bool], timeout: float = 10.0) -> None:
    """Process Qt events on this thread until 'predicate' holds."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("Timed out waiting for the computation channel.")
        QCoreApplication.processEvents()
        time.sleep(0.005)


def settle(duration: float = 0.2) -> None:
    """Keep processing events for a while, to let anything unexpected arrive."""
    deadline = time.monotonic() + duration
    while time.monotonic() < deadline:
        QCoreApplication.processEvents()
        time.sleep(0.005)
