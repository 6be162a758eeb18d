"""Deterministic stand-ins for the external EOS model."""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, List

from regimemap.physics.evaluator import EosInput


@dataclass
class FakeState:
    dominant_pressure_channel: Any


def gas_everywhere(state_input: EosInput) -> FakeState:
    return FakeState("gas")


def by_temperature(state_input: EosInput) -> FakeState:
    """gas below 10^4.5 K, radiation below 10^6.5 K, degeneracy above."""
    t = state_input.temperature_k
    if t < 10 ** 4.5:
        return FakeState("gas")
    if t < 10 ** 6.5:
        return FakeState("radiation")
    return FakeState("degeneracy")


def fails_for_negative_eta(state_input: EosInput) -> FakeState:
    if state_input.radiation_departure_eta < 0:
        raise RuntimeError("eta out of range")
    return FakeState("gas")


def out_of_memory(state_input: EosInput) -> FakeState:
    raise MemoryError("no room for raster")


class RecordingEvaluator:
    """Returns a fixed channel and remembers every input it was called with."""

    def __init__(self, channel: Any = "gas", delay_s: float = 0.0) -> None:
        self.channel = channel
        self.delay_s = delay_s
        self.calls: List[EosInput] = []
        self.threads: set = set()

    def __call__(self, state_input: EosInput) -> FakeState:
        self.calls.append(state_input)
        self.threads.add(threading.get_ident())
        if self.delay_s:
            time.sleep(self.delay_s)
        return FakeState(self.channel)


not_a_function = 42
