"""Shared fixtures for the engine and page tests."""
import random

import pytest

from engine import InputGate, Recorder, StepController


class FakeClock:
    """Manually advanced stand-in for time.monotonic()."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def gate():
    return InputGate()


@pytest.fixture
def controller(recorder, gate, clock):
    return StepController(recorder, gate=gate, clock=clock)


@pytest.fixture
def rng():
    return random.Random(1234)
