"""
producer.py — Step Producer Contract
=====================================
One algorithm run = one StepProducer.

Algorithms are written as plain generator functions:

    def insert(self):
        yield "Enter key of item to insert"
        answer = self.gate.open(NumberField())
        yield "Dialog opened"
        if answer.cancelled:
            return None
        ...
        return f"Insertion completed; total items {self.length}"

Every ``yield`` is a checkpoint (one "Next" click); the ``return`` value is
the optional end-of-run summary.  StepProducer wraps the generator and
exposes the single primitive the controller needs: produce_next().

Design decisions:
  - Single-use.  Once done is reported the wrapper refuses to advance again
    (ProducerExhausted) instead of silently returning empty results.
  - No thread of control of its own.  Nothing happens between two calls.
  - Sub-steps (a search inside Insert) are composed with ``yield from``;
    the sub-generator's return value becomes the value of the expression.
"""

import logging
from dataclasses import dataclass
from typing import Generator, Optional

from engine.errors import ProducerExhausted

logger = logging.getLogger(__name__)


ERROR_MARKER = "ERROR:"
ABORTED_MESSAGE = "Aborted"

StepGenerator = Generator[str, None, Optional[str]]


# ---------------------------------------------------------------------------
# StepResult — what one checkpoint reports back
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class StepResult:
    message: Optional[str] = None
    done:    bool          = False

    @property
    def is_error(self) -> bool:
        return is_error(self.message)


def is_error(message: Optional[str]) -> bool:
    return bool(message) and message.startswith(ERROR_MARKER)


# ---------------------------------------------------------------------------
# StepProducer
# ---------------------------------------------------------------------------
class StepProducer:
    """
    Attributes:
        name       : Label of the action that created this run ("Ins", "Run", …).
        exhausted  : True once produce_next() has reported done.
        steps      : Number of checkpoints produced so far (final one included).
    """

    def __init__(self, generator: StepGenerator, name: str = ""):
        self._generator = generator
        self.name:      str  = name
        self.exhausted: bool = False
        self.steps:     int  = 0

    def produce_next(self) -> StepResult:
        """Advance to the next checkpoint."""
        if self.exhausted:
            raise ProducerExhausted(f"producer {self.name!r} already finished")
        self.steps += 1
        try:
            message = next(self._generator)
        except StopIteration as stop:
            self.exhausted = True
            self._generator = None
            logger.debug("producer %r finished after %d step(s): %r", self.name, self.steps, stop.value)
            return StepResult(message=stop.value, done=True)
        return StepResult(message=message, done=False)

    def close(self) -> None:
        """Discard the underlying generator without running it further."""
        if self._generator is not None:
            self._generator.close()
            self._generator = None
        self.exhausted = True

    def __repr__(self) -> str:
        state = "done" if self.exhausted else f"step {self.steps}"
        return f"<StepProducer {self.name!r} {state}>"


def _aborted() -> StepGenerator:
    return ABORTED_MESSAGE
    yield  # pragma: no cover - makes this a generator


def aborted_producer() -> StepProducer:
    """Synthetic producer that ends immediately with the "Aborted" message."""
    return StepProducer(_aborted(), name="Abort")


def producer_from(messages, final: Optional[str] = None, name: str = "") -> StepProducer:
    """Build a producer from a fixed list of messages (handy for demos and tests)."""
    def _gen() -> StepGenerator:
        for message in messages:
            yield message
        return final
    return StepProducer(_gen(), name=name)
