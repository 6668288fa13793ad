"""
scheduler.py — Run Scheduler
=============================
Turns the controller's single-step primitive into timed, unattended
progress ("Run" mode).

The host drives it the same way the playback loop is: call
tick() periodically (the browser polls every ~20 ms).  A tick that finds
the session due performs exactly ONE advance_once(); everything else is a
no-op.  That gives the guarantees we need without threads:

  - pause / abort tear the session down synchronously, so no stray tick
    can fire afterwards;
  - a step is never skipped or applied twice, however often tick() runs;
  - while the controller waits on the input gate, ticks do nothing.

Interval choice is caller policy (the sort page uses 200 ms for 10 bars,
40 ms for 100); RUN_INTERVALS holds the named presets.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Interval presets (milliseconds per step)
# ---------------------------------------------------------------------------
RUN_INTERVALS = {
    "slow":   1000,
    "normal": 200,
    "fast":   40,
}

MIN_INTERVAL_MS = 20


# ---------------------------------------------------------------------------
# RunSession — exists only while the controller is RUNNING
# ---------------------------------------------------------------------------
@dataclass
class RunSession:
    interval_ms: int
    producer:    object
    next_due:    float
    ticks:       int = 0

    @property
    def interval(self) -> float:
        return self.interval_ms / 1000.0


# ---------------------------------------------------------------------------
# RunScheduler
# ---------------------------------------------------------------------------
class RunScheduler:
    """
    Attributes:
        session : Active RunSession, or None when not running.
        clock   : Monotonic time source in seconds (injectable for tests).
    """

    def __init__(self, controller, clock: Callable[[], float] = time.monotonic):
        self._controller = controller
        self.clock:   Callable[[], float]  = clock
        self.session: Optional[RunSession] = None

    @property
    def active(self) -> bool:
        return self.session is not None

    def start(self, producer, interval_ms: int) -> RunSession:
        interval_ms = max(MIN_INTERVAL_MS, int(interval_ms))
        self.session = RunSession(
            interval_ms=interval_ms,
            producer=producer,
            next_due=self.clock() + interval_ms / 1000.0,
        )
        logger.info("run started: %s every %d ms", producer, interval_ms)
        return self.session

    def cancel(self) -> None:
        if self.session is not None:
            logger.info("run stopped after %d tick(s)", self.session.ticks)
        self.session = None

    def tick(self, now: Optional[float] = None) -> bool:
        """Perform one step if the session is due.  Returns True if a step was taken."""
        session = self.session
        if session is None:
            return False
        controller = self._controller
        if session.producer is not controller.producer:
            # the run outlived its producer
            logger.warning("dropping run session of replaced producer %s", session.producer)
            self.cancel()
            return False
        if not controller.is_running:
            return False
        now = self.clock() if now is None else now
        if now < session.next_due:
            return False
        session.next_due = now + session.interval
        session.ticks += 1
        controller.advance_once()
        return True
