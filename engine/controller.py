"""
controller.py — Step Controller
================================
The ONLY object that advances a StepProducer.  One instance per page.

State machine:
    IDLE / DONE        →  start(p)          →  STEP_PENDING
    STEP_PENDING       →  advance_once()    →  STEP_PENDING        (more to come)
                                            →  WAITING_FOR_INPUT   (checkpoint opened the gate)
                                            →  DONE → IDLE         (producer finished)
    WAITING_FOR_INPUT  →  gate resolves     →  one automatic advance_once()
    STEP_PENDING       →  run(ms)           →  RUNNING   (ticks call advance_once())
    RUNNING            →  pause()           →  STEP_PENDING
    any active state   →  abort()           →  ABORTING → "Aborted" → DONE → IDLE

Ordering:
  produce_next() is never entered twice at the same time and never while
  the gate holds an open request for the current producer.  The gate's
  done-callback is the sole re-entry point while WAITING_FOR_INPUT, and it
  checks that the producer and request it was registered for are still
  current; a resolution arriving after abort is dropped.

Protocol violations raise ProtocolError.  The page filters illegal clicks
before they get here, so hitting one means a bug.
"""

import logging
import time
from enum import Enum
from functools import partial
from typing import Any, Callable, Optional

from engine.errors import ProtocolError
from engine.gate import InputGate, InputRequest
from engine.producer import StepProducer, StepResult, aborted_producer
from engine.scheduler import RunScheduler

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class ControllerState(Enum):
    IDLE              = "idle"
    STEP_PENDING      = "step_pending"
    WAITING_FOR_INPUT = "waiting_for_input"
    RUNNING           = "running"
    ABORTING          = "aborting"
    DONE              = "done"


_INACTIVE = (ControllerState.IDLE, ControllerState.DONE)
_ADVANCEABLE = (ControllerState.STEP_PENDING, ControllerState.RUNNING, ControllerState.ABORTING)


# ---------------------------------------------------------------------------
# StepController
# ---------------------------------------------------------------------------
class StepController:
    """
    Attributes:
        surface     : Presentation surface; gets display_message() / display_snapshot().
        snapshot    : Callable returning the data snapshot to render after each checkpoint.
        gate        : The InputGate the page's producers open requests on.
        scheduler   : RunScheduler backing run() / pause() / tick().
        state       : Current ControllerState.
        last_result : StepResult of the most recent checkpoint.
        step_count  : Checkpoints produced in the current (or last) run.
        on_state    : Optional callback(ControllerState) fired on every transition.
    """

    def __init__(
        self,
        surface,
        snapshot: Optional[Callable[[], Any]] = None,
        gate: Optional[InputGate] = None,
        clock: Callable[[], float] = time.monotonic,
        on_state: Optional[Callable[[ControllerState], None]] = None,
    ):
        self.surface   = surface
        self.snapshot: Optional[Callable[[], Any]] = snapshot
        self.gate:     InputGate                   = gate if gate is not None else InputGate()
        self.scheduler: RunScheduler               = RunScheduler(self, clock=clock)
        self.state:    ControllerState             = ControllerState.IDLE
        self.on_state: Optional[Callable[[ControllerState], None]] = on_state

        self.last_result: Optional[StepResult] = None
        self.step_count:  int                  = 0

        self._producer:     Optional[StepProducer] = None
        self._awaiting:     Optional[InputRequest] = None
        self._resume_state: ControllerState        = ControllerState.STEP_PENDING
        self._advancing:    bool                   = False

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def producer(self) -> Optional[StepProducer]:
        return self._producer

    @property
    def is_active(self) -> bool:
        return self.state not in _INACTIVE

    @property
    def is_running(self) -> bool:
        return self.state == ControllerState.RUNNING

    @property
    def is_waiting(self) -> bool:
        return self.state == ControllerState.WAITING_FOR_INPUT

    @property
    def last_message(self) -> Optional[str]:
        return self.last_result.message if self.last_result else None

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def start(self, producer: StepProducer) -> None:
        """Install a fresh producer.  Only legal when no run is active."""
        if self.is_active:
            raise ProtocolError(f"start() while {self.state.value}")
        if producer.exhausted:
            raise ProtocolError("start() with an exhausted producer")
        self._producer   = producer
        self._awaiting   = None
        self.step_count  = 0
        self.last_result = None
        logger.info("run started: %s", producer)
        self._set_state(ControllerState.STEP_PENDING)

    def advance_once(self) -> StepResult:
        """Produce, publish and account for exactly one checkpoint."""
        if self._advancing:
            raise ProtocolError("advance_once() re-entered while a checkpoint is in flight")
        if self.state == ControllerState.WAITING_FOR_INPUT:
            raise ProtocolError("advance_once() while waiting for input")
        if self.state not in _ADVANCEABLE:
            raise ProtocolError(f"advance_once() while {self.state.value}")
        return self._advance()

    def run(self, interval_ms: int) -> None:
        """Hand the installed producer to the run scheduler."""
        if self.state != ControllerState.STEP_PENDING:
            raise ProtocolError(f"run() while {self.state.value}")
        self.scheduler.start(self._producer, interval_ms)
        self._set_state(ControllerState.RUNNING)

    def pause(self) -> bool:
        """Stop the run session; the producer stays installed for manual stepping."""
        if not self.scheduler.active:
            return False
        self.scheduler.cancel()
        if self.state == ControllerState.RUNNING:
            self._set_state(ControllerState.STEP_PENDING)
        elif self.state == ControllerState.WAITING_FOR_INPUT:
            self._resume_state = ControllerState.STEP_PENDING
        return True

    def tick(self, now: Optional[float] = None) -> bool:
        return self.scheduler.tick(now)

    def abort(self) -> bool:
        """Force the active run to its terminal "Aborted" message.  No-op when idle."""
        if not self.is_active:
            return False
        if self._advancing:
            raise ProtocolError("abort() from inside a checkpoint")
        # timer first, so no tick can slip in after this point
        self.scheduler.cancel()
        self.gate.discard()
        self._awaiting = None
        if self._producer is not None:
            self._producer.close()
        logger.info("run aborted: %s", self._producer)
        self._producer = aborted_producer()
        self._set_state(ControllerState.ABORTING)
        self._advance()
        return True

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _advance(self) -> StepResult:
        producer = self._producer
        gate_was_open = self.gate.is_open
        self._advancing = True
        try:
            result = producer.produce_next()
        except Exception:
            self._advancing = False
            logger.exception("producer %s failed; resetting controller", producer)
            self._teardown()
            raise
        self._advancing = False

        self.step_count += 1
        self.last_result = result
        logger.debug("checkpoint %d of %s: %r (done=%s)", self.step_count, producer, result.message, result.done)
        self._publish(result)

        request = self.gate.request if not gate_was_open else None
        if result.done:
            if request is not None:
                self._teardown()
                raise ProtocolError(f"{producer} finished with an input request still open")
            self._finish()
        elif request is not None:
            self._wait_for(producer, request)
        return result

    def _publish(self, result: StepResult) -> None:
        if result.message is not None:
            self.surface.display_message(result.message)
        if self.snapshot is not None:
            self.surface.display_snapshot(self.snapshot())

    def _wait_for(self, producer: StepProducer, request: InputRequest) -> None:
        self._awaiting = request
        self._resume_state = (
            ControllerState.RUNNING if self.scheduler.active else ControllerState.STEP_PENDING
        )
        self._set_state(ControllerState.WAITING_FOR_INPUT)
        request.add_done_callback(partial(self._on_input_resolved, producer))

    def _on_input_resolved(self, producer: StepProducer, request: InputRequest) -> None:
        if (
            producer is not self._producer
            or request is not self._awaiting
            or self.state != ControllerState.WAITING_FOR_INPUT
        ):
            logger.warning("ignoring late input resolution %r for %s", request, producer)
            return
        self._awaiting = None
        self._set_state(self._resume_state)
        # resume so the producer can read (or miss) the value
        self._advance()

    def _finish(self) -> None:
        self._set_state(ControllerState.DONE)
        self.scheduler.cancel()
        if self.last_result is not None and self.last_result.is_error:
            logger.info("run ended with error: %s", self.last_result.message)
        else:
            logger.info("run finished: %s", self._producer)
        self._producer = None
        self._set_state(ControllerState.IDLE)

    def _teardown(self) -> None:
        self.scheduler.cancel()
        self.gate.discard()
        self._awaiting = None
        if self._producer is not None:
            self._producer.close()
        self._producer = None
        self._set_state(ControllerState.IDLE)

    def _set_state(self, state: ControllerState) -> None:
        if state is self.state:
            return
        logger.debug("controller %s -> %s", self.state.value, state.value)
        self.state = state
        if self.on_state:
            self.on_state(state)
