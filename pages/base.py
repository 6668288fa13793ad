"""
base.py — Visualization Page
=============================
A page owns the data structure being animated and composes the engine
pieces around it:

    Page
     ├─ gate        InputGate     (its producers open the "Number:" modal here)
     ├─ surface     Recorder      (console message + snapshot + message log)
     └─ controller  StepController(surface, snapshot=self.snapshot, gate=gate)

Subclasses only decide WHAT to run: actions() maps each control-panel
button to a generator function, snapshot() says what to draw.  HOW a run
advances is the controller's business and is never overridden.

UI trigger events arrive through the on_*() methods.  They filter clicks
that are illegal in the current state (the browser disables those
buttons anyway), so the controller's protocol assertions are never hit
from the UI.
"""

import logging
import random
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from engine import (
    ControllerState,
    InputGate,
    NumberField,
    RUN_INTERVALS,
    Recorder,
    StepController,
    StepProducer,
)
from engine.producer import StepGenerator
from items import Item

logger = logging.getLogger(__name__)


KEY_MIN = 0
KEY_MAX = 999

KEY_FIELD = NumberField(name="number", label="Number", min=KEY_MIN, max=KEY_MAX, step=1)


def valid_key(key, lower: int = KEY_MIN, upper: int = KEY_MAX) -> bool:
    return isinstance(key, int) and lower <= key <= upper


class Page(ABC):
    key:   str = ""
    title: str = ""

    def __init__(self, rng: Optional[random.Random] = None, clock: Callable[[], float] = time.monotonic):
        self.rng:   random.Random = rng or random.Random()
        self.items: List[Item]    = []
        self.gate    = InputGate()
        self.surface = Recorder()
        self.controller = StepController(
            self.surface,
            snapshot=self.snapshot,
            gate=self.gate,
            clock=clock,
            on_state=self._on_state,
        )
        self.active_action: Optional[str] = None

    # ------------------------------------------------------------------
    # What subclasses provide
    # ------------------------------------------------------------------
    @abstractmethod
    def actions(self) -> Dict[str, Callable[[], StepGenerator]]:
        """Button label -> generator function, in control-panel order."""

    def snapshot(self) -> Dict[str, Any]:
        return {"items": [item.to_dict() for item in self.items]}

    def options(self) -> Dict[str, Any]:
        return {}

    def set_option(self, name: str, value: Any) -> bool:
        return False

    @property
    def supports_run(self) -> bool:
        return False

    def run_interval_ms(self) -> int:
        return RUN_INTERVALS["normal"]

    # ------------------------------------------------------------------
    # UI trigger events
    # ------------------------------------------------------------------
    def on_action_clicked(self, name: str) -> bool:
        """
        A control-panel button.  While idle it starts that action and shows
        its first step; while the same action is pending it acts as "Next".
        """
        actions = self.actions()
        if name not in actions:
            raise KeyError(name)
        controller = self.controller
        if not controller.is_active:
            controller.start(StepProducer(actions[name](), name=name))
            self.active_action = name
            controller.advance_once()
            return True
        if name == self.active_action:
            return self.on_next_clicked()
        logger.warning("%s: %r clicked while %r is active, ignoring", self.key, name, self.active_action)
        return False

    def on_next_clicked(self) -> bool:
        if self.controller.state != ControllerState.STEP_PENDING:
            logger.warning("%s: next clicked while %s, ignoring", self.key, self.controller.state.value)
            return False
        self.controller.advance_once()
        return True

    def on_run_toggled(self) -> bool:
        logger.warning("%s: page has no run mode", self.key)
        return False

    def on_abort_clicked(self) -> bool:
        return self.controller.abort()

    def on_dialog_closed(self, confirmed: bool, value: Any = None) -> bool:
        """Modal closed.  A malformed value raises ValueError and keeps the modal open."""
        if confirmed:
            return self.gate.confirm(value)
        return self.gate.cancel()

    def on_tick(self, now: Optional[float] = None) -> bool:
        return self.controller.tick(now)

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------
    def reset_items_state(self, item: Optional[Item] = None) -> None:
        """Unmark every cell, then mark `item` (if given)."""
        for cell in self.items:
            cell.mark = False
        if item is not None:
            item.mark = True

    def ask_number(self, field: NumberField = KEY_FIELD):
        """Open the modal.  Producers must yield right after this call."""
        return self.gate.open(field)

    def to_dict(self) -> Dict[str, Any]:
        request = self.gate.request
        return {
            "key":        self.key,
            "title":      self.title,
            "state":      self.controller.state.value,
            "active":     self.active_action,
            "actions":    list(self.actions()),
            "options":    self.options(),
            "supports_run": self.supports_run,
            "running":    self.controller.is_running,
            "dialog":     request.field.to_dict() if request is not None else None,
            **self.surface.to_dict(),
            "snapshot":   self.snapshot(),
        }

    def _on_state(self, state: ControllerState) -> None:
        if state == ControllerState.IDLE:
            self.active_action = None
