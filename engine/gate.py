"""
gate.py — Input Gate
=====================
Bridges the modal "Number:" dialog into a suspended StepProducer.

Flow inside a producer:

    yield "Enter key of item to insert"        # checkpoint N
    answer = self.gate.open(NumberField())     # modal shows up
    yield "Dialog opened"                      # checkpoint N+1, controller now WAITING
    ...                                        # resumed by the gate's done-callback
    if answer.cancelled: return None
    key = answer.value

The request keeps its outcome in a concurrent.futures.Future: the UI
resolves it (confirm / cancel), the controller listens with
add_done_callback().  The callbacks live on the request, not on the
Future, and run inside confirm() / cancel(), so the resumed step executes
in the resolving call and whatever it raises reaches the caller
(Future's own callback runner logs and drops exceptions).

Only ONE request may be outstanding at a time; a producer opening a
second one before the first resolved is a ProtocolError.
"""

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from engine.errors import ProtocolError

logger = logging.getLogger(__name__)

Number = Union[int, float]


# ---------------------------------------------------------------------------
# Field spec — what the modal shows
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class NumberField:
    """
    One numeric input.  min / max / step are cosmetic (passed to the HTML
    input); range validation belongs to the producer.
    """

    name:  str              = "number"
    label: str              = "Number"
    min:   Optional[Number] = None
    max:   Optional[Number] = None
    step:  Optional[Number] = None

    def parse(self, raw: Any) -> Number:
        """Form value → number.  Raises ValueError for empty / non-numeric input."""
        if isinstance(raw, bool):
            raise ValueError(f"{self.label}: not a number")
        if isinstance(raw, (int, float)):
            value = raw
        else:
            text = str(raw if raw is not None else "").strip()
            if not text:
                raise ValueError(f"{self.label}: value required")
            value = float(text)
        if value != value or value in (float("inf"), float("-inf")):
            raise ValueError(f"{self.label}: not a finite number")
        if float(value).is_integer():
            return int(value)
        return value

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "label": self.label, "min": self.min, "max": self.max, "step": self.step}


# ---------------------------------------------------------------------------
# InputRequest — one open question to the user
# ---------------------------------------------------------------------------
class InputRequest:
    """
    Outcome is Confirmed(value) or Cancelled.

    Attributes:
        field : The NumberField shown in the modal.
    """

    def __init__(self, field: NumberField):
        self.field:   NumberField = field
        self._future: Future      = Future()
        self._callbacks: List[Callable[["InputRequest"], None]] = []

    # -- resolution (UI side) --
    def confirm(self, value: Number) -> bool:
        if self._future.done():
            logger.warning("input request for %r already resolved, ignoring confirm", self.field.name)
            return False
        self._future.set_result(value)
        self._run_callbacks()
        return True

    def cancel(self) -> bool:
        if self._future.done():
            logger.warning("input request for %r already resolved, ignoring cancel", self.field.name)
            return False
        self._future.cancel()
        self._run_callbacks()
        return True

    # -- observation (producer / controller side) --
    @property
    def pending(self) -> bool:
        return not self._future.done()

    @property
    def cancelled(self) -> bool:
        return self._future.cancelled()

    @property
    def value(self) -> Optional[Number]:
        """The confirmed value, None if cancelled.  Reading it early is a protocol error."""
        if self.pending:
            raise ProtocolError("input request read before it was resolved")
        if self._future.cancelled():
            return None
        return self._future.result()

    def add_done_callback(self, fn: Callable[["InputRequest"], None]) -> None:
        """Call `fn(request)` on resolution, or right away if already resolved."""
        if self._future.done():
            fn(self)
        else:
            self._callbacks.append(fn)

    def _run_callbacks(self) -> None:
        # exceptions propagate to confirm() / cancel()
        callbacks, self._callbacks = self._callbacks, []
        for fn in callbacks:
            fn(self)

    def __repr__(self) -> str:
        if self.pending:
            outcome = "pending"
        elif self.cancelled:
            outcome = "cancelled"
        else:
            outcome = f"confirmed={self._future.result()!r}"
        return f"<InputRequest {self.field.name} {outcome}>"


# ---------------------------------------------------------------------------
# InputGate — owned by one page, shared by its producers and its controller
# ---------------------------------------------------------------------------
class InputGate:
    """
    Attributes:
        request : The outstanding InputRequest, or None.
    """

    def __init__(self):
        self.request: Optional[InputRequest] = None

    @property
    def is_open(self) -> bool:
        return self.request is not None

    def open(self, field: Optional[NumberField] = None) -> InputRequest:
        """Show the modal.  Resolution happens later through confirm() / cancel()."""
        if self.request is not None:
            raise ProtocolError("an input request is already outstanding")
        request = InputRequest(field or NumberField())
        self.request = request
        logger.debug("input gate opened for %r", request.field.name)
        return request

    def confirm(self, raw: Any) -> bool:
        """
        User pressed Confirm.  Parses the raw form value (ValueError leaves
        the request open so the user can retry).  Returns False when no
        request is outstanding, e.g. because the run was aborted meanwhile.
        Whatever the resumed step raises propagates from here.
        """
        request = self.request
        if request is None:
            logger.warning("input confirmed with no outstanding request, ignoring")
            return False
        value = request.field.parse(raw)
        self.request = None
        return request.confirm(value)

    def cancel(self) -> bool:
        """User pressed Cancel or dismissed the modal."""
        request = self.request
        if request is None:
            logger.warning("input cancelled with no outstanding request, ignoring")
            return False
        self.request = None
        return request.cancel()

    def discard(self) -> Optional[InputRequest]:
        """Forget the outstanding request without resolving it (abort path)."""
        request, self.request = self.request, None
        if request is not None:
            logger.debug("input gate discarded %r", request)
        return request
