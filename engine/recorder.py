"""
recorder.py — Presentation Surface Recorder
============================================
The controller talks to the presentation layer through two overwrite-only
calls:

    surface.display_message(text)       # console line
    surface.display_snapshot(snapshot)  # data structure state after the checkpoint

Recorder is the surface every page uses: it keeps what is currently on
screen (message + snapshot) for the web client AND the full ordered
transcript of published messages for the message-log panel.  Tests use
the transcript to check that the controller adds, drops and reorders
nothing compared with driving the producer by hand (see drive()).

Usage:
    rec = Recorder()
    ctl = StepController(rec, snapshot=page.snapshot)
    ...
    rec.messages        # ["Enter key of item to insert", "Dialog opened", …]
"""

from typing import Any, Dict, List, Optional, Protocol

from engine.producer import StepProducer


DEFAULT_CONSOLE_MESSAGE = "Press any key"
TRANSCRIPT_LIMIT = 500


# ---------------------------------------------------------------------------
# Surface contract
# ---------------------------------------------------------------------------
class Surface(Protocol):
    def display_message(self, text: str) -> None: ...

    def display_snapshot(self, snapshot: Any) -> None: ...


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        message    : Message currently displayed (DEFAULT_CONSOLE_MESSAGE before any step).
        snapshot   : Last published data snapshot, or None.
        messages   : Every published message, oldest first (capped at `limit`).
        snapshots  : Number of snapshots published so far.
    """

    def __init__(self, limit: int = TRANSCRIPT_LIMIT):
        self.limit = limit
        self.clear()

    def clear(self) -> None:
        self.message:   str            = DEFAULT_CONSOLE_MESSAGE
        self.snapshot:  Optional[Any]  = None
        self.messages:  List[str]      = []
        self.snapshots: int            = 0

    # -- Surface --
    def display_message(self, text: str) -> None:
        self.message = text
        self.messages.append(text)
        if len(self.messages) > self.limit:
            del self.messages[: len(self.messages) - self.limit]

    def display_snapshot(self, snapshot: Any) -> None:
        self.snapshot = snapshot
        self.snapshots += 1

    # -- Export --
    def to_dict(self, log_size: int = 20) -> Dict[str, Any]:
        return {
            "message":  self.message,
            "snapshot": self.snapshot,
            "log":      self.messages[-log_size:],
        }


# ---------------------------------------------------------------------------
# Reference driver
# ---------------------------------------------------------------------------
def drive(producer: StepProducer) -> List[Optional[str]]:
    """Exhaust a producer by hand and return every message it produced, final one included."""
    messages = []
    while True:
        result = producer.produce_next()
        messages.append(result.message)
        if result.done:
            return messages
