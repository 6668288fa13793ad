"""
errors.py — Engine Protocol Errors
===================================
Recoverable conditions (bad input, "not found", a cancelled dialog) never
show up here: producers report them as ordinary "ERROR: ..." messages.

What DOES live here are protocol violations: advancing a producer that is
waiting on the input gate, opening a second gate request, re-entering
advance_once().  They are programming errors, so they are assertions.
"""


class ProtocolError(AssertionError):
    """The engine was driven in an order its state machine forbids."""


class ProducerExhausted(ProtocolError):
    """produce_next() called on a producer that already reported done."""
