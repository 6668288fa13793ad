"""
engine/
-------
Step-execution layer.

    from engine import StepController, StepProducer, InputGate, NumberField
"""

from engine.errors     import ProtocolError, ProducerExhausted
from engine.producer   import StepProducer, StepResult, aborted_producer, producer_from, is_error
from engine.gate       import InputGate, InputRequest, NumberField
from engine.scheduler  import RunScheduler, RunSession, RUN_INTERVALS, MIN_INTERVAL_MS
from engine.controller import StepController, ControllerState
from engine.recorder   import Recorder, Surface, drive, DEFAULT_CONSOLE_MESSAGE

__all__ = [
    "ProtocolError",
    "ProducerExhausted",
    "StepProducer",
    "StepResult",
    "aborted_producer",
    "producer_from",
    "is_error",
    "InputGate",
    "InputRequest",
    "NumberField",
    "RunScheduler",
    "RunSession",
    "RUN_INTERVALS",
    "MIN_INTERVAL_MS",
    "StepController",
    "ControllerState",
    "Recorder",
    "Surface",
    "drive",
    "DEFAULT_CONSOLE_MESSAGE",
]
