"""Gamepad Bridge - validate input events and forward them to an input simulator.

Accepts batches of gamepad, mouse and keyboard events through a tool
protocol (stdio or HTTP), validates them against a closed taxonomy, and
sends each valid batch over one persistent WebSocket.
"""

__version__ = "0.1.0"

from .dispatch import DispatchFacade, EventSink, SubmissionResult
from .errors import (
    GamepadBridgeError,
    InvalidRequest,
    InvalidValueRange,
    InvalidValueType,
    MalformedEvent,
    UnknownEventCode,
    UnknownEventType,
    ValidationError,
)
from .models import EventBatch, GamepadEvent
from .taxonomy import EventType, TriggerRange
from .validation import ValidationPolicy, validate_batch, validate_event

__all__ = [
    "__version__",
    "DispatchFacade",
    "EventSink",
    "SubmissionResult",
    "GamepadBridgeError",
    "ValidationError",
    "MalformedEvent",
    "UnknownEventType",
    "UnknownEventCode",
    "InvalidValueType",
    "InvalidValueRange",
    "InvalidRequest",
    "EventBatch",
    "GamepadEvent",
    "EventType",
    "TriggerRange",
    "ValidationPolicy",
    "validate_event",
    "validate_batch",
]
