"""Error taxonomy for the gamepad bridge.

Validation errors are surfaced to the caller of a submission. Transport
errors are classified for logging only and never leave the connection
manager.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Protocol error codes carried by error events."""

    INVALID_PARAMS = "InvalidParams"
    INVALID_REQUEST = "InvalidRequest"
    METHOD_NOT_FOUND = "MethodNotFound"
    PARSE_ERROR = "ParseError"
    INTERNAL_ERROR = "InternalError"


class GamepadBridgeError(Exception):
    """Base class for all bridge errors."""


class ConfigError(GamepadBridgeError, ValueError):
    """Invalid configuration value."""


class ValidationError(GamepadBridgeError):
    """A submitted event or batch was rejected.

    Attributes:
        kind: Failure classification (the subclass name)
        index: Position of the offending event in its batch, if known
        code: Protocol error code to report
    """

    code = ErrorCode.INVALID_PARAMS

    def __init__(self, message: str, index: int | None = None):
        self.message = message
        self.index = index
        super().__init__(str(self))

    @property
    def kind(self) -> str:
        return type(self).__name__

    def at(self, index: int) -> ValidationError:
        """Return a copy of this error located at ``index`` in a batch."""
        return type(self)(self.message, index=index)

    def __str__(self) -> str:
        if self.index is None:
            return self.message
        return f"events[{self.index}]: {self.message}"


class MalformedEvent(ValidationError):
    """Event is not an object, or its type/code are not strings."""


class UnknownEventType(ValidationError):
    """Event type is not one of the recognized categories."""


class UnknownEventCode(ValidationError):
    """Event code is not in the table of its type."""


class InvalidValueType(ValidationError):
    """Discrete event value is not a boolean."""


class InvalidValueRange(ValidationError):
    """Continuous event value is not a number inside its interval."""


class InvalidRequest(ValidationError):
    """The batch envelope itself is missing or malformed."""


class TransportUnavailable(GamepadBridgeError):
    """No open connection at send time."""


class TransportError(GamepadBridgeError):
    """Connect failure, dropped session, or unusable inbound frame."""
