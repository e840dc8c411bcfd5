"""Event validation.

Pure functions that turn untyped input (decoded JSON) into validated
GamepadEvent / EventBatch values or raise a ValidationError subclass.

Checks run in a fixed order so the same input always fails the same way:
1. event is a mapping                        -> MalformedEvent
2. type and code are strings                 -> MalformedEvent
3. type is a known category                  -> UnknownEventType
4. code belongs to that category's table     -> UnknownEventCode
5. value matches the category's value domain -> InvalidValueType / InvalidValueRange
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import (
    InvalidValueRange,
    InvalidValueType,
    MalformedEvent,
    UnknownEventCode,
    UnknownEventType,
    ValidationError,
)
from .models import EventBatch, GamepadEvent
from .taxonomy import (
    SYMMETRIC_DOMAIN,
    EventType,
    TriggerRange,
    ValueDomain,
    parse_event_code,
    parse_event_type,
)


@dataclass(frozen=True)
class ValidationPolicy:
    """Tunable validation rules.

    Attributes:
        trigger_range: Interval accepted for trigger values
        allow_empty_batch: Accept a zero-length submission as a no-op
    """

    trigger_range: TriggerRange = TriggerRange.SYMMETRIC
    allow_empty_batch: bool = False

    def domain_for(self, event_type: EventType) -> ValueDomain:
        """Value domain of a continuous event type."""
        if event_type is EventType.TRIGGER:
            return self.trigger_range.domain
        return SYMMETRIC_DOMAIN


DEFAULT_POLICY = ValidationPolicy()


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid continuous value
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_event(raw: Any, policy: ValidationPolicy = DEFAULT_POLICY) -> GamepadEvent:
    """Validate one raw event.

    Args:
        raw: Decoded JSON value, expected to be ``{type, code, value}``
        policy: Value domain rules

    Returns:
        The event with its fields unchanged

    Raises:
        ValidationError: The first rule the event breaks
    """
    if not isinstance(raw, Mapping):
        raise MalformedEvent("Invalid event format: event must be an object")

    type_name = raw.get("type")
    code_name = raw.get("code")
    if not isinstance(type_name, str) or not isinstance(code_name, str):
        raise MalformedEvent("Invalid event format: type and code must be strings")

    event_type = parse_event_type(type_name)
    if event_type is None:
        raise UnknownEventType(f"Invalid event type: {type_name}")

    if parse_event_code(event_type, code_name) is None:
        raise UnknownEventCode(f"Invalid {type_name} code: {code_name}")

    value = raw.get("value")
    if event_type.is_discrete:
        if not isinstance(value, bool):
            raise InvalidValueType(f"Invalid value for {type_name}: must be boolean, got {value!r}")
    else:
        domain = policy.domain_for(event_type)
        if not _is_number(value) or not domain.contains(value):
            raise InvalidValueRange(
                f"Invalid value for {type_name}: must be number {domain.describe()}, got {value!r}"
            )

    return GamepadEvent(type=event_type, code=code_name, value=value)


def validate_batch(raw_events: Any, policy: ValidationPolicy = DEFAULT_POLICY) -> EventBatch:
    """Validate every event in order; the first failure rejects the batch.

    Raises:
        ValidationError: Located at the index of the first invalid event
    """
    events = []
    for index, raw in enumerate(raw_events):
        try:
            events.append(validate_event(raw, policy))
        except ValidationError as e:
            raise e.at(index) from None
    return EventBatch(tuple(events))
