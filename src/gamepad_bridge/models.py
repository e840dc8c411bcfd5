"""Validated input event types.

Instances are only produced by the validator; constructing them directly
skips validation.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from .taxonomy import EventType


@dataclass(frozen=True)
class GamepadEvent:
    """One validated input event.

    ``value`` is a bool for discrete types and an int or float for
    continuous types, exactly as submitted.
    """

    type: EventType
    code: str
    value: bool | int | float

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "code": self.code, "value": self.value}


@dataclass(frozen=True)
class EventBatch:
    """Ordered group of validated events, stored and transmitted as one unit."""

    events: tuple[GamepadEvent, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[GamepadEvent]:
        return iter(self.events)

    def to_dict(self) -> dict[str, Any]:
        return {"events": [event.to_dict() for event in self.events]}

    def to_json(self) -> str:
        """Serialize as the outbound wire message."""
        return json.dumps(self.to_dict())
