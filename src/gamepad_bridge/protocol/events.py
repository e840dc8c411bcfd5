"""Event definitions for the protocol layer.

Events are server responses sent to clients. They can be:
- Correlated: Response to a specific command (has correlation_id)
- Uncorrelated: Server-initiated notifications (no correlation_id)
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from ..errors import ErrorCode


class EventType(str, Enum):
    """All event types in the protocol."""

    # Response events (correlated to commands)
    RESULT = "result"
    ERROR = "error"

    # Server events
    CONNECTED = "connected"
    PONG = "pong"


class Event(BaseModel):
    """An event from server to client.

    Example (tool result):
        {
            "id": "evt_xyz789",
            "type": "result",
            "correlation_id": "cmd_abc123",
            "data": {"success": true, "eventsReceived": 1, "message": "..."},
            "final": true
        }

    Example (error):
        {
            "id": "evt_xyz790",
            "type": "error",
            "correlation_id": "cmd_abc124",
            "data": {
                "error": "events[0]: Invalid axis code: A",
                "code": "InvalidParams",
                "details": {"kind": "UnknownEventCode", "index": 0}
            },
            "final": true
        }
    """

    id: str = Field(default_factory=lambda: f"evt_{uuid.uuid4().hex[:12]}")
    type: str
    correlation_id: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    final: bool = False

    def is_error(self) -> bool:
        """Check if this is an error event."""
        return self.type == EventType.ERROR.value

    @property
    def error_code(self) -> str | None:
        return self.data.get("code") if self.is_error() else None

    @classmethod
    def create(
        cls,
        event_type: str | EventType,
        data: dict[str, Any] | None = None,
        correlation_id: str | None = None,
        final: bool = False,
    ) -> Event:
        """Factory method for creating events."""
        return cls(
            type=event_type.value if isinstance(event_type, EventType) else event_type,
            data=data or {},
            correlation_id=correlation_id,
            final=final,
        )

    @classmethod
    def result(cls, correlation_id: str, data: dict[str, Any]) -> Event:
        """Create a successful result event (final response to command)."""
        return cls.create(EventType.RESULT, data=data, correlation_id=correlation_id, final=True)

    @classmethod
    def error(
        cls,
        correlation_id: str | None,
        error: str,
        code: str | ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ) -> Event:
        """Create an error event."""
        data: dict[str, Any] = {"error": error}
        if code:
            data["code"] = code.value if isinstance(code, ErrorCode) else code
        if details:
            data["details"] = details
        return cls.create(EventType.ERROR, data=data, correlation_id=correlation_id, final=True)

    @classmethod
    def pong(cls, correlation_id: str) -> Event:
        """Create a pong response to ping."""
        return cls.create(EventType.PONG, correlation_id=correlation_id, final=True)

    @classmethod
    def connected(cls, capabilities: dict[str, Any] | None = None) -> Event:
        """Create a connected event (sent on transport connect)."""
        return cls.create(EventType.CONNECTED, data={"capabilities": capabilities or {}})
