"""Command definitions for the protocol layer.

Commands are requests from clients that expect responses.
Each command has a unique ID for correlation with response events.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class CommandType(str, Enum):
    """All supported command types."""

    # Tools
    TOOLS_LIST = "tools.list"
    TOOLS_CALL = "tools.call"

    # Resources
    RESOURCES_LIST = "resources.list"
    RESOURCES_READ = "resources.read"

    # Server
    PING = "ping"
    CAPABILITIES = "capabilities"


class Command(BaseModel):
    """A command from client to server.

    Example:
        {
            "id": "cmd_abc123",
            "cmd": "tools.call",
            "params": {
                "name": "send_gamepad_event",
                "arguments": {"events": [{"type": "button", "code": "A", "value": true}]}
            }
        }

    The server responds with Events that have `correlation_id` = command's `id`.
    """

    id: str = Field(default_factory=lambda: f"cmd_{uuid.uuid4().hex[:12]}")
    cmd: str
    params: dict[str, Any] = Field(default_factory=dict)

    def get_param(self, key: str, default: Any = None) -> Any:
        """Get a parameter with optional default."""
        return self.params.get(key, default)

    def require_param(self, key: str) -> Any:
        """Get a required parameter, raise if missing."""
        if key not in self.params:
            raise KeyError(key)
        return self.params[key]

    @classmethod
    def create(
        cls,
        cmd: str | CommandType,
        params: dict[str, Any] | None = None,
        command_id: str | None = None,
    ) -> Command:
        """Factory method for creating commands."""
        return cls(
            id=command_id or f"cmd_{uuid.uuid4().hex[:12]}",
            cmd=cmd.value if isinstance(cmd, CommandType) else cmd,
            params=params or {},
        )

    @classmethod
    def tools_call(cls, name: str, arguments: dict[str, Any] | None = None) -> Command:
        """Create a tools.call command."""
        return cls.create(CommandType.TOOLS_CALL, {"name": name, "arguments": arguments or {}})

    @classmethod
    def send_events(cls, events: list[dict[str, Any]]) -> Command:
        """Create a tools.call command for send_gamepad_event."""
        return cls.tools_call("send_gamepad_event", {"events": events})

    @classmethod
    def resources_read(cls, uri: str) -> Command:
        """Create a resources.read command."""
        return cls.create(CommandType.RESOURCES_READ, {"uri": uri})

    @classmethod
    def ping(cls) -> Command:
        """Create a ping command."""
        return cls.create(CommandType.PING)
