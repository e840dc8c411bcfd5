"""Transport-agnostic protocol layer.

Defines the command/event protocol that works identically
across the stdio and HTTP adapters.

Key concepts:
- Commands: Client → Server requests with correlation IDs
- Events: Server → Client responses with correlation IDs
- Correlation: Every event links back to its originating command
"""

from .commands import Command, CommandType
from .events import Event, EventType
from .handler import CommandHandler

__all__ = [
    "Command",
    "CommandType",
    "Event",
    "EventType",
    "CommandHandler",
]
