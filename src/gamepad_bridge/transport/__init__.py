"""Transports.

- websocket: outbound connection to the input-simulation service
- stdio_adapter: inbound protocol over stdin/stdout

Note: stdio_adapter is imported separately to avoid circular imports.
Use: from gamepad_bridge.transport.stdio_adapter import StdioProtocolAdapter
"""

from .websocket import ConnectionManager, ConnectionState, Connector, websocket_connect

__all__ = [
    "ConnectionManager",
    "ConnectionState",
    "Connector",
    "websocket_connect",
]
