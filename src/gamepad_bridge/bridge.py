"""Bridge composition root.

Builds the one ConnectionManager, DispatchFacade and CommandHandler a
process uses, and owns their start/stop lifecycle. Inbound adapters
receive the bridge (or its handler) instead of reaching for globals.
"""

from __future__ import annotations

import logging
from typing import Any

from .config import BridgeConfig
from .dispatch import DispatchFacade
from .protocol import CommandHandler
from .transport.websocket import ConnectionManager, Connector

logger = logging.getLogger(__name__)


class GamepadBridge:
    """Wires validation, dispatch and the outbound connection together.

    Usage:
        bridge = GamepadBridge(load_config())
        async with bridge:
            async for event in bridge.handler.handle(command):
                ...
    """

    def __init__(self, config: BridgeConfig | None = None, connector: Connector | None = None):
        self.config = config or BridgeConfig()
        self.connection = ConnectionManager.from_config(self.config, connector=connector)
        self.facade = DispatchFacade(self.connection, policy=self.config.validation_policy)
        self.handler = CommandHandler(self.facade, self.connection)
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        """Start the outbound connection. Must run inside the event loop."""
        if self._started:
            return
        logger.info(f"Starting gamepad bridge (endpoint {self.config.endpoint})")
        self.connection.start()
        self._started = True

    async def stop(self) -> None:
        """Close the outbound connection and stop reconnecting."""
        if not self._started:
            return
        self._started = False
        await self.connection.close()
        logger.info("Gamepad bridge stopped")

    def status(self) -> dict[str, Any]:
        """Snapshot for health checks."""
        return {
            "endpoint": self.config.endpoint,
            "connection": self.connection.state.value,
            "reconnect_pending": self.connection.reconnect_pending,
            "last_batch_size": len(self.facade.last_batch),
        }

    async def __aenter__(self) -> GamepadBridge:
        await self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.stop()
