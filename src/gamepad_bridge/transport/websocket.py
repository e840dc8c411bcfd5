"""WebSocket connection to the input-simulation service.

ConnectionManager owns the single outbound WebSocket and keeps it alive:
- At most one socket exists at a time
- A recurring reconnection timer runs while disconnected
- Outbound batches are fire-and-forget; callers never wait on the network
- Inbound frames are logged and otherwise ignored

State machine:
    disconnected --connect()--> connecting --open--> connected
    connecting --error/timeout--> disconnected (reconnect scheduled)
    connected --close/drop--> disconnected (reconnect scheduled)

Wire format (one text frame per batch):
    {"events": [{"type": "button", "code": "A", "value": true}, ...]}
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

import websockets
import websockets.exceptions

from ..errors import TransportError, TransportUnavailable
from ..models import EventBatch

if TYPE_CHECKING:
    from ..config import BridgeConfig

logger = logging.getLogger(__name__)

# (url, open_timeout) -> connected websocket
Connector = Callable[[str, float], Awaitable[Any]]


class ConnectionState(str, Enum):
    """Connection state machine."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


async def websocket_connect(url: str, open_timeout: float) -> Any:
    """Open a client connection with the websockets library."""
    return await websockets.connect(
        url,
        open_timeout=open_timeout,
        ping_interval=30,
        ping_timeout=10,
    )


class ConnectionManager:
    """Single long-lived WebSocket with automatic reconnection.

    All methods must be called from the event loop that runs the manager.
    No locks are taken: every state change happens in one callback or task
    step at a time.

    Usage:
        manager = ConnectionManager("ws://127.0.0.1:13123")
        manager.start()
        manager.send(batch)  # returns immediately
        ...
        await manager.close()
    """

    def __init__(
        self,
        url: str,
        reconnect_interval: float = 5.0,
        handshake_timeout: float = 5.0,
        connector: Connector | None = None,
    ):
        self.url = url
        self.reconnect_interval = reconnect_interval
        self.handshake_timeout = handshake_timeout
        self._connector = connector or websocket_connect

        self._state = ConnectionState.DISCONNECTED
        self._websocket: Any = None
        self._outbox: asyncio.Queue[str] | None = None
        self._connect_task: asyncio.Task[None] | None = None
        self._reader_task: asyncio.Task[None] | None = None
        self._writer_task: asyncio.Task[None] | None = None
        self._reconnect_task: asyncio.Task[None] | None = None
        self._closed = False

    @classmethod
    def from_config(
        cls, config: BridgeConfig, connector: Connector | None = None
    ) -> ConnectionManager:
        return cls(
            config.endpoint,
            reconnect_interval=config.reconnect_interval,
            handshake_timeout=config.handshake_timeout,
            connector=connector,
        )

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    @property
    def reconnect_pending(self) -> bool:
        """True while the reconnection timer is armed."""
        return self._reconnect_task is not None and not self._reconnect_task.done()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Begin connecting. Reconnection keeps going until close()."""
        self._closed = False
        self.connect()

    def connect(self) -> None:
        """Start a connection attempt unless one is open or in progress."""
        if self._closed:
            logger.debug("Connection manager is closed, not connecting")
            return
        if self._state is ConnectionState.CONNECTED:
            logger.info("WebSocket is already connected")
            return
        if self._state is ConnectionState.CONNECTING:
            logger.debug("WebSocket connection attempt already in progress")
            return

        logger.info(f"Connecting to WebSocket server at {self.url}...")
        self._state = ConnectionState.CONNECTING
        self._connect_task = asyncio.get_running_loop().create_task(self._open())

    async def close(self) -> None:
        """Shut down: stop reconnecting, flush queued frames, close the socket."""
        self._closed = True
        self._cancel_reconnect()

        connect_task, self._connect_task = self._connect_task, None
        if connect_task is not None and not connect_task.done():
            connect_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await connect_task

        websocket = self._websocket
        if websocket is not None:
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self.drain(), timeout=self.handshake_timeout)

            self._websocket = None
            self._stop_writer()

            reader_task, self._reader_task = self._reader_task, None
            if reader_task is not None:
                reader_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await reader_task

            try:
                await websocket.close()
            except Exception as e:
                logger.debug(f"Error closing WebSocket: {e}")

        self._state = ConnectionState.DISCONNECTED
        logger.info("WebSocket connection manager closed")

    # =========================================================================
    # Outbound
    # =========================================================================

    def send(self, batch: EventBatch) -> bool:
        """Queue a batch as one frame for the open socket.

        Never raises and never waits. Returns False when the batch was
        dropped because no socket is open.
        """
        try:
            outbox = self._require_outbox()
        except TransportUnavailable as e:
            logger.warning(f"{e}; dropping batch of {len(batch)} event(s)")
            return False

        try:
            message = batch.to_json()
            outbox.put_nowait(message)
        except Exception as e:
            logger.error(f"Error sending to WebSocket: {e}")
            return False

        logger.debug(f"Sending to WebSocket: {message}")
        return True

    async def drain(self) -> None:
        """Wait until every queued frame has been handed to the socket."""
        outbox = self._outbox
        if outbox is not None:
            await outbox.join()

    def _require_outbox(self) -> asyncio.Queue[str]:
        if self._state is not ConnectionState.CONNECTED or self._outbox is None:
            raise TransportUnavailable(
                f"WebSocket is not open (current state: {self._state.value})"
            )
        return self._outbox

    async def _write_loop(self, websocket: Any, outbox: asyncio.Queue[str]) -> None:
        """Send queued frames in order, one at a time."""
        while True:
            message = await outbox.get()
            try:
                await websocket.send(message)
            except Exception as e:
                logger.error(f"Error sending to WebSocket: {e}")
            finally:
                outbox.task_done()

    def _stop_writer(self) -> None:
        outbox, self._outbox = self._outbox, None
        if outbox is not None:
            discarded = 0
            while not outbox.empty():
                outbox.get_nowait()
                outbox.task_done()
                discarded += 1
            if discarded:
                logger.warning(f"Discarded {discarded} unsent frame(s)")

        writer_task, self._writer_task = self._writer_task, None
        if writer_task is not None:
            writer_task.cancel()

    # =========================================================================
    # Connection events
    # =========================================================================

    async def _open(self) -> None:
        try:
            websocket = await self._dial()
        except TransportError as e:
            self._connect_task = None
            self._state = ConnectionState.DISCONNECTED
            logger.warning(str(e))
            self._schedule_reconnect()
            return

        self._connect_task = None
        self._on_open(websocket)

    async def _dial(self) -> Any:
        try:
            return await asyncio.wait_for(
                self._connector(self.url, self.handshake_timeout),
                timeout=self.handshake_timeout,
            )
        except TimeoutError as e:
            raise TransportError(
                f"Connection to {self.url} timed out after {self.handshake_timeout:g}s"
            ) from e
        except ConnectionRefusedError as e:
            raise TransportError(
                f"Connection refused by {self.url}. Is the input simulation server running?"
            ) from e
        except Exception as e:
            raise TransportError(f"Error creating WebSocket connection to {self.url}: {e}") from e

    def _on_open(self, websocket: Any) -> None:
        self._websocket = websocket
        self._state = ConnectionState.CONNECTED
        self._cancel_reconnect()

        loop = asyncio.get_running_loop()
        self._outbox = asyncio.Queue()
        self._writer_task = loop.create_task(self._write_loop(websocket, self._outbox))
        self._reader_task = loop.create_task(self._read_loop(websocket))
        logger.info(f"Connected to WebSocket server at {self.url}")

    async def _read_loop(self, websocket: Any) -> None:
        """Consume inbound frames until the socket closes."""
        try:
            async for data in websocket:
                self._on_message(data)
        except websockets.exceptions.ConnectionClosed as e:
            logger.warning(f"WebSocket connection lost: {e}")
        except Exception as e:
            logger.warning(f"WebSocket receive error: {e}")
        finally:
            self._on_close(websocket)

    def _on_message(self, data: str | bytes) -> None:
        text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
        try:
            message = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Error parsing WebSocket message: {e}")
            logger.warning(f"Raw message: {text!r}")
            return
        logger.info(f"Received WebSocket message: {json.dumps(message)}")

    def _on_close(self, websocket: Any) -> None:
        if self._websocket is not websocket:
            # Already torn down by close()
            return

        code = getattr(websocket, "close_code", None)
        reason = getattr(websocket, "close_reason", None) or ""
        logger.warning(f"WebSocket connection closed with code {code} and reason: {reason}")

        self._websocket = None
        self._reader_task = None
        self._state = ConnectionState.DISCONNECTED
        self._stop_writer()
        self._schedule_reconnect()

    # =========================================================================
    # Reconnection timer
    # =========================================================================

    def _schedule_reconnect(self) -> None:
        """Arm the reconnection timer. No-op while one is already armed."""
        if self._closed:
            return
        if self.reconnect_pending:
            logger.debug("Reconnection already scheduled")
            return

        logger.info(f"Reconnecting every {self.reconnect_interval:g}s until connected")
        self._reconnect_task = asyncio.get_running_loop().create_task(self._reconnect_loop())

    async def _reconnect_loop(self) -> None:
        while self._state is not ConnectionState.CONNECTED:
            await asyncio.sleep(self.reconnect_interval)
            logger.info("Attempting to reconnect...")
            self.connect()

    def _cancel_reconnect(self) -> None:
        """Disarm the reconnection timer. Safe to call when not armed."""
        task, self._reconnect_task = self._reconnect_task, None
        if task is not None and not task.done():
            task.cancel()
