"""stdio Protocol Adapter.

Thin adapter layer that maps stdio JSON lines to protocol commands
and protocol events to stdout JSON lines.

Wire format (newline-delimited JSON, UTF-8 encoded):
- Input (stdin):  {"id": "cmd_123", "cmd": "tools.call", "params": {...}}
- Output (stdout): {"id": "evt_456", "type": "result", "correlation_id": "cmd_123", ...}

Cross-platform considerations:
- All JSON is UTF-8 encoded (no BOM)
- Newlines are always LF (\\n), never CRLF
- Input accepts both LF and CRLF (normalized to LF)
- Binary mode used internally for consistent behavior
"""

from __future__ import annotations

import asyncio
import io
import logging
import sys
from typing import TYPE_CHECKING, BinaryIO

from ..errors import ErrorCode
from ..protocol import Command, CommandHandler, Event

if TYPE_CHECKING:
    from ..bridge import GamepadBridge

logger = logging.getLogger(__name__)

# UTF-8 encoding for all JSON operations
ENCODING = "utf-8"

# Newline character (always LF for cross-platform consistency)
NEWLINE = "\n"


def _ensure_binary_stream(stream: BinaryIO | None, default_fd: int) -> BinaryIO:
    """Return ``stream``, or the raw binary buffer of the standard stream ``default_fd``."""
    if stream is not None:
        return stream

    if default_fd == 0:
        return sys.stdin.buffer
    elif default_fd == 1:
        return sys.stdout.buffer
    else:
        return sys.stderr.buffer


class StdioProtocolAdapter:
    """Bidirectional stdio adapter using the protocol layer.

    Reads JSON commands from stdin, processes them via CommandHandler,
    writes JSON events to stdout. All business logic is delegated to the
    handler; this adapter only handles serialization and I/O.

    Example session:
        → {"id":"c1","cmd":"tools.call","params":{"name":"send_gamepad_event",
           "arguments":{"events":[{"type":"button","code":"A","value":true}]}}}
        ← {"id":"e1","type":"result","correlation_id":"c1",
           "data":{"success":true,"eventsReceived":1,"message":"..."},"final":true}
        → {"id":"c2","cmd":"resources.read","params":{"uri":"gamepad://events"}}
        ← {"id":"e2","type":"result","correlation_id":"c2","data":{"contents":[...]}}
    """

    def __init__(
        self,
        handler: CommandHandler,
        stdin: BinaryIO | None = None,
        stdout: BinaryIO | None = None,
        stderr: BinaryIO | None = None,
    ):
        """Initialize stdio adapter.

        Args:
            handler: Protocol command handler
            stdin: Binary input stream (default: sys.stdin.buffer)
            stdout: Binary output stream (default: sys.stdout.buffer)
            stderr: Binary error stream (default: sys.stderr.buffer)
        """
        self._stdin = _ensure_binary_stream(stdin, 0)
        self._stdout = _ensure_binary_stream(stdout, 1)
        self._stderr = _ensure_binary_stream(stderr, 2)

        self._reader = io.TextIOWrapper(
            self._stdin,
            encoding=ENCODING,
            errors="replace",
            newline="",  # Universal newline mode - accepts LF, CRLF, CR
        )
        self._writer = io.TextIOWrapper(
            self._stdout,
            encoding=ENCODING,
            errors="replace",
            newline=NEWLINE,
            write_through=True,
        )
        self._error_writer = io.TextIOWrapper(
            self._stderr,
            encoding=ENCODING,
            errors="replace",
            newline=NEWLINE,
            write_through=True,
        )

        self._handler = handler
        self._running = False

    async def run(self) -> None:
        """Run the adapter, processing commands until stdin closes."""
        self._running = True

        await self._send_event(Event.connected({"transport": "stdio", "encoding": ENCODING}))

        try:
            while self._running:
                line = await self._read_line()
                if line is None:
                    break  # EOF

                line = line.strip()
                if not line:
                    continue

                # Skip UTF-8 BOM if present at start
                if line.startswith("\ufeff"):
                    line = line[1:]

                await self._process_line(line)

        except asyncio.CancelledError:
            logger.info("stdio adapter cancelled")
        except Exception as e:
            logger.exception(f"stdio adapter error: {e}")
            self._log_error(f"Fatal error: {e}")
        finally:
            self._running = False

    async def stop(self) -> None:
        """Stop the adapter."""
        self._running = False

    async def _read_line(self) -> str | None:
        """Read a line from stdin without blocking the event loop."""
        loop = asyncio.get_running_loop()
        try:
            line = await loop.run_in_executor(None, self._reader.readline)
        except (OSError, ValueError) as e:
            logger.warning(f"stdin read failed: {e}")
            return None
        return line if line else None

    async def _process_line(self, line: str) -> None:
        """Process a single input line."""
        try:
            command = Command.model_validate_json(line.encode(ENCODING))
        except ValueError as e:
            error_event = Event.error(
                correlation_id=None,  # Can't correlate if we couldn't parse
                error=f"Invalid command: {e}",
                code=ErrorCode.PARSE_ERROR,
            )
            await self._send_event(error_event)
            self._log_error(f"Parse error: {e}")
            return

        logger.debug(f"Received command: {command.cmd} (id={command.id})")
        async for event in self._handler.handle(command):
            await self._send_event(event)

    async def _send_event(self, event: Event) -> None:
        """Send an event to stdout as UTF-8 JSON."""
        try:
            self._writer.write(event.model_dump_json() + NEWLINE)
            self._writer.flush()
        except Exception as e:
            self._log_error(f"Failed to send event: {e}")

    def _log_error(self, message: str) -> None:
        """Log error to stderr."""
        self._error_writer.write(f"ERROR: {message}{NEWLINE}")
        self._error_writer.flush()


async def run_stdio_adapter(bridge: GamepadBridge) -> None:
    """Run the bridge over stdio until stdin closes."""
    async with bridge:
        adapter = StdioProtocolAdapter(bridge.handler)
        await adapter.run()
