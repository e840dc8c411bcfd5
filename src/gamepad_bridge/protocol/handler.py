"""Command Handler - Transport-agnostic business logic.

Processes commands and yields correlated events.
All inbound adapters (stdio, HTTP) use this same handler.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Callable
from typing import TYPE_CHECKING, Any

from .. import __version__
from ..errors import ErrorCode, ValidationError
from ..taxonomy import valid_events
from ..tools import (
    EVENTS_URI,
    JSON_MIME_TYPE,
    RESOURCES,
    SEND_GAMEPAD_EVENT,
    VALID_EVENTS_URI,
    send_gamepad_event_tool,
)
from .commands import Command, CommandType
from .events import Event, EventType

if TYPE_CHECKING:
    from ..dispatch import DispatchFacade, SubmissionResult
    from ..transport.websocket import ConnectionManager

logger = logging.getLogger(__name__)


class CommandHandler:
    """Handles protocol commands and yields correlated events.

    Usage:
        handler = CommandHandler(facade, connection)

        async for event in handler.handle(command):
            adapter.write(event)

    Correlation:
        Every yielded event has `correlation_id` set to the command's `id`.
        Every command yields exactly one final event.
    """

    def __init__(
        self,
        facade: DispatchFacade,
        connection: ConnectionManager | None = None,
    ) -> None:
        """Initialize handler.

        Args:
            facade: Validates and forwards submitted events
            connection: Outbound connection, reported by capabilities
        """
        self._facade = facade
        self._connection = connection
        self._tools = {SEND_GAMEPAD_EVENT: send_gamepad_event_tool()}
        self._tool_handlers: dict[str, Callable[[Any], SubmissionResult]] = {
            SEND_GAMEPAD_EVENT: facade.submit_arguments,
        }

    async def handle(self, command: Command) -> AsyncIterator[Event]:
        """Process a command and yield correlated events."""
        logger.debug(f"Handling command: {command.cmd} (id={command.id})")

        try:
            match command.cmd:
                case CommandType.TOOLS_LIST.value:
                    yield self._tools_list(command)

                case CommandType.TOOLS_CALL.value:
                    yield self._tools_call(command)

                case CommandType.RESOURCES_LIST.value:
                    yield self._resources_list(command)

                case CommandType.RESOURCES_READ.value:
                    yield self._resources_read(command)

                case CommandType.PING.value:
                    yield Event.pong(command.id)

                case CommandType.CAPABILITIES.value:
                    yield self._capabilities(command)

                case _:
                    yield Event.error(
                        command.id,
                        error=f"Unknown command: {command.cmd}",
                        code=ErrorCode.METHOD_NOT_FOUND,
                    )

        except Exception as e:
            logger.exception(f"Error handling command {command.id}: {e}")
            yield Event.error(command.id, error=str(e), code=ErrorCode.INTERNAL_ERROR)

    # =========================================================================
    # Tools
    # =========================================================================

    def _tools_list(self, command: Command) -> Event:
        return Event.result(
            command.id,
            data={"tools": [tool.to_dict() for tool in self._tools.values()]},
        )

    def _tools_call(self, command: Command) -> Event:
        name = command.get_param("name")
        if not isinstance(name, str) or not name:
            return Event.error(
                command.id,
                error="Missing required parameter: name",
                code=ErrorCode.INVALID_PARAMS,
            )

        if name not in self._tools:
            return Event.error(
                command.id,
                error=f"Unknown tool: {name}",
                code=ErrorCode.METHOD_NOT_FOUND,
            )

        try:
            result = self._tool_handlers[name](command.get_param("arguments"))
        except ValidationError as e:
            logger.info(f"Rejected {name} call {command.id}: {e}")
            return Event.error(
                command.id,
                error=str(e),
                code=e.code,
                details=_error_details(e),
            )

        return Event.result(command.id, data=result.to_dict())

    # =========================================================================
    # Resources
    # =========================================================================

    def _resources_list(self, command: Command) -> Event:
        return Event.result(
            command.id,
            data={"resources": [resource.to_dict() for resource in RESOURCES]},
        )

    def _resources_read(self, command: Command) -> Event:
        uri = command.get_param("uri")
        if not isinstance(uri, str) or not uri:
            return Event.error(
                command.id,
                error="Missing required parameter: uri",
                code=ErrorCode.INVALID_PARAMS,
            )

        content = self.read_resource(uri)
        if content is None:
            return Event.error(
                command.id,
                error=f"Unknown resource: {uri}",
                code=ErrorCode.INVALID_REQUEST,
            )

        return Event.result(
            command.id,
            data={
                "contents": [
                    {
                        "uri": uri,
                        "mimeType": JSON_MIME_TYPE,
                        "text": json.dumps(content, indent=2),
                    }
                ]
            },
        )

    def read_resource(self, uri: str) -> dict[str, Any] | None:
        """Return the JSON document behind a resource URI, or None if unknown."""
        if uri == EVENTS_URI:
            return self._facade.last_batch.to_dict()
        if uri == VALID_EVENTS_URI:
            return valid_events()
        return None

    # =========================================================================
    # Server
    # =========================================================================

    def _capabilities(self, command: Command) -> Event:
        data: dict[str, Any] = {
            "version": __version__,
            "commands": [cmd.value for cmd in CommandType],
            "events": [evt.value for evt in EventType],
            "tools": list(self._tools),
            "resources": [resource.uri for resource in RESOURCES],
        }
        if self._connection is not None:
            data["transport"] = {
                "endpoint": self._connection.url,
                "state": self._connection.state.value,
            }
        return Event.result(command.id, data=data)


def _error_details(error: ValidationError) -> dict[str, Any]:
    details: dict[str, Any] = {"kind": error.kind}
    if error.index is not None:
        details["index"] = error.index
    return details
