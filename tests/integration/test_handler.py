"""Integration tests for the protocol command handler.

Runs commands through the real handler, facade and validator with a
recording sink in place of the WebSocket.
"""

import json

import pytest

from gamepad_bridge import __version__
from gamepad_bridge.dispatch import DispatchFacade
from gamepad_bridge.protocol import Command, CommandHandler
from gamepad_bridge.transport.websocket import ConnectionManager
from gamepad_bridge.validation import ValidationPolicy

PRESS_A = {"type": "button", "code": "A", "value": True}


@pytest.fixture
def facade(sink) -> DispatchFacade:
    return DispatchFacade(sink)


@pytest.fixture
def handler(facade) -> CommandHandler:
    return CommandHandler(facade)


async def run(handler: CommandHandler, command: Command) -> list:
    return [event async for event in handler.handle(command)]


async def final(handler: CommandHandler, command: Command):
    events = await run(handler, command)
    assert len(events) == 1
    assert events[0].final is True
    assert events[0].correlation_id == command.id
    return events[0]


def resource_json(event) -> dict:
    (content,) = event.data["contents"]
    assert content["mimeType"] == "application/json"
    return json.loads(content["text"])


# =============================================================================
# Tests: Tools
# =============================================================================


class TestToolsList:
    """Test tools.list."""

    @pytest.mark.anyio
    async def test_lists_send_gamepad_event(self, handler):
        event = await final(handler, Command.create("tools.list"))

        (tool,) = event.data["tools"]
        assert tool["name"] == "send_gamepad_event"
        schema = tool["inputSchema"]
        assert schema["required"] == ["events"]
        item = schema["properties"]["events"]["items"]
        assert item["properties"]["type"]["enum"] == [
            "button",
            "axis",
            "trigger",
            "mouseButton",
            "keyboard",
        ]
        assert tool["examples"]


class TestToolsCall:
    """Test tools.call for send_gamepad_event."""

    @pytest.mark.anyio
    async def test_valid_batch(self, handler, sink):
        event = await final(handler, Command.send_events([PRESS_A]))

        assert event.type == "result"
        assert event.data == {
            "success": True,
            "eventsReceived": 1,
            "message": "Events validated and sent successfully",
        }
        assert len(sink.batches) == 1

    @pytest.mark.anyio
    async def test_invalid_event(self, handler, sink):
        event = await final(
            handler,
            Command.send_events([PRESS_A, {"type": "axis", "code": "A", "value": 0.0}]),
        )

        assert event.is_error()
        assert event.data == {
            "error": "events[1]: Invalid axis code: A",
            "code": "InvalidParams",
            "details": {"kind": "UnknownEventCode", "index": 1},
        }
        assert sink.batches == []

    @pytest.mark.anyio
    async def test_missing_events(self, handler):
        event = await final(handler, Command.tools_call("send_gamepad_event", {}))

        assert event.error_code == "InvalidParams"
        assert event.data["details"] == {"kind": "InvalidRequest"}

    @pytest.mark.anyio
    async def test_empty_batch_rejected(self, handler):
        event = await final(handler, Command.send_events([]))
        assert event.data["details"]["kind"] == "InvalidRequest"

    @pytest.mark.anyio
    async def test_empty_batch_allowed(self, sink):
        handler = CommandHandler(
            DispatchFacade(sink, policy=ValidationPolicy(allow_empty_batch=True))
        )

        event = await final(handler, Command.send_events([]))

        assert event.data["eventsReceived"] == 0
        assert sink.batches == []

    @pytest.mark.anyio
    async def test_unknown_tool(self, handler):
        event = await final(handler, Command.tools_call("send_keyboard_macro", {}))
        assert event.error_code == "MethodNotFound"

    @pytest.mark.anyio
    async def test_missing_tool_name(self, handler):
        event = await final(handler, Command.create("tools.call", {"arguments": {}}))
        assert event.error_code == "InvalidParams"

    @pytest.mark.anyio
    async def test_sink_failure_is_internal_error(self, facade, sink):
        def explode(batch):
            raise RuntimeError("sink exploded")

        sink.send = explode
        handler = CommandHandler(facade)

        event = await final(handler, Command.send_events([PRESS_A]))

        assert event.error_code == "InternalError"
        assert "sink exploded" in event.data["error"]


# =============================================================================
# Tests: Resources
# =============================================================================


class TestResources:
    """Test resources.list and resources.read."""

    @pytest.mark.anyio
    async def test_list(self, handler):
        event = await final(handler, Command.create("resources.list"))

        uris = [r["uri"] for r in event.data["resources"]]
        assert uris == ["gamepad://events", "gamepad://valid-events"]
        assert all(r["mimeType"] == "application/json" for r in event.data["resources"])

    @pytest.mark.anyio
    async def test_events_before_any_submission(self, handler):
        event = await final(handler, Command.resources_read("gamepad://events"))
        assert resource_json(event) == {"events": []}

    @pytest.mark.anyio
    async def test_events_after_submission(self, handler):
        await final(handler, Command.send_events([PRESS_A]))

        event = await final(handler, Command.resources_read("gamepad://events"))

        assert resource_json(event) == {"events": [PRESS_A]}

    @pytest.mark.anyio
    async def test_rejected_submission_keeps_last_batch(self, handler):
        await final(handler, Command.send_events([PRESS_A]))
        await final(
            handler,
            Command.send_events([{"type": "button", "code": "B", "value": "yes"}]),
        )

        event = await final(handler, Command.resources_read("gamepad://events"))

        assert resource_json(event) == {"events": [PRESS_A]}

    @pytest.mark.anyio
    async def test_valid_events(self, handler):
        event = await final(handler, Command.resources_read("gamepad://valid-events"))

        listing = resource_json(event)
        assert {"type": "button", "code": "START"} in listing["buttonEvents"]
        assert {"type": "trigger", "code": "leftTrigger"} in listing["sliderEvents"]

    @pytest.mark.anyio
    async def test_unknown_resource(self, handler):
        event = await final(handler, Command.resources_read("gamepad://state"))

        assert event.error_code == "InvalidRequest"
        assert event.data["error"] == "Unknown resource: gamepad://state"

    @pytest.mark.anyio
    async def test_missing_uri(self, handler):
        event = await final(handler, Command.create("resources.read"))
        assert event.error_code == "InvalidParams"


# =============================================================================
# Tests: Server Commands
# =============================================================================


class TestServerCommands:
    """Test ping, capabilities and unknown commands."""

    @pytest.mark.anyio
    async def test_ping(self, handler):
        event = await final(handler, Command.ping())
        assert event.type == "pong"

    @pytest.mark.anyio
    async def test_unknown_command(self, handler):
        event = await final(handler, Command.create("session.create"))

        assert event.error_code == "MethodNotFound"
        assert "session.create" in event.data["error"]

    @pytest.mark.anyio
    async def test_capabilities(self, handler):
        event = await final(handler, Command.create("capabilities"))

        assert event.data["version"] == __version__
        assert "tools.call" in event.data["commands"]
        assert event.data["tools"] == ["send_gamepad_event"]
        assert "transport" not in event.data

    @pytest.mark.anyio
    async def test_capabilities_reports_connection(self, facade):
        connection = ConnectionManager("ws://127.0.0.1:13123")
        handler = CommandHandler(facade, connection)

        event = await final(handler, Command.create("capabilities"))

        assert event.data["transport"] == {
            "endpoint": "ws://127.0.0.1:13123",
            "state": "disconnected",
        }
