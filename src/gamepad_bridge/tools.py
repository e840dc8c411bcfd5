"""Tool and resource catalog.

Describes what the bridge exposes to the protocol layer:
- ToolDefinition: name, description, JSON Schema for the arguments, examples
- ResourceDefinition: read-only JSON documents addressed by URI

The catalog is static; handlers for each entry live in the CommandHandler.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .taxonomy import EventType, codes_for

SEND_GAMEPAD_EVENT = "send_gamepad_event"

EVENTS_URI = "gamepad://events"
VALID_EVENTS_URI = "gamepad://valid-events"

JSON_MIME_TYPE = "application/json"


@dataclass
class ToolDefinition:
    """Definition of a tool callable through ``tools.call``.

    Attributes:
        name: Unique identifier for the tool
        description: Human-readable description for the caller
        input_schema: JSON Schema for the tool's arguments
        examples: Named example argument sets
    """

    name: str
    description: str
    input_schema: dict[str, Any]
    examples: list[dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Tool name cannot be empty")
        if not self.description:
            raise ValueError("Tool description cannot be empty")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
            "examples": self.examples,
        }


@dataclass(frozen=True)
class ResourceDefinition:
    """A read-only resource."""

    uri: str
    name: str
    description: str
    mime_type: str = JSON_MIME_TYPE

    def to_dict(self) -> dict[str, Any]:
        return {
            "uri": self.uri,
            "name": self.name,
            "mimeType": self.mime_type,
            "description": self.description,
        }


def _event_schema() -> dict[str, Any]:
    all_codes = [code for event_type in EventType for code in codes_for(event_type)]
    return {
        "type": "object",
        "properties": {
            "type": {"type": "string", "enum": [t.value for t in EventType]},
            "code": {"type": "string", "enum": list(dict.fromkeys(all_codes))},
            "value": {
                "type": ["boolean", "number"],
                "description": (
                    "true/false for button, mouseButton and keyboard events; "
                    "a number for axis and trigger events"
                ),
            },
        },
        "required": ["type", "code", "value"],
    }


def _example(name: str, *events: tuple[str, str, bool | float]) -> dict[str, Any]:
    return {
        "name": name,
        "parameters": {
            "events": [{"type": t, "code": c, "value": v} for t, c, v in events],
        },
    }


def send_gamepad_event_tool() -> ToolDefinition:
    return ToolDefinition(
        name=SEND_GAMEPAD_EVENT,
        description=(
            "Send gamepad, mouse and keyboard events to control the game. "
            "All events in one call are delivered together as a single input frame."
        ),
        input_schema={
            "type": "object",
            "properties": {"events": {"type": "array", "items": _event_schema()}},
            "required": ["events"],
        },
        examples=[
            _example("Press A button", ("button", "A", True)),
            _example("Move left stick", ("axis", "leftX", 0.5), ("axis", "leftY", -0.5)),
            _example(
                "Press shoulder buttons",
                ("button", "LEFT_SHOULDER", True),
                ("button", "RIGHT_SHOULDER", True),
            ),
            _example("Pull right trigger", ("trigger", "rightTrigger", 1.0)),
            _example("Mouse click", ("mouseButton", "leftClick", True)),
            _example("Press space", ("keyboard", "space", True)),
        ],
    )


RESOURCES: tuple[ResourceDefinition, ...] = (
    ResourceDefinition(
        uri=EVENTS_URI,
        name="Gamepad Events",
        description="Most recent batch of validated gamepad events",
    ),
    ResourceDefinition(
        uri=VALID_EVENTS_URI,
        name="Valid Gamepad Events",
        description="List of all valid gamepad events",
    ),
)
