"""HTTP Protocol Adapter.

Thin adapter layer that maps HTTP requests to protocol commands
and protocol events to HTTP responses.

This is the ONLY place where HTTP-specific logic lives.
All business logic is in the CommandHandler.

Routes (mounted under /v1):
- GET  /tools                  -> tools.list
- POST /tools/{name}           -> tools.call (JSON body = tool arguments)
- GET  /resources              -> resources.list
- GET  /resources/{name}       -> resources.read (gamepad://{name})
"""

from __future__ import annotations

from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from ..errors import ErrorCode
from ..protocol import Command, CommandHandler, CommandType, Event

RESOURCE_SCHEME = "gamepad://"

_STATUS_BY_CODE = {
    ErrorCode.INVALID_PARAMS.value: 400,
    ErrorCode.INVALID_REQUEST.value: 400,
    ErrorCode.PARSE_ERROR.value: 400,
    ErrorCode.METHOD_NOT_FOUND.value: 404,
}


def get_handler(request: Request) -> CommandHandler:
    """Command handler of the bridge owned by the application."""
    return request.app.state.bridge.handler


def event_to_response(event: Event) -> Response:
    """Convert a final protocol event to a JSON response."""
    if event.is_error():
        status = _STATUS_BY_CODE.get(event.error_code or "", 500)
        return JSONResponse(event.data, status_code=status)
    return JSONResponse(event.data)


async def single_response(request: Request, command: Command) -> Response:
    """Execute command expecting a single final event."""
    async for event in get_handler(request).handle(command):
        if event.final:
            return event_to_response(event)

    # Should not reach here
    return JSONResponse({"error": "No response"}, status_code=500)


def _parse_error(message: str) -> Response:
    return JSONResponse(
        {"error": message, "code": ErrorCode.PARSE_ERROR.value},
        status_code=400,
    )


# =============================================================================
# Route Handlers - Thin adapters to protocol
# =============================================================================


async def list_tools(request: Request) -> Response:
    """GET /tools - List callable tools."""
    return await single_response(request, Command.create(CommandType.TOOLS_LIST))


async def call_tool(request: Request) -> Response:
    """POST /tools/{name} - Call a tool with the JSON body as arguments."""
    name = request.path_params["name"]

    arguments = {}
    if await request.body():
        try:
            arguments = await request.json()
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError
            return _parse_error(f"Invalid JSON body: {e}")

    return await single_response(request, Command.tools_call(name, arguments))


async def list_resources(request: Request) -> Response:
    """GET /resources - List readable resources."""
    return await single_response(request, Command.create(CommandType.RESOURCES_LIST))


async def read_resource(request: Request) -> Response:
    """GET /resources/{name} - Read gamepad://{name}."""
    name = request.path_params["name"]
    return await single_response(request, Command.resources_read(f"{RESOURCE_SCHEME}{name}"))


protocol_routes = [
    Route("/tools", list_tools, methods=["GET"]),
    Route("/tools/{name}", call_tool, methods=["POST"]),
    Route("/resources", list_resources, methods=["GET"]),
    Route("/resources/{name}", read_resource, methods=["GET"]),
]
