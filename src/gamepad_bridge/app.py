"""Gamepad Bridge HTTP Application.

Creates the Starlette ASGI application with all routes:
- /health - Health check, including the outbound connection state
- /v1/*   - Protocol-based routes (tools and resources)

The application owns one GamepadBridge, started and stopped with the
ASGI lifespan.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Mount, Route

from .bridge import GamepadBridge
from .config import load_config
from .routes import health_routes, protocol_routes


def create_app(bridge: GamepadBridge | None = None) -> Starlette:
    """Create the bridge HTTP application.

    Args:
        bridge: Bridge to serve; built from the environment when omitted

    Returns:
        Configured Starlette application
    """
    bridge = bridge or GamepadBridge(load_config())

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        async with bridge:
            yield

    routes: list[Route | Mount] = []
    routes.extend(health_routes)
    routes.append(Mount("/v1", routes=protocol_routes))

    # CORS middleware for local development
    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=["http://localhost:*", "http://127.0.0.1:*"],
            allow_methods=["*"],
            allow_headers=["*"],
        ),
    ]

    app = Starlette(routes=routes, middleware=middleware, lifespan=lifespan)
    app.state.bridge = bridge
    return app
