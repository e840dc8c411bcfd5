"""HTTP routes."""

from .health import health_routes
from .protocol_adapter import protocol_routes

__all__ = ["health_routes", "protocol_routes"]
