"""Gamepad Bridge CLI.

Default mode is stdio (for tool-host subprocess integration).
Use --http to run as HTTP server.

Usage:
    gamepad-bridge                          # Stdio mode (default)
    gamepad-bridge --http                   # HTTP server mode
    gamepad-bridge --http --port 8080       # HTTP with custom port
    gamepad-bridge --endpoint ws://host:1   # Custom input simulator URL
    gamepad-bridge --config bridge.yaml     # Load settings from YAML
    gamepad-bridge --health                 # Check HTTP server health

    gamepad-bridge taxonomy                 # List valid events
    gamepad-bridge config                   # Show effective configuration
    gamepad-bridge validate batch.json      # Validate a batch offline
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any

import click
import httpx

from .bridge import GamepadBridge
from .config import BridgeConfig, load_config
from .errors import ConfigError, ValidationError
from .taxonomy import TriggerRange, valid_events
from .validation import validate_batch

# Output format options
FORMAT_TABLE = "table"
FORMAT_JSON = "json"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 4097


def configure_logging(level: str) -> None:
    """Send logs to stderr; stdout carries the stdio protocol."""
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _load(ctx: click.Context) -> BridgeConfig:
    """Resolve the configuration from the group options."""
    options: dict[str, Any] = ctx.find_root().obj or {}
    try:
        return load_config(options.get("config_path"), **options.get("overrides", {}))
    except ConfigError as e:
        raise click.UsageError(str(e)) from e


@click.group(invoke_without_command=True)
@click.option("--http", "http_mode", is_flag=True, help="Run as HTTP server instead of stdio")
@click.option("--host", default=DEFAULT_HOST, help="Host to bind to (HTTP mode)")
@click.option("--port", default=DEFAULT_PORT, help="Port to bind to (HTTP mode)")
@click.option("--endpoint", default=None, help="WebSocket URL of the input simulation server")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to YAML configuration file",
)
@click.option(
    "--trigger-range",
    type=click.Choice([r.value for r in TriggerRange]),
    default=None,
    help="Accepted trigger interval: symmetric [-1, 1] or unit [0, 1]",
)
@click.option(
    "--allow-empty-batch/--reject-empty-batch",
    default=None,
    help="Treat an empty event list as a successful no-op",
)
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--health", "health_check", is_flag=True, help="Check HTTP server health and exit")
@click.option(
    "--health-url", default=f"http://localhost:{DEFAULT_PORT}", help="Server URL for health check"
)
@click.pass_context
def main(
    ctx: click.Context,
    http_mode: bool,
    host: str,
    port: int,
    endpoint: str | None,
    config_path: str | None,
    trigger_range: str | None,
    allow_empty_batch: bool | None,
    log_level: str | None,
    health_check: bool,
    health_url: str,
) -> None:
    """Gamepad Bridge - forward validated input events to an input simulator.

    By default, runs in stdio mode for subprocess/IPC communication.
    Use --http to run as an HTTP server.
    """
    ctx.obj = {
        "config_path": config_path,
        "overrides": {
            "endpoint": endpoint,
            "trigger_range": trigger_range,
            "allow_empty_batch": allow_empty_batch,
            "log_level": log_level,
        },
    }

    # If a subcommand is invoked, let it handle everything
    if ctx.invoked_subcommand is not None:
        return

    if (host != DEFAULT_HOST or port != DEFAULT_PORT) and not http_mode and not health_check:
        raise click.UsageError(
            "--host and --port require --http mode. "
            "These options are only available when running as an HTTP server."
        )

    if health_check:
        _do_health_check(health_url)
        return

    config = _load(ctx)
    configure_logging(config.log_level)

    if http_mode:
        _run_http_server(config, host, port)
    else:
        _run_stdio_server(config)


def _do_health_check(url: str) -> None:
    """Check server health."""

    async def check() -> None:
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(f"{url}/health")
                if response.status_code == 200:
                    data = response.json()
                    click.echo(f"Server is healthy: {data}")
                else:
                    click.echo(f"Server returned {response.status_code}", err=True)
                    sys.exit(1)
        except httpx.ConnectError:
            click.echo(f"Cannot connect to server at {url}", err=True)
            sys.exit(1)

    asyncio.run(check())


def _run_http_server(config: BridgeConfig, host: str, port: int) -> None:
    """Run HTTP server mode."""
    import uvicorn

    from .app import create_app

    click.echo(f"Starting gamepad bridge on http://{host}:{port}", err=True)
    click.echo(f"  Forwarding to {config.endpoint}", err=True)
    click.echo("Press Ctrl+C to stop", err=True)

    uvicorn.run(
        create_app(GamepadBridge(config)),
        host=host,
        port=port,
        log_level=config.log_level.lower(),
    )


def _run_stdio_server(config: BridgeConfig) -> None:
    """Run stdio server mode (default)."""
    from .transport.stdio_adapter import run_stdio_adapter

    click.echo(f"Gamepad bridge running on stdio, forwarding to {config.endpoint}", err=True)

    try:
        asyncio.run(run_stdio_adapter(GamepadBridge(config)))
    except KeyboardInterrupt:
        click.echo("\nShutting down", err=True)


# =============================================================================
# Offline Commands
# =============================================================================


@main.command("taxonomy")
@click.option(
    "--format",
    "output_format",
    type=click.Choice([FORMAT_TABLE, FORMAT_JSON]),
    default=FORMAT_TABLE,
    help="Output format",
)
def taxonomy_cmd(output_format: str) -> None:
    """List every valid (type, code) pair."""
    listing = valid_events()

    if output_format == FORMAT_JSON:
        click.echo(json.dumps(listing, indent=2))
        return

    for title, key in (("Button events", "buttonEvents"), ("Slider events", "sliderEvents")):
        click.echo(f"{title}:")
        for entry in listing[key]:
            click.echo(f"  {entry['type']:<12} {entry['code']}")


@main.command("config")
@click.pass_context
def config_cmd(ctx: click.Context) -> None:
    """Show the effective configuration."""
    config = _load(ctx)
    click.echo(json.dumps(config.to_dict(), indent=2))


@main.command("validate")
@click.argument("batch_file", type=click.File("r"))
@click.pass_context
def validate_cmd(ctx: click.Context, batch_file: Any) -> None:
    """Validate a JSON batch ({"events": [...]} or a bare list) without sending it."""
    config = _load(ctx)

    try:
        data = json.load(batch_file)
    except json.JSONDecodeError as e:
        click.echo(f"Invalid JSON: {e}", err=True)
        sys.exit(1)

    raw_events = data.get("events") if isinstance(data, dict) else data
    if not isinstance(raw_events, list):
        click.echo("Expected a list of events or an object with an 'events' list", err=True)
        sys.exit(1)

    if not raw_events and not config.allow_empty_batch:
        click.echo("InvalidRequest: events array must not be empty", err=True)
        sys.exit(1)

    try:
        batch = validate_batch(raw_events, config.validation_policy)
    except ValidationError as e:
        click.echo(f"{e.kind}: {e}", err=True)
        sys.exit(1)

    click.echo(f"{len(batch)} event(s) valid")


if __name__ == "__main__":
    main()
