"""CLI commands for homelink."""

import asyncio
import json
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from homelink import __logo__, __version__

app = typer.Typer(
    name="homelink",
    help=f"{__logo__} homelink - connection health for smart-home agents",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} homelink v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """homelink - connection health for smart-home agents."""
    pass


def _setup_logging(config, enabled: bool) -> None:
    from loguru import logger

    if not enabled:
        logger.disable("homelink")
        return
    logger.enable("homelink")
    logger.remove()
    logger.add(
        sys.stderr,
        level=str(config.logging.level or "INFO").upper(),
        serialize=bool(config.logging.serialize),
    )


# ============================================================================
# Config Commands
# ============================================================================


config_app = typer.Typer(help="Manage homelink config")
app.add_typer(config_app, name="config")


@config_app.command("check")
def config_check(
    config: Path | None = typer.Option(None, "--config", help="Config path to validate"),
):
    """Validate config JSON structure, schema and connection settings."""
    from homelink.config.loader import convert_keys, get_config_path, validate_config
    from homelink.config.schema import Config

    config_path = (config or get_config_path()).expanduser()
    if not config_path.exists():
        console.print(f"[red]Config file not found:[/red] {config_path}")
        raise typer.Exit(2)

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        console.print(f"[red]Invalid JSON:[/red] {exc}")
        raise typer.Exit(2) from exc

    if not isinstance(raw, dict):
        console.print("[red]Config must be a JSON object[/red]")
        raise typer.Exit(2)

    try:
        cfg = Config(**convert_keys(raw))
    except Exception as exc:
        console.print(f"[red]Schema validation failed:[/red] {exc}")
        raise typer.Exit(1) from exc

    try:
        validate_config(cfg)
    except ValueError as exc:
        console.print(f"[red]Config check failed:[/red] {exc}")
        raise typer.Exit(1) from exc

    console.print("[green]✓[/green] Config validation passed")
    console.print(f"path={config_path}")
    console.print(f"agent={cfg.agent.name}")
    console.print(f"home_assistant={cfg.home_assistant.url}")
    console.print(f"cloud={'on' if cfg.cloud.enabled else 'off'}")
    console.print(
        f"manager=dedupe_reconnects={'on' if cfg.manager.dedupe_reconnects else 'off'}"
    )
    console.print(
        f"reconnection=interval_ms={cfg.reconnection.interval_ms} "
        f"max_attempts={cfg.reconnection.max_attempts}"
    )


# ============================================================================
# Device ID
# ============================================================================


@app.command("device-id")
def device_id(
    generate: bool = typer.Option(False, "--generate", help="Generate and persist an ID when none is set"),
    path: Path | None = typer.Option(None, "--path", help="Device ID file path"),
):
    """Show the device ID used to identify this agent."""
    from homelink.config.loader import load_config
    from homelink.utils.helpers import (
        generate_device_id,
        get_device_id_path,
        resolve_device_id,
        save_device_id,
    )

    cfg = load_config()
    id_path = (path or get_device_id_path(cfg.addon)).expanduser()
    current = resolve_device_id(cfg.agent.device_id, id_path)

    if current is not None:
        console.print(current)
        return
    if not generate:
        console.print("[yellow]No device ID configured[/yellow] (use --generate to create one)")
        raise typer.Exit(1)

    try:
        created = save_device_id(id_path, generate_device_id())
    except OSError as exc:
        console.print(f"[red]Failed to persist device ID:[/red] {exc}")
        raise typer.Exit(1) from exc
    console.print(f"[green]✓[/green] Device ID written to {id_path}")
    console.print(created)


# ============================================================================
# Simulation
# ============================================================================


@app.command()
def simulate(
    fail_start: list[str] = typer.Option([], "--fail-start", help="Connection name whose start fails"),
    fail_resync: list[str] = typer.Option([], "--fail-resync", help="Connection name whose resync fails"),
    logs: bool = typer.Option(False, "--logs/--no-logs", help="Show homelink runtime logs"),
):
    """Run one outage/recovery cycle over in-memory connections."""
    from homelink.config.loader import load_config
    from homelink.connections import ConnectionManager, MockConnection

    cfg = load_config()
    _setup_logging(cfg, logs)

    names = ["homeassistant"]
    if cfg.cloud.enabled:
        names.append("cloud")
    unknown = sorted((set(fail_start) | set(fail_resync)) - set(names))
    if unknown:
        console.print(f"[yellow]Ignoring unknown connections: {', '.join(unknown)}[/yellow]")

    manager = ConnectionManager.from_config(cfg)
    connections: dict[str, MockConnection] = {}
    for name in names:
        connection = MockConnection(
            name,
            fail_start=name in fail_start,
            fail_resync=name in fail_resync,
        )
        connections[name] = connection
        manager.register(name, connection, connection.resync)

    async def run():
        await manager.start_all()
        for connection in connections.values():
            connection.trigger_unhealthy()
        await manager.wait_idle()
        for connection in connections.values():
            connection.trigger_reconnected()
        await manager.wait_idle()
        states = manager.get_all_states()
        await manager.stop_all()
        return states

    states = asyncio.run(run())

    table = Table(title="Managed connections")
    table.add_column("Connection", style="cyan")
    table.add_column("State")
    table.add_column("Starts", justify="right")
    table.add_column("Reconnects", justify="right")
    table.add_column("Resyncs", justify="right")
    for name in names:
        connection = connections[name]
        table.add_row(
            name,
            str(states[name]),
            str(connection.start_calls),
            str(connection.force_reconnect_calls),
            str(connection.resync_calls),
        )
    console.print(table)


if __name__ == "__main__":
    app()
