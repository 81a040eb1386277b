"""Typer CLI entrypoint."""

from __future__ import annotations

import signal
import threading
from pathlib import Path

import typer

from ppba_alpaca.core.errors import PpbaError
from ppba_alpaca.core.logging_setup import configure_logging
from ppba_alpaca.core.router import invoke, resolve_action
from ppba_alpaca.core.service import Gateway, open_controller
from ppba_alpaca.core.settings import Settings, load_settings
from ppba_alpaca.devices.switch import Switch

app = typer.Typer(help="Alpaca HTTP gateway for PPBA relay switches")


def _config_option():
    return typer.Option(None, "--config", "-c", help="Path to settings YAML")


def _load(config: Path | None) -> Settings:
    settings = load_settings(config)
    configure_logging(settings.log_level, settings.log_dir)
    return settings


def _wait_for_shutdown() -> None:
    stop = threading.Event()

    def _request_stop(signum: int, _frame: object) -> None:
        stop.set()

    signal.signal(signal.SIGINT, _request_stop)
    signal.signal(signal.SIGTERM, _request_stop)
    stop.wait()


@app.command("serve")
def serve(config: Path | None = _config_option()) -> None:
    """Open the box, register its switches and serve the Alpaca HTTP API."""
    try:
        settings = _load(config)
        gateway = Gateway(settings)
        gateway.start()
    except PpbaError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    try:
        port = gateway.server.port if gateway.server else settings.server_port
        typer.echo(f"Alpaca server listening on {settings.server_address}:{port}. Press Ctrl+C to exit.")
        _wait_for_shutdown()
        typer.echo("Shutdown requested. Stopping server...")
    finally:
        gateway.stop()


@app.command("ping")
def ping(
    config: Path | None = _config_option(),
    timeout: int | None = typer.Option(None, "--timeout", help="Read timeout in milliseconds"),
) -> None:
    """Run the P# handshake once and report whether the box answered."""
    try:
        settings = _load(config)
        controller = open_controller(settings)
    except PpbaError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    try:
        ok = controller.handshake(timeout if timeout is not None else settings.read_timeout_ms)
    finally:
        controller.close()

    if not ok:
        typer.echo(f"Handshake failed: {controller.last_error}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{settings.serial_port}: PPBA_OK")


@app.command("switch")
def switch(
    action: str = typer.Argument(..., help="One of: on, off, init"),
    device: int | None = typer.Option(None, "--device", "-d", min=0, help="Relay channel number"),
    config: Path | None = _config_option(),
    timeout: int | None = typer.Option(None, "--timeout", help="Read timeout in milliseconds"),
) -> None:
    """Send one relay command without starting the HTTP server."""
    try:
        resolved = resolve_action(action)
        settings = _load(config)
        device_number = device if device is not None else settings.devices[0]
        controller = open_controller(settings)
    except PpbaError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    relay = Switch(controller, device_number)
    try:
        ok = invoke(relay, resolved, timeout if timeout is not None else settings.read_timeout_ms)
    finally:
        relay.close()
        controller.close()

    typer.echo(f"Switch #{device_number} {resolved.value}: {'ok' if ok else 'failed'}")
    if not ok:
        raise typer.Exit(code=1)


@app.command("config")
def show_config(config: Path | None = _config_option()) -> None:
    """Print the effective settings."""
    try:
        settings = load_settings(config)
    except PpbaError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    for key, value in settings.as_dict().items():
        typer.echo(f"{key}: {value}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
