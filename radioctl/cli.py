"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from typing import Any

import typer

from radioctl.core.errors import InvalidArgumentError, RadioctlError
from radioctl.core.service import RadioService
from radioctl.core.settings import AVAILABLE_TECHNOLOGIES, FAST_DORMANCY

app = typer.Typer(help="Modem radio access settings on simulated modem profiles")


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Log driver and settings activity"),
) -> None:
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )


def _build_service() -> RadioService:
    service = RadioService()
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "on" if value else "off"
    if isinstance(value, (list, tuple)):
        return ", ".join(value)
    return str(value)


def _parse_value(name: str, text: str) -> Any:
    if name != FAST_DORMANCY:
        return text
    lowered = text.strip().lower()
    if lowered in {"on", "true", "1", "yes"}:
        return True
    if lowered in {"off", "false", "0", "no"}:
        return False
    raise InvalidArgumentError(f"{FAST_DORMANCY} expects on/off, got '{text}'")


@app.command("profiles")
def list_profiles() -> None:
    """List available modem profiles."""
    try:
        service = _build_service()
        profiles = service.list_profiles()
        if not profiles:
            typer.echo("No profiles loaded")
            raise typer.Exit(code=1)

        for profile in profiles:
            typer.echo(f"{profile.id}: {profile.name} (driver: {profile.driver})")
    except RadioctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("show")
def show(
    profile: str | None = typer.Option(None, "--profile", help="Profile ID"),
) -> None:
    """Show the radio settings of a modem."""
    try:
        service = _build_service()
        snapshot = service.get_properties(profile_id=profile)
        typer.echo(f"Modem: {snapshot.profile.id} ({snapshot.profile.name})")
        for name, value in snapshot.properties.items():
            typer.echo(f"  {name}: {_format_value(value)}")
    except RadioctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("technologies")
def technologies(
    profile: str | None = typer.Option(None, "--profile", help="Profile ID"),
) -> None:
    """List the technology preferences a modem accepts."""
    try:
        service = _build_service()
        snapshot = service.get_properties(profile_id=profile)
        available = snapshot.properties.get(AVAILABLE_TECHNOLOGIES)
        if not available:
            typer.echo(f"{snapshot.profile.id} does not report available technologies")
            return
        typer.echo(f"Available technologies for {snapshot.profile.id}: {', '.join(available)}")
    except RadioctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("set")
def set_property(
    name: str,
    value: str,
    profile: str | None = typer.Option(None, "--profile", help="Profile ID"),
) -> None:
    """Set a radio setting (TechnologyPreference, GsmBand, UmtsBand, FastDormancy)."""
    try:
        service = _build_service()
        result = service.set_property(name, _parse_value(name, value), profile_id=profile)
        if not result.changes:
            typer.echo(f"{result.name} already {_format_value(result.value)} on {result.profile.id}")
            return
        for changed, new in result.changes:
            typer.echo(f"{changed} -> {_format_value(new)} on {result.profile.id}")
    except RadioctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
