"""Shared helpers for CLI commands."""

from __future__ import annotations

import json

import click

from dbdialects.connections import ConnectionConfig, get_connection
from dbdialects.drivers._base import ConnectionParameters, Driver, DriverError
from dbdialects.drivers._registry import get_driver, list_drivers

FORMAT_OPTION = click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format.",
)

DB_OPTION = click.option(
    "--db",
    required=True,
    envvar="DBDIALECTS_DB",
    help="Connection name or driver:key=val,key=val.",
)


def resolve_driver(driver_id: str) -> Driver:
    """Look up a driver for a CLI argument, turning lookup failures into usage errors."""
    try:
        return get_driver(driver_id)
    except DriverError as e:
        valid = ", ".join(list_drivers())
        raise click.BadParameter(f"{e}. Valid: {valid}", param_hint="'DRIVER'") from e


def parse_db(value: str) -> ConnectionConfig:
    """Resolve --db value: try named connection first, fall back to 'driver:key=val' format."""
    # Named connection from ~/.dbdialects/connections.toml
    config = get_connection(value)
    if config is not None:
        return config

    if ":" not in value:
        raise click.BadParameter(
            f"Connection '{value}' not found in ~/.dbdialects/connections.toml "
            f"and not in 'driver:key=val' format.\n"
            f"  Add it: dbdialects connect add {value} <driver> <param>=<val>",
            param_hint="'--db'",
        )
    driver_id, params_str = value.split(":", 1)

    if driver_id not in list_drivers():
        valid = ", ".join(list_drivers())
        raise click.BadParameter(
            f"Unknown driver '{driver_id}'. Valid: {valid}",
            param_hint="'--db'",
        )

    raw: dict[str, str] = {}
    if params_str:
        for part in params_str.split(","):
            if "=" not in part:
                raise click.BadParameter(
                    f"Expected key=value pair, got '{part}'",
                    param_hint="'--db'",
                )
            k, v = part.split("=", 1)
            raw[k.strip()] = v.strip()

    try:
        params = ConnectionParameters.from_dict(raw)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'--db'") from e
    return ConnectionConfig(name=driver_id, driver_id=driver_id, params=params)


def emit(output_format: str, data: dict[str, object], text: str) -> None:
    """Emit a single output document (JSON or text)."""
    if output_format == "json":
        click.echo(json.dumps(data, indent=2, default=str))
    else:
        click.echo(text)
