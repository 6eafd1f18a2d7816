"""The `connect` command group: manage named connections."""

from __future__ import annotations

import click

from dbdialects.connections import (
    ConnectionConfig,
    list_connections,
    remove_connection,
    save_connection,
)
from dbdialects.drivers._base import SECRET_PROPERTIES, ConnectionParameters
from dbdialects.drivers._registry import list_drivers


def _describe(entry: dict) -> str:
    shown = []
    for k, v in entry.items():
        if k == "driver":
            continue
        if k == "options" and isinstance(v, dict):
            shown.extend(f"{ok}={ov}" for ok, ov in v.items())
        else:
            shown.append(f"{k}={'****' if k in SECRET_PROPERTIES else v}")
    return ", ".join(shown)


@click.group()
def connect() -> None:
    """Manage named connections (~/.dbdialects/connections.toml)."""


@connect.command("add")
@click.argument("name")
@click.argument("driver_id", metavar="DRIVER", type=click.Choice(list_drivers()))
@click.argument("params", nargs=-1, required=True)
def connect_add(name: str, driver_id: str, params: tuple[str, ...]) -> None:
    """Add or replace a named connection.

    Known keys (host, port, dbname, user, password, ssl, additional-options)
    are typed; anything else is kept as a driver option.

    \b
    Examples:
      dbdialects connect add prod hana host=hana.internal port=30015 user=ANALYST
      dbdialects connect add local duckdb path=/data/warehouse.duckdb threads=4
    """
    raw: dict[str, str] = {}
    for p in params:
        if "=" not in p:
            raise click.BadParameter(f"Expected key=value, got '{p}'", param_hint="'PARAMS'")
        k, v = p.split("=", 1)
        raw[k] = v

    try:
        parsed = ConnectionParameters.from_dict(raw)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'PARAMS'") from e

    path = save_connection(ConnectionConfig(name=name, driver_id=driver_id, params=parsed))
    click.echo(f"Saved connection '{name}' ({driver_id}) to {path}")


@connect.command("list")
def connect_list() -> None:
    """List named connections, secrets masked."""
    entries = list_connections()
    if not entries:
        click.echo("No connections configured.")
        click.echo("Add one: dbdialects connect add <name> <driver> <param>=<val>")
        return

    known = set(list_drivers())
    for name, entry in entries.items():
        driver_id = entry.get("driver", "?")
        note = "" if driver_id in known else "  [unknown driver]"
        click.echo(f"  {name} ({driver_id}): {_describe(entry)}{note}")


@connect.command("remove")
@click.argument("name")
def connect_remove(name: str) -> None:
    """Remove a named connection."""
    if not remove_connection(name):
        click.echo(f"Connection '{name}' not found.", err=True)
        raise SystemExit(1)
    click.echo(f"Removed connection '{name}'.")
