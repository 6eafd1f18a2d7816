"""Connection commands: render the connection descriptor and probe the database."""

from __future__ import annotations

import click

from dbdialects.cli._shared import DB_OPTION, FORMAT_OPTION, emit, parse_db, resolve_driver
from dbdialects.drivers._base import ConnectionFailedError
from dbdialects.transport import DEFAULT_TIMEOUT_SECONDS, TransportError, get_transport


@click.command("spec")
@DB_OPTION
@FORMAT_OPTION
def spec(db: str, output_format: str) -> None:
    """Show the connection descriptor a driver builds (password masked)."""
    config = parse_db(db)
    driver = resolve_driver(config.driver_id)
    descriptor = driver.connection_spec(config.params)
    shown = descriptor.redacted()
    lines = [
        f"driver: {shown['driver_class']}",
        f"url: {shown['url']}",
    ]
    lines.extend(f"  {k}={v}" for k, v in shown["properties"].items())
    emit(output_format, shown, "\n".join(lines))


@click.command("probe")
@DB_OPTION
@click.option(
    "--timeout",
    type=float,
    default=DEFAULT_TIMEOUT_SECONDS,
    show_default=True,
    help="Seconds before the probe is abandoned.",
)
@FORMAT_OPTION
def probe(db: str, timeout: float, output_format: str) -> None:
    """Run the driver's probe query. Exits 1 if the database can't be reached."""
    config = parse_db(db)
    driver = resolve_driver(config.driver_id)
    try:
        transport = get_transport(config.driver_id)
    except TransportError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1) from None

    try:
        driver.check_connection(config.params, transport, timeout=timeout)
    except ConnectionFailedError as e:
        emit(
            output_format,
            {
                "connected": False,
                "category": e.classified.category.value,
                "error": str(e),
                "detail": e.classified.message,
            },
            f"error: {e}",
        )
        raise SystemExit(1) from None

    emit(output_format, {"connected": True}, f"connected to {config.name}")
