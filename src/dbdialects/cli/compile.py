"""Compile commands: render temporal buckets, intervals and epoch conversions as SQL."""

from __future__ import annotations

import click
import sqlglot
from sqlglot import exp

from dbdialects.cli._shared import FORMAT_OPTION, emit, resolve_driver
from dbdialects.drivers._base import IntervalUnit, TemporalUnit, TimestampUnit


def _parse_expression(text: str, dialect: str | None) -> exp.Expression:
    try:
        return sqlglot.parse_one(text, dialect=dialect)
    except sqlglot.errors.ParseError as e:
        raise click.BadParameter(f"Not a SQL expression: {e}", param_hint="'EXPR'") from e


@click.command("bucket")
@click.argument("driver_id", metavar="DRIVER")
@click.argument("unit", type=click.Choice([u.value for u in TemporalUnit]))
@click.argument("expr")
@FORMAT_OPTION
def bucket(driver_id: str, unit: str, expr: str, output_format: str) -> None:
    """Render EXPR bucketed to a temporal UNIT.

    \b
    Examples:
      dbdialects bucket hana quarter created_at
      dbdialects bucket duckdb week-of-year "CAST(ts AS DATE)"
    """
    driver = resolve_driver(driver_id)
    parsed = _parse_expression(expr, driver.sqlglot_dialect)
    compiled = driver.render(driver.date(TemporalUnit(unit), parsed))
    emit(output_format, {"driver": driver_id, "unit": unit, "sql": compiled}, compiled)


@click.command("interval", context_settings={"ignore_unknown_options": True})
@click.argument("driver_id", metavar="DRIVER")
@click.argument("unit", type=click.Choice([u.value for u in IntervalUnit]))
@click.argument("amount", type=float)
@FORMAT_OPTION
def interval(driver_id: str, unit: str, amount: float, output_format: str) -> None:
    """Render "now plus AMOUNT UNITs". AMOUNT is truncated to an integer."""
    driver = resolve_driver(driver_id)
    try:
        compiled = driver.render(driver.date_interval(IntervalUnit(unit), amount))
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'AMOUNT'") from e
    emit(output_format, {"driver": driver_id, "sql": compiled}, compiled)


@click.command("epoch")
@click.argument("driver_id", metavar="DRIVER")
@click.argument("expr")
@click.option("--millis", is_flag=True, help="EXPR holds milliseconds, not seconds.")
@FORMAT_OPTION
def epoch(driver_id: str, expr: str, millis: bool, output_format: str) -> None:
    """Render a UNIX timestamp EXPR as a timestamp."""
    driver = resolve_driver(driver_id)
    unit = TimestampUnit.MILLISECONDS if millis else TimestampUnit.SECONDS
    compiled = driver.render(
        driver.unix_timestamp_to_timestamp(_parse_expression(expr, driver.sqlglot_dialect), unit)
    )
    emit(output_format, {"driver": driver_id, "unit": unit.value, "sql": compiled}, compiled)


@click.command("timezone")
@click.argument("driver_id", metavar="DRIVER")
@click.argument("zone")
@FORMAT_OPTION
def timezone(driver_id: str, zone: str, output_format: str) -> None:
    """Render the statement that sets the session time zone."""
    driver = resolve_driver(driver_id)
    statement = driver.set_timezone(zone)
    if statement is None:
        click.echo(f"error: {driver_id} cannot set a session time zone", err=True)
        raise SystemExit(1)
    emit(output_format, {"driver": driver_id, "sql": statement}, statement)
