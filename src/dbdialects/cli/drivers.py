"""Driver inspection commands: list drivers, map types, classify errors, show form fields."""

from __future__ import annotations

import click

from dbdialects.cli._shared import FORMAT_OPTION, emit, resolve_driver
from dbdialects.drivers._registry import list_drivers


@click.command("drivers")
@FORMAT_OPTION
def drivers(output_format: str) -> None:
    """List registered driver ids."""
    ids = list_drivers()
    emit(output_format, {"drivers": ids}, "\n".join(ids))


@click.command("types")
@click.argument("driver_id", metavar="DRIVER")
@click.argument("native_types", nargs=-1, required=True)
@FORMAT_OPTION
def types(driver_id: str, native_types: tuple[str, ...], output_format: str) -> None:
    """Map native column types to semantic types.

    \b
    Examples:
      dbdialects types hana NVARCHAR "DECIMAL(10,2)" ST_POINT
    """
    driver = resolve_driver(driver_id)
    mapping = {t: driver.column_to_semantic_type(t).value for t in native_types}
    text = "\n".join(f"{t}  {semantic}" for t, semantic in mapping.items())
    emit(output_format, {"driver": driver_id, "types": mapping}, text)


@click.command("classify")
@click.argument("driver_id", metavar="DRIVER")
@click.argument("message")
@FORMAT_OPTION
def classify(driver_id: str, message: str, output_format: str) -> None:
    """Classify a raw connection error message."""
    driver = resolve_driver(driver_id)
    classified = driver.classify_connection_error(message)
    emit(
        output_format,
        {
            "category": classified.category.value,
            "message": classified.message,
            "humanized": classified.humanize(),
        },
        f"{classified.category.value}: {classified.humanize()}",
    )


@click.command("fields")
@click.argument("driver_id", metavar="DRIVER")
@FORMAT_OPTION
def fields(driver_id: str, output_format: str) -> None:
    """Show the connection form fields a driver expects."""
    driver = resolve_driver(driver_id)
    entries = driver.details_fields()
    lines = []
    for f in entries:
        line = f"  {f.name} ({f.type}): {f.display_name}"
        if f.default is not None:
            line += f" [default: {f.default}]"
        if f.placeholder:
            line += f"  e.g. {f.placeholder}"
        lines.append(line)
    emit(
        output_format,
        {
            "driver": driver_id,
            "fields": [
                {
                    "name": f.name,
                    "display_name": f.display_name,
                    "type": f.type,
                    "default": f.default,
                    "placeholder": f.placeholder,
                    "required": f.required,
                }
                for f in entries
            ],
        },
        "\n".join(lines),
    )
