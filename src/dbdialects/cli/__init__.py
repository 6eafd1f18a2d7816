"""CLI entry point."""

from __future__ import annotations

import logging

import click

from dbdialects.cli.compile import bucket, epoch, interval, timezone
from dbdialects.cli.connect import connect
from dbdialects.cli.drivers import classify, drivers, fields, types
from dbdialects.cli.probe import probe, spec


@click.group()
@click.version_option(package_name="dbdialects")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
def main(verbose: bool) -> None:
    """dbdialects: one query representation, many SQL dialects."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


main.add_command(drivers)
main.add_command(types)
main.add_command(classify)
main.add_command(fields)
main.add_command(bucket)
main.add_command(interval)
main.add_command(epoch)
main.add_command(timezone)
main.add_command(spec)
main.add_command(probe)
main.add_command(connect)
