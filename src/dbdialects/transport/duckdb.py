"""DuckDB transport — runs probe and ad-hoc SQL in-process."""

from __future__ import annotations

import threading

import duckdb as _duckdb

from dbdialects.drivers._base import ConnectionDescriptor
from dbdialects.transport._base import DEFAULT_TIMEOUT_SECONDS, Row, TransportError


def _parse_config(options: str) -> dict[str, str]:
    config: dict[str, str] = {}
    for part in filter(None, options.split("&")):
        if "=" not in part:
            raise TransportError(f"Expected key=value DuckDB option, got '{part}'")
        k, v = part.split("=", 1)
        config[k.strip()] = v.strip()
    return config


class DuckDBTransport:
    """One short-lived connection per call; the timeout interrupts the running query."""

    def execute(
        self,
        descriptor: ConnectionDescriptor,
        sql: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> list[Row]:
        path = descriptor.properties.get("path", ":memory:")
        config = _parse_config(descriptor.options)
        try:
            conn = _duckdb.connect(path, config=config)
        except Exception as e:
            raise TransportError(f"DuckDB connection failed: {e}") from e

        timer = threading.Timer(timeout, conn.interrupt)
        timer.start()
        try:
            result = conn.execute(sql)
            columns = [desc[0] for desc in result.description] if result.description else []
            rows_raw = result.fetchall() if result.description else []
        except Exception as e:
            raise TransportError(f"DuckDB execution failed: {e}") from e
        finally:
            timer.cancel()
            conn.close()

        return [dict(zip(columns, row, strict=True)) for row in rows_raw]
