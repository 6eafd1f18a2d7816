"""Transports — blocking SQL execution that drivers probe through.

Client libraries are optional; each transport is imported only when asked for.
"""

from __future__ import annotations

import importlib

from dbdialects.transport._base import (
    DEFAULT_TIMEOUT_SECONDS,
    Row,
    Transport,
    TransportError,
)

_TRANSPORT_MAP: dict[str, tuple[str, str]] = {
    "duckdb": ("dbdialects.transport.duckdb", "DuckDBTransport"),
    "hana": ("dbdialects.transport.hana", "HanaTransport"),
}

_EXTRAS: dict[str, str] = {
    "duckdb": "duckdb",
    "hana": "hana",
}


def get_transport(driver_id: str) -> Transport:
    """Instantiate the transport for a driver id.

    Raises TransportError with an install hint if the client package is missing.
    """
    entry = _TRANSPORT_MAP.get(driver_id)
    if entry is None:
        raise TransportError(f"No transport available for '{driver_id}'")

    module_path, class_name = entry
    try:
        mod = importlib.import_module(module_path)
    except ImportError as e:
        extra = _EXTRAS.get(driver_id, "all")
        raise TransportError(
            f"Missing client library for {driver_id}. "
            f"Install with: pip install 'dbdialects[{extra}]'"
        ) from e

    return getattr(mod, class_name)()


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "Row",
    "Transport",
    "TransportError",
    "get_transport",
]
