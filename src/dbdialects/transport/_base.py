"""Transport protocol — the blocking "run SQL, get rows" boundary drivers probe through."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from dbdialects.drivers._base import ConnectionDescriptor

DEFAULT_TIMEOUT_SECONDS = 10.0

Row = dict[str, object]


class TransportError(Exception):
    """Raised by transports for connection/execution failures."""


@runtime_checkable
class Transport(Protocol):
    def execute(
        self,
        descriptor: ConnectionDescriptor,
        sql: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> list[Row]: ...
