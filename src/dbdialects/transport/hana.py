"""SAP HANA transport via hdbcli (SAP's Python client)."""

from __future__ import annotations

from hdbcli import dbapi

from dbdialects.drivers._base import ConnectionDescriptor
from dbdialects.transport._base import DEFAULT_TIMEOUT_SECONDS, Row, TransportError


def _parse_options(options: str) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for part in filter(None, options.split("&")):
        if "=" not in part:
            raise TransportError(f"Expected key=value HANA option, got '{part}'")
        k, v = part.split("=", 1)
        parsed[k.strip()] = v.strip()
    return parsed


class HanaTransport:
    """Blocking hdbcli connection per call; timeouts map to connect/communication limits."""

    def execute(
        self,
        descriptor: ConnectionDescriptor,
        sql: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> list[Row]:
        if descriptor.host is None or descriptor.port is None:
            raise TransportError("HANA requires a host and port")
        timeout_ms = str(int(timeout * 1000))
        # Named properties (user, password, databaseName, encrypt) pass through untouched.
        properties = {**_parse_options(descriptor.options), **descriptor.properties}
        try:
            conn = dbapi.connect(
                address=descriptor.host,
                port=descriptor.port,
                connectTimeout=timeout_ms,
                communicationTimeout=timeout_ms,
                **properties,
            )
        except dbapi.Error as e:
            raise TransportError(str(e)) from e

        try:
            cursor = conn.cursor()
            try:
                cursor.execute(sql)
                columns = [desc[0] for desc in cursor.description] if cursor.description else []
                rows_raw = cursor.fetchall() if cursor.description else []
            finally:
                cursor.close()
        except dbapi.Error as e:
            raise TransportError(str(e)) from e
        finally:
            conn.close()

        return [dict(zip(columns, row, strict=True)) for row in rows_raw]
