"""DuckDB driver — in-process, no server. Temporal SQL comes straight from the baseline."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from dbdialects.drivers._base import (
    ConnectionDescriptor,
    ConnectionField,
    ConnectionParameters,
    SemanticType,
    Tunnel,
)
from dbdialects.drivers.generic import GenericSQLDriver
from dbdialects.errors import ErrorCategory, ErrorPattern

_COLUMN_TYPES: Mapping[str, SemanticType] = MappingProxyType({
    "BIGINT": SemanticType.BIG_INTEGER,
    "HUGEINT": SemanticType.BIG_INTEGER,
    "UBIGINT": SemanticType.BIG_INTEGER,
    "BLOB": SemanticType.BLOB,
    "DATE": SemanticType.DATE,
    "DECIMAL": SemanticType.DECIMAL,
    "DOUBLE": SemanticType.FLOAT,
    "FLOAT": SemanticType.FLOAT,
    "REAL": SemanticType.FLOAT,
    "INTEGER": SemanticType.INTEGER,
    "UINTEGER": SemanticType.INTEGER,
    "SMALLINT": SemanticType.INTEGER,
    "USMALLINT": SemanticType.INTEGER,
    "TINYINT": SemanticType.INTEGER,
    "UTINYINT": SemanticType.INTEGER,
    "TIME": SemanticType.TIME,
    "TIMESTAMP": SemanticType.DATE_TIME,
    "TIMESTAMP WITH TIME ZONE": SemanticType.DATE_TIME,
    "TIMESTAMPTZ": SemanticType.DATE_TIME,
    "VARCHAR": SemanticType.TEXT,
    "TEXT": SemanticType.TEXT,
})

_ERROR_PATTERNS: tuple[ErrorPattern, ...] = (
    ErrorPattern.of(
        r".*IO Error: Cannot open (?:database|file) .*",
        ErrorCategory.DATABASE_NAME_INCORRECT,
    ),
    ErrorPattern.of(
        r".*Catalog Error: .*database .* does not exist.*",
        ErrorCategory.DATABASE_NAME_INCORRECT,
    ),
)


class DuckDBDriver(GenericSQLDriver):
    """Overrides types, errors and the connection address only."""

    name = "duckdb"
    excluded_schemas = frozenset({"information_schema", "pg_catalog"})
    set_timezone_sql = "SET TimeZone = %s;"

    column_types = _COLUMN_TYPES
    error_patterns = _ERROR_PATTERNS

    driver_class = "org.duckdb.DuckDBDriver"
    protocol = "duckdb"
    default_path = ":memory:"

    # Fetching TIMESTAMPTZ needs pytz, so return a naive UTC TIMESTAMP.
    db_time_query = "SELECT CAST(now() AT TIME ZONE 'UTC' AS TIMESTAMP)"

    @property
    def sqlglot_dialect(self) -> str | None:
        return "duckdb"

    def details_fields(self) -> list[ConnectionField]:
        return [
            ConnectionField("path", "Database file", default=self.default_path),
            ConnectionField(
                "additional-options",
                "Additional DuckDB configuration",
                placeholder="threads=4",
            ),
        ]

    def connection_spec(
        self, params: ConnectionParameters, *, tunnel: Tunnel | None = None
    ) -> ConnectionDescriptor:
        # The database is a file (or memory): the address is the path, options are config.
        settings = {k: v for k, v in params.options.items() if k != "path"}
        path = params.options.get("path") or params.dbname or self.default_path
        options = self._render_options(
            ConnectionParameters(options=settings, additional_options=params.additional_options)
        )
        descriptor = ConnectionDescriptor(
            driver_class=self.driver_class,
            protocol=self.protocol,
            subname=self._append_options(path, options),
            properties={"path": path},
            options=options,
        )
        if tunnel is not None:
            descriptor = tunnel(descriptor, params)
        return descriptor
