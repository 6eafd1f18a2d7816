"""Generic SQL driver — the baseline every dialect inherits from.

A dialect subclasses `GenericSQLDriver` and overrides only the attributes or
methods that differ; anything it leaves alone behaves exactly as here.
Instances hold no state, so one instance is shared by all callers.
"""

from __future__ import annotations

import datetime
import logging
import math
import numbers
import re
from collections.abc import Mapping
from types import MappingProxyType

from sqlglot import exp

from dbdialects import sql
from dbdialects.drivers._base import (
    ConnectionDescriptor,
    ConnectionFailedError,
    ConnectionField,
    ConnectionParameters,
    DriverError,
    IntervalUnit,
    QuoteStyle,
    SemanticType,
    SeparatorStyle,
    TemporalUnit,
    TimestampUnit,
    Tunnel,
    WeekNumbering,
)
from dbdialects.errors import (
    ClassifiedError,
    ErrorCategory,
    ErrorPattern,
    classify_message,
)
from dbdialects.transport._base import DEFAULT_TIMEOUT_SECONDS, Row, Transport

logger = logging.getLogger(__name__)

MAX_INTERVAL_AMOUNT = 1_000_000

_UNSIGNED_RE = re.compile(r"\s+UNSIGNED$")
_PRECISION_RE = re.compile(r"\s*\([^)]*\)$")

_QUOTE_STYLE_DIALECTS: dict[QuoteStyle, str | None] = {
    QuoteStyle.ANSI: None,
    QuoteStyle.MYSQL: "mysql",
    QuoteStyle.SQLSERVER: "tsql",
}

_ANSI_COLUMN_TYPES: Mapping[str, SemanticType] = MappingProxyType({
    "BIGINT": SemanticType.BIG_INTEGER,
    "BLOB": SemanticType.BLOB,
    "CHAR": SemanticType.TEXT,
    "CHARACTER": SemanticType.TEXT,
    "CHARACTER VARYING": SemanticType.TEXT,
    "CLOB": SemanticType.TEXT,
    "DATE": SemanticType.DATE,
    "DECIMAL": SemanticType.DECIMAL,
    "DOUBLE": SemanticType.FLOAT,
    "DOUBLE PRECISION": SemanticType.FLOAT,
    "FLOAT": SemanticType.FLOAT,
    "INT": SemanticType.INTEGER,
    "INTEGER": SemanticType.INTEGER,
    "NUMERIC": SemanticType.DECIMAL,
    "REAL": SemanticType.FLOAT,
    "SMALLINT": SemanticType.INTEGER,
    "TEXT": SemanticType.TEXT,
    "TIME": SemanticType.TIME,
    "TIMESTAMP": SemanticType.DATE_TIME,
    "VARBINARY": SemanticType.BLOB,
    "VARCHAR": SemanticType.TEXT,
})


def _is_probe_success(rows: list[Row]) -> bool:
    """Exactly one row holding exactly one value, and that value is 1."""
    if len(rows) != 1:
        return False
    values = list(rows[0].values())
    return len(values) == 1 and values[0] == 1 and not isinstance(values[0], bool)


def tunnel_fields() -> list[ConnectionField]:
    """Connection-form fields for an SSH tunnel; the tunnel itself is established elsewhere."""
    return [
        ConnectionField("tunnel-enabled", "Use an SSH tunnel", type="boolean", default=False),
        ConnectionField("tunnel-host", "SSH tunnel host", placeholder="hostname"),
        ConnectionField("tunnel-port", "SSH tunnel port", type="integer", default=22),
        ConnectionField("tunnel-user", "SSH tunnel username", placeholder="username"),
        ConnectionField("tunnel-pass", "SSH tunnel password", type="password"),
    ]


class GenericSQLDriver:
    """ANSI-flavoured defaults. Works as-is against engines with DATE_TRUNC/EXTRACT."""

    name = "sql"
    quote_style = QuoteStyle.ANSI
    excluded_schemas: frozenset[str] = frozenset()
    set_timezone_sql: str | None = None

    column_types: Mapping[str, SemanticType] = _ANSI_COLUMN_TYPES
    error_patterns: tuple[ErrorPattern, ...] = ()
    week_numbering = WeekNumbering(first_day="monday", min_days_in_first_week=4)

    # Connection spec
    driver_class = "java.sql.Driver"
    protocol = "sql"
    default_host = "localhost"
    default_port: int | None = None
    default_user = "dbuser"
    database_property = "database"
    encrypt_property = "ssl"
    separator_style = SeparatorStyle.URL
    default_connection_args: Mapping[str, str] = MappingProxyType({})
    additional_options_placeholder: str | None = None

    # Probes
    probe_query = "SELECT 1"
    db_time_query: str | None = "SELECT CURRENT_TIMESTAMP"
    db_time_format = "%Y-%m-%d %H:%M:%S.%f"

    # -- Rendering ---------------------------------------------------------------

    @property
    def sqlglot_dialect(self) -> str | None:
        return _QUOTE_STYLE_DIALECTS[self.quote_style]

    def render(self, expr: exp.Expression) -> str:
        return expr.sql(dialect=self.sqlglot_dialect)

    def quote_identifier(self, name: str) -> str:
        return exp.to_identifier(name, quoted=True).sql(dialect=self.sqlglot_dialect)

    def set_timezone(self, timezone: str) -> str | None:
        """Session time zone statement, or None if the dialect can't set one."""
        if self.set_timezone_sql is None:
            return None
        return self.set_timezone_sql % sql.literal(timezone).sql()

    # -- Type mapping ------------------------------------------------------------

    def normalize_column_type(self, column_type: str) -> str:
        text = column_type.strip().upper()
        text = _UNSIGNED_RE.sub("", text)
        return _PRECISION_RE.sub("", text)

    def column_to_semantic_type(self, column_type: str) -> SemanticType:
        key = self.normalize_column_type(column_type)
        semantic = self.column_types.get(key)
        if semantic is None:
            logger.debug("%s: unmapped column type %r", self.name, column_type)
            return SemanticType.UNKNOWN
        return semantic

    # -- Temporal expressions ----------------------------------------------------

    def current_datetime(self) -> exp.Expression:
        return sql.raw("CURRENT_TIMESTAMP")

    def epoch(self) -> exp.Expression:
        return sql.cast(sql.literal("1970-01-01"), "TIMESTAMP")

    def date(self, unit: TemporalUnit, expr: exp.Expression) -> exp.Expression:
        unit = TemporalUnit(unit)
        if unit is TemporalUnit.DEFAULT:
            return expr
        if unit is TemporalUnit.MINUTE:
            return self._trunc("minute", expr)
        if unit is TemporalUnit.MINUTE_OF_HOUR:
            return sql.extract("MINUTE", expr)
        if unit is TemporalUnit.HOUR:
            return self._trunc("hour", expr)
        if unit is TemporalUnit.HOUR_OF_DAY:
            return sql.extract("HOUR", expr)
        if unit is TemporalUnit.DAY:
            return sql.cast(expr, "DATE")
        if unit is TemporalUnit.DAY_OF_WEEK:
            # 1 = Sunday
            return sql.add(sql.extract("DOW", expr), sql.number(1))
        if unit is TemporalUnit.DAY_OF_MONTH:
            return sql.extract("DAY", expr)
        if unit is TemporalUnit.DAY_OF_YEAR:
            return sql.extract("DOY", expr)
        if unit is TemporalUnit.WEEK:
            return self._trunc("week", expr)
        if unit is TemporalUnit.WEEK_OF_YEAR:
            return self.week_of_year(expr)
        if unit is TemporalUnit.MONTH:
            return self._trunc("month", expr)
        if unit is TemporalUnit.MONTH_OF_YEAR:
            return sql.extract("MONTH", expr)
        if unit is TemporalUnit.QUARTER:
            return self._trunc("quarter", expr)
        if unit is TemporalUnit.QUARTER_OF_YEAR:
            return sql.extract("QUARTER", expr)
        if unit is TemporalUnit.YEAR:
            return self._trunc("year", expr)
        raise ValueError(f"Unhandled temporal unit: {unit!r}")

    def week_of_year(self, expr: exp.Expression) -> exp.Expression:
        return sql.extract("WEEK", expr)

    def _trunc(self, part: str, expr: exp.Expression) -> exp.Expression:
        return sql.call("DATE_TRUNC", sql.literal(part), expr)

    def add_seconds(self, expr: exp.Expression, seconds: exp.Expression) -> exp.Expression:
        return sql.add(expr, sql.mul(sql.paren(seconds), sql.raw("INTERVAL '1' SECOND")))

    def unix_timestamp_to_timestamp(
        self, expr: exp.Expression, unit: TimestampUnit
    ) -> exp.Expression:
        """Epoch plus `expr` seconds. Milliseconds are divided by 1000 in SQL first."""
        unit = TimestampUnit(unit)
        if unit is TimestampUnit.SECONDS:
            seconds = expr
        elif unit is TimestampUnit.MILLISECONDS:
            seconds = sql.div(expr, sql.number(1000))
        else:
            raise ValueError(f"Unhandled timestamp unit: {unit!r}")
        return self.add_seconds(self.epoch(), seconds)

    def date_interval(self, unit: IntervalUnit, amount: float) -> exp.Expression:
        """`now + INTERVAL '<amount>' <UNIT>`; amount truncated to an integer and range-checked."""
        unit = IntervalUnit(unit)
        if isinstance(amount, bool) or not isinstance(amount, numbers.Real):
            raise ValueError(f"Interval amount must be a number, got {amount!r}")
        if not math.isfinite(amount):
            raise ValueError(f"Interval amount must be finite, got {amount!r}")
        count = int(amount)
        if abs(count) > MAX_INTERVAL_AMOUNT:
            raise ValueError(
                f"Interval amount {count} is out of range (max {MAX_INTERVAL_AMOUNT:,})"
            )
        return sql.add(self.current_datetime(), sql.raw(self.interval_fragment(count, unit)))

    def interval_fragment(self, count: int, unit: IntervalUnit) -> str:
        # Quoted so a negative count still parses.
        return f"INTERVAL '{count}' {unit.name}"

    def string_length(self, expr: exp.Expression) -> exp.Expression:
        return sql.call("LENGTH", expr)

    def time_literal(self, value: datetime.time) -> exp.Expression:
        return sql.cast(sql.literal(value.replace(tzinfo=None).isoformat()), "TIME")

    # -- Connection spec ---------------------------------------------------------

    def details_fields(self) -> list[ConnectionField]:
        return [
            ConnectionField("host", "Host", default=self.default_host, required=True),
            ConnectionField("port", "Port", type="integer", default=self.default_port),
            ConnectionField("dbname", "Database name"),
            ConnectionField("user", "Database username", default=self.default_user),
            ConnectionField("password", "Database password", type="password"),
            ConnectionField("ssl", "Use a secure connection (SSL)?", type="boolean", default=False),
            ConnectionField(
                "additional-options",
                "Additional connection string options",
                placeholder=self.additional_options_placeholder,
            ),
        ]

    def connection_spec(
        self, params: ConnectionParameters, *, tunnel: Tunnel | None = None
    ) -> ConnectionDescriptor:
        """Build the connection descriptor. Pure; never touches the network."""
        host = self.default_host if params.host is None else params.host
        port = self.default_port if params.port is None else params.port
        options = self._render_options(params)
        descriptor = ConnectionDescriptor(
            driver_class=self.driver_class,
            protocol=self.protocol,
            subname=self._append_options(self._address(host, port, params), options),
            host=host,
            port=port,
            properties=self._connection_properties(params),
            options=options,
        )
        if tunnel is not None:
            descriptor = tunnel(descriptor, params)
        return descriptor

    def _address(self, host: str, port: int | None, params: ConnectionParameters) -> str:
        if port is None:
            return f"//{host}"
        return f"//{host}:{port}"

    def _connection_properties(self, params: ConnectionParameters) -> dict[str, str]:
        # Credentials travel as properties so special characters never hit the URL.
        props = {"user": self.default_user if params.user is None else params.user}
        if params.password is not None:
            props["password"] = params.password
        if params.dbname is not None:
            props[self.database_property] = params.dbname
        props[self.encrypt_property] = "true" if params.ssl else "false"
        return props

    @property
    def option_separator(self) -> str:
        return ";" if self.separator_style is SeparatorStyle.SEMICOLON else "&"

    def _render_options(self, params: ConnectionParameters) -> str:
        merged = {**self.default_connection_args, **params.options}
        segments = [f"{k}={v}" for k, v in merged.items()]
        extra = (params.additional_options or "").strip().strip("?&;")
        if extra:
            segments.append(extra)
        return self.option_separator.join(segments)

    def _append_options(self, address: str, options: str) -> str:
        if not options:
            return address
        if self.separator_style is SeparatorStyle.SEMICOLON:
            lead = ";"
        else:
            lead = "&" if "?" in address else "?"
        return f"{address}{lead}{options}"

    # -- Error classification ----------------------------------------------------

    def classify_connection_error(self, message: str) -> ClassifiedError:
        return classify_message(message, self.error_patterns)

    def humanize_connection_error_message(
        self, message: str, messages: Mapping[ErrorCategory, str] | None = None
    ) -> str:
        return self.classify_connection_error(message).humanize(messages)

    # -- Probes ------------------------------------------------------------------

    def _probe(
        self, params: ConnectionParameters, transport: Transport, timeout: float
    ) -> list[Row]:
        descriptor = self.connection_spec(params)
        logger.debug("%s: probing %s with %r", self.name, descriptor.subname, self.probe_query)
        return transport.execute(descriptor, self.probe_query, timeout=timeout)

    def can_connect(
        self,
        params: ConnectionParameters,
        transport: Transport,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> bool:
        """Run the probe query; True only if it returns the single value 1."""
        try:
            rows = self._probe(params, transport, timeout)
        except Exception as e:
            logger.warning("%s: connection probe failed: %s", self.name, e)
            return False
        if not _is_probe_success(rows):
            logger.warning("%s: unexpected probe result: %r", self.name, rows)
            return False
        return True

    def check_connection(
        self,
        params: ConnectionParameters,
        transport: Transport,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Like can_connect, but raises ConnectionFailedError with a classified cause."""
        try:
            rows = self._probe(params, transport, timeout)
        except Exception as e:
            classified = self.classify_connection_error(str(e))
            raise ConnectionFailedError(classified, classified.humanize()) from e
        if not _is_probe_success(rows):
            classified = ClassifiedError(
                category=ErrorCategory.UNCLASSIFIED,
                message=f"Unexpected probe result: {rows!r}",
            )
            raise ConnectionFailedError(classified, classified.message)

    def current_db_time(
        self,
        params: ConnectionParameters,
        transport: Transport,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> datetime.datetime:
        """Ask the database for its clock. Naive results are taken as UTC."""
        if self.db_time_query is None:
            raise DriverError(f"{self.name} cannot report the database time")
        descriptor = self.connection_spec(params)
        try:
            rows = transport.execute(descriptor, self.db_time_query, timeout=timeout)
        except Exception as e:
            raise DriverError(f"{self.name} time query failed: {e}") from e
        if not rows or not rows[0]:
            raise DriverError(f"{self.name} time query returned no rows")

        value = next(iter(rows[0].values()))
        if isinstance(value, datetime.datetime):
            moment = value
        else:
            try:
                moment = datetime.datetime.strptime(str(value), self.db_time_format)
            except ValueError as e:
                raise DriverError(f"Unparseable database time {value!r}: {e}") from e
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=datetime.UTC)
        return moment
