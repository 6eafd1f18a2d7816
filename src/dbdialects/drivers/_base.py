"""Driver protocol — the contract every dialect implements, plus the shared value types."""

from __future__ import annotations

import datetime
import enum
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sqlglot import exp

from dbdialects.errors import ClassifiedError

if TYPE_CHECKING:
    from dbdialects.transport._base import Transport


class SemanticType(enum.Enum):
    TEXT = "text"
    BIG_INTEGER = "big_integer"
    BLOB = "blob"
    DECIMAL = "decimal"
    FLOAT = "float"
    INTEGER = "integer"
    DATE = "date"
    TIME = "time"
    DATE_TIME = "date_time"
    UNKNOWN = "unknown"


class TemporalUnit(enum.Enum):
    DEFAULT = "default"
    MINUTE = "minute"
    MINUTE_OF_HOUR = "minute-of-hour"
    HOUR = "hour"
    HOUR_OF_DAY = "hour-of-day"
    DAY = "day"
    DAY_OF_WEEK = "day-of-week"
    DAY_OF_MONTH = "day-of-month"
    DAY_OF_YEAR = "day-of-year"
    WEEK = "week"
    WEEK_OF_YEAR = "week-of-year"
    MONTH = "month"
    MONTH_OF_YEAR = "month-of-year"
    QUARTER = "quarter"
    QUARTER_OF_YEAR = "quarter-of-year"
    YEAR = "year"


class TimestampUnit(enum.Enum):
    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"


class IntervalUnit(enum.Enum):
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class QuoteStyle(enum.Enum):
    ANSI = "ansi"  # "name"
    MYSQL = "mysql"  # `name`
    SQLSERVER = "sqlserver"  # [name]


class SeparatorStyle(enum.Enum):
    URL = "url"  # ?a=1&b=2
    SEMICOLON = "semicolon"  # ;a=1;b=2


@dataclass(frozen=True)
class WeekNumbering:
    """How a dialect's native week function counts weeks."""

    first_day: str
    min_days_in_first_week: int


# -- Errors ---------------------------------------------------------------------


class DriverError(Exception):
    """Raised by drivers for registry and connection failures."""


class DriverNotRegisteredError(DriverError):
    def __init__(self, driver_id: str) -> None:
        super().__init__(f"No driver registered for '{driver_id}'")
        self.driver_id = driver_id


class ConnectionFailedError(DriverError):
    """A probe or connection attempt failed; carries the classified cause."""

    def __init__(self, classified: ClassifiedError, humanized: str) -> None:
        super().__init__(humanized)
        self.classified = classified


# -- Connection values ----------------------------------------------------------

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off", ""})

_FIELD_ALIASES = {
    "host": "host",
    "port": "port",
    "dbname": "dbname",
    "db": "dbname",
    "database": "dbname",
    "user": "user",
    "password": "password",
    "ssl": "ssl",
    "additional_options": "additional_options",
    "additional-options": "additional_options",
}

SECRET_PROPERTIES = frozenset({"password"})


def _parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(f"Expected a boolean, got '{value}'")


@dataclass(frozen=True)
class ConnectionParameters:
    """What the user typed into the connection form. Never mutated."""

    host: str | None = None
    port: int | None = None
    dbname: str | None = None
    user: str | None = None
    password: str | None = field(default=None, repr=False)
    ssl: bool = False
    options: Mapping[str, str] = field(default_factory=dict)
    additional_options: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ConnectionParameters:
        """Build from flat key/value pairs; unrecognized keys become driver options."""
        known: dict[str, object] = {}
        options: dict[str, str] = {}
        for key, value in data.items():
            target = _FIELD_ALIASES.get(key)
            if target is None:
                options[key] = str(value)
            else:
                known[target] = value

        port = known.get("port")
        if port is not None and port != "":
            try:
                port = int(port)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Port must be an integer, got '{port}'") from e
        else:
            port = None

        return cls(
            host=_optional_str(known.get("host")),
            port=port,
            dbname=_optional_str(known.get("dbname")),
            user=_optional_str(known.get("user")),
            password=_optional_str(known.get("password")),
            ssl=_parse_bool(known.get("ssl", False)),
            options=options,
            additional_options=_optional_str(known.get("additional_options")),
        )


def _optional_str(value: object) -> str | None:
    return None if value is None else str(value)


@dataclass(frozen=True, repr=False)
class ConnectionDescriptor:
    """Dialect-specific connection spec. Lives only as long as one connection attempt."""

    driver_class: str
    protocol: str
    subname: str
    host: str | None = None
    port: int | None = None
    properties: Mapping[str, str] = field(default_factory=dict)
    options: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @property
    def url(self) -> str:
        return f"jdbc:{self.protocol}:{self.subname}"

    def redacted(self) -> dict[str, object]:
        """Display form with secret properties masked."""
        return {
            "driver_class": self.driver_class,
            "protocol": self.protocol,
            "subname": self.subname,
            "url": self.url,
            "host": self.host,
            "port": self.port,
            "properties": {
                k: ("****" if k in SECRET_PROPERTIES else v)
                for k, v in self.properties.items()
            },
            "options": self.options,
        }

    def __repr__(self) -> str:
        props = ", ".join(
            f"{k}={'****' if k in SECRET_PROPERTIES else v!r}"
            for k, v in self.properties.items()
        )
        return (
            f"ConnectionDescriptor(driver_class={self.driver_class!r}, "
            f"protocol={self.protocol!r}, subname={self.subname!r}, properties=({props}))"
        )


@dataclass(frozen=True)
class ConnectionField:
    """One entry in a driver's connection form."""

    name: str
    display_name: str
    type: str = "string"
    default: object | None = None
    placeholder: str | None = None
    required: bool = False


Tunnel = Callable[[ConnectionDescriptor, ConnectionParameters], ConnectionDescriptor]


@runtime_checkable
class Driver(Protocol):
    name: str
    quote_style: QuoteStyle
    excluded_schemas: frozenset[str]
    set_timezone_sql: str | None

    def column_to_semantic_type(self, column_type: str) -> SemanticType: ...
    def date(self, unit: TemporalUnit, expr: exp.Expression) -> exp.Expression: ...
    def unix_timestamp_to_timestamp(
        self, expr: exp.Expression, unit: TimestampUnit
    ) -> exp.Expression: ...
    def date_interval(self, unit: IntervalUnit, amount: float) -> exp.Expression: ...
    def current_datetime(self) -> exp.Expression: ...
    def connection_spec(
        self, params: ConnectionParameters, *, tunnel: Tunnel | None = None
    ) -> ConnectionDescriptor: ...
    def classify_connection_error(self, message: str) -> ClassifiedError: ...
    def details_fields(self) -> list[ConnectionField]: ...
    def set_timezone(self, timezone: str) -> str | None: ...
    def can_connect(
        self, params: ConnectionParameters, transport: Transport, *, timeout: float = ...
    ) -> bool: ...
    def current_db_time(
        self, params: ConnectionParameters, transport: Transport
    ) -> datetime.datetime: ...
    @property
    def sqlglot_dialect(self) -> str | None: ...
    def render(self, expr: exp.Expression) -> str: ...
    def check_connection(
        self, params: ConnectionParameters, transport: Transport, *, timeout: float = ...
    ) -> None: ...
