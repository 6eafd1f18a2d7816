"""SAP HANA driver — builds off the generic SQL driver.

HANA has no DATE_TRUNC, so month and quarter buckets are faked by formatting
the date to a string and parsing it back with TO_DATE.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType

from sqlglot import exp

from dbdialects import sql
from dbdialects.drivers._base import (
    ConnectionField,
    IntervalUnit,
    QuoteStyle,
    SemanticType,
    TemporalUnit,
    WeekNumbering,
)
from dbdialects.drivers.generic import GenericSQLDriver, tunnel_fields
from dbdialects.errors import ErrorCategory, ErrorPattern

_COLUMN_TYPES: Mapping[str, SemanticType] = MappingProxyType({
    "ALPHANUM": SemanticType.TEXT,
    "BIGINT": SemanticType.BIG_INTEGER,
    "BLOB": SemanticType.BLOB,
    "CLOB": SemanticType.TEXT,
    "DATE": SemanticType.DATE,
    "DECIMAL": SemanticType.DECIMAL,
    "DOUBLE": SemanticType.FLOAT,
    "INTEGER": SemanticType.INTEGER,
    "NCLOB": SemanticType.TEXT,
    "NVARCHAR": SemanticType.TEXT,
    "REAL": SemanticType.FLOAT,
    "SECONDDATE": SemanticType.DATE_TIME,
    "SMALLDECIMAL": SemanticType.DECIMAL,
    "SMALLINT": SemanticType.INTEGER,
    "SHORTTEXT": SemanticType.TEXT,
    "TEXT": SemanticType.TEXT,
    "TIME": SemanticType.TIME,
    "TIMESTAMP": SemanticType.DATE_TIME,
    "TINYINT": SemanticType.INTEGER,
    "VARBINARY": SemanticType.BLOB,
    "VARCHAR": SemanticType.TEXT,
})

# Evaluated top to bottom; the first full match wins.
_ERROR_PATTERNS: tuple[ErrorPattern, ...] = (
    ErrorPattern.of(
        r"^Communications link failure\s+The last packet sent successfully to the server "
        r"was 0 milliseconds ago\. The driver has not received any packets from the server\.$",
        ErrorCategory.CANNOT_CONNECT_CHECK_HOST_AND_PORT,
    ),
    ErrorPattern.of(r"^Unknown database .*$", ErrorCategory.DATABASE_NAME_INCORRECT),
    ErrorPattern.of(r"Access denied for user.*$", ErrorCategory.USERNAME_OR_PASSWORD_INCORRECT),
    ErrorPattern.of(
        r"Must specify port after ':' in connection string",
        ErrorCategory.INVALID_HOSTNAME,
    ),
    # hdbcli / HANA JDBC texts
    ErrorPattern.of(
        r".*(?:(?:database|tenant) \S+ (?:not found|does not exist)|unknown (?:tenant )?database).*",
        ErrorCategory.DATABASE_NAME_INCORRECT,
        re.IGNORECASE,
    ),
    ErrorPattern.of(
        r".*authentication failed.*",
        ErrorCategory.USERNAME_OR_PASSWORD_INCORRECT,
        re.IGNORECASE,
    ),
    ErrorPattern.of(
        r".*(?:connection refused|connect failed|connection timed out).*",
        ErrorCategory.CANNOT_CONNECT_CHECK_HOST_AND_PORT,
        re.IGNORECASE,
    ),
)


def _date_format(format_str: str, expr: exp.Expression) -> exp.Expression:
    return sql.call("TO_CHAR", expr, sql.literal(format_str))


def _str_to_date(format_str: str, expr: exp.Expression) -> exp.Expression:
    return sql.call("TO_DATE", expr, sql.literal(format_str))


class HanaDriver(GenericSQLDriver):
    """SAP HANA via the com.sap.db.jdbc driver / hdbcli."""

    name = "hana"
    quote_style = QuoteStyle.ANSI
    excluded_schemas = frozenset({
        "INFORMATION_SCHEMA",
        "SYS",
        "_SYS_BI",
        "_SYS_BIC",
        "_SYS_REPO",
        "_SYS_STATISTICS",
        "_SYS_XS",
    })
    set_timezone_sql = "SET @@session.time_zone = %s;"

    column_types = _COLUMN_TYPES
    error_patterns = _ERROR_PATTERNS
    # WEEK(): weeks start on Monday and January 1st is always in week 1, so a
    # week never straddles two years. WEEK and WEEK_OF_YEAR both rely on this.
    week_numbering = WeekNumbering(first_day="monday", min_days_in_first_week=1)

    driver_class = "com.sap.db.jdbc.Driver"
    protocol = "sap"
    default_port = 30015
    database_property = "databaseName"
    encrypt_property = "encrypt"
    additional_options_placeholder = "tinyInt1isBit=false"

    probe_query = "SELECT 1 FROM DUMMY"
    db_time_query = (
        "SELECT TO_CHAR(CURRENT_UTCTIMESTAMP, 'YYYY-MM-DD HH24:MI:SS.FF3') FROM DUMMY"
    )

    def details_fields(self) -> list[ConnectionField]:
        return super().details_fields() + tunnel_fields()

    def epoch(self) -> exp.Expression:
        return sql.call("TO_TIMESTAMP", sql.literal("1970-01-01"), sql.literal("YYYY-MM-DD"))

    def add_seconds(self, expr: exp.Expression, seconds: exp.Expression) -> exp.Expression:
        return sql.call("ADD_SECONDS", expr, seconds)

    def interval_fragment(self, count: int, unit: IntervalUnit) -> str:
        return f"INTERVAL {count} {unit.name}"

    def week_of_year(self, expr: exp.Expression) -> exp.Expression:
        return sql.call("WEEK", expr)

    def quarter_number(self, expr: exp.Expression) -> exp.Expression:
        # QUARTER() yields 'YYYY-Qn'; the last character is the quarter.
        return sql.call("TO_INTEGER", sql.call("RIGHT", sql.call("QUARTER", expr), sql.number(1)))

    def date(self, unit: TemporalUnit, expr: exp.Expression) -> exp.Expression:
        unit = TemporalUnit(unit)
        if unit is TemporalUnit.DEFAULT:
            return expr
        if unit is TemporalUnit.MINUTE:
            return sql.call("MINUTE", expr)
        if unit is TemporalUnit.MINUTE_OF_HOUR:
            return sql.extract("MINUTE", expr)
        if unit is TemporalUnit.HOUR:
            return sql.call("HOUR", expr)
        if unit is TemporalUnit.HOUR_OF_DAY:
            return sql.extract("HOUR", expr)
        if unit is TemporalUnit.DAY:
            return sql.call("TO_DATE", expr)
        if unit is TemporalUnit.DAY_OF_WEEK:
            # WEEKDAY() is 0 = Monday; shift to 1 = Sunday.
            shifted = sql.add(sql.call("WEEKDAY", expr), sql.number(1))
            return sql.add(sql.call("MOD", shifted, sql.number(7)), sql.number(1))
        if unit is TemporalUnit.DAY_OF_MONTH:
            return sql.call("DAYOFMONTH", expr)
        if unit is TemporalUnit.DAY_OF_YEAR:
            return sql.call("DAYOFYEAR", expr)
        if unit is TemporalUnit.WEEK:
            # Year first and zero-padded so '202409' sorts before '202410'.
            week = sql.call(
                "LPAD",
                sql.call("TO_VARCHAR", self.week_of_year(expr)),
                sql.number(2),
                sql.literal("0"),
            )
            return sql.concat(sql.call("YEAR", expr), week)
        if unit is TemporalUnit.WEEK_OF_YEAR:
            return self.week_of_year(expr)
        if unit is TemporalUnit.MONTH:
            return _str_to_date(
                "YYYY-MM-DD",
                sql.concat(_date_format("YYYY-MM", expr), sql.literal("-01")),
            )
        if unit is TemporalUnit.MONTH_OF_YEAR:
            return sql.call("MONTH", expr)
        if unit is TemporalUnit.QUARTER:
            # No format string for quarters: build 'YYYY-M-01' where M = 3q - 2.
            first_month = sql.sub(sql.mul(self.quarter_number(expr), sql.number(3)), sql.number(2))
            return _str_to_date(
                "YYYY-MM-DD",
                sql.concat(
                    sql.call("YEAR", expr),
                    sql.literal("-"),
                    sql.paren(first_month),
                    sql.literal("-01"),
                ),
            )
        if unit is TemporalUnit.QUARTER_OF_YEAR:
            return self.quarter_number(expr)
        if unit is TemporalUnit.YEAR:
            return sql.call("YEAR", expr)
        raise ValueError(f"Unhandled temporal unit: {unit!r}")
