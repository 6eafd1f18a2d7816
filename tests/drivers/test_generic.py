"""Tests for the generic SQL baseline."""

from __future__ import annotations

import datetime

import pytest

from dbdialects.drivers._base import (
    ConnectionFailedError,
    ConnectionParameters,
    DriverError,
    IntervalUnit,
    SemanticType,
    SeparatorStyle,
    TemporalUnit,
    TimestampUnit,
)
from dbdialects.drivers.generic import GenericSQLDriver
from dbdialects.errors import ErrorCategory


@pytest.mark.parametrize(
    "unit,expected",
    [
        (TemporalUnit.MINUTE, "DATE_TRUNC('minute', ts)"),
        (TemporalUnit.MINUTE_OF_HOUR, "EXTRACT(MINUTE FROM ts)"),
        (TemporalUnit.DAY, "CAST(ts AS DATE)"),
        (TemporalUnit.DAY_OF_WEEK, "EXTRACT(DOW FROM ts) + 1"),
        (TemporalUnit.WEEK_OF_YEAR, "EXTRACT(WEEK FROM ts)"),
        (TemporalUnit.QUARTER, "DATE_TRUNC('quarter', ts)"),
        (TemporalUnit.YEAR, "DATE_TRUNC('year', ts)"),
    ],
)
def test_baseline_buckets(generic, ts, unit, expected):
    assert generic.render(generic.date(unit, ts)) == expected


def test_baseline_unix_timestamp(generic, ts):
    result = generic.unix_timestamp_to_timestamp(ts, TimestampUnit.SECONDS)
    assert generic.render(result) == (
        "CAST('1970-01-01' AS TIMESTAMP) + (ts) * INTERVAL '1' SECOND"
    )


@pytest.mark.parametrize(
    "amount,expected",
    [
        (-4, "CURRENT_TIMESTAMP + INTERVAL '-4' HOUR"),
        (2.9, "CURRENT_TIMESTAMP + INTERVAL '2' HOUR"),
    ],
)
def test_baseline_interval_quotes_amount(generic, amount, expected):
    assert generic.render(generic.date_interval(IntervalUnit.HOUR, amount)) == expected


def test_baseline_types(generic):
    assert generic.column_to_semantic_type("varchar(20)") is SemanticType.TEXT
    assert generic.column_to_semantic_type("NVARCHAR") is SemanticType.UNKNOWN


def test_no_timezone_support(generic):
    assert generic.set_timezone("UTC") is None


def test_baseline_classifies_nothing(generic):
    classified = generic.classify_connection_error("Unknown database foo")
    assert classified.category is ErrorCategory.UNCLASSIFIED
    assert not classified.is_classified


def test_connection_spec_without_port(generic):
    descriptor = generic.connection_spec(ConnectionParameters(host="db", dbname="sales"))
    assert descriptor.subname == "//db"
    assert dict(descriptor.properties) == {"user": "dbuser", "database": "sales", "ssl": "false"}


def test_semicolon_separator():
    class SemicolonDriver(GenericSQLDriver):
        separator_style = SeparatorStyle.SEMICOLON
        default_port = 1433
        default_connection_args = {"loginTimeout": "10"}

    params = ConnectionParameters(host="db", options={"a": "1"}, additional_options=";b=2")
    descriptor = SemicolonDriver().connection_spec(params)
    assert descriptor.subname == "//db:1433;loginTimeout=10;a=1;b=2"


def test_user_options_override_defaults():
    class WithDefaults(GenericSQLDriver):
        default_connection_args = {"a": "default", "b": "2"}

    params = ConnectionParameters(host="db", options={"a": "user"})
    assert WithDefaults().connection_spec(params).options == "a=user&b=2"


@pytest.mark.parametrize(
    "rows,expected",
    [
        ([{"1": 1}], True),
        ([{1: 1}], True),
        ([], False),
        ([{"1": 2}], False),
        ([{"1": True}], False),
        ([{"a": 1, "b": 1}], False),
        ([{"1": 1}, {"1": 1}], False),
    ],
)
def test_can_connect_probe_result(generic, make_transport, rows, expected):
    transport = make_transport(rows=rows)
    assert generic.can_connect(ConnectionParameters(), transport) is expected
    assert transport.calls[0][1] == "SELECT 1"


def test_can_connect_swallows_transport_failure(generic, make_transport):
    transport = make_transport(error=OSError("Connection refused"))
    assert generic.can_connect(ConnectionParameters(), transport) is False


def test_check_connection_on_unexpected_result(generic, make_transport):
    with pytest.raises(ConnectionFailedError) as excinfo:
        generic.check_connection(ConnectionParameters(), make_transport(rows=[{"x": 0}]))
    assert excinfo.value.classified.category is ErrorCategory.UNCLASSIFIED


def test_check_connection_passes(generic, make_transport):
    assert generic.check_connection(ConnectionParameters(), make_transport(rows=[{"1": 1}])) is None


def test_current_db_time_assumes_utc(generic, make_transport):
    naive = datetime.datetime(2024, 1, 2, 3, 4, 5)
    moment = generic.current_db_time(ConnectionParameters(), make_transport(rows=[{"now": naive}]))
    assert moment == naive.replace(tzinfo=datetime.UTC)


def test_current_db_time_keeps_timezone(generic, make_transport):
    aware = datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=datetime.timezone(datetime.timedelta(hours=2)))
    moment = generic.current_db_time(ConnectionParameters(), make_transport(rows=[{"now": aware}]))
    assert moment is aware


@pytest.mark.parametrize("rows", [[], [{"now": "yesterday-ish"}]])
def test_current_db_time_errors(generic, make_transport, rows):
    with pytest.raises(DriverError):
        generic.current_db_time(ConnectionParameters(), make_transport(rows=rows))


def test_current_db_time_wraps_transport_failure(generic, make_transport):
    transport = make_transport(error=RuntimeError("boom"))
    with pytest.raises(DriverError, match="boom"):
        generic.current_db_time(ConnectionParameters(), transport)
