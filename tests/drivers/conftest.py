"""Driver test fixtures."""

from __future__ import annotations

import pytest

from dbdialects import sql
from dbdialects.drivers._base import ConnectionDescriptor
from dbdialects.drivers.duckdb import DuckDBDriver
from dbdialects.drivers.generic import GenericSQLDriver
from dbdialects.drivers.hana import HanaDriver


class StubTransport:
    """Records every call and answers with canned rows (or raises)."""

    def __init__(self, rows=None, error: Exception | None = None) -> None:
        self.rows = [] if rows is None else rows
        self.error = error
        self.calls: list[tuple[ConnectionDescriptor, str, float]] = []

    def execute(self, descriptor, sql, *, timeout=10.0):
        self.calls.append((descriptor, sql, timeout))
        if self.error is not None:
            raise self.error
        return self.rows


@pytest.fixture
def generic():
    return GenericSQLDriver()


@pytest.fixture
def hana():
    return HanaDriver()


@pytest.fixture
def duckdb_driver():
    return DuckDBDriver()


@pytest.fixture
def ts():
    return sql.column("ts")


@pytest.fixture
def make_transport():
    return StubTransport
