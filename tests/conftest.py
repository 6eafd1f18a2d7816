"""Root conftest — shared fixtures and markers."""

from __future__ import annotations

import os

import pytest

from dbdialects import connections


def pytest_configure(config):
    config.addinivalue_line("markers", "hana: requires a reachable SAP HANA instance")


def pytest_collection_modifyitems(config, items):
    if os.environ.get("DBDIALECTS_TEST_HANA"):
        return

    skip_hana = pytest.mark.skip(reason="HANA not available (set DBDIALECTS_TEST_HANA=1)")
    for item in items:
        if item.get_closest_marker("hana") is not None:
            item.add_marker(skip_hana)


@pytest.fixture(autouse=True)
def connections_file(tmp_path, monkeypatch):
    """Point named-connection storage at a temp file for every test."""
    path = tmp_path / "dbdialects" / "connections.toml"
    monkeypatch.setattr(connections, "_CONNECTIONS_FILE", path)
    monkeypatch.delenv("DBDIALECTS_DB", raising=False)
    return path
