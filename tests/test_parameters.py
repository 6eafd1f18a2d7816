"""Tests for connection parameters and descriptors."""

from __future__ import annotations

import dataclasses

import pytest

from dbdialects.drivers._base import ConnectionDescriptor, ConnectionParameters


def test_from_dict_maps_aliases_and_options():
    params = ConnectionParameters.from_dict({
        "host": "h",
        "port": "30015",
        "db": "HXE",
        "user": "u",
        "password": "p",
        "ssl": "true",
        "additional-options": "a=1",
        "statementCacheSize": 10,
    })
    assert params.host == "h"
    assert params.port == 30015
    assert params.dbname == "HXE"
    assert params.ssl is True
    assert params.additional_options == "a=1"
    assert dict(params.options) == {"statementCacheSize": "10"}


def test_from_dict_blank_port_is_none():
    assert ConnectionParameters.from_dict({"port": ""}).port is None


@pytest.mark.parametrize("data", [{"port": "abc"}, {"ssl": "maybe"}])
def test_from_dict_rejects_bad_values(data):
    with pytest.raises(ValueError):
        ConnectionParameters.from_dict(data)


def test_parameters_are_immutable():
    params = ConnectionParameters(options={"a": "1"})
    with pytest.raises(dataclasses.FrozenInstanceError):
        params.host = "other"  # type: ignore[misc]
    with pytest.raises(TypeError):
        params.options["a"] = "2"  # type: ignore[index]


def test_caller_dict_is_copied():
    source = {"a": "1"}
    params = ConnectionParameters(options=source)
    source["a"] = "changed"
    assert params.options["a"] == "1"


def test_password_not_in_repr():
    assert "s3cret" not in repr(ConnectionParameters(password="s3cret"))


def test_descriptor_redacted_and_url():
    descriptor = ConnectionDescriptor(
        driver_class="x.Driver",
        protocol="x",
        subname="//h:1",
        properties={"user": "u", "password": "s3cret"},
    )
    assert descriptor.url == "jdbc:x://h:1"
    assert descriptor.redacted()["properties"] == {"user": "u", "password": "****"}
    assert "s3cret" not in repr(descriptor)
    assert "'u'" in repr(descriptor)
