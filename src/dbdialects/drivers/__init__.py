"""Dialect drivers — implementations of the Driver protocol."""

from dbdialects.drivers._base import (
    ConnectionDescriptor,
    ConnectionFailedError,
    ConnectionField,
    ConnectionParameters,
    Driver,
    DriverError,
    DriverNotRegisteredError,
    IntervalUnit,
    QuoteStyle,
    SemanticType,
    SeparatorStyle,
    TemporalUnit,
    TimestampUnit,
    WeekNumbering,
)

__all__ = [
    "ConnectionDescriptor",
    "ConnectionFailedError",
    "ConnectionField",
    "ConnectionParameters",
    "Driver",
    "DriverError",
    "DriverNotRegisteredError",
    "IntervalUnit",
    "QuoteStyle",
    "SemanticType",
    "SeparatorStyle",
    "TemporalUnit",
    "TimestampUnit",
    "WeekNumbering",
]
