"""dbdialects: compile one query representation into SQL for many database dialects."""

from dbdialects.drivers._base import (
    ConnectionDescriptor,
    ConnectionParameters,
    Driver,
    DriverError,
    DriverNotRegisteredError,
    IntervalUnit,
    SemanticType,
    TemporalUnit,
    TimestampUnit,
)
from dbdialects.drivers._registry import get_driver, list_drivers, register_driver
from dbdialects.errors import ClassifiedError, ErrorCategory

__version__ = "0.1.0"

__all__ = [
    "ClassifiedError",
    "ConnectionDescriptor",
    "ConnectionParameters",
    "Driver",
    "DriverError",
    "DriverNotRegisteredError",
    "ErrorCategory",
    "IntervalUnit",
    "SemanticType",
    "TemporalUnit",
    "TimestampUnit",
    "get_driver",
    "list_drivers",
    "register_driver",
]
