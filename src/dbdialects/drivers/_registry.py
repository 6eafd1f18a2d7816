"""Driver registry — process-wide id → driver table, built-ins loaded lazily."""

from __future__ import annotations

import importlib
import logging
import threading
from collections.abc import Mapping
from types import MappingProxyType

from dbdialects.drivers._base import Driver, DriverError, DriverNotRegisteredError

logger = logging.getLogger(__name__)

_BUILTIN_DRIVERS: dict[str, tuple[str, str]] = {
    "sql": ("dbdialects.drivers.generic", "GenericSQLDriver"),
    "hana": ("dbdialects.drivers.hana", "HanaDriver"),
    "duckdb": ("dbdialects.drivers.duckdb", "DuckDBDriver"),
}


class DriverRegistry:
    """Writes are serialized and swap in a new table; reads never lock."""

    def __init__(self, builtins: Mapping[str, tuple[str, str]] | None = None) -> None:
        self._lock = threading.Lock()
        self._drivers: Mapping[str, Driver] = MappingProxyType({})
        self._builtins = dict(_BUILTIN_DRIVERS if builtins is None else builtins)

    def register(self, driver_id: str, driver: Driver) -> None:
        """Insert or replace the driver for `driver_id`."""
        with self._lock:
            table = dict(self._drivers)
            if driver_id in table:
                logger.debug("Replacing driver %r", driver_id)
            table[driver_id] = driver
            self._drivers = MappingProxyType(table)

    def lookup(self, driver_id: str) -> Driver:
        driver = self._drivers.get(driver_id)
        if driver is not None:
            return driver
        if driver_id in self._builtins:
            return self._load_builtin(driver_id)
        raise DriverNotRegisteredError(driver_id)

    def ids(self) -> list[str]:
        return sorted(set(self._drivers) | set(self._builtins))

    def _load_builtin(self, driver_id: str) -> Driver:
        module_path, class_name = self._builtins[driver_id]
        try:
            mod = importlib.import_module(module_path)
        except ImportError as e:
            raise DriverError(f"Could not load driver '{driver_id}': {e}") from e

        driver = getattr(mod, class_name)()
        with self._lock:
            # Another thread may have won the race; keep whichever landed first.
            existing = self._drivers.get(driver_id)
            if existing is not None:
                return existing
            table = dict(self._drivers)
            table[driver_id] = driver
            self._drivers = MappingProxyType(table)
        logger.debug("Loaded built-in driver %r", driver_id)
        return driver


_REGISTRY = DriverRegistry()


def default_registry() -> DriverRegistry:
    return _REGISTRY


def register_driver(driver_id: str, driver: Driver) -> None:
    _REGISTRY.register(driver_id, driver)


def get_driver(driver_id: str) -> Driver:
    """Look up a driver by id. Raises DriverNotRegisteredError if unknown."""
    return _REGISTRY.lookup(driver_id)


def list_drivers() -> list[str]:
    return _REGISTRY.ids()
