"""Named connections — ~/.dbdialects/connections.toml.

One table per connection: a `driver` key, the typed connection fields
(`port` is an integer, `ssl` a boolean) and an optional `options` sub-table
for driver-specific settings.
"""

from __future__ import annotations

import dataclasses
import os
import stat
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dbdialects.drivers._base import ConnectionParameters
from dbdialects.drivers._registry import list_drivers

_CONNECTIONS_FILE = Path.home() / ".dbdialects" / "connections.toml"

_FIELDS = ("host", "port", "dbname", "user", "password", "ssl", "additional_options")


@dataclass(frozen=True)
class ConnectionConfig:
    name: str
    driver_id: str
    params: ConnectionParameters

    def to_entry(self) -> dict[str, object]:
        entry: dict[str, object] = {"driver": self.driver_id}
        for key in _FIELDS:
            value = getattr(self.params, key)
            if value is None or (key == "ssl" and value is False):
                continue
            entry[key] = value
        if self.params.options:
            entry["options"] = dict(self.params.options)
        return entry

    @classmethod
    def from_entry(cls, name: str, entry: Mapping[str, object]) -> ConnectionConfig:
        """Parse one stored table. Raises ValueError if it can't be used."""
        driver_id = entry.get("driver")
        if not isinstance(driver_id, str):
            raise ValueError(f"Connection '{name}' has no driver")
        options = entry.get("options", {})
        if not isinstance(options, Mapping):
            raise ValueError(f"Connection '{name}': options must be a table")

        params = ConnectionParameters.from_dict(
            {k: v for k, v in entry.items() if k not in ("driver", "options")}
        )
        if options:
            merged = {**params.options, **{k: str(v) for k, v in options.items()}}
            params = dataclasses.replace(params, options=merged)
        return cls(name=name, driver_id=driver_id, params=params)


_TOML_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def _quote(v: str) -> str:
    """TOML basic string; every control character is escaped."""
    out = []
    for ch in v:
        if ch in _TOML_ESCAPES:
            out.append(_TOML_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{ord(ch):04X}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def _toml_value(v: object) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, int):
        return str(v)
    return _quote(str(v))


def _write_toml(data: Mapping[str, Mapping[str, object]]) -> None:
    """Serialize connection tables and write with restricted permissions."""
    lines: list[str] = []
    for conn_name, entry in data.items():
        lines.append(f"[{_quote(conn_name)}]")
        nested = entry.get("options")
        for k, v in entry.items():
            if k != "options":
                lines.append(f"{_quote(k)} = {_toml_value(v)}")
        if isinstance(nested, Mapping) and nested:
            lines.append("")
            lines.append(f"[{_quote(conn_name)}.options]")
            lines.extend(f"{_quote(k)} = {_toml_value(v)}" for k, v in nested.items())
        lines.append("")

    _CONNECTIONS_FILE.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    _CONNECTIONS_FILE.write_text("\n".join(lines))
    os.chmod(_CONNECTIONS_FILE, stat.S_IRUSR | stat.S_IWUSR)  # 0600


def _load_file() -> dict[str, dict]:
    if not _CONNECTIONS_FILE.exists():
        return {}
    return tomllib.loads(_CONNECTIONS_FILE.read_text())


def list_connections() -> dict[str, dict]:
    """All stored tables as written, usable or not."""
    return _load_file()


def get_connection(name: str) -> ConnectionConfig | None:
    """Look up a named connection. None if missing, for an unknown driver, or malformed."""
    entry = _load_file().get(name)
    if entry is None:
        return None
    try:
        config = ConnectionConfig.from_entry(name, entry)
    except ValueError:
        return None
    if config.driver_id not in list_drivers():
        return None
    return config


def save_connection(config: ConnectionConfig) -> Path:
    """Insert or replace a named connection."""
    data = _load_file()
    data[config.name] = config.to_entry()
    _write_toml(data)
    return _CONNECTIONS_FILE


def remove_connection(name: str) -> bool:
    """Remove a named connection. Returns True if removed, False if not found."""
    data = _load_file()
    if name not in data:
        return False
    del data[name]
    if not data:
        _CONNECTIONS_FILE.unlink(missing_ok=True)
    else:
        _write_toml(data)
    return True
