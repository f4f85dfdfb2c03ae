# ABOUTME: Key-value persistence for the last searched city and preferred temperature unit.
# ABOUTME: Provides the store protocol, in-memory and JSON file backends, and preference helpers.

import json
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from weather_widget.models import Preferences, TemperatureUnit

logger = logging.getLogger(__name__)

LAST_CITY_KEY = "weather_last_city"
TEMP_UNIT_KEY = "weather_temp_unit"

# Values written by the browser build of the widget.
LEGACY_UNITS = {"celsius": TemperatureUnit.METRIC, "fahrenheit": TemperatureUnit.IMPERIAL}


@runtime_checkable
class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Store backed by a dict, for tests and single-process use."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """Store backed by a single JSON object on disk.

    A missing or unreadable file behaves as an empty store. Writes are fire-and-forget:
    an OSError is logged and the value is dropped.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not persist %s to %s: %s", key, self.path, e)

    def _read(self) -> dict:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable store %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}


def load_preferences(store: KeyValueStore) -> Preferences:
    """Read saved preferences. Legacy celsius/fahrenheit values are mapped; unknown units become metric."""
    raw_unit = store.get(TEMP_UNIT_KEY)
    try:
        if raw_unit in LEGACY_UNITS:
            unit = LEGACY_UNITS[raw_unit]
        else:
            unit = TemperatureUnit(raw_unit) if raw_unit else TemperatureUnit.METRIC
    except ValueError:
        logger.warning("Ignoring unknown stored unit %r", raw_unit)
        unit = TemperatureUnit.METRIC
    return Preferences(last_city=store.get(LAST_CITY_KEY) or None, unit=unit)


def save_last_city(store: KeyValueStore, city: str) -> None:
    store.set(LAST_CITY_KEY, city)


def save_unit(store: KeyValueStore, unit: TemperatureUnit) -> None:
    store.set(TEMP_UNIT_KEY, TemperatureUnit(unit).value)
