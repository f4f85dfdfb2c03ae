# ABOUTME: Orchestrates a weather lookup: concurrent current + forecast fetch, normalization, persistence.
# ABOUTME: Tracks the snapshot, error, and unit state a search box / results panel renders from.

import asyncio
import logging

from weather_widget.api_client import WeatherProvider
from weather_widget.autocomplete import DEBOUNCE_SECONDS, CityAutocomplete
from weather_widget.errors import EMPTY_LOCATION_MESSAGE, InvalidQueryError, WeatherError, user_message
from weather_widget.forecast import normalize
from weather_widget.models import Preferences, TemperatureUnit, WeatherSnapshot
from weather_widget.storage import KeyValueStore, load_preferences, save_last_city, save_unit

logger = logging.getLogger(__name__)


class WeatherWidget:
    """Weather lookup state machine with injected provider and store.

    A snapshot is only ever replaced as a whole. An explicit search clears the old one
    before fetching; a unit change keeps it when the re-fetch fails.
    """

    def __init__(
        self,
        provider: WeatherProvider,
        store: KeyValueStore,
        debounce_seconds: float = DEBOUNCE_SECONDS,
    ):
        self.provider = provider
        self.store = store
        self.unit = TemperatureUnit.METRIC
        self.snapshot: WeatherSnapshot | None = None
        self.error: str | None = None
        self.loading = False
        self.autocomplete = CityAutocomplete(provider, on_select=self.search, delay=debounce_seconds)
        self._fetch_seq = 0

    @property
    def location(self) -> str:
        """Text currently in the search box."""
        return self.autocomplete.query

    @location.setter
    def location(self, value: str) -> None:
        self.autocomplete.query = value

    async def restore(self) -> Preferences:
        """Apply saved preferences and reload the last searched city, if any."""
        prefs = load_preferences(self.store)
        self.unit = prefs.unit
        if prefs.last_city:
            self.location = prefs.last_city
            await self.search(prefs.last_city)
        return prefs

    async def search(self, location: str | None = None) -> WeatherSnapshot | None:
        """Explicit lookup for a location, defaulting to the search box text."""
        location = (self.location if location is None else location).strip()
        self.autocomplete.dismiss()
        self.snapshot = None

        if not location:
            self.error = user_message(InvalidQueryError(EMPTY_LOCATION_MESSAGE))
            return None

        self.error = None
        self.loading = True
        unit = self.unit
        seq = self._next_seq()
        try:
            snapshot = await self._fetch(location, unit)
        except WeatherError as e:
            logger.warning("Weather lookup for %r failed: %s", location, e)
            if seq == self._fetch_seq:
                self.error = user_message(e)
            return None
        finally:
            if seq == self._fetch_seq:
                self.loading = False

        if seq != self._fetch_seq:
            logger.debug("Discarding stale weather result for %r", location)
            return None
        self.snapshot = snapshot
        save_last_city(self.store, location)
        if unit != self.unit:
            # Units changed while this lookup was in flight.
            await self._refresh()
        return self.snapshot

    async def set_unit(self, unit: TemperatureUnit) -> None:
        """Switch units, persist the choice, and silently re-fetch the loaded location."""
        unit = TemperatureUnit(unit)
        if unit == self.unit:
            return
        self.unit = unit
        save_unit(self.store, unit)
        if self.snapshot is not None:
            await self._refresh()

    async def _refresh(self) -> None:
        """Re-fetch the loaded location in the current unit, keeping the snapshot on failure."""
        location = self.snapshot.current.name
        unit = self.unit
        seq = self._next_seq()
        try:
            snapshot = await self._fetch(location, unit)
        except WeatherError as e:
            logger.warning("Re-fetch of %r in %s units failed, keeping previous data: %s", location, unit.value, e)
            return
        if seq == self._fetch_seq:
            self.snapshot = snapshot

    async def _fetch(self, location: str, unit: TemperatureUnit) -> WeatherSnapshot:
        current, forecast = await asyncio.gather(
            self.provider.get_current(location, unit),
            self.provider.get_forecast(location, unit),
            return_exceptions=True,
        )
        for result in (current, forecast):
            if isinstance(result, BaseException):
                raise result
        return WeatherSnapshot(current=current, forecast=normalize(forecast.samples))

    def _next_seq(self) -> int:
        self._fetch_seq += 1
        return self._fetch_seq
