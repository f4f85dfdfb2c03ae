# ABOUTME: City type-ahead: minimum-length search, keystroke debouncing, and stale-result suppression.
# ABOUTME: Selecting a suggestion fills the query with "name, country" and hands it to a fetch callback.

import asyncio
import logging
from collections.abc import Awaitable, Callable

from weather_widget.api_client import WeatherProvider
from weather_widget.errors import WeatherError
from weather_widget.models import CitySuggestion

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
MAX_SUGGESTIONS = 5
DEBOUNCE_SECONDS = 0.2


async def search(provider: WeatherProvider, query: str) -> list[CitySuggestion]:
    """Return up to MAX_SUGGESTIONS distinct cities matching a partial name.

    Queries shorter than MIN_QUERY_LENGTH return [] without calling the provider.
    Provider failures are logged and also return [], since suggestions are optional.
    """
    query = query.strip()
    if len(query) < MIN_QUERY_LENGTH:
        return []
    try:
        results = await provider.search_cities(query)
    except WeatherError as e:
        logger.warning("City search for %r failed: %s", query, e)
        return []

    unique: dict[tuple[str, str | None], CitySuggestion] = {}
    for city in results:
        unique.setdefault(city.key, CitySuggestion(id=city.id, name=city.name, country=city.country))
    return list(unique.values())[:MAX_SUGGESTIONS]


class Debouncer:
    """Single-slot timer: scheduling again cancels whatever is still waiting.

    Only the quiet interval is cancellable. Once the delay elapses the callback runs to
    completion even if a newer timer is scheduled meanwhile.
    """

    def __init__(self, delay: float = DEBOUNCE_SECONDS):
        self.delay = delay
        self._timer: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def schedule(self, callback: Callable[[], Awaitable[None]]) -> asyncio.Task:
        self.cancel()
        self._timer = asyncio.get_running_loop().create_task(self._fire(callback))
        return self._timer

    def cancel(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _fire(self, callback: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(self.delay)
        if self._timer is asyncio.current_task():
            self._timer = None
        await callback()


class CityAutocomplete:
    """State behind the search box: query text, current suggestions, and selection."""

    def __init__(
        self,
        provider: WeatherProvider,
        on_select: Callable[[str], Awaitable[object]] | None = None,
        delay: float = DEBOUNCE_SECONDS,
    ):
        self.provider = provider
        self.on_select = on_select
        self.debouncer = Debouncer(delay)
        self.query = ""
        self.suggestions: list[CitySuggestion] = []
        self._seq = 0

    def on_input(self, text: str) -> asyncio.Task | None:
        """Record a keystroke and schedule a debounced lookup for the full text."""
        self.query = text
        if len(text.strip()) < MIN_QUERY_LENGTH:
            self.dismiss()
            return None
        return self.debouncer.schedule(lambda: self._lookup(text))

    def dismiss(self) -> None:
        """Drop current suggestions, the pending timer, and any lookup still in flight."""
        self.debouncer.cancel()
        self._seq += 1
        self.suggestions = []

    async def select(self, suggestion: CitySuggestion) -> None:
        location = suggestion.label
        self.query = location
        self.dismiss()
        if self.on_select is not None:
            await self.on_select(location)

    async def _lookup(self, text: str) -> None:
        self._seq += 1
        seq = self._seq
        results = await search(self.provider, text)
        if seq != self._seq:
            logger.debug("Discarding stale suggestions for %r", text)
            return
        self.suggestions = results
