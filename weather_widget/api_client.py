# ABOUTME: Client for the weather proxy routes, implementing the WeatherProvider capability.
# ABOUTME: Parses proxy JSON into models and maps failures onto the WeatherError taxonomy.

from typing import Protocol

import httpx
from pydantic import TypeAdapter, ValidationError

from weather_widget.errors import CredentialError, ProviderError, TransportError
from weather_widget.models import CitySuggestion, CurrentConditions, ForecastResponse, TemperatureUnit

API_BASE = "/api/weather"

_suggestions_adapter = TypeAdapter(list[CitySuggestion])


class WeatherProvider(Protocol):
    """What the widget needs from a weather backend."""

    async def get_current(self, city: str, unit: TemperatureUnit) -> CurrentConditions: ...

    async def get_forecast(self, city: str, unit: TemperatureUnit) -> ForecastResponse: ...

    async def search_cities(self, query: str) -> list[CitySuggestion]: ...


class WeatherApiClient:
    """WeatherProvider backed by the proxy's HTTP routes."""

    def __init__(self, http_client: httpx.AsyncClient, api_base: str = API_BASE):
        self.http_client = http_client
        self.api_base = api_base

    async def get_current(self, city: str, unit: TemperatureUnit) -> CurrentConditions:
        data = await self._get("/current", {"q": city, "units": TemperatureUnit(unit).value})
        return _parse(CurrentConditions.model_validate, data)

    async def get_forecast(self, city: str, unit: TemperatureUnit) -> ForecastResponse:
        data = await self._get("/forecast", {"q": city, "units": TemperatureUnit(unit).value})
        return _parse(ForecastResponse.model_validate, data)

    async def search_cities(self, query: str) -> list[CitySuggestion]:
        data = await self._get("/search", {"q": query})
        return _parse(_suggestions_adapter.validate_python, data)

    async def _get(self, path: str, params: dict):
        try:
            resp = await self.http_client.get(self.api_base + path, params=params)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise _status_error(e.response) from e
        except httpx.RequestError as e:
            raise TransportError(str(e) or None) from e
        try:
            return resp.json()
        except ValueError as e:
            raise ProviderError(None, 502) from e


def _parse(validate, data):
    try:
        return validate(data)
    except ValidationError as e:
        raise ProviderError(None, 502) from e


def _status_error(resp: httpx.Response) -> ProviderError:
    """Map a proxy error response to ProviderError, singling out credential problems."""
    try:
        message = resp.json().get("error")
    except (ValueError, AttributeError):
        message = None
    if resp.status_code == 401 or (message and "API Key missing" in message):
        return CredentialError(message, resp.status_code)
    return ProviderError(message, resp.status_code)
