# ABOUTME: Service layer for OpenWeatherMap API calls used by the proxy.
# ABOUTME: Handles current weather, 5 day forecast, and city search with typed errors.

import httpx

from weather_widget.errors import CredentialError, ProviderError, TransportError

CURRENT_PATH = "/weather"
FORECAST_PATH = "/forecast"
FIND_PATH = "/find"

MAX_CITY_RESULTS = 5


async def fetch_current(
    client: httpx.AsyncClient,
    base_url: str,
    api_key: str,
    q: str,
    units: str = "metric",
    lang: str = "zh_tw",
) -> dict:
    """Fetch current conditions for a city query and return the provider JSON unchanged."""
    return await _get_json(client, base_url + CURRENT_PATH, {"q": q, "appid": api_key, "units": units, "lang": lang})


async def fetch_forecast(
    client: httpx.AsyncClient,
    base_url: str,
    api_key: str,
    q: str,
    units: str = "metric",
    lang: str = "zh_tw",
) -> dict:
    """Fetch the 5 day / 3 hour forecast for a city query and return the provider JSON unchanged."""
    return await _get_json(client, base_url + FORECAST_PATH, {"q": q, "appid": api_key, "units": units, "lang": lang})


async def find_cities(client: httpx.AsyncClient, base_url: str, api_key: str, q: str) -> list[dict]:
    """Search cities by partial name, most populous first, reduced to id, name, and country."""
    data = await _get_json(
        client,
        base_url + FIND_PATH,
        {"q": q, "type": "like", "sort": "population", "appid": api_key},
    )
    try:
        return [
            {"id": item["id"], "name": item["name"], "country": (item.get("sys") or {}).get("country")}
            for item in (data.get("list") or [])[:MAX_CITY_RESULTS]
        ]
    except (KeyError, TypeError, AttributeError) as e:
        raise ProviderError(None, 502) from e


async def _get_json(client: httpx.AsyncClient, url: str, params: dict) -> dict:
    try:
        resp = await client.get(url, params=params)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise _status_error(e.response) from e
    except httpx.RequestError as e:
        raise TransportError(str(e) or None) from e
    try:
        return resp.json()
    except ValueError as e:
        raise ProviderError(None, 502) from e


def _status_error(resp: httpx.Response) -> ProviderError:
    """Build a ProviderError from an error response, keeping the provider's message if any."""
    try:
        message = resp.json().get("message")
    except (ValueError, AttributeError):
        message = None
    if resp.status_code == 401:
        return CredentialError(message, resp.status_code)
    return ProviderError(message, resp.status_code)
