# ABOUTME: ASGI proxy in front of OpenWeatherMap that keeps the API key on the server.
# ABOUTME: Exposes /api/weather/current, /api/weather/forecast and /api/weather/search via Starlette.

import logging
from contextlib import asynccontextmanager

import httpx
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from weather_widget.config import Settings, load_settings
from weather_widget.deps import create_http_client
from weather_widget.errors import ProviderError, WeatherError
from weather_widget.models import TemperatureUnit
from weather_widget.weather_service import fetch_current, fetch_forecast, find_cities

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "Server configuration error: API Key missing"
MIN_SEARCH_LENGTH = 2


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def create_app(settings: Settings, http_client: httpx.AsyncClient) -> Starlette:
    """Build the proxy application around an upstream client and settings."""

    def weather_route(fetch, fallback_message: str):
        async def endpoint(request: Request) -> JSONResponse:
            q = request.query_params.get("q")
            units = request.query_params.get("units", TemperatureUnit.METRIC.value)
            lang = request.query_params.get("lang", settings.default_lang)

            if not q:
                return _error(400, "Missing city parameter")
            if units not in {u.value for u in TemperatureUnit}:
                return _error(400, f"Unsupported units: {units}")
            if not settings.openweather_api_key:
                return _error(500, MISSING_KEY_MESSAGE)

            try:
                data = await fetch(
                    http_client, settings.openweather_base_url, settings.openweather_api_key, q, units, lang
                )
            except WeatherError as e:
                logger.warning("Upstream %s failed for %r: %s", request.url.path, q, e)
                message = e.message if isinstance(e, ProviderError) else None
                return _error(e.status_code or 500, message or fallback_message)
            return JSONResponse(data)

        return endpoint

    async def search(request: Request) -> JSONResponse:
        q = request.query_params.get("q") or ""
        if len(q) < MIN_SEARCH_LENGTH:
            return _error(400, "Search query too short")
        if not settings.openweather_api_key:
            return _error(500, MISSING_KEY_MESSAGE)

        try:
            cities = await find_cities(http_client, settings.openweather_base_url, settings.openweather_api_key, q)
        except WeatherError as e:
            logger.warning("City search failed for %r: %s", q, e)
            return _error(500, "Search failed")
        return JSONResponse(cities)

    routes = [
        Route("/api/weather/current", weather_route(fetch_current, "Failed to fetch weather")),
        Route("/api/weather/forecast", weather_route(fetch_forecast, "Failed to fetch forecast")),
        Route("/api/weather/search", search),
    ]

    @asynccontextmanager
    async def lifespan(app: Starlette):
        yield
        await http_client.aclose()

    return Starlette(routes=routes, lifespan=lifespan)


_settings = load_settings()
app = create_app(_settings, create_http_client(timeout=_settings.request_timeout))
