# ABOUTME: Contract tests for the proxy API client that implements the WeatherProvider capability.
# ABOUTME: Validates payload parsing and the mapping of proxy errors onto the error taxonomy.

from unittest.mock import AsyncMock

import httpx
import pytest

from weather_widget.api_client import WeatherApiClient
from weather_widget.errors import CredentialError, ProviderError, TransportError
from weather_widget.models import TemperatureUnit

CURRENT = {
    "name": "Tokyo",
    "dt": 1736940000,
    "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
    "main": {"temp": 8.2, "feels_like": 6.1, "humidity": 45},
    "wind": {"speed": 2.5, "deg": 320},
    "sys": {"country": "JP"},
}

FORECAST = {
    "cod": "200",
    "list": [
        {
            "dt": 1736942400,
            "dt_txt": "2025-01-15 12:00:00",
            "main": {"temp": 9.0},
            "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
        }
    ],
    "city": {"id": 1850147, "name": "Tokyo", "country": "JP"},
}


def _mock_client(json_data, status_code: int = 200) -> httpx.AsyncClient:
    """Create a mock httpx.AsyncClient that returns the given JSON response."""
    mock = AsyncMock(spec=httpx.AsyncClient)
    mock.get.return_value = httpx.Response(
        status_code=status_code, json=json_data, request=httpx.Request("GET", "https://test")
    )
    return mock


class TestSuccessfulCalls:
    @pytest.mark.asyncio
    async def test_get_current_parses_conditions(self):
        """get_current returns CurrentConditions from the proxy body.

        Implementation: Mocks /api/weather/current and checks the request.
        Passing implies: City and unit are forwarded and the body is typed.
        """
        client = _mock_client(CURRENT)
        api = WeatherApiClient(client)

        result = await api.get_current("Tokyo", TemperatureUnit.IMPERIAL)

        assert result.name == "Tokyo"
        assert result.humidity == 45
        assert client.get.call_args.args[0] == "/api/weather/current"
        assert client.get.call_args.kwargs["params"] == {"q": "Tokyo", "units": "imperial"}

    @pytest.mark.asyncio
    async def test_get_forecast_parses_samples(self):
        """get_forecast returns a ForecastResponse with typed samples.

        Implementation: Mocks /api/weather/forecast with one sample.
        Passing implies: Raw samples are ready for normalization.
        """
        api = WeatherApiClient(_mock_client(FORECAST))

        result = await api.get_forecast("Tokyo", TemperatureUnit.METRIC)

        assert len(result.samples) == 1
        assert result.samples[0].time_of_day == "12:00:00"

    @pytest.mark.asyncio
    async def test_search_cities_parses_suggestions(self):
        """search_cities returns CitySuggestion models.

        Implementation: Mocks /api/weather/search with two cities.
        Passing implies: Optional country values are accepted.
        """
        client = _mock_client([{"id": 1, "name": "Taipei", "country": "TW"}, {"id": 2, "name": "Taipa", "country": None}])
        api = WeatherApiClient(client)

        result = await api.search_cities("Taip")

        assert [s.label for s in result] == ["Taipei, TW", "Taipa"]
        assert client.get.call_args.kwargs["params"] == {"q": "Taip"}


class TestErrorMapping:
    @pytest.mark.asyncio
    async def test_unauthorized_is_credential_error(self):
        """A 401 from the proxy raises CredentialError.

        Implementation: Mocks a 401 with an error body.
        Passing implies: The widget can show the key-activation message.
        """
        api = WeatherApiClient(_mock_client({"error": "Invalid API key."}, status_code=401))
        with pytest.raises(CredentialError):
            await api.get_current("Tokyo", TemperatureUnit.METRIC)

    @pytest.mark.asyncio
    async def test_missing_key_is_credential_error(self):
        """The proxy's missing-key 500 raises CredentialError.

        Implementation: Mocks the configuration error body.
        Passing implies: An unconfigured server is reported as a credential problem.
        """
        api = WeatherApiClient(
            _mock_client({"error": "Server configuration error: API Key missing"}, status_code=500)
        )
        with pytest.raises(CredentialError):
            await api.get_forecast("Tokyo", TemperatureUnit.METRIC)

    @pytest.mark.asyncio
    async def test_other_errors_keep_message(self):
        """Other error statuses raise ProviderError with the proxy message.

        Implementation: Mocks a 404 city-not-found body.
        Passing implies: Provider messages reach the user verbatim.
        """
        api = WeatherApiClient(_mock_client({"error": "city not found"}, status_code=404))
        with pytest.raises(ProviderError) as exc_info:
            await api.get_current("Atlantis", TemperatureUnit.METRIC)
        assert exc_info.value.message == "city not found"
        assert exc_info.value.status_code == 404
        assert not isinstance(exc_info.value, CredentialError)

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self):
        """A timeout raises TransportError.

        Implementation: Makes the mock client raise httpx.ReadTimeout.
        Passing implies: No-response failures use the generic message path.
        """
        mock = AsyncMock(spec=httpx.AsyncClient)
        mock.get.side_effect = httpx.ReadTimeout("timed out")
        with pytest.raises(TransportError):
            await WeatherApiClient(mock).get_current("Tokyo", TemperatureUnit.METRIC)

    @pytest.mark.asyncio
    async def test_malformed_payload_is_provider_error(self):
        """A body that does not match the model raises ProviderError 502.

        Implementation: Mocks a current-weather body missing required fields.
        Passing implies: Parse failures are reported like bad upstream responses.
        """
        api = WeatherApiClient(_mock_client({"name": "Tokyo"}))
        with pytest.raises(ProviderError) as exc_info:
            await api.get_current("Tokyo", TemperatureUnit.METRIC)
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_non_json_body_is_provider_error(self):
        """A 2xx body that is not JSON raises ProviderError 502 with no message.

        Implementation: Mocks an HTML page returned with status 200.
        Passing implies: The widget falls back to the generic message instead of crashing.
        """
        mock = AsyncMock(spec=httpx.AsyncClient)
        mock.get.return_value = httpx.Response(200, text="<html>oops</html>", request=httpx.Request("GET", "https://test"))
        with pytest.raises(ProviderError) as exc_info:
            await WeatherApiClient(mock).get_forecast("Tokyo", TemperatureUnit.METRIC)
        assert exc_info.value.status_code == 502
        assert exc_info.value.message is None
