# ABOUTME: Runtime settings for the weather proxy, read from the environment and .env file.
# ABOUTME: Holds the OpenWeatherMap credential, base URL, default language, and request timeout.

import os

from dotenv import load_dotenv
from pydantic import BaseModel

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"


class Settings(BaseModel):
    """Proxy configuration. The API key never leaves the server."""

    openweather_api_key: str | None = None
    openweather_base_url: str = OPENWEATHER_BASE_URL
    default_lang: str = "zh_tw"
    request_timeout: float = 10.0


def load_settings() -> Settings:
    """Build Settings from environment variables, loading a .env file first if present."""
    load_dotenv()
    # The VITE_ prefixed name is what older .env files for the browser build used.
    api_key = os.environ.get("OPENWEATHER_API_KEY") or os.environ.get("VITE_OPENWEATHER_API_KEY")
    api_key = api_key.strip() if api_key else None
    return Settings(
        openweather_api_key=api_key or None,
        openweather_base_url=os.environ.get("OPENWEATHER_BASE_URL", OPENWEATHER_BASE_URL),
        default_lang=os.environ.get("WEATHER_LANG", "zh_tw"),
        request_timeout=float(os.environ.get("WEATHER_REQUEST_TIMEOUT", "10")),
    )
