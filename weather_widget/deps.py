# ABOUTME: Dependency container for the weather widget using Pydantic BaseModel.
# ABOUTME: Holds the weather provider and key-value store injected into the widget.

import httpx
from pydantic import BaseModel, ConfigDict

from weather_widget.api_client import WeatherApiClient
from weather_widget.storage import KeyValueStore, MemoryStore
from weather_widget.widget import WeatherWidget


class WidgetDeps(BaseModel):
    """Capabilities the widget core depends on but does not implement."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    http_client: httpx.AsyncClient
    store: KeyValueStore

    def build_widget(self) -> WeatherWidget:
        return WeatherWidget(WeatherApiClient(self.http_client), self.store)


def create_http_client(base_url: str = "", timeout: float = 10.0) -> httpx.AsyncClient:
    """Create an httpx client for talking to the weather provider or the proxy.

    Requests are never retried automatically; a failed lookup is re-submitted by the user.
    """
    return httpx.AsyncClient(base_url=base_url, timeout=timeout)


def create_deps(proxy_url: str, store: KeyValueStore | None = None) -> WidgetDeps:
    """Wire an httpx client pointed at the proxy with the given store (in-memory by default)."""
    return WidgetDeps(http_client=create_http_client(proxy_url), store=store if store is not None else MemoryStore())
