from __future__ import annotations

import asyncio
from typing import Any, Callable

import httpx
import pytest

from weather_gateway.config import Settings
from weather_gateway.resolver import WeatherResolver


API = "https://api.weather.gov"
POINTS_URL = f"{API}/points/40.7128,-74.0060"
FORECAST_URL = f"{API}/gridpoints/OKX/33,35/forecast"

ALERTS_DOC = {
    "type": "FeatureCollection",
    "features": [
        {
            "id": "urn:oid:2.49.0.1.840.0.1",
            "properties": {
                "event": "Heat Advisory",
                "areaDesc": "Los Angeles",
                "severity": "Moderate",
            },
        }
    ],
}
EMPTY_ALERTS_DOC = {"type": "FeatureCollection", "features": []}
POINTS_DOC = {
    "properties": {
        "gridId": "OKX",
        "gridX": 33,
        "gridY": 35,
        "forecast": FORECAST_URL,
    }
}
FORECAST_DOC = {
    "properties": {
        "periods": [
            {
                "number": 1,
                "name": "Tonight",
                "temperature": 61,
                "temperatureUnit": "F",
                "windSpeed": "5 mph",
                "windDirection": "SW",
                "detailedForecast": "Mostly clear.",
            }
        ]
    }
}


class FakeNWS:
    """Answers requests from a table of canned responses and records them."""

    def __init__(self) -> None:
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, url: str, payload: Any = None, status: int = 200) -> None:
        self.routes[url] = lambda request: httpx.Response(status, json=payload)

    def add_raw(self, url: str, body: bytes, status: int = 200) -> None:
        self.routes[url] = lambda request: httpx.Response(status, content=body)

    def fail(self, url: str) -> None:
        def raise_connect_error(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        self.routes[url] = raise_connect_error

    @property
    def urls(self) -> list[str]:
        return [str(request.url) for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, json={"title": "Not Found"})
        return route(request)


@pytest.fixture
def nws() -> FakeNWS:
    return FakeNWS()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def resolver(nws: FakeNWS, settings: Settings):
    client = httpx.AsyncClient(transport=httpx.MockTransport(nws.handler))
    yield WeatherResolver(settings, client=client)
    asyncio.run(client.aclose())
