"""REST and MCP gateway over the National Weather Service API."""

from weather_gateway.config import Settings
from weather_gateway.errors import (
    InvalidArgument,
    UpstreamShapeMismatch,
    UpstreamUnavailable,
    WeatherError,
)
from weather_gateway.resolver import WeatherResolver

__version__ = "1.0.0"

__all__ = [
    "Settings",
    "WeatherResolver",
    "WeatherError",
    "InvalidArgument",
    "UpstreamUnavailable",
    "UpstreamShapeMismatch",
]
