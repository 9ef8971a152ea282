import json
import logging
from typing import Annotated, Any

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ResourceError
from pydantic import Field

from weather_gateway.errors import InvalidArgument, UpstreamShapeMismatch, UpstreamUnavailable, WeatherError
from weather_gateway.resolver import WeatherResolver


logger = logging.getLogger(__name__)

RESOURCE_URI = "weather-data://{kind}/{target}"


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2)


def format_degrees(value: float) -> str:
    # whole degrees print without a trailing ".0"
    return str(int(value)) if float(value).is_integer() else str(value)


async def alerts_report(resolver: WeatherResolver, state: str) -> str:
    """Render the get-alerts tool result as text."""
    state_code = state.upper()
    try:
        alerts_data = await resolver.alerts(state)
    except InvalidArgument as e:
        return str(e)
    except UpstreamUnavailable:
        return "Failed to retrieve alerts data"

    features = alerts_data.get("features") or []
    if not features:
        return f"No active alerts for {state_code}"

    return f"Active alerts for {state_code}:\n\n{to_json(alerts_data)}"


async def forecast_report(resolver: WeatherResolver, latitude: float, longitude: float) -> str:
    """Render the get-forecast tool result as text."""
    lat_text, lon_text = format_degrees(latitude), format_degrees(longitude)
    try:
        forecast_data = await resolver.forecast(latitude, longitude)
    except InvalidArgument as e:
        return str(e)
    except UpstreamShapeMismatch:
        return "Failed to get forecast URL from grid point data"
    except UpstreamUnavailable as e:
        if e.step == "points":
            return (
                f"Failed to retrieve grid point data for coordinates: {lat_text}, {lon_text}. "
                "This location may not be supported by the NWS API (only US locations are supported)."
            )
        return "Failed to retrieve forecast data"

    return f"Forecast for {lat_text}, {lon_text}:\n\n{to_json(forecast_data)}"


async def read_weather_data(resolver: WeatherResolver, kind: str, target: str) -> str:
    """
    Resolve a weather-data resource.

    Args:
        kind: ``alerts`` or ``forecast``.
        target: a state code for alerts, ``LAT,LON`` for forecast.
    """
    if kind == "forecast":
        lat, _, lon = target.partition(",")
        try:
            coords = float(lat), float(lon)
        except ValueError:
            raise ResourceError(f"Forecast target must be 'latitude,longitude', got {target!r}") from None
    elif kind != "alerts":
        raise ResourceError(f"Unknown weather data type {kind!r}, expected 'alerts' or 'forecast'")

    try:
        if kind == "alerts":
            data = await resolver.alerts(target)
        else:
            data = await resolver.forecast(*coords)
    except WeatherError as e:
        logger.error("Failed to resolve weather-data://%s/%s: %s", kind, target, e)
        raise ResourceError("Failed to retrieve weather data") from e

    return to_json(data)


def create_mcp_server(resolver: WeatherResolver, log_level: str = "ERROR") -> FastMCP:
    """Register the weather tools and resource against ``resolver``."""
    mcp = FastMCP("weather", log_level=log_level)

    @mcp.tool(name="get-alerts", description="Get weather alerts for a state")
    async def get_alerts(
        state: Annotated[str, Field(min_length=2, max_length=2, description="Two-letter state code (e.g. CA, NY)")],
    ) -> str:
        return await alerts_report(resolver, state)

    @mcp.tool(name="get-forecast", description="Get weather forecast for a location")
    async def get_forecast(
        latitude: Annotated[float, Field(ge=-90, le=90, description="Latitude of the location")],
        longitude: Annotated[float, Field(ge=-180, le=180, description="Longitude of the location")],
    ) -> str:
        return await forecast_report(resolver, latitude, longitude)

    @mcp.resource(
        RESOURCE_URI,
        name="weather-data",
        description="Weather data from National Weather Service API",
        mime_type="application/json",
    )
    async def weather_data(kind: str, target: str) -> str:
        return await read_weather_data(resolver, kind, target)

    return mcp
