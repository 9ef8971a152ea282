import logging
import math
from typing import Any

import httpx

from weather_gateway.config import Settings
from weather_gateway.errors import InvalidArgument, UpstreamShapeMismatch, UpstreamUnavailable


logger = logging.getLogger(__name__)

Document = dict[str, Any]


class WeatherResolver:
    """Fetches alert and forecast documents from the NWS API.

    One instance is built at startup and handed to both the REST and the MCP
    adapter. When ``client`` is given it is reused for every request and the
    caller owns its lifetime; otherwise each fetch opens its own client.
    """

    def __init__(self, settings: Settings | None = None, client: httpx.AsyncClient | None = None):
        self.settings = settings or Settings()
        self._client = client

    @property
    def headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": "application/geo+json",
        }

    async def fetch(self, url: str, step: str) -> Document:
        """make a request to the NWS API, raising UpstreamUnavailable on any failure."""
        try:
            if self._client is None:
                async with httpx.AsyncClient() as client:
                    data = await self._get_json(client, url)
            else:
                data = await self._get_json(self._client, url)
        except httpx.HTTPStatusError as e:
            logger.warning("NWS %s request to %s returned HTTP %s", step, url, e.response.status_code)
            raise UpstreamUnavailable(step, status_code=e.response.status_code,
                                      reason=e.response.reason_phrase) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.warning("NWS %s request to %s failed: %s", step, url, e)
            raise UpstreamUnavailable(step, reason=str(e) or type(e).__name__) from e
        except ValueError as e:
            logger.warning("NWS %s request to %s returned a body that is not JSON", step, url)
            raise UpstreamUnavailable(step, reason="malformed response body") from e

        if not isinstance(data, dict):
            logger.warning("NWS %s request to %s returned %s instead of an object", step, url, type(data).__name__)
            raise UpstreamUnavailable(step, reason="malformed response body")

        logger.debug("NWS %s request to %s succeeded", step, url)
        return data

    async def _get_json(self, client: httpx.AsyncClient, url: str) -> Any:
        response = await client.get(url, headers=self.headers, timeout=self.settings.timeout)
        response.raise_for_status()
        return response.json()

    async def alerts(self, region: str) -> Document:
        """Get the alerts collection for a two-letter US state or territory code."""
        code = normalize_region(region)
        url = f"{self.settings.api_base}/alerts/active?area={code}"
        return await self.fetch(url, "alerts")

    async def forecast(self, latitude: float, longitude: float) -> Document:
        """
        Get the forecast collection for a coordinate.

        The coordinate is resolved to a grid point first; the forecast is then
        fetched from the URL that grid point names. The second request is only
        sent when the first one produced a forecast URL.
        """
        check_coordinate(latitude, longitude)

        # Format coordinates to 4 decimal places for API compatibility
        points_url = f"{self.settings.api_base}/points/{latitude:.4f},{longitude:.4f}"
        points_data = await self.fetch(points_url, "points")

        forecast_url = forecast_locator(points_data)
        if forecast_url is None:
            logger.warning("Grid point response for %s has no properties.forecast", points_url)
            raise UpstreamShapeMismatch("properties.forecast")

        return await self.fetch(forecast_url, "forecast")


def normalize_region(region: str) -> str:
    if not isinstance(region, str) or len(region) != 2:
        raise InvalidArgument(f"State code must be exactly two characters, got {region!r}")
    return region.upper()


def check_coordinate(latitude: float, longitude: float) -> None:
    if not (math.isfinite(latitude) and -90 <= latitude <= 90):
        raise InvalidArgument(f"Latitude must be between -90 and 90, got {latitude}")
    if not (math.isfinite(longitude) and -180 <= longitude <= 180):
        raise InvalidArgument(f"Longitude must be between -180 and 180, got {longitude}")


def forecast_locator(points_data: Any) -> str | None:
    if not isinstance(points_data, dict):
        return None
    props = points_data.get("properties")
    if not isinstance(props, dict):
        return None
    url = props.get("forecast")
    if not isinstance(url, str) or not url:
        return None
    return url
