import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from weather_gateway.errors import InvalidArgument, UpstreamShapeMismatch, UpstreamUnavailable
from weather_gateway.resolver import WeatherResolver


logger = logging.getLogger(__name__)

UPSTREAM_MESSAGES = {
    "alerts": "Failed to retrieve alerts data",
    "forecast": "Failed to retrieve forecast data",
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def get_resolver(request: Request) -> WeatherResolver:
    return request.app.state.resolver


def create_app(resolver: WeatherResolver) -> FastAPI:
    """Build the REST surface around an already constructed resolver."""
    app = FastAPI(title="Weather Gateway", version="1.0.0")
    app.state.resolver = resolver

    @app.exception_handler(InvalidArgument)
    async def invalid_argument(request: Request, exc: InvalidArgument) -> JSONResponse:
        return error_response(400, str(exc))

    @app.exception_handler(UpstreamUnavailable)
    async def upstream_unavailable(request: Request, exc: UpstreamUnavailable) -> JSONResponse:
        logger.error("Error serving %s: %s", request.url.path, exc)
        if exc.step == "points":
            params = request.query_params
            message = (
                "Failed to retrieve grid point data for coordinates: "
                f"{params.get('latitude')}, {params.get('longitude')}"
            )
        else:
            message = UPSTREAM_MESSAGES.get(exc.step, "Failed to retrieve weather data")
        return error_response(500, message)

    @app.exception_handler(UpstreamShapeMismatch)
    async def upstream_shape_mismatch(request: Request, exc: UpstreamShapeMismatch) -> JSONResponse:
        logger.error("Error serving %s: %s", request.url.path, exc)
        return error_response(500, "Failed to get forecast URL")

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected error serving %s", request.url.path)
        return error_response(500, str(exc))

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "OK", "message": "Weather server is running"}

    @app.get("/alerts/{region}")
    async def alerts(region: str, resolver: WeatherResolver = Depends(get_resolver)):
        return await resolver.alerts(region)

    @app.get("/forecast")
    async def forecast(
        latitude: str | None = None,
        longitude: str | None = None,
        resolver: WeatherResolver = Depends(get_resolver),
    ):
        lat, lon = parse_coordinates(latitude, longitude)
        return await resolver.forecast(lat, lon)

    return app


def parse_coordinates(latitude: str | None, longitude: str | None) -> tuple[float, float]:
    if not latitude or not latitude.strip() or not longitude or not longitude.strip():
        raise InvalidArgument("Latitude and longitude are required")
    try:
        return float(latitude), float(longitude)
    except ValueError:
        raise InvalidArgument("Latitude and longitude must be numbers") from None
