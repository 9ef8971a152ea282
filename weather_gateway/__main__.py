import argparse
import asyncio
import dataclasses
import logging
import sys

import httpx
import uvicorn

from weather_gateway.config import Settings, configure_logging
from weather_gateway.mcp_server import RESOURCE_URI, create_mcp_server
from weather_gateway.resolver import WeatherResolver
from weather_gateway.rest_api import create_app


logger = logging.getLogger("weather_gateway")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weather-gateway",
        description="Serve NWS alerts and forecasts over REST and MCP stdio.",
    )
    parser.add_argument("--mode", choices=("both", "rest", "mcp"), default="both",
                        help="which surfaces to serve (default: both)")
    parser.add_argument("--host", default=settings.host, help=f"REST bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"REST port (default: {settings.port})")
    return parser


async def serve(settings: Settings, mode: str) -> None:
    async with httpx.AsyncClient() as client:
        resolver = WeatherResolver(settings, client=client)
        jobs = []

        if mode in ("both", "rest"):
            app = create_app(resolver)
            # log_config=None keeps uvicorn on our stderr handlers; stdout is the MCP stream
            config = uvicorn.Config(app, host=settings.host, port=settings.port,
                                    log_config=None, access_log=False)
            jobs.append(uvicorn.Server(config).serve())
            logger.info("REST server running on http://%s:%s", settings.host, settings.port)
            logger.info("Available endpoints:")
            logger.info("  GET /health - Health check")
            logger.info("  GET /alerts/{region} - Get alerts for a state (e.g., /alerts/CA)")
            logger.info("  GET /forecast?latitude=40.7128&longitude=-74.0060 - Get forecast for coordinates")

        if mode in ("both", "mcp"):
            mcp = create_mcp_server(resolver, log_level=settings.log_level)
            jobs.append(mcp.run_stdio_async())
            logger.info("Weather MCP Server running on stdio")
            logger.info("Available MCP tools: get-alerts, get-forecast")
            logger.info("Available MCP resources: %s", RESOURCE_URI)

        await asyncio.gather(*jobs)


def main(argv: list[str] | None = None) -> int:
    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"weather-gateway: {e}", file=sys.stderr)
        return 2

    args = build_parser(settings).parse_args(argv)
    settings = dataclasses.replace(settings, host=args.host, port=args.port)
    configure_logging(settings.log_level)

    try:
        asyncio.run(serve(settings, args.mode))
    except KeyboardInterrupt:
        logger.info("Shutting down")
    except Exception:
        logger.exception("Fatal error in main()")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
