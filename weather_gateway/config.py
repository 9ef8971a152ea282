import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping


NWS_API_BASE = "https://api.weather.gov"
USER_AGENT = "weather-app/1.0"
DEFAULT_TIMEOUT = 30.0
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000


@dataclass(frozen=True)
class Settings:
    """Static configuration shared by the resolver and both adapters."""

    api_base: str = NWS_API_BASE
    user_agent: str = USER_AGENT
    timeout: float = DEFAULT_TIMEOUT
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ

        timeout = _number(env, "NWS_TIMEOUT", float, DEFAULT_TIMEOUT)
        if timeout <= 0:
            raise ValueError(f"NWS_TIMEOUT must be positive, got {timeout}")

        return cls(
            api_base=env.get("NWS_API_BASE", NWS_API_BASE).rstrip("/"),
            user_agent=env.get("NWS_USER_AGENT", USER_AGENT),
            timeout=timeout,
            host=env.get("HOST", DEFAULT_HOST),
            port=_number(env, "PORT", int, DEFAULT_PORT),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )


def _number(env: Mapping[str, str], key: str, kind, default):
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return kind(raw)
    except ValueError:
        raise ValueError(f"{key} must be a {kind.__name__}, got {raw!r}") from None


def configure_logging(level: str = "INFO") -> None:
    # stdout carries the MCP stdio stream, so everything goes to stderr
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )
