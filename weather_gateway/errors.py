class WeatherError(Exception):
    """Base class for every failure the resolver reports."""


class InvalidArgument(WeatherError):
    """A region or coordinate failed local validation; no request was sent."""


class UpstreamUnavailable(WeatherError):
    """The NWS API could not be reached or answered with a non-success status.

    ``step`` names the fetch that failed: ``alerts``, ``points`` or
    ``forecast``. ``status_code`` and ``reason`` carry detail when known,
    but callers are expected to treat every instance the same way.
    """

    def __init__(self, step: str, status_code: int | None = None, reason: str | None = None):
        self.step = step
        self.status_code = status_code
        self.reason = reason
        detail = f"HTTP {status_code}" if status_code is not None else (reason or "request failed")
        super().__init__(f"Upstream {step} request failed: {detail}")


class UpstreamShapeMismatch(WeatherError):
    """The NWS API answered successfully but a required field was missing."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Upstream response is missing {field}")
