"""
Envai Custom Exceptions

Simple exception hierarchy for error handling.
"""


class EnvaiError(Exception):
    """Base exception for Envai."""

    pass


class ConfigurationError(EnvaiError):
    """Configuration is invalid."""

    pass


class DataStoreError(EnvaiError):
    """Reading data cannot be loaded."""

    pass


class EmptyInputError(EnvaiError):
    """An aggregate was asked to summarize zero readings."""

    def __init__(self, operation: str, message: str | None = None):
        self.operation = operation
        super().__init__(message or f"No readings available for {operation}")


class ZeroBaselineError(EnvaiError):
    """A relative change was requested against a zero baseline."""

    pass


class InvalidRangeError(EnvaiError):
    """Date range or window is malformed (bad timestamp, start >= end)."""

    pass


class UnknownChartError(EnvaiError):
    """Requested chart type does not exist."""

    pass


class AssistantError(EnvaiError):
    """Text generation service failed."""

    pass
