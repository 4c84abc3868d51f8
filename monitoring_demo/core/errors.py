"""Exceptions raised by the monitoring demo service."""
from typing import Iterable, Optional


class MonitoringDemoError(Exception):
    """Base class for all service errors."""
    pass


class ConfigurationError(MonitoringDemoError):
    """Raised when required environment variables are missing or invalid.

    Attributes:
        missing: Names of required variables that are unset or empty
        invalid: ``"NAME: reason"`` entries for values that failed to parse
    """

    def __init__(
        self,
        missing: Optional[Iterable[str]] = None,
        invalid: Optional[Iterable[str]] = None,
    ):
        self.missing = list(missing or [])
        self.invalid = list(invalid or [])
        super().__init__("; ".join(self.messages()))

    def messages(self) -> list:
        """One diagnostic line per problem."""
        lines = [f"${name} is required" for name in self.missing]
        lines.extend(f"invalid ${entry}" for entry in self.invalid)
        return lines


class BackendBusyError(MonitoringDemoError):
    """Raised when a run is requested for a backend that is already running."""

    def __init__(self, backend: str):
        self.backend = backend
        super().__init__(f"{backend} is busy now")


class ExerciseError(MonitoringDemoError):
    """Raised when an exerciser fails to connect, set up or write."""

    def __init__(self, backend: str, message: str):
        self.backend = backend
        self.message = message
        super().__init__(f"{backend}: {message}")
