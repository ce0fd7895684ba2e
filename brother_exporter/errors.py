"""Exception types for Brother Exporter."""

from typing import Optional


class ExporterError(Exception):
    """Base class for all exporter errors."""


class ConfigError(ExporterError):
    """Printer configuration could not be loaded."""


class FetchError(ExporterError):
    """Fetching the maintenance document from a printer failed."""

    def __init__(self, target: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.target = target
        self.cause = cause


class TransportError(FetchError):
    """Printer unreachable, refused the connection, timed out or answered non-2xx."""


class MalformedDocumentError(FetchError):
    """Printer answered, but the body is not the expected two-row CSV."""


class MissingTargetError(ExporterError):
    """Scrape request did not name a target."""


class DuplicateMetricError(ExporterError):
    """The same metric name and host were registered twice in one scrape."""
