"""Exceptions raised by the reporter and its collaborators."""

from __future__ import annotations

from typing import Optional


class ReporterError(Exception):
    """Base class for graphite_reporter errors."""


class FetchError(ReporterError):
    """Rates could not be gathered from the accumulators."""

    def __init__(self, message: str, addr: Optional[str] = None):
        self.addr = addr
        super().__init__(f"{addr}: {message}" if addr else message)


class AuthError(ReporterError):
    """UAA token could not be obtained."""


class MetadataLookupError(ReporterError):
    """App metadata could not be read from the API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class GraphiteClientError(ReporterError):
    """Connecting, sending to or disconnecting from Graphite failed."""
