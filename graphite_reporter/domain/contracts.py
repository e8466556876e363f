"""Collaborator interfaces used by the builder and the reporter.

Each interface carries only the operations its caller needs, so tests can
swap in doubles without an HTTP stack or a Graphite server.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Sequence

from .models import GraphiteMetric, LookupResult, Rate


class Fetcher(ABC):
    """Source of instance rates (the accumulators)."""

    @abstractmethod
    def rate(self, timestamp: int) -> Rate:
        """Returns the counters for ``timestamp``.

        The returned Rate echoes the requested timestamp.

        Raises:
            FetchError: if the counters cannot be gathered
        """


class AppInfoStore(ABC):
    """Translates app GUIDs into org/space/app names."""

    @abstractmethod
    def lookup(self, guids: Sequence[str]) -> LookupResult:
        """Looks up metadata for ``guids``.

        Fails open: on error the result carries whatever data is available
        (possibly stale, possibly empty) plus the error, and callers use the
        data anyway. An empty ``guids`` returns an empty result without any
        remote call.
        """


class PointBuilder(ABC):
    """Builds the metrics sent on every reporter cycle."""

    @abstractmethod
    def build_points(self, timestamp: int) -> List[GraphiteMetric]:
        pass


class GraphiteClient(ABC):
    """Transport to the metrics backend.

    Some transports are connectionless; the reporter calls all three
    operations on every cycle regardless.
    """

    @abstractmethod
    def connect(self) -> None:
        pass

    @abstractmethod
    def send_metrics(self, metrics: Sequence[GraphiteMetric]) -> None:
        pass

    @abstractmethod
    def disconnect(self) -> None:
        pass
