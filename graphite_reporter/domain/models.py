"""Data models shared by the builder, the collectors and the reporter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class Rate:
    """Counters for every known instance at one timestamp (epoch seconds)."""

    timestamp: int
    counts: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class AppInfo:
    """Names of an application, its space and its organization."""

    name: str = ""
    space: str = ""
    org: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.name and self.space and self.org)

    def __str__(self) -> str:
        return f"{self.org}.{self.space}.{self.name}"


@dataclass(frozen=True)
class LookupResult:
    """Result of an AppInfoStore lookup.

    ``apps`` is authoritative even when ``error`` is set: stores fail open
    and may serve partial or stale data together with the error.
    """

    apps: Dict[str, AppInfo] = field(default_factory=dict)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class GraphiteMetric:
    """One point ready for Graphite."""

    name: str
    value: str
    timestamp: int

    def to_line(self) -> str:
        """Plaintext protocol line: ``<name> <value> <timestamp>\\n``."""
        return f"{self.name} {self.value} {self.timestamp}\n"
