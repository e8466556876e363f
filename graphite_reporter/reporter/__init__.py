"""Scheduled reporting to Graphite."""

from .graphite_client import PlaintextGraphiteClient
from .graphite_reporter import GraphiteReporter

__all__ = ["PlaintextGraphiteClient", "GraphiteReporter"]
