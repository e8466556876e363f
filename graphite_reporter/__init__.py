"""Graphite usage reporter.

Packages:
- domain: GUIDIndex codec, models, collaborator interfaces
- builder: GraphiteBuilder + app metadata stores
- collector: accumulator rates + UAA auth
- reporter: scheduled GraphiteReporter + plaintext client
- app / cli: wiring and entry point
"""

from .builder import GraphiteBuilder
from .reporter import GraphiteReporter

__all__ = ["GraphiteBuilder", "GraphiteReporter"]

__version__ = "0.1.0"
