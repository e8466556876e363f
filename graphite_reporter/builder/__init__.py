"""Point building: rates + app metadata -> Graphite points."""

from .graphite_builder import GraphiteBuilder
from .light_api_store import CFLightApp, LightAPIAppInfoStore
from .cache import CachedAppInfoStore

__all__ = [
    "GraphiteBuilder",
    "CFLightApp",
    "LightAPIAppInfoStore",
    "CachedAppInfoStore",
]
