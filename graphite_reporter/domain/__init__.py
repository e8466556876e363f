from .guid_index import GUIDIndex, entity_id, instance_index
from .models import AppInfo, GraphiteMetric, LookupResult, Rate
from .contracts import AppInfoStore, Fetcher, GraphiteClient, PointBuilder

__all__ = [
    "GUIDIndex",
    "entity_id",
    "instance_index",
    "AppInfo",
    "GraphiteMetric",
    "LookupResult",
    "Rate",
    "AppInfoStore",
    "Fetcher",
    "GraphiteClient",
    "PointBuilder",
]
