"""GraphiteBuilder - turns accumulator rates into named Graphite points.

Name format: ``<prefix>.<org>.<space>.<app>.<index>``. Dots inside org,
space or app names are not escaped, so such names collide with deeper
namespaces.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..domain.contracts import AppInfoStore, Fetcher, PointBuilder
from ..domain.guid_index import GUIDIndex
from ..domain.models import AppInfo, GraphiteMetric

logger = logging.getLogger(__name__)


class GraphiteBuilder(PointBuilder):
    """Builds one point per instance whose app metadata is complete.

    Stateless between calls apart from ``last_build_stats``.
    """

    def __init__(self, fetcher: Fetcher, store: AppInfoStore, metrics_prefix: str):
        self._fetcher = fetcher
        self._store = store
        self._metrics_prefix = metrics_prefix
        self.last_build_stats: Optional[dict] = None

    @property
    def metrics_prefix(self) -> str:
        return self._metrics_prefix

    def build_points(self, timestamp: int) -> List[GraphiteMetric]:
        """Fetches the rates for ``timestamp`` and formats them.

        Raises:
            Whatever the fetcher raises; metadata failures are only logged.
        """
        rate = self._fetcher.rate(timestamp)

        guids: List[str] = []
        seen = set()
        for guid_index in rate.counts:
            guid = GUIDIndex(guid_index).guid()
            if guid not in seen:
                seen.add(guid)
                guids.append(guid)

        apps = self._lookup_apps(guids)

        points: List[GraphiteMetric] = []
        unresolved = 0
        for guid_index, value in rate.counts.items():
            gi = GUIDIndex(guid_index)
            app_info = apps.get(gi.guid())

            if app_info is None or not app_info.is_complete:
                unresolved += 1
                logger.debug("UNRESOLVED guid_index=%s app_info=%r", gi, app_info)
                continue

            points.append(GraphiteMetric(
                name=f"{self._metrics_prefix}.{app_info}.{gi.index()}",
                value=str(value),
                timestamp=rate.timestamp,
            ))

        self.last_build_stats = {
            "timestamp": rate.timestamp,
            "total": len(rate.counts),
            "emitted": len(points),
            "unresolved": unresolved,
        }
        if unresolved:
            logger.info(
                "build_points ts=%d total=%d emitted=%d unresolved=%d",
                rate.timestamp, len(rate.counts), len(points), unresolved,
            )
        else:
            logger.debug("build_points ts=%d emitted=%d", rate.timestamp, len(points))

        return points

    def _lookup_apps(self, guids: List[str]) -> Dict[str, AppInfo]:
        # Stores fail open: apps of an errored result are still used.
        try:
            result = self._store.lookup(guids)
        except Exception as e:
            logger.warning("app metadata lookup raised, treating as empty: %s", e)
            return {}

        if result is None:
            return {}
        if result.error is not None:
            logger.warning("%s: failed to collect app metadata from API lookup", result.error)
        return result.apps or {}
