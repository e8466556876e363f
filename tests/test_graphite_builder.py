"""Tests de GraphiteBuilder.

Ejecutar:
    pytest tests/test_graphite_builder.py -v
"""

import pytest

from graphite_reporter.builder.graphite_builder import GraphiteBuilder
from graphite_reporter.domain.models import AppInfo, GraphiteMetric, LookupResult, Rate
from graphite_reporter.errors import FetchError, MetadataLookupError


def as_set(points):
    return {(p.name, p.value, p.timestamp) for p in points}


# =============================================================================
# HAPPY PATH
# =============================================================================

class TestBuildPoints:

    def test_builds_one_point_per_instance(self, fetcher, store):
        builder = GraphiteBuilder(fetcher, store, "test")

        points = builder.build_points(1520259517)

        assert as_set(points) == {
            ("test.org1.space1.app1.0", "2", 1520259517),
            ("test.org2.space2.app2.0", "3", 1520259517),
        }
        fetcher.rate.assert_called_once_with(1520259517)

    def test_returns_graphite_metrics(self, fetcher, store):
        points = GraphiteBuilder(fetcher, store, "test").build_points(1520259517)

        assert all(isinstance(p, GraphiteMetric) for p in points)

    def test_uses_snapshot_timestamp(self, fetcher, store):
        fetcher.rate.return_value = Rate(timestamp=1520259600, counts={"a/1": 5})

        points = GraphiteBuilder(fetcher, store, "p").build_points(1520259517)

        assert points == [GraphiteMetric("p.org1.space1.app1.1", "5", 1520259600)]

    def test_zero_counter_is_emitted(self, fetcher, store):
        fetcher.rate.return_value = Rate(timestamp=10, counts={"a/0": 0})

        points = GraphiteBuilder(fetcher, store, "p").build_points(10)

        assert points == [GraphiteMetric("p.org1.space1.app1.0", "0", 10)]

    def test_identity_without_index_uses_zero(self, fetcher, store):
        fetcher.rate.return_value = Rate(timestamp=10, counts={"a": 7})

        points = GraphiteBuilder(fetcher, store, "p").build_points(10)

        assert points[0].name == "p.org1.space1.app1.0"

    def test_looks_up_each_guid_once(self, fetcher, store):
        fetcher.rate.return_value = Rate(timestamp=10, counts={"a/0": 1, "a/1": 2, "b/0": 3})

        points = GraphiteBuilder(fetcher, store, "p").build_points(10)

        assert len(points) == 3
        (guids,), _ = store.lookup.call_args
        assert sorted(guids) == ["a", "b"]

    def test_dots_in_names_are_not_escaped(self, fetcher, store):
        store.lookup.return_value = LookupResult(apps={
            "a": AppInfo(name="my.app", space="space1", org="org1"),
        })
        fetcher.rate.return_value = Rate(timestamp=10, counts={"a/0": 1})

        points = GraphiteBuilder(fetcher, store, "p").build_points(10)

        assert points[0].name == "p.org1.space1.my.app.0"

    def test_idempotent(self, fetcher, store):
        builder = GraphiteBuilder(fetcher, store, "test")

        assert as_set(builder.build_points(1520259517)) == as_set(builder.build_points(1520259517))


# =============================================================================
# FILTRADO DE METADATA INCOMPLETA
# =============================================================================

class TestUnresolvedMetadata:

    def test_empty_fields_drop_points(self, fetcher, store):
        store.lookup.return_value = LookupResult(apps={
            "a": AppInfo(name="", space="space1", org="org1"),
            "b": AppInfo(name="app2", space="", org="org2"),
        })

        points = GraphiteBuilder(fetcher, store, "test").build_points(1520259517)

        assert points == []

    def test_missing_guid_drops_point(self, fetcher, store):
        fetcher.rate.return_value = Rate(timestamp=10, counts={"c/0": 4})
        store.lookup.return_value = LookupResult(apps={
            "not-c": AppInfo(name="app", space="space", org="org"),
        })

        points = GraphiteBuilder(fetcher, store, "p").build_points(10)

        assert points == []

    def test_partial_metadata_keeps_resolved(self, fetcher, store):
        store.lookup.return_value = LookupResult(apps={
            "a": AppInfo(name="app1", space="space1", org="org1"),
        })
        builder = GraphiteBuilder(fetcher, store, "test")

        points = builder.build_points(1520259517)

        assert as_set(points) == {("test.org1.space1.app1.0", "2", 1520259517)}
        assert builder.last_build_stats == {
            "timestamp": 1520259517,
            "total": 2,
            "emitted": 1,
            "unresolved": 1,
        }

    @pytest.mark.parametrize("result", [None, LookupResult()])
    def test_no_metadata_returns_no_points(self, fetcher, store, result):
        store.lookup.return_value = result

        assert GraphiteBuilder(fetcher, store, "p").build_points(10) == []


# =============================================================================
# ERRORES
# =============================================================================

class TestErrors:

    def test_fetch_error_propagates(self, fetcher, store):
        fetcher.rate.side_effect = FetchError("boom")

        with pytest.raises(FetchError):
            GraphiteBuilder(fetcher, store, "p").build_points(10)
        store.lookup.assert_not_called()

    def test_lookup_error_uses_returned_apps(self, fetcher, store, apps):
        store.lookup.return_value = LookupResult(apps=apps, error=MetadataLookupError("stale"))

        points = GraphiteBuilder(fetcher, store, "test").build_points(1520259517)

        assert len(points) == 2

    def test_lookup_exception_is_not_fatal(self, fetcher, store):
        store.lookup.side_effect = RuntimeError("store exploded")

        assert GraphiteBuilder(fetcher, store, "p").build_points(10) == []

    def test_empty_snapshot(self, fetcher, store):
        fetcher.rate.return_value = Rate(timestamp=10, counts={})
        store.lookup.return_value = LookupResult()

        assert GraphiteBuilder(fetcher, store, "p").build_points(10) == []
