"""Shared fixtures: collaborator doubles without HTTP or sockets."""

from typing import Dict
from unittest.mock import MagicMock

import pytest

from graphite_reporter.domain.contracts import AppInfoStore, Fetcher, GraphiteClient, PointBuilder
from graphite_reporter.domain.models import AppInfo, LookupResult, Rate


def make_response(status_code: int = 200, json_body=None, text: str = "") -> MagicMock:
    """Fake requests.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    if isinstance(json_body, Exception):
        resp.json.side_effect = json_body
    else:
        resp.json.return_value = json_body
    return resp


@pytest.fixture
def rate() -> Rate:
    return Rate(timestamp=1520259517, counts={"a/0": 2, "b/0": 3})


@pytest.fixture
def apps() -> Dict[str, AppInfo]:
    return {
        "a": AppInfo(name="app1", space="space1", org="org1"),
        "b": AppInfo(name="app2", space="space2", org="org2"),
    }


@pytest.fixture
def fetcher(rate):
    f = MagicMock(spec=Fetcher)
    f.rate.return_value = rate
    return f


@pytest.fixture
def store(apps):
    s = MagicMock(spec=AppInfoStore)
    s.lookup.return_value = LookupResult(apps=apps)
    return s


@pytest.fixture
def point_builder():
    b = MagicMock(spec=PointBuilder)
    b.build_points.return_value = []
    return b


@pytest.fixture
def graphite_client():
    return MagicMock(spec=GraphiteClient)


@pytest.fixture
def session():
    return MagicMock()
