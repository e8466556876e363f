"""AccumulatorFetcher - gathers instance rates from the accumulators.

Every accumulator is asked for the same timestamp; counts for the same
instance are summed, then only the ``report_limit`` busiest instances are
kept.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence, Tuple

import requests
from pydantic import BaseModel, Field, ValidationError

from ..domain.contracts import Fetcher
from ..domain.models import Rate
from ..errors import AuthError, FetchError
from .auth import UAAAuthenticator

logger = logging.getLogger(__name__)


class RateResponse(BaseModel):
    """Body of ``GET /rates/{timestamp}``."""

    timestamp: int = 0
    counts: Dict[str, int] = Field(default_factory=dict)


def top_counts(counts: Dict[str, int], limit: int) -> List[Tuple[str, int]]:
    """Largest counters first; ties ordered by instance identity."""
    ordered = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return ordered[:limit]


def sum_counts(responses: Iterable[RateResponse]) -> Dict[str, int]:
    totals: Dict[str, int] = {}
    for resp in responses:
        for guid_index, value in resp.counts.items():
            totals[guid_index] = totals.get(guid_index, 0) + value
    return totals


class AccumulatorFetcher(Fetcher):

    DEFAULT_REPORT_LIMIT = 50

    def __init__(
        self,
        addrs: Sequence[str],
        authenticator: UAAAuthenticator,
        session: requests.Session,
        report_limit: int = DEFAULT_REPORT_LIMIT,
    ):
        if not addrs:
            raise ValueError("at least one accumulator address is required")
        self._addrs = [a.rstrip("/") for a in addrs]
        self._auth = authenticator
        self._session = session
        self._report_limit = report_limit

    def rate(self, timestamp: int) -> Rate:
        try:
            token = self._auth.refresh_auth_token()
        except AuthError as e:
            raise FetchError(f"failed to authenticate: {e}") from e

        responses = [self._fetch_one(addr, timestamp, token) for addr in self._addrs]
        totals = sum_counts(responses)
        top = top_counts(totals, self._report_limit)

        if len(totals) > len(top):
            logger.debug(
                "rates ts=%d instances=%d kept=%d (report_limit)",
                timestamp, len(totals), len(top),
            )
        return Rate(timestamp=timestamp, counts=dict(top))

    def _fetch_one(self, addr: str, timestamp: int, token: str) -> RateResponse:
        url = f"{addr}/rates/{timestamp}"
        try:
            resp = self._session.get(url, headers={"Authorization": token})
        except requests.RequestException as e:
            raise FetchError(f"request failed: {e}", addr=addr) from e

        if resp.status_code == 401:
            self._auth.invalidate()
        if resp.status_code != 200:
            raise FetchError(
                f"expected 200, got {resp.status_code}: {resp.text}", addr=addr,
            )

        try:
            return RateResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise FetchError(f"invalid rates payload: {e}", addr=addr) from e
