"""Rate collection from the accumulators (authenticated through UAA)."""

from .auth import UAAAuthenticator
from .accumulator import AccumulatorFetcher, RateResponse, sum_counts, top_counts

__all__ = [
    "UAAAuthenticator",
    "AccumulatorFetcher",
    "RateResponse",
    "sum_counts",
    "top_counts",
]
