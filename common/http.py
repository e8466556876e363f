from __future__ import annotations

import logging

import requests
from requests.adapters import HTTPAdapter


logger = logging.getLogger(__name__)


class TimeoutHTTPAdapter(HTTPAdapter):
    """HTTPAdapter that applies a default timeout to every request."""

    def __init__(self, *args, timeout: float = 5.0, **kwargs):
        self._timeout = timeout
        super().__init__(*args, **kwargs)

    def send(self, request, **kwargs):
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = self._timeout
        return super().send(request, **kwargs)


def build_session(timeout: float = 5.0, verify: bool = True) -> requests.Session:
    """Shared session for the UAA, accumulator and Light API calls."""
    session = requests.Session()
    adapter = TimeoutHTTPAdapter(timeout=timeout)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.verify = verify

    if not verify:
        logger.warning("[HTTP] TLS certificate verification disabled")

    logger.info("[HTTP] Session created timeout=%gs verify=%s", timeout, verify)
    return session
