"""Graphite plaintext protocol client (TCP, one connection per cycle)."""

from __future__ import annotations

import logging
import socket
from typing import Optional, Sequence

from ..domain.contracts import GraphiteClient
from ..domain.models import GraphiteMetric
from ..errors import GraphiteClientError

logger = logging.getLogger(__name__)


class PlaintextGraphiteClient(GraphiteClient):
    """Writes ``<name> <value> <timestamp>\\n`` lines to carbon."""

    def __init__(self, host: str, port: int, timeout: float = 5.0):
        self._host = host
        self._port = port
        self._timeout = timeout
        self._sock: Optional[socket.socket] = None

    @property
    def address(self) -> str:
        return f"{self._host}:{self._port}"

    @property
    def is_connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> None:
        if self._sock is not None:
            self.disconnect()
        try:
            self._sock = socket.create_connection((self._host, self._port), timeout=self._timeout)
        except OSError as e:
            self._sock = None
            raise GraphiteClientError(f"failed to connect to {self.address}: {e}") from e
        logger.debug("[GRAPHITE] Connected: %s", self.address)

    def send_metrics(self, metrics: Sequence[GraphiteMetric]) -> None:
        if self._sock is None:
            raise GraphiteClientError(f"not connected to {self.address}")
        if not metrics:
            return

        payload = "".join(m.to_line() for m in metrics).encode("utf-8")
        try:
            self._sock.sendall(payload)
        except OSError as e:
            raise GraphiteClientError(f"failed to send {len(metrics)} metrics to {self.address}: {e}") from e
        logger.debug("[GRAPHITE] Sent %d metrics (%d bytes)", len(metrics), len(payload))

    def disconnect(self) -> None:
        sock, self._sock = self._sock, None
        if sock is None:
            return
        try:
            sock.close()
        except OSError as e:
            raise GraphiteClientError(f"failed to close connection to {self.address}: {e}") from e
