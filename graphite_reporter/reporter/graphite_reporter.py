"""GraphiteReporter - sends built points to Graphite on a fixed interval.

Each cycle:
1. Computes a lagged timestamp (two intervals back, truncated to the
   interval) so the accumulators have finished the bucket.
2. Builds the points; a failure aborts the cycle before any transport call.
3. Connects (failure is logged, the send is still attempted), sends, and
   always disconnects.

Failures never stop the loop and a failed cycle is not replayed: the next
tick computes a new timestamp. Ticks missed while a cycle overruns the
interval are dropped, not queued.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from ..domain.contracts import GraphiteClient, PointBuilder

logger = logging.getLogger(__name__)


class GraphiteReporter:
    """Runs one reporting cycle per interval until stopped."""

    DEFAULT_INTERVAL = 60.0  # segundos

    def __init__(
        self,
        point_builder: PointBuilder,
        graphite_client: GraphiteClient,
        interval: float = DEFAULT_INTERVAL,
        clock: Callable[[], float] = time.time,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._point_builder = point_builder
        self._graphite_client = graphite_client
        self._interval = float(interval)
        self._clock = clock
        self._monotonic = monotonic

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._stats_lock = threading.Lock()

        # Métricas
        self._cycles = 0
        self._succeeded = 0
        self._build_failures = 0
        self._send_failures = 0
        self._unexpected_failures = 0
        self._connect_errors = 0
        self._disconnect_errors = 0
        self._dropped_ticks = 0
        self._last_points = 0
        self._last_timestamp: Optional[int] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def snapshot_timestamp(self, now: Optional[float] = None) -> int:
        """``now - 2 * interval`` truncated down to an interval boundary."""
        if now is None:
            now = self._clock()
        lagged = now - 2 * self._interval
        return int(math.floor(lagged / self._interval) * self._interval)

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    def run_once(self) -> bool:
        """Runs one cycle. Returns True when the points were sent."""
        timestamp = self.snapshot_timestamp()
        with self._stats_lock:
            self._cycles += 1
            self._last_timestamp = timestamp
        logger.info("graphite reporter ticked ts=%d", timestamp)

        try:
            points = self._point_builder.build_points(timestamp)
        except Exception as e:
            logger.error("failed to build points from point builder: %s", e)
            with self._stats_lock:
                self._build_failures += 1
            return False

        with self._graphite_connection():
            try:
                self._graphite_client.send_metrics(points)
            except Exception as e:
                logger.error("failed to post to graphite: %s", e)
                with self._stats_lock:
                    self._send_failures += 1
                return False

        with self._stats_lock:
            self._succeeded += 1
            self._last_points = len(points)
        logger.info("graphite reporter sent %d points ts=%d", len(points), timestamp)
        return True

    @contextmanager
    def _graphite_connection(self) -> Iterator[None]:
        # Connect errors are logged only; the send is still attempted.
        try:
            self._graphite_client.connect()
        except Exception as e:
            logger.error("Failed connecting to graphite: %s", e)
            with self._stats_lock:
                self._connect_errors += 1
        try:
            yield
        finally:
            try:
                self._graphite_client.disconnect()
            except Exception as e:
                logger.error("Failed disconnecting from graphite: %s", e)
                with self._stats_lock:
                    self._disconnect_errors += 1

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Blocking loop; returns once stop() is called.

        The stop flag is checked between cycles, an in-flight cycle always
        completes. A stopped reporter stays stopped until start().
        """
        logger.info("GraphiteReporter started interval=%gs", self._interval)

        next_tick = self._monotonic() + self._interval
        while not self._stop_event.is_set():
            delay = next_tick - self._monotonic()
            if delay > 0 and self._stop_event.wait(delay):
                break
            if self._stop_event.is_set():
                break

            try:
                self.run_once()
            except Exception:
                logger.exception("graphite reporter cycle crashed")
                with self._stats_lock:
                    self._unexpected_failures += 1

            next_tick += self._interval
            now = self._monotonic()
            if now >= next_tick:
                missed = int((now - next_tick) // self._interval) + 1
                next_tick += missed * self._interval
                with self._stats_lock:
                    self._dropped_ticks += missed
                logger.warning(
                    "graphite reporter cycle overran interval=%gs, dropped %d tick(s)",
                    self._interval, missed,
                )

        logger.info("GraphiteReporter stopped. Stats: %s", self.get_stats())

    def start(self) -> None:
        """Runs the loop on a daemon thread.

        Does nothing while a previous loop thread is alive, even if it was
        asked to stop: the event is never cleared under a live loop.
        """
        if self.is_running:
            if self._stop_event.is_set():
                logger.warning("GraphiteReporter still stopping, start() ignored")
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, name="graphite-reporter", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Prevents new cycles and waits for the loop thread, if any.

        If the join times out the thread is kept, so is_running stays True
        until the in-flight cycle finishes.
        """
        self._stop_event.set()
        thread = self._thread
        if thread is None or thread is threading.current_thread():
            return
        thread.join(timeout=timeout)
        if not thread.is_alive() and self._thread is thread:
            self._thread = None

    def get_stats(self) -> dict:
        with self._stats_lock:
            return {
                "cycles": self._cycles,
                "succeeded": self._succeeded,
                "build_failures": self._build_failures,
                "send_failures": self._send_failures,
                "unexpected_failures": self._unexpected_failures,
                "connect_errors": self._connect_errors,
                "disconnect_errors": self._disconnect_errors,
                "dropped_ticks": self._dropped_ticks,
                "last_points": self._last_points,
                "last_timestamp": self._last_timestamp,
                "interval": self._interval,
            }
