"""CLI entry point for the graphite reporter."""

from __future__ import annotations

import argparse
import logging
import os
import signal
import sys
from typing import List, Optional

from common.config import ConfigError, get_settings

from .app import build_reporter

logger = logging.getLogger(__name__)


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Reports per-instance usage rates to Graphite. "
                    "Every flag falls back to the environment variable in brackets.",
    )
    p.add_argument("--uaa-addr", help="UAA address [UAA_ADDR]")
    p.add_argument("--capi-addr", help="Light API address [CAPI_ADDR]")
    p.add_argument("--accumulator-addr", help="Comma separated accumulator addresses [ACCUMULATOR_ADDR]")
    p.add_argument("--client-id", help="UAA client id [CLIENT_ID]")
    p.add_argument("--client-secret", help="UAA client secret [CLIENT_SECRET]")
    p.add_argument("--metrics-host", help="Graphite host [METRICS_HOST]")
    p.add_argument("--metrics-port", help="Graphite plaintext port [METRICS_PORT]")
    p.add_argument("--graphite-prefix", help="Metric name prefix [GRAPHITE_PREFIX]")
    p.add_argument("--skip-cert-verify", action="store_const", const="true", default=None,
                   help="Disable TLS verification [SKIP_CERT_VERIFY]")
    p.add_argument("--report-interval", help="Report interval, e.g. 1m [REPORT_INTERVAL]")
    p.add_argument("--report-limit", help="Max instances per report [REPORT_LIMIT]")
    p.add_argument("--cache-duration", dest="app_info_cache_ttl",
                   help="App info cache TTL, e.g. 150s [APP_INFO_CACHE_TTL]")
    p.add_argument("--http-timeout", help="HTTP and Graphite timeout [HTTP_TIMEOUT]")
    p.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO"))
    p.add_argument("--once", action="store_true", help="run a single cycle and exit")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = _parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    overrides = {k: v for k, v in vars(args).items() if k not in ("log_level", "once")}
    try:
        cfg = get_settings(**overrides)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    reporter = build_reporter(cfg)

    if args.once:
        return 0 if reporter.run_once() else 1

    def _handle_signal(signum, _frame):
        logger.info("Signal %d received, stopping after the current cycle", signum)
        reporter.stop()

    signal.signal(signal.SIGTERM, _handle_signal)
    signal.signal(signal.SIGINT, _handle_signal)

    reporter.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
