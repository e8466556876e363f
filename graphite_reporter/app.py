"""Builds a ready-to-run GraphiteReporter from Settings."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from common.config import Settings
from common.http import build_session

from .builder import CachedAppInfoStore, GraphiteBuilder, LightAPIAppInfoStore
from .collector import AccumulatorFetcher, UAAAuthenticator
from .reporter import GraphiteReporter, PlaintextGraphiteClient

logger = logging.getLogger(__name__)


def build_reporter(cfg: Settings, session: Optional[requests.Session] = None) -> GraphiteReporter:
    if session is None:
        session = build_session(timeout=cfg.http_timeout, verify=not cfg.skip_cert_verify)

    authenticator = UAAAuthenticator(cfg.client_id, cfg.client_secret, cfg.uaa_addr, session)

    store = CachedAppInfoStore(
        LightAPIAppInfoStore(cfg.capi_addr, session),
        ttl=cfg.app_info_cache_ttl,
    )

    logger.info("initializing fetcher with accumulators: %s", ", ".join(cfg.accumulator_addrs))
    fetcher = AccumulatorFetcher(
        cfg.accumulator_addrs,
        authenticator,
        session,
        report_limit=cfg.report_limit,
    )

    builder = GraphiteBuilder(fetcher, store, cfg.graphite_prefix)
    client = PlaintextGraphiteClient(cfg.graphite_host, cfg.graphite_port, timeout=cfg.http_timeout)

    logger.info(
        "initializing graphite reporter graphite=%s prefix=%s interval=%gs limit=%d",
        client.address, cfg.graphite_prefix, cfg.report_interval, cfg.report_limit,
    )
    return GraphiteReporter(builder, client, interval=cfg.report_interval)
