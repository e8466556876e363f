from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv


class ConfigError(Exception):
    """Invalid or missing startup configuration."""


_NUMBER_RE = re.compile(r"^\d+(?:\.\d+)?$")
_DURATION_RE = re.compile(r"^(?:\d+(?:\.\d+)?(?:ms|h|m|s))+$")
_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def _default_env_file() -> str:
    return str(Path.cwd() / ".env")


def parse_duration(raw: str) -> float:
    """Parse a duration into seconds.

    Accepts a bare number of seconds (``90``) or one or more
    ``<number><unit>`` groups with units ``h``, ``m``, ``s``, ``ms``
    (``90s``, ``1m``, ``1h30m``, ``1m30s``, ``500ms``).
    """
    text = (raw or "").strip()
    if _NUMBER_RE.match(text):
        value = float(text)
    elif _DURATION_RE.match(text):
        value = sum(
            float(number) * _DURATION_UNITS[unit]
            for number, unit in _DURATION_PART_RE.findall(text)
        )
    else:
        raise ConfigError(f"invalid duration: {raw!r}")
    if value <= 0:
        raise ConfigError(f"duration must be positive: {raw!r}")
    return value


def parse_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    uaa_addr: str
    capi_addr: str
    accumulator_addrs: Tuple[str, ...]
    client_id: str
    client_secret: str

    graphite_host: str
    graphite_port: int
    graphite_prefix: str

    skip_cert_verify: bool = False
    report_interval: float = 60.0
    report_limit: int = 50
    app_info_cache_ttl: float = 150.0
    http_timeout: float = 5.0


def _required(name: str, override: Optional[str] = None) -> str:
    value = override if override is not None else os.getenv(name, "")
    if not value:
        raise ConfigError(f"missing required setting {name}")
    return value


def _int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def get_settings(**overrides: Optional[str]) -> Settings:
    """Build Settings from the environment.

    Keyword overrides use the lower-cased variable names (``metrics_port="2003"``)
    and win over the environment; ``None`` means "not given".
    """
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = os.getenv("GRAPHITE_REPORTER_ENV_FILE", _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    def pick(name: str, default: str = "") -> str:
        value = overrides.get(name.lower())
        if value is not None:
            return value
        return os.getenv(name, default)

    accumulators = tuple(
        addr.strip().rstrip("/")
        for addr in _required("ACCUMULATOR_ADDR", overrides.get("accumulator_addr")).split(",")
        if addr.strip()
    )
    if not accumulators:
        raise ConfigError("ACCUMULATOR_ADDR must name at least one accumulator")

    report_limit = _int("REPORT_LIMIT", pick("REPORT_LIMIT", "50"))
    if report_limit < 1:
        raise ConfigError("REPORT_LIMIT must be at least 1")

    return Settings(
        uaa_addr=_required("UAA_ADDR", overrides.get("uaa_addr")).rstrip("/"),
        capi_addr=_required("CAPI_ADDR", overrides.get("capi_addr")).rstrip("/"),
        accumulator_addrs=accumulators,
        client_id=_required("CLIENT_ID", overrides.get("client_id")),
        client_secret=_required("CLIENT_SECRET", overrides.get("client_secret")),
        graphite_host=_required("METRICS_HOST", overrides.get("metrics_host")),
        graphite_port=_int("METRICS_PORT", _required("METRICS_PORT", overrides.get("metrics_port"))),
        graphite_prefix=_required("GRAPHITE_PREFIX", overrides.get("graphite_prefix")),
        skip_cert_verify=parse_bool(pick("SKIP_CERT_VERIFY", "false")),
        report_interval=parse_duration(pick("REPORT_INTERVAL", "1m")),
        report_limit=report_limit,
        app_info_cache_ttl=parse_duration(pick("APP_INFO_CACHE_TTL", "150s")),
        http_timeout=parse_duration(pick("HTTP_TIMEOUT", "5s")),
    )
