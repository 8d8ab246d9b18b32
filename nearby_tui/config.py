"""
Configuration
=============
Endpoint paths and defaults for talking to the geo service, plus the
runtime ``Settings`` built from the environment and the command line.

Environment:
    NEARBY_TUI_BASE_URL, NEARBY_TUI_TIMEOUT, NEARBY_TUI_RETRIES,
    NEARBY_TUI_CITY, NEARBY_TUI_LOG_FILE, NEARBY_TUI_LOG_LEVEL
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

# ---------------- Endpoints / UA ----------------
DEFAULT_BASE_URL = "http://localhost:8000"
CENTER_PATH = "/load-dummy"
NEARBY_PATH = "/find-nearby"
USER_AGENT = "nearby-tui/0.3 (+geo service client)"

# ---------------- Defaults ----------------
DEFAULT_RADIUS_KM = 5.0
DEFAULT_CITY = "mum"
DEFAULT_TIMEOUT_S = 10.0
DEFAULT_RETRIES = 2

ENV_PREFIX = "NEARBY_TUI_"


@dataclass(frozen=True)
class Settings:
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    retries: int = DEFAULT_RETRIES
    default_city: str = DEFAULT_CITY
    default_radius_km: float = DEFAULT_RADIUS_KM
    log_file: Optional[str] = None
    log_level: int = logging.INFO

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            v = env.get(ENV_PREFIX + name)
            return v.strip() if v and v.strip() else None

        level_name = (get("LOG_LEVEL") or "INFO").upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise ValueError(f"{ENV_PREFIX}LOG_LEVEL: unknown level {level_name!r}")
        return cls(
            base_url=(get("BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            timeout_s=float(get("TIMEOUT") or DEFAULT_TIMEOUT_S),
            retries=int(get("RETRIES") or DEFAULT_RETRIES),
            default_city=get("CITY") or DEFAULT_CITY,
            log_file=get("LOG_FILE"),
            log_level=level,
        )
