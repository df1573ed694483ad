"""
Configuration for devsig.

Settings come from ``~/.devsig/config.json`` with environment variable
overrides::

    DEVSIG_CATALOG=/etc/devsig/catalog.json devsig classify --screen 1179x2556
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 5.0
DEFAULT_LOG_LEVEL = "WARNING"


# ---------------------------------------------------------------------------
# Config file helpers (~/.devsig/config.json)
# ---------------------------------------------------------------------------


def _config_path() -> Path:
    return Path.home() / ".devsig" / "config.json"


def load_config() -> dict[str, Any]:
    """Load the local devsig config from ``~/.devsig/config.json``."""
    path = _config_path()
    if path.exists():
        try:
            data = json.loads(path.read_text())
        except (json.JSONDecodeError, OSError):
            logger.warning("Ignoring unreadable config file %s", path)
            return {}
        return data if isinstance(data, dict) else {}
    return {}


def save_config(config: dict[str, Any]) -> None:
    """Persist config to ``~/.devsig/config.json``."""
    path = _config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config, indent=2) + "\n")
    path.chmod(0o600)


# ---------------------------------------------------------------------------
# Resolved settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Settings:
    catalog_path: str | None = None  # JSON catalog replacing the built-in one
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT  # seconds per subprocess probe
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_timeout(value: object) -> float:
    try:
        timeout = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.warning("Invalid probe timeout %r, using %s", value, DEFAULT_PROBE_TIMEOUT)
        return DEFAULT_PROBE_TIMEOUT
    return timeout if timeout > 0 else DEFAULT_PROBE_TIMEOUT


def get_settings() -> Settings:
    """Resolve settings: env vars first, then the config file, then defaults."""
    cfg = load_config()

    catalog_path = os.environ.get("DEVSIG_CATALOG", "") or cfg.get("catalog_path") or None

    timeout_raw = os.environ.get("DEVSIG_PROBE_TIMEOUT", "") or cfg.get("probe_timeout")
    probe_timeout = (
        _parse_timeout(timeout_raw) if timeout_raw not in (None, "") else DEFAULT_PROBE_TIMEOUT
    )

    log_level = os.environ.get("DEVSIG_LOG_LEVEL", "") or cfg.get("log_level") or DEFAULT_LOG_LEVEL

    return Settings(
        catalog_path=str(catalog_path) if catalog_path else None,
        probe_timeout=probe_timeout,
        log_level=str(log_level).upper(),
    )
