"""
Runtime settings.

Values come from the environment, with a `.env` file in the project root
loaded first. Every setting has a default, so an empty environment is valid.

Environment variables:
- CHEERBASE_GST_RATE: GST rate applied to invoice subtotals (default 0.05)
- CHEERBASE_QST_RATE: QST rate applied to invoice subtotals (default 0.09975)
- CHEERBASE_PLATFORM_TAKE_RATE: Platform fee charged to organizers (default 0.03)
- CHEERBASE_INVOICE_CENTURY: Century anchor for two-digit invoice years (default 2000)
- CHEERBASE_CORS_ORIGINS: Comma separated list of allowed origins (default "*")
- CHEERBASE_LOG_LEVEL: Logging level name (default INFO)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

ENV_PATH = Path(__file__).parent.parent / ".env"


@dataclass(frozen=True, slots=True)
class Settings:
    gst_rate: Decimal = Decimal("0.05")
    qst_rate: Decimal = Decimal("0.09975")
    platform_take_rate: Decimal = Decimal("0.03")
    invoice_century: int = 2000
    cors_origins: Tuple[str, ...] = ("*",)
    log_level: str = "INFO"


def _read_rate(environ: Mapping[str, str], name: str, default: Decimal) -> Decimal:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        rate = Decimal(raw.strip())
    except InvalidOperation:
        raise RuntimeError(f"Invalid environment variable: {name} must be a decimal rate, got {raw!r}")
    if not rate.is_finite() or rate < 0:
        raise RuntimeError(f"Invalid environment variable: {name} must be a non-negative rate, got {raw!r}")
    return rate


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise RuntimeError(f"Invalid environment variable: {name} must be an integer, got {raw!r}")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from `environ` (default: the process environment after
    loading `.env`).

    Raises:
        RuntimeError: If a variable is set to a malformed value.
    """

    if environ is None:
        load_dotenv(dotenv_path=ENV_PATH)
        environ = os.environ

    defaults = Settings()

    origins_raw = environ.get("CHEERBASE_CORS_ORIGINS")
    if origins_raw is None or not origins_raw.strip():
        cors_origins = defaults.cors_origins
    else:
        cors_origins = tuple(origin.strip() for origin in origins_raw.split(",") if origin.strip())

    log_level = (environ.get("CHEERBASE_LOG_LEVEL") or defaults.log_level).strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise RuntimeError(f"Invalid environment variable: CHEERBASE_LOG_LEVEL has unknown level {log_level!r}")

    return Settings(
        gst_rate=_read_rate(environ, "CHEERBASE_GST_RATE", defaults.gst_rate),
        qst_rate=_read_rate(environ, "CHEERBASE_QST_RATE", defaults.qst_rate),
        platform_take_rate=_read_rate(environ, "CHEERBASE_PLATFORM_TAKE_RATE", defaults.platform_take_rate),
        invoice_century=_read_int(environ, "CHEERBASE_INVOICE_CENTURY", defaults.invoice_century),
        cors_origins=cors_origins,
        log_level=log_level,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded once."""

    return load_settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = ["Settings", "configure_logging", "get_settings", "load_settings"]
