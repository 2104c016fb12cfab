"""
Tests for `services/settings.py`.

Covers:
- An empty environment yields the defaults.
- Variables override defaults; malformed values raise RuntimeError naming the variable.
- get_settings reads the process environment and a .env file.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from services import settings as settings_module
from services.settings import Settings, get_settings, load_settings


def test_defaults() -> None:
    settings = load_settings({})

    assert settings == Settings()
    assert settings.gst_rate == Decimal("0.05")
    assert settings.qst_rate == Decimal("0.09975")
    assert settings.platform_take_rate == Decimal("0.03")
    assert settings.invoice_century == 2000
    assert settings.cors_origins == ("*",)
    assert settings.log_level == "INFO"


def test_overrides() -> None:
    settings = load_settings({
        "CHEERBASE_GST_RATE": "0.13",
        "CHEERBASE_QST_RATE": "0",
        "CHEERBASE_PLATFORM_TAKE_RATE": " 0.025 ",
        "CHEERBASE_INVOICE_CENTURY": "2100",
        "CHEERBASE_CORS_ORIGINS": "https://cheerbase.example, http://localhost:3000,",
        "CHEERBASE_LOG_LEVEL": "debug",
    })

    assert settings.gst_rate == Decimal("0.13")
    assert settings.qst_rate == Decimal("0")
    assert settings.platform_take_rate == Decimal("0.025")
    assert settings.invoice_century == 2100
    assert settings.cors_origins == ("https://cheerbase.example", "http://localhost:3000")
    assert settings.log_level == "DEBUG"


def test_blank_values_use_defaults() -> None:
    settings = load_settings({"CHEERBASE_GST_RATE": "  ", "CHEERBASE_INVOICE_CENTURY": ""})

    assert settings.gst_rate == Decimal("0.05")
    assert settings.invoice_century == 2000


@pytest.mark.parametrize(
    "name, value",
    [
        ("CHEERBASE_GST_RATE", "five percent"),
        ("CHEERBASE_QST_RATE", "-0.1"),
        ("CHEERBASE_PLATFORM_TAKE_RATE", "NaN"),
        ("CHEERBASE_INVOICE_CENTURY", "20th"),
        ("CHEERBASE_LOG_LEVEL", "LOUD"),
    ],
)
def test_malformed_values_raise(name: str, value: str) -> None:
    with pytest.raises(RuntimeError, match=name):
        load_settings({name: value})


def test_get_settings_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHEERBASE_INVOICE_CENTURY", "1900")
    get_settings.cache_clear()

    assert get_settings().invoice_century == 1900
    assert get_settings() is get_settings()


def test_get_settings_reads_dotenv_file(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("CHEERBASE_GST_RATE=0.07\n")
    monkeypatch.setattr(settings_module, "ENV_PATH", env_file)
    # Record the variable as unset so the value loaded from .env is removed afterwards.
    monkeypatch.setenv("CHEERBASE_GST_RATE", "0")
    monkeypatch.delenv("CHEERBASE_GST_RATE")
    get_settings.cache_clear()

    assert get_settings().gst_rate == Decimal("0.07")
