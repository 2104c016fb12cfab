"""
Pytest configuration.

Adds the project root to the Python path so that tests can import the
domain, services, api and scripts packages without installing the project.
"""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from services.settings import get_settings  # noqa: E402

_SETTINGS_VARIABLES = (
    "CHEERBASE_GST_RATE",
    "CHEERBASE_QST_RATE",
    "CHEERBASE_PLATFORM_TAKE_RATE",
    "CHEERBASE_INVOICE_CENTURY",
    "CHEERBASE_CORS_ORIGINS",
    "CHEERBASE_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Run every test against default settings, whatever the shell exports."""

    for name in _SETTINGS_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("services.settings.ENV_PATH", project_root / "tests" / "missing.env")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
