"""Root pytest fixtures for iterpipes tests."""

from __future__ import annotations

import pytest

from iterpipes.config import reset_config
from iterpipes.telemetry.logger import PipeLogger, clear_log_context


@pytest.fixture(autouse=True)
def _isolated_config():
    """Give every test a fresh configuration and logging setup."""
    reset_config()
    clear_log_context()
    yield
    reset_config()
    clear_log_context()
    PipeLogger.configure()
