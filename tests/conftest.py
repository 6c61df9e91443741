# =============================================================================
# conftest.py - Shared Test Fixtures
# =============================================================================

import pytest

from marie_asm.config import set_default_config


ENV_VARS = ("MARIEASM_ALLOW_OVERLAP", "MARIEASM_OUTPUT_FORMAT", "MARIEASM_LOG_LEVEL")


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Run every test with default configuration and no MARIEASM_* variables."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)
