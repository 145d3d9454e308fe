"""
Pytest configuration and shared fixtures for oracle engine tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

NOW = _common.NOW
make_market = _common.make_market
make_event_market = _common.make_event_market
make_spec = _common.make_spec
make_fetch_result = _common.make_fetch_result
make_corpus = _common.make_corpus
make_mock_http = _common.make_mock_http


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep developer API keys and ORACLE_* settings out of the tests."""
    for name in (
        "ANTHROPIC_API_KEY",
        "OPENAI_API_KEY",
        "GNEWS_API_KEY",
        "ALPHA_VANTAGE_API_KEY",
        "ORACLE_LLM_PROVIDER",
        "ORACLE_LLM_MODEL",
        "ORACLE_LLM_API_KEY",
        "ORACLE_EXECUTE_DETERMINISTIC",
        "ORACLE_MAX_WORKERS",
        "ORACLE_DEBUG",
        "ORACLE_HTTP_PROXY",
        "ORACLE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def market():
    """Provide a default crypto threshold Market for tests."""
    return make_market()


@pytest.fixture
def event_market():
    """Provide a default EVENT_RESOLVABLE-style Market for tests."""
    return make_event_market()


@pytest.fixture
def spec():
    """Provide a default CRYPTO_PRICE_SPOT DeterministicSpec."""
    return make_spec()


@pytest.fixture
def corpus():
    """Provide a one-source EvidenceCorpus."""
    return make_corpus()


@pytest.fixture
def frozen_clock():
    from agents.context import FrozenClock
    return FrozenClock(NOW)


@pytest.fixture
def mock_ctx():
    """
    Factory for a MockProvider-backed AgentContext frozen at NOW.

    Usage:
        ctx = mock_ctx(['{"category": "SUBJECTIVE"}'])
    """
    from agents.context import AgentContext

    def _make(llm_responses=None, http=None, config=None):
        return AgentContext.create_mock(
            llm_responses=llm_responses,
            http=http,
            config=config,
            now=NOW,
        )
    return _make


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
