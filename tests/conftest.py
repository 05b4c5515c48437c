"""Shared test fixtures.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import logging
import os
from collections.abc import Iterator

import pytest
import structlog
from hypothesis import Phase, Verbosity, settings

from splunkacs.client import AcsClient
from splunkacs.core.config import PropagationSettings, RetryBudgetSettings

# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# ACS fixtures
# =============================================================================

DEPLOYMENT = "test-stack"
BASE_URL = f"https://admin.splunk.com/{DEPLOYMENT}/adminconfig/v2"


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
def client() -> Iterator[AcsClient]:
    """Client against the default ACS host; mock it with respx."""
    acs = AcsClient(DEPLOYMENT, "test-jwt")
    yield acs
    acs.close()


@pytest.fixture
def fast_propagation() -> PropagationSettings:
    """Small budgets with no delay so waits finish instantly."""
    return PropagationSettings(
        hec_token_create=RetryBudgetSettings(max_attempts=3, interval_seconds=0),
        hec_token_update=RetryBudgetSettings(max_attempts=3, interval_seconds=0),
        index_create=RetryBudgetSettings(max_attempts=3, interval_seconds=0),
        index_update=RetryBudgetSettings(max_attempts=3, interval_seconds=0),
    )


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo configure_logging() so handlers never outlive a captured stream."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real credentials and overrides out of tests."""
    for name in list(os.environ):
        if name.startswith(("SPLUNKACS_", "SPLUNK_")):
            monkeypatch.delenv(name, raising=False)
