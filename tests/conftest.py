# tests/conftest.py
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

from tests.fixtures import NOW, ArchiveBuilder
from trashcan.core.clock import MockClock
from trashcan.core.retry import RetryConfig, RetryManager
from trashcan.core.store import ArchiveDB
from trashcan.core.transaction import TransactionHelper


@pytest.fixture
def db() -> Iterator[ArchiveDB]:
    """Fresh in-memory node store."""
    database = ArchiveDB.in_memory()
    yield database
    database.close()


@pytest.fixture
def archive(db: ArchiveDB) -> ArchiveBuilder:
    """Archive store with an empty trashcan."""
    return ArchiveBuilder(db)


@pytest.fixture
def clock() -> MockClock:
    return MockClock(NOW)


@pytest.fixture
def fast_retry() -> RetryManager:
    """Three attempts, no waiting between them."""
    return RetryManager(
        RetryConfig(max_attempts=3, base_delay=0.01, max_delay=0.01, jitter=0.0),
        sleep=lambda _seconds: None,
    )


@pytest.fixture
def helper(db: ArchiveDB, fast_retry: RetryManager) -> TransactionHelper:
    return TransactionHelper(db, fast_retry)


@pytest.fixture
def reset_logging() -> Iterator[None]:
    """Restore structlog and root logger state after a test configures logging."""
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    yield
    structlog.reset_defaults()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
