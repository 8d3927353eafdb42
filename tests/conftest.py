# tests/conftest.py
"""Shared test fixtures.

Table Fixtures:
- anbn_table: a^n b^n with an implicit stack-bottom marker
- zeros_ones_table: 0^n 1^n whose first rule pushes its own bottom marker
- anbn_engine: fresh PdaEngine over anbn_table

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

from pdasim.core.table import TransitionTable
from pdasim.engine.processor import PdaEngine
from tests.fixtures.tables import ANBN_TABLE, ZEROS_ONES_TABLE

# =============================================================================
# Hypothesis profiles
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
# Tables and engines
# =============================================================================


@pytest.fixture
def anbn_table() -> TransitionTable:
    return TransitionTable.from_mapping(ANBN_TABLE)


@pytest.fixture
def zeros_ones_table() -> TransitionTable:
    return TransitionTable.from_mapping(ZEROS_ONES_TABLE)


@pytest.fixture
def anbn_engine(anbn_table: TransitionTable) -> PdaEngine:
    return PdaEngine(anbn_table)


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo any logging configuration a test applied."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)
