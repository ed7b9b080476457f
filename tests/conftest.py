"""Shared pytest fixtures and configuration.

This file is automatically loaded by pytest and provides fixtures
accessible to all tests.
"""

import os

import pytest
from hypothesis import HealthCheck, settings

from avb.model import Slot
from avb.session import OutputConfig, Session
from tests.helpers import make_slot

# =============================================================================
# Hypothesis Configuration
# =============================================================================

# Define profiles for different environments
settings.register_profile(
    "ci",
    max_examples=50,  # Faster for CI
    deadline=None,  # No deadlines for slow tests
    suppress_health_check=[HealthCheck.too_slow],
)

settings.register_profile(
    "dev",
    max_examples=25,  # Fast for local development
    deadline=None,
)

settings.register_profile(
    "thorough",
    max_examples=1000,  # Comprehensive for nightly runs
    deadline=None,
)

# Load profile based on environment variable
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))

# =============================================================================
# Slot Fixtures
# =============================================================================


@pytest.fixture
def ab_slots() -> tuple[Slot, ...]:
    """A:[a0,a1], B:[b0] - the two-combination example."""
    return (
        make_slot("a", "A", "a0", "a1"),
        make_slot("b", "B", "b0"),
    )


@pytest.fixture
def ad_slots() -> tuple[Slot, ...]:
    """Three slots, 2 x 3 x 2 = 12 combinations."""
    return (
        make_slot("hook", "Hook", "Tired of your job?", "Dreading Mondays?"),
        make_slot("body", "Body", "I left nursing.", "I rebuilt my life.", "I found my fit."),
        make_slot("cta", "CTA", "DM me INFO.", "Link in bio."),
    )


@pytest.fixture
def session(ad_slots) -> Session:
    """Session over ``ad_slots`` with default output config."""
    return Session(slots=ad_slots, config=OutputConfig())
