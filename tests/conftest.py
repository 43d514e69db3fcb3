"""Shared pytest fixtures."""

import pytest

from pathforge import sampling


@pytest.fixture(autouse=True)
def seeded_rng():
    """Give every test the same random stream on the main thread."""
    return sampling.seed(1234)
