"""Shared fixtures for ldsi tests."""

import pytest

import ldsi


@pytest.fixture(scope="session")
def scorer():
    """Load the default scorer once for all tests."""
    return ldsi.load()


@pytest.fixture
def paragraph():
    return (
        "Gravity bends the path of light around massive stars. Astronomers "
        "measure this bending to weigh distant galaxies, and the same effect "
        "lets them see objects hidden behind dense clusters of matter."
    )
