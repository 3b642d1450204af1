"""Shared pytest configuration."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest


@pytest.fixture(autouse=True)
def close_figures():
    """Release figures created during a test."""
    yield
    plt.close("all")
