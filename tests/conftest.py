"""Pytest configuration for repository-relative imports and shared data."""

import os
import sys

import matplotlib
import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

matplotlib.use("Agg")

from helpers import GOOD_CT, NOISY_CT, QUANTITIES  # noqa: E402


@pytest.fixture
def quantities():
    return list(QUANTITIES)


@pytest.fixture
def good_ct():
    return np.array(GOOD_CT, dtype=float)


@pytest.fixture
def noisy_ct():
    return np.array(NOISY_CT, dtype=float)
