# tests/conftest.py
"""
Shared fixtures & path setup so `import mpcc_cost` works even when the repo
isn't installed as a package.
"""
import sys
import pathlib

import numpy as np
import pytest

# project root on sys.path ---------------------------------------------------
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class StraightPath:
    """Analytic straight line through the origin with constant heading."""

    def __init__(self, heading=0.0):
        self.direction = np.array([np.cos(heading), np.sin(heading)])

    def position(self, s):
        return s * self.direction

    def first_derivative(self, s):
        return self.direction.copy()

    def second_derivative(self, s):
        return np.zeros(2)


class CirclePath:
    """
    Analytic counter-clockwise circle around the origin, angle = rate * s.

    The default rate 1/radius makes s the arc length.
    """

    def __init__(self, radius=1.0, rate=None):
        self.radius = radius
        self.rate = 1.0 / radius if rate is None else rate

    def position(self, s):
        a = self.rate * s
        return self.radius * np.array([np.cos(a), np.sin(a)])

    def first_derivative(self, s):
        a = self.rate * s
        return self.radius * self.rate * np.array([-np.sin(a), np.cos(a)])

    def second_derivative(self, s):
        a = self.rate * s
        return -self.radius * self.rate**2 * np.array([np.cos(a), np.sin(a)])


# |first derivative| == |second derivative| == 2: the guarded curvature
# formula gives the exact heading rate and clears the threshold
EXACT_CIRCLE = CirclePath(radius=2.0, rate=1.0)


# common fixtures -----------------------------------------------------------
@pytest.fixture(scope="session")
def cost_params():
    from mpcc_cost.config.params import COST
    return dict(COST)


@pytest.fixture
def unit_params(cost_params):
    """Every weight set to one, handy for checking structure by hand."""
    return {name: 1.0 for name in cost_params}


@pytest.fixture
def straight_path():
    return StraightPath()
