import numpy as np
from scipy.interpolate import CubicSpline
from typing import Protocol


class Path(Protocol):
    """Reference path parameterized by arc length s."""

    def position(self, s: float) -> np.ndarray: ...

    def first_derivative(self, s: float) -> np.ndarray: ...

    def second_derivative(self, s: float) -> np.ndarray: ...


class ArcLengthSpline:
    """
    Cubic spline through center-line points, parameterized by the cumulative
    chord length between points as an approximation of arc length.

    Closed tracks use a periodic spline and wrap s into [0, length).
    Open tracks leave out-of-range s to the spline's polynomial extrapolation.
    """

    def __init__(self, points, closed=False):
        points = np.asarray(points, dtype=float)
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError(f"Track points must have shape (M, 2), got {points.shape}")

        # drop repeated points, they would give zero-length segments
        keep = np.ones(len(points), dtype=bool)
        keep[1:] = np.linalg.norm(np.diff(points, axis=0), axis=1) > 1e-12
        points = points[keep]

        if closed:
            if np.linalg.norm(points[-1] - points[0]) > 1e-9:
                points = np.vstack([points, points[0]])
            else:
                points[-1] = points[0]

        if len(points) < (4 if closed else 2):
            raise ValueError("At least 2 distinct points required for an open track, 3 for a closed one")

        segment = np.linalg.norm(np.diff(points, axis=0), axis=1)
        s_grid = np.concatenate([[0.0], np.cumsum(segment)])

        self.closed = closed
        self.length = float(s_grid[-1])
        self.points = points
        self._spline = CubicSpline(s_grid, points, axis=0,
                                   bc_type="periodic" if closed else "not-a-knot")

    def _wrap(self, s):
        if self.closed:
            return np.mod(s, self.length)
        return s

    def position(self, s):
        return self._spline(self._wrap(s))

    def first_derivative(self, s):
        return self._spline(self._wrap(s), 1)

    def second_derivative(self, s):
        return self._spline(self._wrap(s), 2)


def circular_track(radius=8.0, width=2.0, points=300):
    theta = np.linspace(0, 2*np.pi, points)
    center = np.vstack([radius*np.cos(theta), radius*np.sin(theta)]).T
    return center, width


def sinusoidal_track(length=50.0, amplitude=4.0, width=3.0, points=200):
    """
    Create a sinusoidal two-lane road

    Args:
        length: Total length of the road (meters)
        amplitude: Amplitude of the sinusoid (meters)
        width: Width of the road (meters)
        points: Number of points along the centerline

    Returns:
        center: Road centerline points [N, 2]
        width: Road width
    """
    x = np.linspace(0, length, points)
    y = amplitude * np.sin(2 * np.pi * x / length)
    center = np.vstack([x, y]).T
    return center, width


def straight_track(length=50.0, heading=0.0, width=3.0, points=50):
    s = np.linspace(0, length, points)
    center = np.vstack([s*np.cos(heading), s*np.sin(heading)]).T
    return center, width
