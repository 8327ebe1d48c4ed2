"""Interpolating curve over energy.

A natural cubic spline through (E, sigma) knots, used both for per-channel
cross section cache entries and for the driver's cross section sum.
"""

from __future__ import annotations

from typing import Union

import numpy as np
from scipy.interpolate import CubicSpline

ArrayLike = Union[float, np.ndarray]


class Spline:
    """Natural cubic spline with edge clamping.

    Evaluation outside [x_min, x_max] returns the edge value. With
    `non_negative` (the default, cross sections) negative overshoots between
    knots are clamped to zero.

    Attributes:
        knots: Knot abscissae (strictly increasing)
        values: Knot ordinates
    """

    def __init__(self, knots, values, non_negative: bool = True):
        """Initialize spline.

        Args:
            knots: Knot abscissae (any order; sorted internally)
            values: Knot ordinates
            non_negative: Clamp interpolated values at zero

        Raises:
            ValueError: If arrays have mismatched shapes, fewer than 2 knots,
                duplicated abscissae or non-finite entries.
        """
        knots = np.asarray(knots, dtype=float)
        values = np.asarray(values, dtype=float)

        if knots.ndim != 1 or values.ndim != 1:
            raise ValueError(
                f"knots and values must be 1D arrays, got shapes {knots.shape} and {values.shape}"
            )

        if len(knots) != len(values):
            raise ValueError(
                f"knots and values must have same length: {len(knots)} != {len(values)}"
            )

        if len(knots) < 2:
            raise ValueError(f"Spline needs at least 2 knots, got {len(knots)}")

        if not (np.all(np.isfinite(knots)) and np.all(np.isfinite(values))):
            raise ValueError("knots and values must be finite")

        # Sort by abscissa for interpolation
        sort_idx = np.argsort(knots)
        knots = knots[sort_idx]
        values = values[sort_idx]

        if not np.all(np.diff(knots) > 0):
            raise ValueError("knots must be strictly monotonically increasing (duplicates found)")

        self.knots = knots
        self.values = values
        self.non_negative = non_negative
        self._curve = CubicSpline(knots, values, bc_type="natural", extrapolate=False)

    @property
    def x_min(self) -> float:
        return float(self.knots[0])

    @property
    def x_max(self) -> float:
        return float(self.knots[-1])

    def evaluate(self, x: ArrayLike) -> ArrayLike:
        """Interpolated value(s) at x, clamped to the knot range.

        Args:
            x: Scalar or array abscissa

        Returns:
            float for scalar input, ndarray otherwise
        """
        x_arr = np.clip(np.asarray(x, dtype=float), self.knots[0], self.knots[-1])
        y = self._curve(x_arr)
        if self.non_negative:
            y = np.maximum(y, 0.0)
        if np.ndim(y) == 0:
            return float(y)
        return y

    def __call__(self, x: ArrayLike) -> ArrayLike:
        return self.evaluate(x)

    def __len__(self) -> int:
        """Return number of knots."""
        return len(self.knots)

    def __repr__(self) -> str:
        return (
            f"Spline(range=[{self.x_min:.4g}, {self.x_max:.4g}], "
            f"num_knots={len(self.knots)})"
        )


def knot_energies(n_knots: int, e_min: float, e_max: float, log_spacing: bool) -> np.ndarray:
    """Knot placement between e_min and e_max (both included).

    Args:
        n_knots: Number of knots (>= 2)
        e_min: Lower bound, must be > 0 for log spacing
        e_max: Upper bound
        log_spacing: Equal steps in log(E) instead of E

    Returns:
        Array of n_knots energies
    """
    if log_spacing:
        energies = np.exp(np.linspace(np.log(e_min), np.log(e_max), n_knots))
        # Pin the ends exactly; exp(log(x)) is not always x
        energies[0] = e_min
        energies[-1] = e_max
        return energies
    return np.linspace(e_min, e_max, n_knots)
