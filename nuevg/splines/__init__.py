"""Cross section splines.

This module provides the interpolating curve used for cross sections and the
shared per-channel spline cache.
"""

from nuevg.splines.spline import Spline, knot_energies
from nuevg.splines.spline_list import (
    XSecSplineList,
    get_global_spline_list,
    reset_global_spline_list,
)

__all__ = [
    'Spline',
    'knot_energies',
    'XSecSplineList',
    'get_global_spline_list',
    'reset_global_spline_list',
]
