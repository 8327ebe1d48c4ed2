"""Utility functions."""

from nuevg.utils.visualization import plot_spline, plot_xsec_sum

__all__ = [
    "plot_xsec_sum",
    "plot_spline",
]
