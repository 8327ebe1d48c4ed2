"""Tests for the plotting helpers."""

import matplotlib

matplotlib.use("Agg")

import numpy as np

from nuevg.splines import Spline
from nuevg.utils import plot_spline, plot_xsec_sum


class TestPlotXSecSum:
    """Tests for plot_xsec_sum()."""

    def test_saves_figure(self, tmp_path, capsys):
        energies = np.geomspace(0.1, 100.0, 20)
        path = tmp_path / "sum.png"
        plot_xsec_sum(energies, 1.0e-38 * energies, save_path=str(path))
        assert path.exists()
        assert "Saved:" in capsys.readouterr().out

    def test_per_channel_linear_axis(self, tmp_path):
        energies = np.linspace(0.5, 10.0, 10)
        per_channel = {"QES": 0.2e-38 * energies, "DIS": 0.8e-38 * energies}
        path = tmp_path / "channels.png"
        plot_xsec_sum(energies, 1.0e-38 * energies, save_path=str(path), log_energy=False, per_channel=per_channel)
        assert path.exists()


class TestPlotSpline:
    """Tests for plot_spline()."""

    def test_saves_figure(self, tmp_path):
        knots = np.geomspace(0.1, 10.0, 8)
        path = tmp_path / "spline.png"
        plot_spline(Spline(knots, 1.0e-38 * knots), n_points=50, save_path=str(path))
        assert path.exists()

    def test_zero_lower_knot_uses_linear_axis(self, tmp_path):
        knots = np.linspace(0.0, 10.0, 6)
        path = tmp_path / "spline_linear.png"
        plot_spline(Spline(knots, 1.0e-38 * knots), save_path=str(path))
        assert path.exists()
