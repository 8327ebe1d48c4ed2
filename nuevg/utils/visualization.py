"""Simple visualization utilities for cross sections and splines."""

import numpy as np
import matplotlib.pyplot as plt

from nuevg.config.defaults import XSEC_REPORT_UNIT_CM2


def plot_xsec_sum(
    energies: np.ndarray,
    xsecs: np.ndarray,
    title: str = 'Total Cross Section',
    save_path: str = None,
    log_energy: bool = True,
    per_channel: dict = None,
):
    """Plot the cross section sum vs probe energy.

    Args:
        energies: Probe energies [GeV]
        xsecs: Cross section sum at each energy [cm2]
        title: Plot title
        save_path: If provided, save to file
        log_energy: Logarithmic energy axis
        per_channel: Optional {label: xsecs [cm2]} drawn as thin lines
    """
    energies = np.asarray(energies, dtype=float)
    xsecs = np.asarray(xsecs, dtype=float)

    fig, ax = plt.subplots(figsize=(10, 6))

    ax.plot(energies, xsecs / XSEC_REPORT_UNIT_CM2, linewidth=2, label='sum')
    if per_channel:
        for label, values in per_channel.items():
            ax.plot(energies, np.asarray(values) / XSEC_REPORT_UNIT_CM2, linewidth=1, label=label)
        ax.legend(fontsize=8)

    if log_energy:
        ax.set_xscale('log')
    ax.set_xlabel('E [GeV]')
    ax.set_ylabel('cross section [1e-38 cm2]')
    ax.set_title(title)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Saved: {save_path}")
    else:
        plt.show()

    plt.close()


def plot_spline(
    spline,
    n_points: int = 500,
    title: str = 'Cross Section Spline',
    save_path: str = None,
    log_energy: bool = True,
):
    """Plot a spline with its knots.

    Args:
        spline: nuevg.splines.Spline of a cross section [cm2] vs E [GeV]
        n_points: Number of evaluation points
        title: Plot title
        save_path: If provided, save to file
        log_energy: Logarithmic energy axis (requires x_min > 0)
    """
    if log_energy and spline.x_min > 0:
        grid = np.geomspace(spline.x_min, spline.x_max, n_points)
    else:
        log_energy = False
        grid = np.linspace(spline.x_min, spline.x_max, n_points)

    fig, ax = plt.subplots(figsize=(10, 6))

    ax.plot(grid, spline(grid) / XSEC_REPORT_UNIT_CM2, linewidth=2, label='spline')
    ax.plot(spline.knots, spline.values / XSEC_REPORT_UNIT_CM2, 'o', markersize=4, label='knots')

    if log_energy:
        ax.set_xscale('log')
    ax.set_xlabel('E [GeV]')
    ax.set_ylabel('cross section [1e-38 cm2]')
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Saved: {save_path}")
    else:
        plt.show()

    plt.close()
