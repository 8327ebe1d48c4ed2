"""Cylindrical beam flux driver.

Generates neutrinos travelling along a fixed direction, with vertices spread
over a transverse disk centred on the beam spot. Energies are drawn from the
sum of per-species histogram spectra; the species is then chosen according
to each spectrum's content at the drawn energy.

Pull interface:
    flux.generate_next()
    flux.pdg_code, flux.momentum, flux.position
"""

from __future__ import annotations

import logging
import math
import warnings
from typing import Callable, Dict, List, Optional

import numpy as np
from scipy.integrate import cumulative_trapezoid

from nuevg.core import pdg
from nuevg.core.constants import TWO_PI
from nuevg.core.kinematics import FourVector, orthonormal_frame

logger = logging.getLogger(__name__)

# Points of the radial density grid used for inverse CDF sampling
RADIAL_GRID_POINTS = 1001


class CylindricalBeamFlux:
    """Histogram-spectrum neutrino beam with a cylindrical profile.

    Attributes:
        direction: Unit vector of the beam direction
        beam_spot: Beam centre [same units as the position output]
        transverse_radius: Radius of the beam disk
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.direction = np.array([0.0, 0.0, 1.0])
        self.beam_spot = np.zeros(3)
        self.transverse_radius = 0.0

        self._pdg_codes: List[int] = []
        self._spectra: Dict[int, np.ndarray] = {}
        self._bin_edges: Optional[np.ndarray] = None
        self._total: Optional[np.ndarray] = None
        self._max_energy = 0.0

        self._radial_dependence: Callable[[float], float] = lambda r: r
        self._radial_grid: Optional[np.ndarray] = None
        self._radial_cdf: Optional[np.ndarray] = None

        self.reset_selection()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_direction(self, direction) -> None:
        direction = np.asarray(direction, dtype=float)
        norm = float(np.linalg.norm(direction))
        if direction.shape != (3,) or norm == 0.0:
            raise ValueError(f"Beam direction must be a non-zero 3-vector, got {direction}")
        self.direction = direction / norm

    def set_beam_spot(self, spot) -> None:
        spot = np.asarray(spot, dtype=float)
        if spot.shape != (3,):
            raise ValueError(f"Beam spot must be a 3-vector, got shape {spot.shape}")
        self.beam_spot = spot

    def set_transverse_radius(self, radius: float) -> None:
        if radius < 0:
            raise ValueError(f"Transverse radius must be >= 0, got {radius}")
        logger.info("Setting R[transverse] = %g", radius)
        self.transverse_radius = float(radius)
        self._radial_cdf = None

    def set_radial_dependence(self, density: Callable[[float], float]) -> None:
        """Radial density of vertices in [0, R]; the default r -> r is uniform over the disk."""
        self._radial_dependence = density
        self._radial_cdf = None

    def add_energy_spectrum(self, pdg_code: int, bin_edges, contents) -> bool:
        """Add the energy spectrum of one species.

        All spectra must share the same binning. A species that already has
        a spectrum is ignored with a warning.

        Args:
            pdg_code: Neutrino species
            bin_edges: Histogram bin edges [GeV], strictly increasing
            contents: Bin contents (non-negative), len(bin_edges) - 1 entries

        Returns:
            True if the spectrum was added

        Raises:
            ValueError: For malformed histograms or a binning mismatch
        """
        if pdg_code in self._spectra:
            message = f"Spectrum for {pdg.name(pdg_code)} already added; ignoring the new one"
            logger.warning(message)
            warnings.warn(message, UserWarning, stacklevel=2)
            return False

        edges = np.asarray(bin_edges, dtype=float)
        values = np.asarray(contents, dtype=float)

        if edges.ndim != 1 or values.ndim != 1 or len(edges) != len(values) + 1:
            raise ValueError(
                f"Need len(bin_edges) == len(contents) + 1, got {len(edges)} and {len(values)}",
            )
        if len(values) == 0:
            raise ValueError("Spectrum must have at least one bin")
        if not np.all(np.diff(edges) > 0):
            raise ValueError("bin_edges must be strictly increasing")
        if edges[0] < 0:
            raise ValueError(f"Energies must be >= 0, got lower edge {edges[0]}")
        if np.any(values < 0) or not np.all(np.isfinite(values)):
            raise ValueError("Bin contents must be finite and non-negative")

        if self._bin_edges is not None and not np.array_equal(edges, self._bin_edges):
            raise ValueError("All energy spectra must share the same binning")

        self._pdg_codes.append(pdg_code)
        self._spectra[pdg_code] = values
        self._bin_edges = edges
        self._max_energy = max(self._max_energy, float(edges[-1]))

        logger.info("Computing combined flux")
        self._total = np.sum([self._spectra[code] for code in self._pdg_codes], axis=0)
        return True

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def reset_selection(self) -> None:
        self._pdg_code = 0
        self._momentum = FourVector(0.0, 0.0, 0.0, 0.0)
        self._position = FourVector(0.0, 0.0, 0.0, 0.0)

    def generate_next(self) -> bool:
        """Generate the next flux neutrino.

        Returns:
            True (a neutrino is always generated once spectra are set)

        Raises:
            ValueError: If no spectrum was added or the combined spectrum is empty
        """
        self.reset_selection()

        if self._total is None:
            raise ValueError("No energy spectrum added")

        energy, bin_index = self._sample_energy()
        self._pdg_code = self._select_species(bin_index)
        self._momentum = FourVector(*(energy * self.direction), energy)

        psi = TWO_PI * self.rng.random()
        radius = self._sample_radius()
        u, v, _ = orthonormal_frame(self.direction)
        vertex = self.beam_spot + radius * (math.cos(psi) * u + math.sin(psi) * v)
        self._position = FourVector(float(vertex[0]), float(vertex[1]), float(vertex[2]), 0.0)

        return True

    def _sample_energy(self):
        cumulative = np.cumsum(self._total)
        total = cumulative[-1]
        if not total > 0.0:
            raise ValueError("Combined energy spectrum is empty")

        index = int(np.searchsorted(cumulative, total * self.rng.random(), side="right"))
        index = min(index, len(cumulative) - 1)
        low, high = self._bin_edges[index], self._bin_edges[index + 1]
        return float(low + (high - low) * self.rng.random()), index

    def _select_species(self, bin_index: int) -> int:
        fractions = np.cumsum([self._spectra[code][bin_index] for code in self._pdg_codes])
        for code, fraction in zip(self._pdg_codes, fractions):
            logger.debug("SUM-FRACTION(%s) = %g", pdg.name(code), fraction)

        r = fractions[-1] * self.rng.random()
        index = min(int(np.searchsorted(fractions, r, side="right")), len(fractions) - 1)
        return self._pdg_codes[index]

    def _sample_radius(self) -> float:
        if self.transverse_radius == 0.0:
            return 0.0

        if self._radial_cdf is None:
            grid = np.linspace(0.0, self.transverse_radius, RADIAL_GRID_POINTS)
            density = np.array([float(self._radial_dependence(r)) for r in grid])
            if np.any(density < 0) or not np.all(np.isfinite(density)):
                raise ValueError("Radial dependence must be finite and non-negative on [0, R]")
            cdf = cumulative_trapezoid(density, grid, initial=0.0)
            if not cdf[-1] > 0.0:
                raise ValueError("Radial dependence integrates to zero on [0, R]")
            self._radial_grid = grid
            self._radial_cdf = cdf / cdf[-1]

        return float(np.interp(self.rng.random(), self._radial_cdf, self._radial_grid))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def pdg_code(self) -> int:
        return self._pdg_code

    @property
    def momentum(self) -> FourVector:
        return self._momentum

    @property
    def position(self) -> FourVector:
        return self._position

    @property
    def flux_particles(self) -> List[int]:
        return list(self._pdg_codes)

    @property
    def max_energy(self) -> float:
        return self._max_energy
