"""Cross section spline cache (XSecSplineList).

Maps (cross section algorithm identity, interaction channel identity) to a
Spline of sigma(E). Entries are created lazily or in bulk and are reused by
every driver sharing the cache.

Runtime API:
    - spline_exists(alg, interaction) -> bool
    - get_spline(alg, interaction) -> Spline
    - create_spline(alg, interaction, n_knots, e_min, e_max) -> Spline
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional, Tuple

from nuevg.config.defaults import XSEC_REPORT_UNIT_CM2
from nuevg.core.kinematics import FourVector
from nuevg.splines.spline import Spline, knot_energies

logger = logging.getLogger(__name__)

SplineKey = Tuple[str, str]


class XSecSplineList:
    """Shared store of per-channel cross section splines.

    Keys are identity pairs (algorithm key, interaction key), never floating
    point kinematics. Creation is serialized by a lock so several drivers can
    populate the same cache; lookups are plain dictionary reads.

    Attributes:
        use_log_energy: Knots of newly created splines are spaced in log(E)
    """

    def __init__(self, use_log_energy: bool = False):
        self._splines: Dict[SplineKey, Spline] = {}
        self._lock = threading.Lock()
        self.use_log_energy = use_log_energy

    @staticmethod
    def build_key(alg, interaction) -> SplineKey:
        return (alg.id.key, interaction.key)

    def set_log_energy(self, on_off: bool) -> None:
        self.use_log_energy = on_off

    def spline_exists(self, alg, interaction) -> bool:
        return self.build_key(alg, interaction) in self._splines

    def get_spline(self, alg, interaction) -> Spline:
        """Get the spline of a channel.

        Raises:
            KeyError: If no spline was created for this (algorithm, channel)
        """
        key = self.build_key(alg, interaction)
        if key not in self._splines:
            raise KeyError(f"No cross section spline for {key[0]} / {key[1]}")
        return self._splines[key]

    def create_spline(
        self, alg, interaction, n_knots: int, e_min: float, e_max: float,
    ) -> Spline:
        """Sample alg.xsec() for the channel and store the resulting spline.

        Callers check spline_exists() first; an existing entry is replaced.

        Args:
            alg: Cross section algorithm (deterministic xsec(interaction))
            interaction: Channel; its probe 4-momentum is rebound per knot
            n_knots: Number of knots (>= 2)
            e_min, e_max: Energy range [GeV], 0 < e_min < e_max

        Returns:
            The stored Spline

        Raises:
            ValueError: For fewer than 2 knots or an invalid energy range
        """
        if n_knots < 2:
            raise ValueError(f"n_knots must be >= 2, got {n_knots}")
        if not (0.0 < e_min < e_max):
            raise ValueError(f"Need 0 < e_min < e_max, got e_min={e_min}, e_max={e_max}")

        key = self.build_key(alg, interaction)
        energies = knot_energies(n_knots, e_min, e_max, self.use_log_energy)

        xsecs = []
        for energy in energies:
            interaction.set_probe_p4(FourVector(0.0, 0.0, float(energy), float(energy)))
            xsecs.append(alg.xsec(interaction))

        spline = Spline(energies, xsecs)

        with self._lock:
            self._splines[key] = spline

        logger.debug(
            "Created spline for %s / %s: %d knots in E = [%g, %g] GeV (%s)",
            key[0], key[1], n_knots, e_min, e_max,
            "log" if self.use_log_energy else "linear",
        )
        return spline

    def keys(self) -> List[SplineKey]:
        return list(self._splines.keys())

    def clear(self) -> None:
        with self._lock:
            self._splines.clear()

    def __len__(self) -> int:
        return len(self._splines)

    def __contains__(self, key: SplineKey) -> bool:
        return key in self._splines

    def summary(self) -> str:
        """Listing of all cached splines."""
        lines = [f"XSecSplineList: {len(self._splines)} spline(s), log-E knots: {self.use_log_energy}"]
        for (alg_key, int_key), spline in sorted(self._splines.items()):
            peak = float(spline.values.max()) / XSEC_REPORT_UNIT_CM2
            lines.append(
                f"  [{alg_key}] {int_key}: E = [{spline.x_min:.4g}, {spline.x_max:.4g}] GeV, "
                f"{len(spline)} knots, max = {peak:.4g} x 1e-38 cm2"
            )
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.summary()


# Global spline list instance
_global_spline_list: Optional[XSecSplineList] = None


def get_global_spline_list() -> XSecSplineList:
    """Get or create the process-wide spline list.

    Returns:
        Global XSecSplineList instance

    """
    global _global_spline_list
    if _global_spline_list is None:
        _global_spline_list = XSecSplineList()
    return _global_spline_list


def reset_global_spline_list() -> None:
    """Drop the process-wide spline list (end of job, or between tests)."""
    global _global_spline_list
    _global_spline_list = None
