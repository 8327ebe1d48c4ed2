"""Cross section weighted interaction selection.

InteractionSelector collects every candidate channel of every generator for
an initial state, weighs each by its cross section and draws one. The
winner seeds a new EventRecord.

Cross sections are cache-aware through `channel_xsec`, the same rule the
driver's cross section sum uses: interpolate the cached spline when spline
mode is on and an entry exists, otherwise call the algorithm directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

import numpy as np

from nuevg.config.defaults import XSEC_REPORT_UNIT_CM2
from nuevg.config.enums import InteractionType, ProcessType
from nuevg.core import pdg
from nuevg.core.event_record import EventRecord
from nuevg.core.initial_state import InitialState
from nuevg.core.interaction import Interaction
from nuevg.generators.base import EventGenerator
from nuevg.generators.generator_list import EventGeneratorList
from nuevg.splines.spline_list import XSecSplineList

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InteractionFilter:
    """Restricts the channels the selector may pick.

    Each field is either None (no restriction) or the set of allowed values.

    Attributes:
        processes: Allowed process types
        currents: Allowed currents
        hit_pdgs: Allowed struck particle PDG codes

    """

    processes: Optional[FrozenSet[ProcessType]] = None
    currents: Optional[FrozenSet[InteractionType]] = None
    hit_pdgs: Optional[FrozenSet[int]] = None

    @classmethod
    def create(cls, processes=None, currents=None, hit_pdgs=None) -> "InteractionFilter":
        """Build a filter from any iterables (None keeps a field open)."""
        return cls(
            processes=None if processes is None else frozenset(ProcessType(p) for p in processes),
            currents=None if currents is None else frozenset(InteractionType(c) for c in currents),
            hit_pdgs=None if hit_pdgs is None else frozenset(int(h) for h in hit_pdgs),
        )

    def accepts(self, interaction: Interaction) -> bool:
        info = interaction.process_info
        if self.processes is not None and info.process not in self.processes:
            return False
        if self.currents is not None and info.current not in self.currents:
            return False
        if self.hit_pdgs is not None and interaction.hit_pdg not in self.hit_pdgs:
            return False
        return True

    def __str__(self) -> str:
        parts = []
        if self.processes is not None:
            parts.append("proc=" + ",".join(sorted(p.value for p in self.processes)))
        if self.currents is not None:
            parts.append("cur=" + ",".join(sorted(c.value for c in self.currents)))
        if self.hit_pdgs is not None:
            parts.append("hit=" + ",".join(pdg.name(h) for h in sorted(self.hit_pdgs)))
        return "InteractionFilter(" + ("; ".join(parts) if parts else "all") + ")"


def channel_xsec(
    generator: EventGenerator,
    interaction: Interaction,
    spline_list: Optional[XSecSplineList],
    use_splines: bool,
) -> Tuple[float, bool]:
    """Cross section of one channel at the interaction's probe energy.

    Returns:
        (cross section [cm2], whether it was interpolated)
    """
    alg = generator.xsec_algorithm
    if use_splines and spline_list is not None and spline_list.spline_exists(alg, interaction):
        spline = spline_list.get_spline(alg, interaction)
        return float(spline.evaluate(interaction.probe_energy)), True
    return float(alg.xsec(interaction)), False


class InteractionSelector:
    """Weighted random choice of one interaction channel.

    Attributes:
        generator_list: Event generators queried for candidates
        spline_list: Spline cache consulted in spline mode
        use_splines: Spline mode, set by the driver
        filter: Optional channel filter, set by the driver
        rng: Random generator used for the draw

    """

    def __init__(
        self,
        generator_list: EventGeneratorList,
        spline_list: Optional[XSecSplineList] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.generator_list = generator_list
        self.spline_list = spline_list
        self.rng = rng if rng is not None else np.random.default_rng()
        self.use_splines = False
        self.filter: Optional[InteractionFilter] = None

    def set_filter(self, interaction_filter: Optional[InteractionFilter]) -> None:
        self.filter = interaction_filter

    def candidates(self, init_state: InitialState) -> List[Tuple[EventGenerator, Interaction, float]]:
        """All filtered candidate channels with their cross sections."""
        result = []
        for generator in self.generator_list:
            interactions = generator.create_interaction_list(init_state)
            if not interactions:
                continue
            for interaction in interactions:
                interaction.set_probe_p4(init_state.probe_p4)
                if self.filter is not None and not self.filter.accepts(interaction):
                    continue
                xsec, interpolated = channel_xsec(
                    generator, interaction, self.spline_list, self.use_splines,
                )
                logger.debug(
                    "  %s: xsec = %.6g x 1e-38 cm2 (%s)",
                    interaction.key, xsec / XSEC_REPORT_UNIT_CM2,
                    "interpolated" if interpolated else "computed",
                )
                result.append((generator, interaction, xsec))
        return result

    def select_interaction(self, init_state: InitialState) -> Optional[EventRecord]:
        """Draw one interaction proportionally to its cross section.

        Args:
            init_state: Initial state with the probe 4-momentum bound

        Returns:
            A new EventRecord seeded with the chosen interaction, or None when
            there are no candidates or all cross sections are zero
        """
        candidates = self.candidates(init_state)
        if not candidates:
            logger.warning("No candidate interactions for %s", init_state)
            return None

        weights = np.array([xsec for _, _, xsec in candidates], dtype=float)
        # Negative or NaN cross sections carry no weight
        weights[~np.isfinite(weights) | (weights < 0.0)] = 0.0

        cumulative = np.cumsum(weights)
        total = cumulative[-1]
        if not total > 0.0:
            logger.warning(
                "Total cross section is zero for %s over %d candidates", init_state, len(candidates),
            )
            return None

        r = total * self.rng.random()
        index = min(int(np.searchsorted(cumulative, r, side="right")), len(candidates) - 1)

        _, interaction, xsec = candidates[index]
        logger.debug(
            "Selected %s (%d of %d), xsec = %.6g / %.6g x 1e-38 cm2",
            interaction.key, index + 1, len(candidates),
            xsec / XSEC_REPORT_UNIT_CM2, total / XSEC_REPORT_UNIT_CM2,
        )
        return EventRecord(interaction=interaction, xsec=float(weights[index]))
