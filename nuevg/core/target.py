"""Target description: nucleus or free nucleon, with an optional struck particle."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from nuevg.core import pdg
from nuevg.core.constants import (
    DEFAULT_FERMI_MOMENTUM,
    DEUTERON_FERMI_MOMENTUM,
    FERMI_MOMENTUM_BY_Z,
)


@dataclass(frozen=True)
class Target:
    """Scattering target.

    Attributes:
        Z: Number of protons
        A: Mass number
        hit_pdg: PDG code of the struck particle (nucleon or atomic electron),
            None while the target is only a nucleus description

    """

    Z: int
    A: int
    hit_pdg: Optional[int] = None

    def is_free_nucleon(self) -> bool:
        return self.A == 1 and self.Z in (0, 1)

    def is_valid_nucleus(self) -> bool:
        return self.A > 1 and 0 < self.Z <= self.A

    def is_valid(self) -> bool:
        return self.is_valid_nucleus() or self.is_free_nucleon()

    @property
    def n_protons(self) -> int:
        return self.Z

    @property
    def n_neutrons(self) -> int:
        return self.A - self.Z

    @property
    def pdg_code(self) -> int:
        if self.is_free_nucleon():
            return pdg.PROTON if self.Z == 1 else pdg.NEUTRON
        return pdg.ion_code(self.Z, self.A)

    @property
    def fermi_momentum(self) -> float:
        """Fermi momentum [GeV]; zero for a free nucleon."""
        if not self.is_valid_nucleus():
            return 0.0
        if self.A == 2:
            return DEUTERON_FERMI_MOMENTUM
        return FERMI_MOMENTUM_BY_Z.get(self.Z, DEFAULT_FERMI_MOMENTUM)

    def n_hit(self, hit_pdg: int) -> int:
        """Number of target constituents of the given kind."""
        if hit_pdg == pdg.PROTON:
            return self.n_protons
        if hit_pdg == pdg.NEUTRON:
            return self.n_neutrons
        if hit_pdg == pdg.ELECTRON:
            return self.Z
        return 0

    def with_hit(self, hit_pdg: Optional[int]) -> "Target":
        return replace(self, hit_pdg=hit_pdg)

    def __str__(self) -> str:
        text = pdg.name(self.pdg_code)
        if self.hit_pdg is not None:
            text += f"[{pdg.name(self.hit_pdg)}]"
        return text
