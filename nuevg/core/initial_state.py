"""Initial state of a neutrino interaction: probe species, target and probe 4-momentum."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from nuevg.core import pdg
from nuevg.core.kinematics import FourVector
from nuevg.core.target import Target


@dataclass(frozen=True)
class InitialState:
    """Probe species + target + probe 4-momentum.

    Immutable; the probe 4-momentum is rebound per generation call through
    `with_probe_p4`, which returns a new instance.

    Attributes:
        probe_pdg: PDG code of the incoming (anti)neutrino
        target: Target nucleus or free nucleon
        probe_p4: Probe 4-momentum in the lab frame [GeV]

    """

    probe_pdg: int
    target: Target
    probe_p4: FourVector = field(default_factory=lambda: FourVector(0.0, 0.0, 0.0, 0.0))

    def is_valid(self) -> bool:
        return pdg.is_neutrino_or_anti_neutrino(self.probe_pdg) and self.target.is_valid()

    @property
    def probe_energy(self) -> float:
        return self.probe_p4.energy

    def with_probe_p4(self, p4: FourVector) -> "InitialState":
        return replace(self, probe_p4=p4)

    def with_hit(self, hit_pdg) -> "InitialState":
        return replace(self, target=self.target.with_hit(hit_pdg))

    def key(self) -> str:
        """Identity string; kinematics are deliberately excluded."""
        text = f"nu:{self.probe_pdg};tgt:{self.target.pdg_code}"
        if self.target.hit_pdg is not None:
            text += f";hit:{self.target.hit_pdg}"
        return text

    def __str__(self) -> str:
        return f"{pdg.name(self.probe_pdg)} + {self.target} (E = {self.probe_energy:.4g} GeV)"
