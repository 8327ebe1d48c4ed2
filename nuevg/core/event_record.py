"""Event record: the mutable accumulator for one generated event.

Created by the interaction selector, populated by the visitor chain of the
responsible event generator, owned by the driver until it is returned to the
caller (or discarded as unphysical).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional

from nuevg.config.defaults import XSEC_REPORT_UNIT_CM2
from nuevg.core import pdg
from nuevg.core.interaction import Interaction
from nuevg.core.kinematics import FourVector


class ParticleStatus(IntEnum):
    """Status code of an event record entry."""

    INITIAL_STATE = 0
    STABLE_FINAL_STATE = 1
    INTERMEDIATE_RESONANCE = 3
    DECAYED = 4
    NUCLEON_TARGET = 11


@dataclass
class Particle:
    """One entry of the event record.

    Attributes:
        pdg: PDG code
        status: Status code
        p4: Lab-frame 4-momentum [GeV]
        mother: Index of the mother entry (-1 for primaries)

    """

    pdg: int
    status: ParticleStatus
    p4: FourVector
    mother: int = -1

    @property
    def name(self) -> str:
        return pdg.name(self.pdg)


@dataclass
class EventRecord:
    """Generated event.

    Attributes:
        interaction: Selected interaction
        xsec: Cross section the interaction was selected with [cm2]
        vertex: Interaction 4-position
        particles: Ordered particle entries
        unphysical_reasons: Reasons recorded by mark_unphysical()

    """

    interaction: Interaction
    xsec: float = 0.0
    vertex: FourVector = field(default_factory=lambda: FourVector(0.0, 0.0, 0.0, 0.0))
    particles: List[Particle] = field(default_factory=list)
    unphysical_reasons: List[str] = field(default_factory=list)

    @property
    def is_unphysical(self) -> bool:
        return bool(self.unphysical_reasons)

    def mark_unphysical(self, reason: str) -> None:
        self.unphysical_reasons.append(reason)

    def add_particle(
        self, code: int, status: ParticleStatus, p4: FourVector, mother: int = -1,
    ) -> int:
        """Append an entry and return its index."""
        self.particles.append(Particle(code, status, p4, mother))
        return len(self.particles) - 1

    def find(self, status: ParticleStatus) -> List[Particle]:
        return [p for p in self.particles if p.status == status]

    def final_state(self) -> List[Particle]:
        return self.find(ParticleStatus.STABLE_FINAL_STATE)

    def probe(self) -> Optional[Particle]:
        for particle in self.particles:
            if particle.status == ParticleStatus.INITIAL_STATE and pdg.is_neutrino_or_anti_neutrino(particle.pdg):
                return particle
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Summary dictionary (not a persistence format)."""
        return {
            "interaction": self.interaction.key,
            "xsec_1e38cm2": self.xsec / XSEC_REPORT_UNIT_CM2,
            "unphysical": self.is_unphysical,
            "unphysical_reasons": list(self.unphysical_reasons),
            "particles": [
                {
                    "pdg": p.pdg,
                    "name": p.name,
                    "status": p.status.name,
                    "mother": p.mother,
                    "p4": p.p4.as_array().tolist(),
                }
                for p in self.particles
            ],
        }

    def __str__(self) -> str:
        lines = [
            f"EventRecord: {self.interaction.as_string()}",
            f"  xsec = {self.xsec / XSEC_REPORT_UNIT_CM2:.4g} x 1e-38 cm2"
            + ("  *** UNPHYSICAL: " + ", ".join(self.unphysical_reasons) if self.is_unphysical else ""),
        ]
        for i, p in enumerate(self.particles):
            lines.append(
                f"  {i:3d} {p.name:>10s} {p.status.name:<22s} mother={p.mother:3d} {p.p4}"
            )
        return "\n".join(lines)
