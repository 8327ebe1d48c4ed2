"""Interaction summary: a fully specified candidate reaction.

An Interaction is an initial state (including the struck particle) plus a
process identifier. Its `key` is built from identities only and is the
channel half of the spline cache key.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from nuevg.config.enums import InteractionType, ProcessType
from nuevg.core import pdg
from nuevg.core.initial_state import InitialState
from nuevg.core.kinematics import FourVector


@dataclass(frozen=True)
class ProcessInfo:
    """Scattering process and current of an interaction channel."""

    process: ProcessType
    current: InteractionType

    def is_cc(self) -> bool:
        return self.current == InteractionType.WEAK_CC

    def is_nc(self) -> bool:
        return self.current == InteractionType.WEAK_NC

    def __str__(self) -> str:
        return f"{self.process.value}-{self.current.value}"


@dataclass
class Interaction:
    """Candidate reaction for one initial state.

    The probe 4-momentum is rebound with `set_probe_p4` before a cross
    section is evaluated; every other field identifies the channel.

    Attributes:
        init_state: Initial state, with the struck particle set on its target
        process_info: Process type and current

    """

    init_state: InitialState
    process_info: ProcessInfo

    @property
    def probe_pdg(self) -> int:
        return self.init_state.probe_pdg

    @property
    def hit_pdg(self) -> Optional[int]:
        return self.init_state.target.hit_pdg

    @property
    def probe_energy(self) -> float:
        return self.init_state.probe_energy

    def set_probe_p4(self, p4: FourVector) -> None:
        self.init_state = self.init_state.with_probe_p4(p4)

    @property
    def key(self) -> str:
        """Channel identity, e.g. 'nu:14;tgt:1000060120;hit:2112;proc:QES;cur:CC'."""
        return (
            f"{self.init_state.key()};proc:{self.process_info.process.value};"
            f"cur:{self.process_info.current.value}"
        )

    def as_string(self) -> str:
        return (
            f"{pdg.name(self.probe_pdg)} {self.init_state.target} "
            f"{self.process_info}"
        )

    def __str__(self) -> str:
        return self.as_string()


class InteractionList(list):
    """Ordered collection of Interaction objects produced for one initial state.

    Created by an interaction list generator for a single aggregation pass
    and dropped by the caller afterwards.
    """

    def __init__(self, interactions: Iterable[Interaction] = ()):
        super().__init__(interactions)

    def keys(self) -> list[str]:
        return [interaction.key for interaction in self]
