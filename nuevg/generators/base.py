"""Event generator building blocks.

An EventGenerator bundles one physics model: the interaction list generator
enumerating its channels, the cross section algorithm, the validity context
and the ordered chain of event record visitors that build the event.

The three model-facing contracts are abstract base classes:
    XSecAlgorithm.xsec(interaction, phase_space) -> float [cm2]
    InteractionListGenerator.create_interaction_list(init_state) -> InteractionList | None
    EventRecordVisitor.process_event_record(record, rng) -> None
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Sequence, Tuple

import numpy as np

from nuevg.config.enums import InteractionType, KinePhaseSpace, ProcessType
from nuevg.core.event_record import EventRecord
from nuevg.core.initial_state import InitialState
from nuevg.core.interaction import Interaction, InteractionList

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlgorithmId:
    """Identity of a configured algorithm: name plus configuration label."""

    name: str
    config: str = "Default"

    @property
    def key(self) -> str:
        return f"{self.name}/{self.config}"

    def __str__(self) -> str:
        return self.key


class XSecAlgorithm(ABC):
    """Cross section algorithm of one physics model.

    Implementations must be deterministic for fixed inputs; the spline cache
    relies on it.
    """

    def __init__(self, name: str, config: str = "Default"):
        self._id = AlgorithmId(name, config)

    @property
    def id(self) -> AlgorithmId:
        return self._id

    @abstractmethod
    def xsec(
        self, interaction: Interaction, phase_space: KinePhaseSpace = KinePhaseSpace.TOTAL,
    ) -> float:
        """Cross section [cm2] at the interaction's probe energy."""

    def integral(self, interaction: Interaction) -> float:
        """Integrated cross section [cm2]."""
        return self.xsec(interaction, KinePhaseSpace.TOTAL)

    @abstractmethod
    def valid_process(self, interaction: Interaction) -> bool:
        """Whether this algorithm can compute the given channel at all."""


class InteractionListGenerator(ABC):
    """Enumerates the channels one model can produce for an initial state."""

    @abstractmethod
    def create_interaction_list(self, init_state: InitialState) -> Optional[InteractionList]:
        """Candidate interactions, or None when the model has nothing to offer."""


class EventRecordVisitor(ABC):
    """One step of event construction; mutates the record in place."""

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def process_event_record(self, record: EventRecord, rng: np.random.Generator) -> None:
        """Add particles or kinematics; may call record.mark_unphysical()."""


@dataclass(frozen=True)
class ValidityContext:
    """Where a generator's physics is trustworthy.

    Attributes:
        e_min, e_max: Probe energy range [GeV]
        processes: Process types the generator builds
        currents: Currents the generator builds
        probes: Accepted probe PDG codes (None: any neutrino)

    """

    e_min: float
    e_max: float
    processes: FrozenSet[ProcessType]
    currents: FrozenSet[InteractionType]
    probes: Optional[FrozenSet[int]] = None

    def accepts_energy(self, energy: float) -> bool:
        return self.e_min <= energy <= self.e_max

    def accepts(self, interaction: Interaction) -> bool:
        info = interaction.process_info
        if info.process not in self.processes:
            return False
        if info.current not in self.currents:
            return False
        if self.probes is not None and interaction.probe_pdg not in self.probes:
            return False
        return self.accepts_energy(interaction.probe_energy)


@dataclass(frozen=True)
class SplineSettings:
    """Per-generator overrides of the spline range and knot count.

    Unset fields fall back to the validity range and config.spline_knots.
    Narrow features such as a resonance peak need more knots than smooth
    curves.
    """

    e_min: Optional[float] = None
    e_max: Optional[float] = None
    n_knots: Optional[int] = None


@dataclass(frozen=True)
class EventGenerator:
    """One registered physics model.

    Immutable after assembly. Drivers borrow generators from the assembled
    EventGeneratorList; they never own them.

    Attributes:
        name: Generator name (catalog key, e.g. 'QEL-CC')
        validity: Validity context
        interaction_list_generator: Channel enumerator
        xsec_algorithm: Cross section algorithm
        visitors: Ordered event record visitors
        spline_settings: Spline range and knot overrides for the cache

    """

    name: str
    validity: ValidityContext
    interaction_list_generator: InteractionListGenerator
    xsec_algorithm: XSecAlgorithm
    visitors: Tuple[EventRecordVisitor, ...] = field(default_factory=tuple)
    spline_settings: SplineSettings = field(default_factory=SplineSettings)

    def __post_init__(self):
        # Accept any sequence of visitors, store a tuple
        object.__setattr__(self, "visitors", tuple(self.visitors))

    def create_interaction_list(self, init_state: InitialState) -> Optional[InteractionList]:
        return self.interaction_list_generator.create_interaction_list(init_state)

    def process_event_record(self, record: EventRecord, rng: np.random.Generator) -> None:
        """Run the visitor chain; stop early once the record is unphysical."""
        for visitor in self.visitors:
            logger.debug("[%s] running visitor %s", self.name, visitor.name)
            visitor.process_event_record(record, rng)
            if record.is_unphysical:
                logger.debug(
                    "[%s] record flagged unphysical by %s: %s",
                    self.name, visitor.name, ", ".join(record.unphysical_reasons),
                )
                break

    def __str__(self) -> str:
        return (
            f"{self.name} [{self.xsec_algorithm.id}] "
            f"E = [{self.validity.e_min:g}, {self.validity.e_max:g}] GeV"
        )


def make_validity(
    e_min: float,
    e_max: float,
    processes: Sequence[ProcessType],
    currents: Sequence[InteractionType],
    probes: Optional[Sequence[int]] = None,
) -> ValidityContext:
    """Convenience constructor taking plain sequences."""
    return ValidityContext(
        e_min=float(e_min),
        e_max=float(e_max),
        processes=frozenset(processes),
        currents=frozenset(currents),
        probes=None if probes is None else frozenset(probes),
    )
