"""Glashow resonance: nu_e_bar e- -> W- on atomic electrons, W- -> l- nu_l_bar."""

from __future__ import annotations

import math

import numpy as np

from nuevg.config.enums import InteractionType, KinePhaseSpace, ProcessType
from nuevg.config.validation import ConfigurationError
from nuevg.core import pdg
from nuevg.core.constants import (
    ELECTRON_MASS,
    FERMI_CONSTANT,
    GEV2_TO_CM2,
    W_BOSON_MASS,
    W_BOSON_WIDTH,
)
from nuevg.core.event_record import EventRecord, ParticleStatus
from nuevg.core.interaction import Interaction
from nuevg.core.kinematics import isotropic_two_body_decay
from nuevg.generators.base import (
    EventGenerator,
    EventRecordVisitor,
    XSecAlgorithm,
    make_validity,
)
from nuevg.physics.common import ChannelListGenerator, InitialStateAppender, find_hit

_W_DECAY_LEPTONS = (
    (pdg.ELECTRON, pdg.NU_E_BAR),
    (pdg.MUON, pdg.NU_MU_BAR),
    (pdg.TAU, pdg.NU_TAU_BAR),
)


def electron_hits(probe_pdg: int, current: InteractionType):
    return (pdg.ELECTRON,)


class GLRESXSec(XSecAlgorithm):
    """Breit-Wigner in s = m_e^2 + 2 m_e E, times the number of electrons.

    sigma(s) = G_F^2 M_W^4 s / (3 pi ((s - M_W^2)^2 + M_W^2 Gamma_W^2))
    """

    def __init__(self, config: str = "Default"):
        super().__init__("GLRESXSec", config)

    def valid_process(self, interaction: Interaction) -> bool:
        return (
            interaction.process_info.process == ProcessType.GLASHOW_RESONANCE
            and interaction.probe_pdg == pdg.NU_E_BAR
            and interaction.hit_pdg == pdg.ELECTRON
        )

    def xsec(self, interaction, phase_space=KinePhaseSpace.TOTAL) -> float:
        if not self.valid_process(interaction):
            return 0.0

        s = ELECTRON_MASS * ELECTRON_MASS + 2.0 * ELECTRON_MASS * interaction.probe_energy
        mw2 = W_BOSON_MASS * W_BOSON_MASS
        bw = mw2 * mw2 / ((s - mw2) ** 2 + mw2 * W_BOSON_WIDTH * W_BOSON_WIDTH)
        sigma = FERMI_CONSTANT * FERMI_CONSTANT * s * bw / (3.0 * math.pi) * GEV2_TO_CM2

        return interaction.init_state.target.n_hit(pdg.ELECTRON) * sigma


class GLRESKinematicsGenerator(EventRecordVisitor):
    """Forms the W- and decays it isotropically into an open lepton flavour."""

    def process_event_record(self, record: EventRecord, rng: np.random.Generator) -> None:
        hit_index, hit = find_hit(record)
        probe = record.probe()
        if hit is None or probe is None:
            record.mark_unphysical("missing initial state entries")
            return

        w_boson = probe.p4 + hit.p4
        w_mass = w_boson.mass
        open_modes = [mode for mode in _W_DECAY_LEPTONS if pdg.mass(mode[0]) < w_mass]
        if not open_modes:
            record.mark_unphysical("no open W decay channel")
            return

        lepton_pdg, neutrino_pdg = open_modes[int(rng.integers(len(open_modes)))]
        w_index = record.add_particle(pdg.W_MINUS, ParticleStatus.DECAYED, w_boson, hit_index)
        lepton, neutrino = isotropic_two_body_decay(w_boson, pdg.mass(lepton_pdg), 0.0, rng)
        record.add_particle(lepton_pdg, ParticleStatus.STABLE_FINAL_STATE, lepton, w_index)
        record.add_particle(neutrino_pdg, ParticleStatus.STABLE_FINAL_STATE, neutrino, w_index)


def make_glres_generator(
    name: str,
    current: InteractionType,
    e_min: float,
    e_max: float,
) -> EventGenerator:
    """Glashow resonance event generator factory (catalog model 'glres')."""
    if current != InteractionType.WEAK_CC:
        raise ConfigurationError(f"Event generator '{name}': Glashow resonance is a CC process")

    return EventGenerator(
        name=name,
        validity=make_validity(
            e_min, e_max, [ProcessType.GLASHOW_RESONANCE], [current], probes=[pdg.NU_E_BAR],
        ),
        interaction_list_generator=ChannelListGenerator(
            ProcessType.GLASHOW_RESONANCE, current, hits=electron_hits, probes=[pdg.NU_E_BAR],
        ),
        xsec_algorithm=GLRESXSec(),
        visitors=(InitialStateAppender(), GLRESKinematicsGenerator()),
    )
