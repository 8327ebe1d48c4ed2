"""Deep-inelastic scattering with an unfragmented hadronic system."""

from __future__ import annotations

import math

import numpy as np

from nuevg.config.enums import InteractionType, KinePhaseSpace, ProcessType
from nuevg.core import pdg
from nuevg.core.event_record import EventRecord, ParticleStatus
from nuevg.core.interaction import Interaction
from nuevg.generators.base import (
    EventGenerator,
    EventRecordVisitor,
    XSecAlgorithm,
    make_validity,
)
from nuevg.physics.common import (
    ChannelListGenerator,
    InitialStateAppender,
    find_hit,
    lepton_kinematics,
    outgoing_lepton,
    q2_range,
    sample_q2_dipole,
    smooth_turn_on,
    threshold_energy,
)

# sigma/E per target nucleon [cm2/GeV]
DIS_SLOPE_NU = 0.67e-38
DIS_SLOPE_ANTINU = 0.34e-38
DIS_NC_FACTOR = 0.3
DIS_TURN_ON_SCALE = 1.0
DEFAULT_W_MIN = 1.7
# Q2 scale of the sampled distribution [GeV]
DIS_Q2_SCALE = 1.0


class DISXSec(XSecAlgorithm):
    """Cross section rising linearly in E above a smooth W > w_min threshold."""

    def __init__(self, w_min: float = DEFAULT_W_MIN, config: str = "Default"):
        super().__init__("DISXSec", config)
        self.w_min = w_min

    def valid_process(self, interaction: Interaction) -> bool:
        return (
            interaction.process_info.process == ProcessType.DEEP_INELASTIC
            and pdg.is_neutrino_or_anti_neutrino(interaction.probe_pdg)
            and pdg.is_nucleon(interaction.hit_pdg)
        )

    def xsec(self, interaction, phase_space=KinePhaseSpace.TOTAL) -> float:
        if not self.valid_process(interaction):
            return 0.0

        m_hit = pdg.mass(interaction.hit_pdg)
        m_lepton = pdg.mass(outgoing_lepton(interaction.probe_pdg, interaction.process_info.current))
        e_thr = threshold_energy(m_hit, m_lepton + self.w_min)

        slope = DIS_SLOPE_NU if pdg.is_neutrino(interaction.probe_pdg) else DIS_SLOPE_ANTINU
        if interaction.process_info.is_nc():
            slope *= DIS_NC_FACTOR

        energy = interaction.probe_energy
        n_hit = interaction.init_state.target.n_hit(interaction.hit_pdg)
        return n_hit * slope * energy * smooth_turn_on(energy, e_thr, DIS_TURN_ON_SCALE)


class DISKinematicsGenerator(EventRecordVisitor):
    """Uniform W above w_min, Q2 within its limits, hadronic system as one entry."""

    def __init__(self, w_min: float = DEFAULT_W_MIN):
        self.w_min = w_min

    def process_event_record(self, record: EventRecord, rng: np.random.Generator) -> None:
        interaction = record.interaction
        hit_index, hit = find_hit(record)
        probe = record.probe()
        if hit is None or probe is None:
            record.mark_unphysical("missing initial state entries")
            return

        m_hit = hit.p4.mass
        lepton_pdg = outgoing_lepton(interaction.probe_pdg, interaction.process_info.current)
        m_lepton = pdg.mass(lepton_pdg)

        s = m_hit * m_hit + 2.0 * m_hit * probe.p4.energy
        w_max = math.sqrt(s) - m_lepton
        if w_max <= self.w_min:
            record.mark_unphysical("below DIS threshold")
            return

        w = rng.uniform(self.w_min, w_max)
        limits = q2_range(s, m_hit, m_lepton, w)
        if limits is None:
            record.mark_unphysical("hadronic mass not reachable")
            return

        q2 = sample_q2_dipole(rng, limits[0], limits[1], DIS_Q2_SCALE)
        lepton = lepton_kinematics(probe.p4, q2, w, m_hit, m_lepton, rng)
        if lepton is None:
            record.mark_unphysical("lepton kinematics failed")
            return

        record.add_particle(lepton_pdg, ParticleStatus.STABLE_FINAL_STATE, lepton, 0)
        hadrons = probe.p4 + hit.p4 - lepton
        record.add_particle(pdg.HADRONIC_SYSTEM, ParticleStatus.STABLE_FINAL_STATE, hadrons, hit_index)


def make_dis_generator(
    name: str,
    current: InteractionType,
    e_min: float,
    e_max: float,
    w_min: float = DEFAULT_W_MIN,
) -> EventGenerator:
    """Deep-inelastic event generator factory (catalog model 'dis')."""
    return EventGenerator(
        name=name,
        validity=make_validity(e_min, e_max, [ProcessType.DEEP_INELASTIC], [current]),
        interaction_list_generator=ChannelListGenerator(ProcessType.DEEP_INELASTIC, current),
        xsec_algorithm=DISXSec(w_min),
        visitors=(InitialStateAppender(), DISKinematicsGenerator(w_min)),
    )
