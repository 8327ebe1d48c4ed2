"""Delta(1232) resonance production with isotropic Delta -> N pi decay."""

from __future__ import annotations

import math
from typing import Dict, Tuple

import numpy as np

from nuevg.config.enums import InteractionType, KinePhaseSpace, ProcessType
from nuevg.core import pdg
from nuevg.core.constants import DELTA_1232_MASS, DELTA_1232_WIDTH
from nuevg.core.event_record import EventRecord, ParticleStatus
from nuevg.core.interaction import Interaction
from nuevg.core.kinematics import isotropic_two_body_decay
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

RES_XSEC_PLATEAU = 0.6e-38
RES_ANTINU_FACTOR = 0.6
RES_NC_FACTOR = 0.3
RES_TURN_ON_SCALE = 0.6
RES_REFERENCE_AXIAL_MASS = 1.12

# Delta charge state by (hit nucleon, charge transferred to the hadronic side)
_DELTA_BY_CHARGE: Dict[Tuple[int, int], int] = {
    (pdg.PROTON, +1): pdg.DELTA_PLUS_PLUS,
    (pdg.NEUTRON, +1): pdg.DELTA_PLUS,
    (pdg.PROTON, 0): pdg.DELTA_PLUS,
    (pdg.NEUTRON, 0): pdg.DELTA_ZERO,
    (pdg.PROTON, -1): pdg.DELTA_ZERO,
    (pdg.NEUTRON, -1): pdg.DELTA_MINUS,
}

# Decay mode used for each charge state
_DELTA_DECAY: Dict[int, Tuple[int, int]] = {
    pdg.DELTA_PLUS_PLUS: (pdg.PROTON, pdg.PI_PLUS),
    pdg.DELTA_PLUS: (pdg.PROTON, pdg.PI_ZERO),
    pdg.DELTA_ZERO: (pdg.NEUTRON, pdg.PI_ZERO),
    pdg.DELTA_MINUS: (pdg.NEUTRON, pdg.PI_MINUS),
}


def delta_code(interaction: Interaction) -> int:
    """Delta charge state produced in the interaction."""
    charge = 0
    if interaction.process_info.is_cc():
        charge = +1 if pdg.is_neutrino(interaction.probe_pdg) else -1
    return _DELTA_BY_CHARGE[(interaction.hit_pdg, charge)]


def sample_breit_wigner(
    rng: np.random.Generator, mass: float, width: float, w_min: float, w_max: float,
) -> float:
    """Breit-Wigner (Cauchy) mass truncated to [w_min, w_max] (inverse CDF)."""
    a = math.atan(2.0 * (w_min - mass) / width)
    b = math.atan(2.0 * (w_max - mass) / width)
    return mass + 0.5 * width * math.tan(a + (b - a) * rng.random())


class RESXSec(XSecAlgorithm):
    """Saturating Delta production cross section above the N pi threshold."""

    def __init__(self, axial_mass: float = RES_REFERENCE_AXIAL_MASS, config: str = "Default"):
        super().__init__("RESXSec", config)
        self.axial_mass = axial_mass

    def valid_process(self, interaction: Interaction) -> bool:
        return (
            interaction.process_info.process == ProcessType.RESONANT
            and pdg.is_neutrino_or_anti_neutrino(interaction.probe_pdg)
            and pdg.is_nucleon(interaction.hit_pdg)
        )

    def xsec(self, interaction, phase_space=KinePhaseSpace.TOTAL) -> float:
        if not self.valid_process(interaction):
            return 0.0

        m_hit = pdg.mass(interaction.hit_pdg)
        m_lepton = pdg.mass(outgoing_lepton(interaction.probe_pdg, interaction.process_info.current))
        nucleon_pdg, pion_pdg = _DELTA_DECAY[delta_code(interaction)]
        e_thr = threshold_energy(m_hit, m_lepton + pdg.mass(nucleon_pdg) + pdg.mass(pion_pdg))

        sigma = RES_XSEC_PLATEAU * (self.axial_mass / RES_REFERENCE_AXIAL_MASS) ** 2
        if pdg.is_anti_neutrino(interaction.probe_pdg):
            sigma *= RES_ANTINU_FACTOR
        if interaction.process_info.is_nc():
            sigma *= RES_NC_FACTOR

        n_hit = interaction.init_state.target.n_hit(interaction.hit_pdg)
        return n_hit * sigma * smooth_turn_on(interaction.probe_energy, e_thr, RES_TURN_ON_SCALE)


class RESKinematicsGenerator(EventRecordVisitor):
    """Samples W and Q2, adds the lepton and the Delta, then decays the Delta."""

    def __init__(self, axial_mass: float = RES_REFERENCE_AXIAL_MASS):
        self.axial_mass = axial_mass

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
        delta_pdg = delta_code(interaction)
        nucleon_pdg, pion_pdg = _DELTA_DECAY[delta_pdg]
        m_nucleon = pdg.mass(nucleon_pdg)
        m_pion = pdg.mass(pion_pdg)

        s = m_hit * m_hit + 2.0 * m_hit * probe.p4.energy
        w_min = m_nucleon + m_pion
        w_max = math.sqrt(s) - m_lepton
        if w_max <= w_min:
            record.mark_unphysical("below resonance threshold")
            return

        w = sample_breit_wigner(rng, DELTA_1232_MASS, DELTA_1232_WIDTH, w_min, w_max)
        limits = q2_range(s, m_hit, m_lepton, w)
        if limits is None:
            record.mark_unphysical("resonance mass not reachable")
            return

        q2 = sample_q2_dipole(rng, limits[0], limits[1], self.axial_mass)
        lepton = lepton_kinematics(probe.p4, q2, w, m_hit, m_lepton, rng)
        if lepton is None:
            record.mark_unphysical("lepton kinematics failed")
            return

        record.add_particle(lepton_pdg, ParticleStatus.STABLE_FINAL_STATE, lepton, 0)
        delta = probe.p4 + hit.p4 - lepton
        delta_index = record.add_particle(delta_pdg, ParticleStatus.DECAYED, delta, hit_index)

        nucleon, pion = isotropic_two_body_decay(delta, m_nucleon, m_pion, rng)
        record.add_particle(nucleon_pdg, ParticleStatus.STABLE_FINAL_STATE, nucleon, delta_index)
        record.add_particle(pion_pdg, ParticleStatus.STABLE_FINAL_STATE, pion, delta_index)


def make_res_generator(
    name: str,
    current: InteractionType,
    e_min: float,
    e_max: float,
    axial_mass: float = RES_REFERENCE_AXIAL_MASS,
) -> EventGenerator:
    """Resonance event generator factory (catalog model 'res')."""
    return EventGenerator(
        name=name,
        validity=make_validity(e_min, e_max, [ProcessType.RESONANT], [current]),
        interaction_list_generator=ChannelListGenerator(ProcessType.RESONANT, current),
        xsec_algorithm=RESXSec(axial_mass),
        visitors=(
            InitialStateAppender(),
            RESKinematicsGenerator(axial_mass),
        ),
    )
