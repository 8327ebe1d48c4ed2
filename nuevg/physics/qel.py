"""Quasi-elastic scattering: nu n -> l- p, nubar p -> l+ n (CC), nu N -> nu N (NC)."""

from __future__ import annotations

from typing import Tuple

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
    PauliBlocker,
    cc_final_nucleon,
    dipole_fraction,
    find_hit,
    lepton_kinematics,
    outgoing_lepton,
    pauli_q2_min,
    q2_range,
    sample_q2_dipole,
    smooth_turn_on,
    threshold_energy,
)

# Asymptotic cross section per target nucleon [cm2] at M_A = 0.99 GeV
QEL_XSEC_PLATEAU = 1.0e-38
QEL_ANTINU_FACTOR = 0.5
QEL_NC_FACTOR = 0.2
# Energy scale of the rise above threshold [GeV]
QEL_TURN_ON_SCALE = 0.4
QEL_REFERENCE_AXIAL_MASS = 0.99


def qel_hits(probe_pdg: int, current: InteractionType) -> Tuple[int, ...]:
    if current == InteractionType.WEAK_NC:
        return (pdg.PROTON, pdg.NEUTRON)
    # CC: nu scatters on neutrons, nubar on protons
    return (pdg.NEUTRON,) if pdg.is_neutrino(probe_pdg) else (pdg.PROTON,)


def qel_final_nucleon(interaction: Interaction) -> int:
    if interaction.process_info.is_cc():
        return cc_final_nucleon(interaction.probe_pdg)
    return interaction.hit_pdg


class QELXSec(XSecAlgorithm):
    """Saturating quasi-elastic cross section, scaled by the number of struck nucleons."""

    def __init__(self, axial_mass: float = QEL_REFERENCE_AXIAL_MASS, config: str = "Default"):
        super().__init__("QELXSec", config)
        self.axial_mass = axial_mass

    def valid_process(self, interaction: Interaction) -> bool:
        info = interaction.process_info
        if info.process != ProcessType.QUASI_ELASTIC:
            return False
        if not pdg.is_neutrino_or_anti_neutrino(interaction.probe_pdg):
            return False
        return interaction.hit_pdg in qel_hits(interaction.probe_pdg, info.current)

    def xsec(self, interaction, phase_space=KinePhaseSpace.TOTAL) -> float:
        """Free-nucleon curve times the share of the dipole Q2 range left open by the Fermi sea.

        Below the energy where even Q2_max cannot lift the recoil above k_F
        the cross section is zero, so no event is selected only to be blocked.
        """
        if not self.valid_process(interaction):
            return 0.0

        m_hit = pdg.mass(interaction.hit_pdg)
        m_lepton = pdg.mass(outgoing_lepton(interaction.probe_pdg, interaction.process_info.current))
        m_final = pdg.mass(qel_final_nucleon(interaction))
        energy = interaction.probe_energy

        s = m_hit * m_hit + 2.0 * m_hit * energy
        limits = q2_range(s, m_hit, m_lepton, m_final)
        if limits is None:
            return 0.0

        target = interaction.init_state.target
        q2_pauli = pauli_q2_min(m_hit, m_final, target.fermi_momentum)
        allowed = dipole_fraction(q2_pauli, limits[0], limits[1], self.axial_mass)
        if allowed <= 0.0:
            return 0.0

        sigma = QEL_XSEC_PLATEAU * (self.axial_mass / QEL_REFERENCE_AXIAL_MASS) ** 2
        if pdg.is_anti_neutrino(interaction.probe_pdg):
            sigma *= QEL_ANTINU_FACTOR
        if interaction.process_info.is_nc():
            sigma *= QEL_NC_FACTOR

        e_thr = threshold_energy(m_hit, m_lepton + m_final)
        n_hit = target.n_hit(interaction.hit_pdg)
        return n_hit * sigma * allowed * smooth_turn_on(energy, e_thr, QEL_TURN_ON_SCALE)


class QELKinematicsGenerator(EventRecordVisitor):
    """Dipole Q2, then two-body kinematics for the lepton and the recoil nucleon."""

    def __init__(self, axial_mass: float = QEL_REFERENCE_AXIAL_MASS):
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
        nucleon_pdg = qel_final_nucleon(interaction)
        m_lepton = pdg.mass(lepton_pdg)
        m_nucleon = pdg.mass(nucleon_pdg)

        s = m_hit * m_hit + 2.0 * m_hit * probe.p4.energy
        limits = q2_range(s, m_hit, m_lepton, m_nucleon)
        if limits is None:
            record.mark_unphysical("below quasi-elastic threshold")
            return

        # Only the Q2 range whose recoil clears the Fermi sea
        k_fermi = interaction.init_state.target.fermi_momentum
        q2_lo = max(limits[0], pauli_q2_min(m_hit, m_nucleon, k_fermi))
        if q2_lo >= limits[1]:
            record.mark_unphysical("Pauli blocked")
            return

        q2 = sample_q2_dipole(rng, q2_lo, limits[1], self.axial_mass)
        lepton = lepton_kinematics(probe.p4, q2, m_nucleon, m_hit, m_lepton, rng)
        if lepton is None:
            record.mark_unphysical("lepton kinematics failed")
            return

        record.add_particle(lepton_pdg, ParticleStatus.STABLE_FINAL_STATE, lepton, 0)
        recoil = probe.p4 + hit.p4 - lepton
        record.add_particle(nucleon_pdg, ParticleStatus.STABLE_FINAL_STATE, recoil, hit_index)


def make_qel_generator(
    name: str,
    current: InteractionType,
    e_min: float,
    e_max: float,
    axial_mass: float = QEL_REFERENCE_AXIAL_MASS,
) -> EventGenerator:
    """Quasi-elastic event generator factory (catalog model 'qel')."""
    return EventGenerator(
        name=name,
        validity=make_validity(e_min, e_max, [ProcessType.QUASI_ELASTIC], [current]),
        interaction_list_generator=ChannelListGenerator(
            ProcessType.QUASI_ELASTIC, current, hits=qel_hits,
        ),
        xsec_algorithm=QELXSec(axial_mass),
        visitors=(
            InitialStateAppender(),
            QELKinematicsGenerator(axial_mass),
            PauliBlocker(),
        ),
    )
