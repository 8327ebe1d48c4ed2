"""Pieces shared by the reference physics models.

Visitors:
    InitialStateAppender: probe, target and struck particle entries
    PauliBlocker: flags events whose outgoing nucleon is Fermi-blocked

Helpers:
    ChannelListGenerator: one interaction per allowed struck particle
    lepton_kinematics: outgoing lepton for given (E, Q2, W)
    q2_range / sample_q2_dipole: kinematic limits and Q2 sampling
    pauli_q2_min / dipole_fraction: Q2 reach of the Fermi sea and its dipole share
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Iterable, Optional, Tuple

import numpy as np

from nuevg.config.enums import InteractionType, ProcessType
from nuevg.core import pdg
from nuevg.core.constants import NEUTRON_MASS, PROTON_MASS, TWO_PI
from nuevg.core.event_record import EventRecord, Particle, ParticleStatus
from nuevg.core.initial_state import InitialState
from nuevg.core.interaction import Interaction, InteractionList, ProcessInfo
from nuevg.core.kinematics import FourVector, rotate_to_direction, two_body_momentum
from nuevg.core.target import Target
from nuevg.generators.base import EventRecordVisitor, InteractionListGenerator

logger = logging.getLogger(__name__)

# (probe_pdg, current) -> allowed struck particles
HitSelector = Callable[[int, InteractionType], Iterable[int]]


def target_mass(target: Target) -> float:
    """Target rest mass [GeV], nuclear binding neglected."""
    return target.n_protons * PROTON_MASS + target.n_neutrons * NEUTRON_MASS


def outgoing_lepton(probe_pdg: int, current: InteractionType) -> int:
    if current == InteractionType.WEAK_CC:
        return pdg.charged_lepton_partner(probe_pdg)
    return probe_pdg


def cc_final_nucleon(probe_pdg: int) -> int:
    """Nucleon left by CC quasi-elastic scattering (nu n -> l- p, nubar p -> l+ n)."""
    return pdg.PROTON if pdg.is_neutrino(probe_pdg) else pdg.NEUTRON


def nucleon_hits(probe_pdg: int, current: InteractionType) -> Tuple[int, ...]:
    return (pdg.PROTON, pdg.NEUTRON)


def threshold_energy(m_hit: float, m_final: float) -> float:
    """Probe energy at which s = m_final^2 for a struck particle at rest."""
    return max(0.0, (m_final * m_final - m_hit * m_hit) / (2.0 * m_hit))


def smooth_turn_on(energy: float, e_threshold: float, scale: float) -> float:
    """0 below threshold, rising as 1 - exp(-(E - Ethr)/scale) above."""
    if energy <= e_threshold:
        return 0.0
    return 1.0 - math.exp(-(energy - e_threshold) / scale)


class ChannelListGenerator(InteractionListGenerator):
    """Builds one interaction per struck particle species present in the target.

    Returns None for a non-neutrino probe, an invalid target, or a probe the
    model does not accept.
    """

    def __init__(
        self,
        process: ProcessType,
        current: InteractionType,
        hits: HitSelector = nucleon_hits,
        probes: Optional[Iterable[int]] = None,
    ):
        self.process_info = ProcessInfo(process, current)
        self.hits = hits
        self.probes = None if probes is None else frozenset(probes)

    def create_interaction_list(self, init_state: InitialState) -> Optional[InteractionList]:
        probe = init_state.probe_pdg
        if not init_state.is_valid():
            return None
        if self.probes is not None and probe not in self.probes:
            return None

        interactions = InteractionList()
        for hit in self.hits(probe, self.process_info.current):
            if init_state.target.n_hit(hit) > 0:
                interactions.append(Interaction(init_state.with_hit(hit), self.process_info))

        return interactions if interactions else None


def q2_range(s: float, m_hit: float, m_lepton: float, m_final: float) -> Optional[Tuple[float, float]]:
    """Kinematically allowed Q2 for probe + hit -> lepton + m_final.

    Args:
        s: Invariant mass squared of the probe and struck particle
        m_hit: Struck particle mass (at rest)
        m_lepton: Outgoing lepton mass
        m_final: Invariant mass of the hadronic final state

    Returns:
        (Q2_min, Q2_max), or None if the channel is closed
    """
    sqrt_s = math.sqrt(s)
    if sqrt_s <= m_lepton + m_final:
        return None
    p_in = (s - m_hit * m_hit) / (2.0 * sqrt_s)
    p_out = two_body_momentum(sqrt_s, m_lepton, m_final)
    e_out = (s + m_lepton * m_lepton - m_final * m_final) / (2.0 * sqrt_s)
    q2_min = 2.0 * p_in * (e_out - p_out) - m_lepton * m_lepton
    q2_max = 2.0 * p_in * (e_out + p_out) - m_lepton * m_lepton
    return max(q2_min, 0.0), q2_max


def _dipole_cdf(q2: float, m2: float) -> float:
    # Integral of (1 + Q2/M^2)^-2 dQ2 from 0, in units of M^2
    return q2 / (m2 + q2)


def sample_q2_dipole(rng: np.random.Generator, q2_min: float, q2_max: float, mass: float) -> float:
    """Q2 distributed as (1 + Q2/M^2)^-2 within [q2_min, q2_max] (inverse CDF)."""
    m2 = mass * mass
    g_lo = _dipole_cdf(q2_min, m2)
    g_hi = _dipole_cdf(q2_max, m2)
    g = g_lo + (g_hi - g_lo) * rng.random()
    return m2 * g / (1.0 - g)


def dipole_fraction(q2_lo: float, q2_min: float, q2_max: float, mass: float) -> float:
    """Share of the dipole Q2 distribution on [q2_min, q2_max] lying above q2_lo."""
    m2 = mass * mass
    full = _dipole_cdf(q2_max, m2) - _dipole_cdf(q2_min, m2)
    if full <= 0.0 or q2_lo >= q2_max:
        return 0.0
    if q2_lo <= q2_min:
        return 1.0
    return (_dipole_cdf(q2_max, m2) - _dipole_cdf(q2_lo, m2)) / full


def pauli_q2_min(m_hit: float, m_final: float, k_fermi: float) -> float:
    """Smallest Q2 at which a nucleon knocked off a nucleon at rest escapes the Fermi sea.

    The recoil carries E = m_hit + nu with nu = (Q2 + m_final^2 - m_hit^2) / 2 m_hit,
    so |p| grows with Q2 and reaches k_fermi at
    Q2 = 2 m_hit sqrt(m_final^2 + k_fermi^2) - m_final^2 - m_hit^2.

    Returns:
        Q2 threshold [GeV^2]; 0 for free nucleons (k_fermi <= 0)
    """
    if k_fermi <= 0.0:
        return 0.0
    e_fermi = math.sqrt(m_final * m_final + k_fermi * k_fermi)
    return max(2.0 * m_hit * e_fermi - m_final * m_final - m_hit * m_hit, 0.0)


def lepton_kinematics(
    probe: FourVector,
    q2: float,
    w: float,
    m_hit: float,
    m_lepton: float,
    rng: np.random.Generator,
) -> Optional[FourVector]:
    """Outgoing lepton 4-momentum for a struck particle at rest.

    Energy transfer nu = (W^2 - M^2 + Q2) / 2M, lepton energy E - nu, and the
    scattering angle from Q2 = 2E(E_l - p_l cos(theta)) - m_l^2. Azimuth is
    uniform around the probe direction.

    Returns:
        Lepton 4-momentum, or None when (Q2, W) is not reachable
    """
    energy = probe.energy
    nu = (w * w - m_hit * m_hit + q2) / (2.0 * m_hit)
    e_lepton = energy - nu
    if e_lepton <= m_lepton:
        return None

    p_lepton = math.sqrt(e_lepton * e_lepton - m_lepton * m_lepton)
    cos_theta = (e_lepton - (q2 + m_lepton * m_lepton) / (2.0 * energy)) / p_lepton
    if abs(cos_theta) > 1.0:
        # Rounding at the kinematic limits
        if abs(cos_theta) - 1.0 > 1e-9:
            return None
        cos_theta = math.copysign(1.0, cos_theta)

    phi = TWO_PI * rng.random()
    direction = rotate_to_direction(cos_theta, phi, probe.direction)
    return FourVector.from_momentum(p_lepton * direction, m_lepton)


def find_hit(record: EventRecord) -> Tuple[int, Optional[Particle]]:
    """Index and entry of the struck particle (-1, None if absent)."""
    for i, particle in enumerate(record.particles):
        if particle.status == ParticleStatus.NUCLEON_TARGET:
            return i, particle
    return -1, None


class InitialStateAppender(EventRecordVisitor):
    """Adds the probe, the target and the struck particle (at rest) to the record."""

    def process_event_record(self, record: EventRecord, rng: np.random.Generator) -> None:
        init_state = record.interaction.init_state
        target = init_state.target

        record.add_particle(init_state.probe_pdg, ParticleStatus.INITIAL_STATE, init_state.probe_p4)
        target_index = record.add_particle(
            target.pdg_code, ParticleStatus.INITIAL_STATE, FourVector.at_rest(target_mass(target)),
        )

        hit = target.hit_pdg
        if hit is not None:
            mother = target_index if target.is_valid_nucleus() else -1
            record.add_particle(
                hit, ParticleStatus.NUCLEON_TARGET, FourVector.at_rest(pdg.mass(hit)), mother,
            )


class PauliBlocker(EventRecordVisitor):
    """Marks the event unphysical when an outgoing nucleon is below the Fermi momentum.

    Free nucleon targets are never blocked.
    """

    def process_event_record(self, record: EventRecord, rng: np.random.Generator) -> None:
        target = record.interaction.init_state.target
        k_fermi = target.fermi_momentum
        if k_fermi <= 0.0:
            return

        for particle in record.final_state():
            if pdg.is_nucleon(particle.pdg) and particle.p4.p < k_fermi:
                logger.debug(
                    "Pauli blocked: |p| = %.4f GeV < k_F = %.4f GeV", particle.p4.p, k_fermi,
                )
                record.mark_unphysical("Pauli blocked")
                return
