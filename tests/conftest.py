"""Pytest configuration and shared fixtures for nuevg tests."""

import pytest
import numpy as np

from nuevg.config.driver_config import DriverConfig
from nuevg.config.enums import InteractionType, KinePhaseSpace, ProcessType
from nuevg.core import pdg
from nuevg.core.event_record import ParticleStatus
from nuevg.core.interaction import Interaction, InteractionList, ProcessInfo
from nuevg.core.kinematics import FourVector
from nuevg.driver import EventGenerationDriver
from nuevg.generators.base import (
    EventGenerator,
    EventRecordVisitor,
    InteractionListGenerator,
    XSecAlgorithm,
    make_validity,
)
from nuevg.generators.generator_list import EventGeneratorList
from nuevg.splines.spline_list import XSecSplineList, reset_global_spline_list


# Test doubles


class LinearXSec(XSecAlgorithm):
    """sigma = n_hit * slope * E; counts its evaluations."""

    def __init__(self, name, slope):
        super().__init__(name)
        self.slope = slope
        self.n_calls = 0

    def valid_process(self, interaction):
        return True

    def xsec(self, interaction, phase_space=KinePhaseSpace.TOTAL):
        self.n_calls += 1
        n_hit = interaction.init_state.target.n_hit(interaction.hit_pdg)
        return n_hit * self.slope * interaction.probe_energy


class ToyListGenerator(InteractionListGenerator):
    """One interaction per struck nucleon species present in the target."""

    def __init__(self, process, current, hits=(pdg.PROTON, pdg.NEUTRON)):
        self.process_info = ProcessInfo(process, current)
        self.hits = hits

    def create_interaction_list(self, init_state):
        if not pdg.is_neutrino_or_anti_neutrino(init_state.probe_pdg):
            return None
        interactions = InteractionList(
            Interaction(init_state.with_hit(hit), self.process_info)
            for hit in self.hits
            if init_state.target.n_hit(hit) > 0
        )
        return interactions or None


class FinalStateVisitor(EventRecordVisitor):
    """Adds the probe and an outgoing lepton carrying the probe momentum."""

    def process_event_record(self, record, rng):
        p4 = record.interaction.init_state.probe_p4
        record.add_particle(record.interaction.probe_pdg, ParticleStatus.INITIAL_STATE, p4)
        record.add_particle(pdg.MUON, ParticleStatus.STABLE_FINAL_STATE, p4, 0)


class FailingVisitor(EventRecordVisitor):
    """Marks the first `n_failures` records it sees unphysical."""

    def __init__(self, n_failures):
        self.n_failures = n_failures
        self.n_calls = 0

    def process_event_record(self, record, rng):
        self.n_calls += 1
        if self.n_calls <= self.n_failures:
            record.mark_unphysical("forced failure")


class RandomlyFailingVisitor(EventRecordVisitor):
    """Marks records unphysical with a fixed probability."""

    def __init__(self, probability):
        self.probability = probability

    def process_event_record(self, record, rng):
        if rng.random() < self.probability:
            record.mark_unphysical("random failure")


def make_toy_generator(
    name,
    process,
    current,
    slope,
    e_min=0.0,
    e_max=100.0,
    hits=(pdg.PROTON, pdg.NEUTRON),
    visitors=None,
):
    """Toy EventGenerator with a linear cross section."""
    return EventGenerator(
        name=name,
        validity=make_validity(e_min, e_max, [process], [current]),
        interaction_list_generator=ToyListGenerator(process, current, hits),
        xsec_algorithm=LinearXSec(f"Toy{name}", slope),
        visitors=visitors if visitors is not None else (FinalStateVisitor(),),
    )


def beam(energy):
    """Probe 4-momentum along z."""
    return FourVector(0.0, 0.0, energy, energy)


# Fixtures


@pytest.fixture(autouse=True)
def fresh_global_spline_list():
    """Every test starts and ends without a process-wide spline list."""
    reset_global_spline_list()
    yield
    reset_global_spline_list()


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(12345)


@pytest.fixture
def spline_list():
    """Empty spline cache."""
    return XSecSplineList()


@pytest.fixture
def toy_generators():
    """QES-CC on neutrons, RES-CC and DIS-NC on both nucleons."""
    return [
        make_toy_generator(
            "QES", ProcessType.QUASI_ELASTIC, InteractionType.WEAK_CC, 1.0e-38,
            hits=(pdg.NEUTRON,),
        ),
        make_toy_generator("RES", ProcessType.RESONANT, InteractionType.WEAK_CC, 2.0e-38),
        make_toy_generator(
            "DIS", ProcessType.DEEP_INELASTIC, InteractionType.WEAK_NC, 0.5e-38,
            e_min=1.0, e_max=200.0,
        ),
    ]


@pytest.fixture
def toy_generator_list(toy_generators):
    """Toy generator list in registration order QES, RES, DIS."""
    return EventGeneratorList(toy_generators, profile="Toy")


@pytest.fixture
def toy_config():
    """Seeded driver configuration."""
    return DriverConfig(generator_list="Toy", seed=42)


@pytest.fixture
def toy_driver(toy_config, toy_generator_list, spline_list):
    """Driver on nu_mu + C12 using the toy generators."""
    driver = EventGenerationDriver(
        toy_config, generator_list=toy_generator_list, spline_list=spline_list,
    )
    driver.set_initial_state(pdg.NU_MU, 6, 12)
    return driver
