"""Core data model: four-vectors, PDG codes, targets, initial states,
interactions and event records."""

from nuevg.core import pdg
from nuevg.core.event_record import EventRecord, Particle, ParticleStatus
from nuevg.core.initial_state import InitialState
from nuevg.core.interaction import Interaction, InteractionList, ProcessInfo
from nuevg.core.kinematics import FourVector
from nuevg.core.target import Target

__all__ = [
    "pdg",
    "FourVector",
    "Target",
    "InitialState",
    "ProcessInfo",
    "Interaction",
    "InteractionList",
    "EventRecord",
    "Particle",
    "ParticleStatus",
]
