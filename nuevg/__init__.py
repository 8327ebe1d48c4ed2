"""Neutrino Event Generation Driver

Monte Carlo event generation for a fixed neutrino-target initial state.
For each probe 4-momentum the driver selects one interaction channel with
probability proportional to its cross section, resolves the event generator
responsible for it and lets that generator's visitors build the event.

Key Principles:
- Chain of responsibility: first generator whose validity context accepts
  the interaction wins
- Cross sections computed directly or interpolated from a shared spline cache
- Unphysical events regenerated up to a bounded retry depth, then fatal
- Generator lists assembled from named YAML profiles

Version: 1.0
"""

__version__ = "1.0"

# Core data structures
from nuevg.core import (
    EventRecord,
    FourVector,
    InitialState,
    Interaction,
    InteractionList,
    Particle,
    ParticleStatus,
    ProcessInfo,
    Target,
    pdg,
)

# Configuration
from nuevg.config import DriverConfig, create_validated_config

# Errors
from nuevg.errors import (
    GenerationError,
    InvalidEnergyRangeError,
    InvalidInitialStateError,
    InvalidSplineParametersError,
    NoGeneratorFoundError,
    NoInteractionSelectedError,
    RetryLimitExceededError,
    SplineAvailabilityWarning,
    SplinesNotLoadedError,
)

# Splines
from nuevg.splines import (
    Spline,
    XSecSplineList,
    get_global_spline_list,
    reset_global_spline_list,
)

# Generators
from nuevg.generators import (
    EventGenerator,
    EventGeneratorList,
    EventGeneratorListAssembler,
    InteractionFilter,
    InteractionSelector,
    ResponsibilityChain,
)

# Driver
from nuevg.driver import EventGenerationDriver, GenerationAttempt, create_driver

# Flux
from nuevg.flux import CylindricalBeamFlux

__all__ = [
    # Version
    "__version__",
    # Core
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
    # Config
    "DriverConfig",
    "create_validated_config",
    # Errors
    "GenerationError",
    "InvalidInitialStateError",
    "NoInteractionSelectedError",
    "NoGeneratorFoundError",
    "RetryLimitExceededError",
    "SplinesNotLoadedError",
    "InvalidSplineParametersError",
    "InvalidEnergyRangeError",
    "SplineAvailabilityWarning",
    # Splines
    "Spline",
    "XSecSplineList",
    "get_global_spline_list",
    "reset_global_spline_list",
    # Generators
    "EventGenerator",
    "EventGeneratorList",
    "EventGeneratorListAssembler",
    "InteractionFilter",
    "InteractionSelector",
    "ResponsibilityChain",
    # Driver
    "EventGenerationDriver",
    "GenerationAttempt",
    "create_driver",
    # Flux
    "CylindricalBeamFlux",
]
