"""Configuration Module - Single Source of Truth for Driver Parameters

Default Configuration (loaded from defaults.yaml):
    from nuevg.config import get_default, get_defaults

    # Get a specific default value by dotted key path
    n_knots = get_default('driver.spline_knots')

    # Get the full configuration dictionary (driver defaults,
    # event generator catalog and generator list profiles)
    all_defaults = get_defaults()

Recommended Usage:
    from nuevg.config import DriverConfig, create_validated_config

    config = create_validated_config(generator_list="CC", seed=1234)

Import Policy:
    DO NOT use: from nuevg.config import *

Submodules:
    enums: ProcessType, InteractionType, KinePhaseSpace, KnotSpacing
    yaml_loader: YAML configuration loader (get_default, get_defaults)
    driver_config: DriverConfig dataclass
    validation: Validation utilities (validate_config, warn_if_unsafe, ...)
"""

from nuevg.config.enums import (
    InteractionType,
    KinePhaseSpace,
    KnotSpacing,
    ProcessType,
)
# Import YAML loader functions first (no circular dependencies)
from nuevg.config.yaml_loader import get_default, get_defaults, reload_defaults
from nuevg.config.driver_config import DriverConfig, create_default_config
from nuevg.config.validation import (
    ConfigurationError,
    ConfigurationWarning,
    create_validated_config,
    validate_config,
    warn_if_unsafe,
)


__all__ = [
    # Enums
    "ProcessType",
    "InteractionType",
    "KinePhaseSpace",
    "KnotSpacing",
    # Config classes
    "DriverConfig",
    # Factory functions
    "create_default_config",
    "create_validated_config",
    # Validation
    "ConfigurationError",
    "ConfigurationWarning",
    "validate_config",
    "warn_if_unsafe",
    # YAML defaults access
    "get_default",
    "get_defaults",
    "reload_defaults",
]
