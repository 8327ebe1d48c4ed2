"""
Driver configuration checks

Hard errors come from DriverConfig.validate() and are raised as
ConfigurationError. Settings that are legal but likely to hurt a run
(coarse splines, shallow retry depth, unfiltered records) are reported as
ConfigurationWarning.

Import Policy:
    from nuevg.config.validation import validate_config, warn_if_unsafe, ConfigurationError

DO NOT use: from nuevg.config.validation import *
"""

import warnings
from typing import List, Tuple

from nuevg.config.defaults import (
    RETRY_DEPTH_WARN_THRESHOLD,
    SPLINE_KNOTS_WARN_THRESHOLD,
)
from nuevg.config.driver_config import DriverConfig, create_default_config


class ConfigurationError(Exception):
    """Invalid driver configuration, generator catalog or profile."""


class ConfigurationWarning(Warning):
    """Legal but risky driver setting."""


def validate_config(config: DriverConfig, raise_on_error: bool = True) -> Tuple[bool, List[str]]:
    """Run DriverConfig.validate().

    Args:
        config: Configuration to check
        raise_on_error: Raise instead of returning the problems

    Returns:
        (is_valid, problems)

    Raises:
        ConfigurationError: On any problem when raise_on_error is set
    """
    problems = config.validate()
    if not problems:
        return True, []

    if raise_on_error:
        details = "\n".join(f"  - {problem}" for problem in problems)
        raise ConfigurationError(f"Invalid driver configuration ({len(problems)} error(s)):\n{details}")
    return False, problems


def warn_if_unsafe(config: DriverConfig) -> List[str]:
    """Emit a ConfigurationWarning for each risky setting and return the messages."""
    messages = []

    if config.spline_knots < SPLINE_KNOTS_WARN_THRESHOLD:
        messages.append(
            f"spline_knots ({config.spline_knots}) is small. Interpolated cross "
            "sections may deviate from the directly computed ones."
        )
    if config.max_retry_depth < RETRY_DEPTH_WARN_THRESHOLD:
        messages.append(
            f"max_retry_depth ({config.max_retry_depth}) is small. Channels with "
            "a high Pauli-blocking rate may abort the run."
        )
    if not config.filter_unphysical:
        messages.append("filter_unphysical is off. Returned event records may be incomplete.")

    for message in messages:
        warnings.warn(message, ConfigurationWarning, stacklevel=2)
    return messages


def create_validated_config(**overrides) -> DriverConfig:
    """Default configuration with overrides applied, validated.

    Raises:
        ValueError: For a field DriverConfig does not have
        ConfigurationError: If the result is invalid

    Example:
        >>> config = create_validated_config(generator_list="QE", seed=7)
    """
    config = create_default_config()
    for name, value in overrides.items():
        if not hasattr(config, name):
            raise ValueError(f"Unknown configuration parameter: {name}")
        setattr(config, name, value)

    validate_config(config, raise_on_error=True)
    return config
