"""Driver Configuration - Single Source of Truth (SSOT)

This module provides the configuration dataclass of the event generation driver.
ALL driver parameters must flow through this class.

Import Policy:
    from nuevg.config.driver_config import DriverConfig, create_default_config

DO NOT use: from nuevg.config.driver_config import *
"""

from dataclasses import asdict, dataclass
from typing import Optional

from nuevg.config.defaults import (
    DEFAULT_FILTER_UNPHYSICAL,
    DEFAULT_GENERATOR_LIST,
    DEFAULT_MAX_RETRY_DEPTH,
    DEFAULT_SEED,
    DEFAULT_SPLINE_E_MIN_FLOOR,
    DEFAULT_SPLINE_KNOTS,
    DEFAULT_USE_LOG_ENERGY,
    DEFAULT_XSEC_SUM_KNOTS,
)


@dataclass
class DriverConfig:
    """Event generation driver configuration (SSOT).

    Example:
        >>> config = DriverConfig(generator_list="CC", seed=1234)
        >>> errors = config.validate()
        >>> if not errors:
        ...     driver = EventGenerationDriver(config)

    Attributes:
        generator_list: Name of the event generator list profile to assemble
        generators_path: Optional YAML catalog replacing the packaged defaults.yaml
        max_retry_depth: Maximum number of unphysical events discarded per call
        filter_unphysical: Regenerate unphysical events instead of returning them
        seed: Seed of the driver's random generator (None: OS entropy)
        spline_knots: Knots per channel spline created by create_splines()
        spline_e_min_floor: Floor applied to validity e_min when placing knots [GeV]
        use_log_energy: Log-spaced knots for channel splines
        xsec_sum_knots: Default knot count of the cross section sum spline

    """

    generator_list: str = DEFAULT_GENERATOR_LIST
    generators_path: Optional[str] = None
    max_retry_depth: int = DEFAULT_MAX_RETRY_DEPTH
    filter_unphysical: bool = DEFAULT_FILTER_UNPHYSICAL
    seed: Optional[int] = DEFAULT_SEED
    spline_knots: int = DEFAULT_SPLINE_KNOTS
    spline_e_min_floor: float = DEFAULT_SPLINE_E_MIN_FLOOR
    use_log_energy: bool = DEFAULT_USE_LOG_ENERGY
    xsec_sum_knots: int = DEFAULT_XSEC_SUM_KNOTS

    def validate(self) -> list[str]:
        """Validate driver configuration.

        Returns:
            List of error messages (empty if valid)

        """
        errors = []

        if not self.generator_list:
            errors.append("generator_list must be a non-empty profile name")

        if self.max_retry_depth < 0:
            errors.append(f"max_retry_depth must be >= 0, got {self.max_retry_depth}")

        # Spline knots: the sum spline needs more than two, so do channels
        if self.spline_knots <= 2:
            errors.append(f"spline_knots must be > 2, got {self.spline_knots}")

        if self.xsec_sum_knots <= 2:
            errors.append(f"xsec_sum_knots must be > 2, got {self.xsec_sum_knots}")

        if self.spline_e_min_floor <= 0:
            errors.append(
                f"spline_e_min_floor must be > 0, got {self.spline_e_min_floor}",
            )

        if self.seed is not None and self.seed < 0:
            errors.append(f"seed must be >= 0 or None, got {self.seed}")

        return errors

    def to_dict(self) -> dict:
        """Convert configuration to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "DriverConfig":
        """Create configuration from dictionary.

        Missing keys fall back to the SSOT defaults; unknown keys are ignored.

        Args:
            data: Dictionary representation, e.g. the `driver` section of defaults.yaml

        Returns:
            DriverConfig instance

        """
        return cls(
            generator_list=data.get("generator_list", DEFAULT_GENERATOR_LIST),
            generators_path=data.get("generators_path"),
            max_retry_depth=int(data.get("max_retry_depth", DEFAULT_MAX_RETRY_DEPTH)),
            filter_unphysical=bool(data.get("filter_unphysical", DEFAULT_FILTER_UNPHYSICAL)),
            seed=data.get("seed", DEFAULT_SEED),
            spline_knots=int(data.get("spline_knots", DEFAULT_SPLINE_KNOTS)),
            spline_e_min_floor=float(
                data.get("spline_e_min_floor", DEFAULT_SPLINE_E_MIN_FLOOR),
            ),
            use_log_energy=bool(data.get("use_log_energy", DEFAULT_USE_LOG_ENERGY)),
            xsec_sum_knots=int(data.get("xsec_sum_knots", DEFAULT_XSEC_SUM_KNOTS)),
        )


def create_default_config() -> DriverConfig:
    """Create a default driver configuration.

    Returns:
        Valid DriverConfig instance

    """
    config = DriverConfig()
    errors = config.validate()

    if errors:
        raise ValueError("Default configuration is invalid:\n" + "\n".join(errors))

    return config
