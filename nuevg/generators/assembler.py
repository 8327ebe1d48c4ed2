"""Event generator list assembly from a named profile.

The catalog (YAML) names event generators and groups them into ordered
profiles:

    event_generators:
      QEL-CC:
        model: qel          # key in the model registry
        current: CC
        e_min: 0.0
        e_max: 500.0
        params:             # optional, passed to the model factory
          axial_mass: 0.99
        spline_knots: 40    # optional spline_e_min / spline_e_max / spline_knots
    generator_lists:
      Default: [QEL-CC, ...]

Model factories are registered with `register_model`; the reference models
in nuevg.physics register themselves on import.

Import Policy:
    from nuevg.generators.assembler import EventGeneratorListAssembler, register_model

DO NOT use: from nuevg.generators.assembler import *
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

from nuevg.config.enums import InteractionType
from nuevg.config.validation import ConfigurationError
from nuevg.config.yaml_loader import get_defaults, load_yaml_file
from nuevg.generators.base import EventGenerator, SplineSettings
from nuevg.generators.generator_list import EventGeneratorList

logger = logging.getLogger(__name__)

# factory(name, current, e_min, e_max, **params) -> EventGenerator
ModelFactory = Callable[..., EventGenerator]

_MODEL_FACTORIES: Dict[str, ModelFactory] = {}


def register_model(model: str, factory: ModelFactory) -> None:
    """Register a model factory under a catalog model name.

    Args:
        model: Name used in the catalog's `model` field
        factory: Callable building an EventGenerator

    """
    if model in _MODEL_FACTORIES and _MODEL_FACTORIES[model] is not factory:
        warnings.warn(
            f"Model '{model}' already registered. Overwriting.",
            UserWarning,
            stacklevel=2,
        )
    _MODEL_FACTORIES[model] = factory


def available_models() -> List[str]:
    _ensure_reference_models()
    return sorted(_MODEL_FACTORIES)


def _ensure_reference_models() -> None:
    # Importing the physics package registers the reference models
    import nuevg.physics  # noqa: F401


class EventGeneratorListAssembler:
    """Builds the EventGeneratorList of one profile.

    Runtime API:
        - assemble() -> EventGeneratorList
        - list_profiles() -> List[str]
        - list_generators() -> List[str]

    Validation:
        - Profile exists
        - Every listed generator exists in the catalog
        - Known model, current and e_min <= e_max for every entry
    """

    def __init__(self, profile: str = "Default", catalog: Optional[Dict[str, Any]] = None):
        """Initialize assembler.

        Args:
            profile: Generator list profile name
            catalog: Parsed catalog mapping; the packaged defaults.yaml when None

        """
        self.profile = profile
        self.catalog = catalog if catalog is not None else get_defaults()

    @classmethod
    def from_yaml(cls, profile: str, path: str) -> "EventGeneratorListAssembler":
        """Assembler reading its catalog from a YAML file."""
        return cls(profile, load_yaml_file(path))

    def list_profiles(self) -> List[str]:
        return list(self.catalog.get("generator_lists") or {})

    def list_generators(self) -> List[str]:
        return list(self.catalog.get("event_generators") or {})

    def profile_entries(self) -> List[str]:
        """Generator names of the profile, in chain order.

        Raises:
            ConfigurationError: If the profile is not defined
        """
        profiles = self.catalog.get("generator_lists") or {}
        if self.profile not in profiles:
            available = ", ".join(profiles) or "none"
            raise ConfigurationError(
                f"Event generator list '{self.profile}' not found. Available: {available}",
            )
        return list(profiles[self.profile] or [])

    def build_generator(self, name: str) -> EventGenerator:
        """Instantiate one catalog entry.

        Raises:
            ConfigurationError: For unknown names, models or currents and
                invalid validity ranges
        """
        _ensure_reference_models()

        entries = self.catalog.get("event_generators") or {}
        if name not in entries:
            raise ConfigurationError(f"Event generator '{name}' is not defined in the catalog")
        entry = entries[name] or {}

        model = entry.get("model")
        if model not in _MODEL_FACTORIES:
            raise ConfigurationError(
                f"Event generator '{name}': unknown model '{model}'. "
                f"Available: {', '.join(sorted(_MODEL_FACTORIES))}",
            )

        try:
            current = InteractionType(entry.get("current", "CC"))
        except ValueError as e:
            raise ConfigurationError(f"Event generator '{name}': {e}") from e

        e_min = float(entry.get("e_min", 0.0))
        e_max = float(entry.get("e_max", 0.0))
        if e_min < 0 or e_max <= e_min:
            raise ConfigurationError(
                f"Event generator '{name}': invalid validity range [{e_min}, {e_max}]",
            )

        params = dict(entry.get("params") or {})
        generator = _MODEL_FACTORIES[model](name, current, e_min, e_max, **params)
        settings = self._spline_settings(name, entry, generator.spline_settings)
        return replace(generator, spline_settings=settings)

    @staticmethod
    def _spline_settings(name: str, entry: Dict[str, Any], base: SplineSettings) -> SplineSettings:
        """Optional spline_e_min / spline_e_max / spline_knots of a catalog entry.

        Keys missing from the entry keep the factory's value.

        Raises:
            ConfigurationError: For a non-positive or inverted range, or fewer than 2 knots
        """
        e_min = entry.get("spline_e_min")
        e_max = entry.get("spline_e_max")
        n_knots = entry.get("spline_knots")

        settings = SplineSettings(
            e_min=base.e_min if e_min is None else float(e_min),
            e_max=base.e_max if e_max is None else float(e_max),
            n_knots=base.n_knots if n_knots is None else int(n_knots),
        )
        if settings.e_min is not None and settings.e_min <= 0:
            raise ConfigurationError(f"Event generator '{name}': spline_e_min must be > 0")
        if settings.e_min is not None and settings.e_max is not None and settings.e_max <= settings.e_min:
            raise ConfigurationError(
                f"Event generator '{name}': invalid spline range [{settings.e_min}, {settings.e_max}]",
            )
        if settings.n_knots is not None and settings.n_knots < 2:
            raise ConfigurationError(f"Event generator '{name}': spline_knots must be >= 2")
        return settings

    def assemble(self) -> EventGeneratorList:
        """Build the ordered generator list of the profile.

        Returns:
            EventGeneratorList in profile order

        Raises:
            ConfigurationError: If the profile or any entry is invalid

        """
        names = self.profile_entries()
        generators = [self.build_generator(name) for name in names]

        logger.info(
            "Assembled event generator list '%s': %s",
            self.profile, ", ".join(names) if names else "(empty)",
        )
        return EventGeneratorList(generators, profile=self.profile)
