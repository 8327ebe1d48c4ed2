"""Event generation driver.

The driver owns an initial state (probe species and target), borrows an
assembled EventGeneratorList and a shared spline cache, and turns a probe
4-momentum into one event:

    select interaction -> resolve generator -> run visitors
        -> accept, or discard the unphysical record and retry (bounded)

It also aggregates cross sections over every reachable channel, either
computed directly or interpolated from the spline cache.

Import Policy:
    from nuevg.driver import EventGenerationDriver

DO NOT use: from nuevg.driver.driver import *
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import numpy as np

from nuevg.config.defaults import XSEC_REPORT_UNIT_CM2
from nuevg.config.driver_config import DriverConfig, create_default_config
from nuevg.config.validation import validate_config
from nuevg.core import pdg
from nuevg.core.event_record import EventRecord
from nuevg.core.initial_state import InitialState
from nuevg.core.interaction import Interaction
from nuevg.core.kinematics import FourVector
from nuevg.core.target import Target
from nuevg.errors import (
    InvalidEnergyRangeError,
    InvalidInitialStateError,
    InvalidSplineParametersError,
    NoGeneratorFoundError,
    NoInteractionSelectedError,
    RetryLimitExceededError,
    SplineAvailabilityWarning,
    SplinesNotLoadedError,
)
from nuevg.generators.assembler import EventGeneratorListAssembler
from nuevg.generators.base import EventGenerator
from nuevg.generators.generator_list import EventGeneratorList
from nuevg.generators.responsibility_chain import ResponsibilityChain
from nuevg.generators.selector import InteractionFilter, InteractionSelector, channel_xsec
from nuevg.splines.spline import Spline, knot_energies
from nuevg.splines.spline_list import XSecSplineList, get_global_spline_list

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationAttempt:
    """Outcome of one bounded generation loop.

    Attributes:
        record: Accepted (or, with filtering off, returned) record; None if exceeded
        n_discarded: Number of unphysical records discarded
        exceeded: True when more than max_retry_depth records were discarded

    """

    record: Optional[EventRecord]
    n_discarded: int
    exceeded: bool


class EventGenerationDriver:
    """Event generation driver for one initial state.

    Example:
        >>> driver = EventGenerationDriver(DriverConfig(seed=1234))
        >>> driver.set_initial_state(14, 6, 12)
        >>> record = driver.generate_event(FourVector(0, 0, 1.0, 1.0))

    Runtime API:
        - set_initial_state(probe_pdg, Z, A) / set_initial_state_from(init_state)
        - generate_event(p4) -> EventRecord
        - xsec_sum(p4) -> float
        - create_splines(use_log_e) / use_splines() / create_xsec_sum_spline(...)
        - valid_energy_range() -> (e_min, e_max)
    """

    def __init__(
        self,
        config: Optional[DriverConfig] = None,
        generator_list: Optional[EventGeneratorList] = None,
        spline_list: Optional[XSecSplineList] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """Initialize driver.

        Args:
            config: Driver configuration (defaults when None)
            generator_list: Pre-assembled generator list; assembled from
                config.generator_list when None
            spline_list: Shared spline cache; the process-wide one when None
            rng: Random generator; seeded from config.seed when None

        Raises:
            ConfigurationError: If the configuration or the profile is invalid

        """
        self.config = config if config is not None else create_default_config()
        validate_config(self.config, raise_on_error=True)

        logger.info("Configuring event generation driver")
        if generator_list is None:
            generator_list = self._assemble(self.config)

        self._generator_list = generator_list
        self._spline_list = spline_list if spline_list is not None else get_global_spline_list()
        self._rng = rng if rng is not None else np.random.default_rng(self.config.seed)

        self._chain = ResponsibilityChain(generator_list)
        self._selector = InteractionSelector(generator_list, self._spline_list, self._rng)

        self._probe_pdg: Optional[int] = None
        self._target: Optional[Target] = None
        self._filter: Optional[InteractionFilter] = None
        self._using_splines = False
        self._filter_unphysical = self.config.filter_unphysical
        self._xsec_sum_spline: Optional[Spline] = None

    @staticmethod
    def _assemble(config: DriverConfig) -> EventGeneratorList:
        logger.info("Specified event generator list = %s", config.generator_list)
        if config.generators_path:
            assembler = EventGeneratorListAssembler.from_yaml(
                config.generator_list, config.generators_path,
            )
        else:
            assembler = EventGeneratorListAssembler(config.generator_list)
        return assembler.assemble()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def generator_list(self) -> EventGeneratorList:
        return self._generator_list

    @property
    def spline_list(self) -> XSecSplineList:
        return self._spline_list

    @property
    def using_splines(self) -> bool:
        return self._using_splines

    @property
    def xsec_sum_spline(self) -> Optional[Spline]:
        return self._xsec_sum_spline

    @property
    def filter(self) -> Optional[InteractionFilter]:
        return self._filter

    @property
    def probe_pdg(self) -> Optional[int]:
        return self._probe_pdg

    @property
    def target(self) -> Optional[Target]:
        return self._target

    @property
    def filtering_unphysical(self) -> bool:
        return self._filter_unphysical

    # ------------------------------------------------------------------
    # Initial state and options
    # ------------------------------------------------------------------

    def set_initial_state(self, probe_pdg: int, Z: int, A: int) -> None:
        """Set probe species and target.

        Raises:
            InvalidInitialStateError: If (Z, A) is neither a valid nucleus nor
                a free nucleon
        """
        target = Target(Z, A)
        if not target.is_valid():
            logger.critical("Invalid target Z = %d, A = %d", Z, A)
            raise InvalidInitialStateError(
                f"Target (Z={Z}, A={A}) is neither a valid nucleus nor a free nucleon",
            )

        self._probe_pdg = probe_pdg
        self._target = target
        logger.info("Set neutrino PDG code: %d", probe_pdg)
        logger.info("Set target PDG code: %d", target.pdg_code)

    def set_initial_state_from(self, init_state: InitialState) -> None:
        target = init_state.target
        self.set_initial_state(init_state.probe_pdg, target.Z, target.A)

    def set_filter(self, interaction_filter: Optional[InteractionFilter]) -> None:
        """Replace the interaction filter; the selector uses it immediately."""
        self._filter = interaction_filter
        self._selector.set_filter(interaction_filter)

    def filter_unphysical(self, on_off: bool) -> None:
        logger.info("Filtering unphysical events is turned %s", "on" if on_off else "off")
        self._filter_unphysical = on_off

    def is_valid_init_state(self) -> bool:
        if self._target is None or self._probe_pdg is None:
            return False
        return pdg.is_neutrino_or_anti_neutrino(self._probe_pdg)

    def assert_is_valid_init_state(self) -> None:
        """Raises InvalidInitialStateError unless a valid initial state is set."""
        if not self.is_valid_init_state():
            logger.critical("Invalid initial state")
            raise InvalidInitialStateError(
                f"Invalid initial state (probe = {self._probe_pdg}, target = {self._target})",
            )

    def _init_state(self, p4: Optional[FourVector] = None) -> InitialState:
        self.assert_is_valid_init_state()
        init_state = InitialState(self._probe_pdg, self._target)
        if p4 is not None:
            init_state = init_state.with_probe_p4(p4)
        return init_state

    def _reachable_channels(
        self, init_state: InitialState,
    ) -> Iterator[Tuple[EventGenerator, Interaction]]:
        """Every (generator, interaction) the generator list offers for the initial state."""
        for generator in self._generator_list:
            logger.debug("Querying [%s] for its interaction list", generator.name)
            interactions = generator.create_interaction_list(init_state)
            if not interactions:
                continue
            for interaction in interactions:
                yield generator, interaction

    # ------------------------------------------------------------------
    # Event generation
    # ------------------------------------------------------------------

    def _generate_once(self, p4: FourVector) -> EventRecord:
        init_state = self._init_state(p4)

        logger.debug("Selecting an interaction for %s", init_state)
        record = self._selector.select_interaction(init_state)
        if record is None:
            logger.critical("No interaction could be selected for %s", init_state)
            raise NoInteractionSelectedError(
                f"No interaction could be selected for {init_state}",
            )

        interaction = record.interaction
        generator = self._chain.find_generator(interaction)
        if generator is None:
            logger.critical("No event generator found for %s", interaction.as_string())
            raise NoGeneratorFoundError(
                f"No event generator accepts {interaction.as_string()} "
                f"at E = {interaction.probe_energy:g} GeV",
            )

        logger.debug("Generating event with [%s]", generator.name)
        generator.process_event_record(record, self._rng)
        return record

    def try_generate_event(self, p4: FourVector) -> GenerationAttempt:
        """Generate one event, retrying unphysical ones up to max_retry_depth.

        The same probe 4-momentum is used for every attempt.

        Args:
            p4: Probe 4-momentum [GeV]

        Returns:
            GenerationAttempt; `exceeded` is True when the retry bound was hit

        Raises:
            InvalidInitialStateError, NoInteractionSelectedError,
            NoGeneratorFoundError: Fatal conditions of a single attempt
        """
        max_depth = self.config.max_retry_depth
        n_discarded = 0

        while True:
            record = self._generate_once(p4)

            if not self._filter_unphysical or not record.is_unphysical:
                return GenerationAttempt(record, n_discarded, exceeded=False)

            n_discarded += 1
            logger.warning(
                "Generated an unphysical event (%s)", ", ".join(record.unphysical_reasons),
            )
            if n_discarded > max_depth:
                return GenerationAttempt(None, n_discarded, exceeded=True)
            logger.warning("Attempting to regenerate the event")

    def generate_event(self, p4: FourVector) -> EventRecord:
        """Generate one event for the configured initial state.

        With unphysical filtering on, the returned record is always physical.

        Raises:
            RetryLimitExceededError: If more than max_retry_depth unphysical
                records were produced in a row
        """
        attempt = self.try_generate_event(p4)
        if attempt.exceeded:
            logger.critical(
                "Could not produce a physical event after %d attempts - aborting",
                attempt.n_discarded,
            )
            raise RetryLimitExceededError(
                f"Could not produce a physical event after {attempt.n_discarded} attempts",
                attempt.n_discarded,
            )
        return attempt.record

    # ------------------------------------------------------------------
    # Cross sections and splines
    # ------------------------------------------------------------------

    def xsec_sum(self, p4: FourVector) -> float:
        """Sum of all channel cross sections [cm2] at the probe energy.

        Interpolated from the spline cache in spline mode (where an entry
        exists), computed directly otherwise. The filter is not applied.
        """
        init_state = self._init_state()
        total = 0.0
        for generator, interaction in self._reachable_channels(init_state):
            interaction.set_probe_p4(p4)
            xsec, interpolated = channel_xsec(
                generator, interaction, self._spline_list, self._using_splines,
            )
            total += xsec
            logger.debug(
                "%s: xsec %s = %.6g x 1e-38 cm2",
                interaction.as_string(), "*interpolated*" if interpolated else "*computed*",
                xsec / XSEC_REPORT_UNIT_CM2,
            )

        logger.info(
            "SumXSec(%s + %s -> X, E = %g GeV) %s = %.6g x 1e-38 cm2",
            pdg.name(self._probe_pdg), pdg.name(self._target.pdg_code), p4.energy,
            "*interpolated*" if self._using_splines else "*computed*",
            total / XSEC_REPORT_UNIT_CM2,
        )
        return total

    def create_xsec_sum_spline(
        self, n_knots: int, e_min: float, e_max: float, in_log_e: bool = True,
    ) -> Spline:
        """Spline of xsec_sum over [e_min, e_max]; replaces any previous one.

        Raises:
            SplinesNotLoadedError: If spline mode is off
            InvalidSplineParametersError: Unless 0 < e_min < e_max and n_knots > 2
        """
        logger.info(
            "Creating spline (sum-xsec = f(%s)) in E = [%g, %g] using %d knots",
            "logE" if in_log_e else "E", e_min, e_max, n_knots,
        )
        if not self._using_splines:
            logger.critical("Cross section splines are not loaded")
            raise SplinesNotLoadedError(
                "Cross section splines are not in use; call create_splines() or use_splines() first",
            )
        if not (0.0 < e_min < e_max and n_knots > 2):
            logger.critical(
                "Invalid sum spline parameters: n_knots = %d, E = [%g, %g]", n_knots, e_min, e_max,
            )
            raise InvalidSplineParametersError(
                f"Need 0 < e_min < e_max and n_knots > 2, got "
                f"e_min={e_min}, e_max={e_max}, n_knots={n_knots}",
            )

        energies = knot_energies(n_knots, e_min, e_max, in_log_e)
        xsecs = [self.xsec_sum(FourVector(0.0, 0.0, float(e), float(e))) for e in energies]

        self._xsec_sum_spline = Spline(energies, xsecs)
        return self._xsec_sum_spline

    def use_splines(self) -> bool:
        """Switch to spline mode if every reachable channel has a cache entry.

        Otherwise stays in direct mode and warns (SplineAvailabilityWarning).

        Returns:
            Whether spline mode is on
        """
        init_state = self._init_state()

        for generator, interaction in self._reachable_channels(init_state):
            if not self._spline_list.spline_exists(generator.xsec_algorithm, interaction):
                message = (
                    f"No spline for [{generator.xsec_algorithm.id}] {interaction.as_string()}; "
                    "reverting to direct cross section computation"
                )
                logger.warning(message)
                warnings.warn(message, SplineAvailabilityWarning, stacklevel=2)
                self._set_spline_mode(False)
                return False

        self._set_spline_mode(True)
        return True

    def create_splines(self, use_log_e: Optional[bool] = None) -> int:
        """Create the missing cache entries of all reachable channels.

        Existing entries are left untouched. Spline mode is on afterwards.

        Args:
            use_log_e: Log-spaced knots for the created splines
                (config.use_log_energy when None)

        Returns:
            Number of splines created
        """
        if use_log_e is None:
            use_log_e = self.config.use_log_energy
        logger.info("Creating cross section splines with log-E knots %s", "on" if use_log_e else "off")
        init_state = self._init_state()
        self._spline_list.set_log_energy(use_log_e)

        n_created = 0
        for generator, interaction in self._reachable_channels(init_state):
            alg = generator.xsec_algorithm
            if self._spline_list.spline_exists(alg, interaction):
                logger.debug("Spline for %s already loaded - skipping", interaction.key)
                continue

            n_knots, e_min, e_max = self._spline_grid(generator)
            logger.info(
                "Creating cross section spline for %s (%d knots, E = [%g, %g] GeV)",
                interaction.as_string(), n_knots, e_min, e_max,
            )
            self._spline_list.create_spline(alg, interaction, n_knots, e_min, e_max)
            n_created += 1

        logger.debug("%s", self._spline_list)
        self._set_spline_mode(True)
        return n_created

    def _spline_grid(self, generator: EventGenerator) -> Tuple[int, float, float]:
        """Knot count and energy range of the splines of one generator.

        The generator's spline settings override its validity range and
        config.spline_knots; e_min is floored at config.spline_e_min_floor.

        Raises:
            InvalidSplineParametersError: Unless 0 < e_min < e_max and n_knots >= 2
        """
        settings = generator.spline_settings
        e_min = generator.validity.e_min if settings.e_min is None else settings.e_min
        e_max = generator.validity.e_max if settings.e_max is None else settings.e_max
        n_knots = self.config.spline_knots if settings.n_knots is None else settings.n_knots
        e_min = max(self.config.spline_e_min_floor, e_min)

        if not (0.0 < e_min < e_max and n_knots >= 2):
            logger.critical(
                "Invalid spline grid for [%s]: n_knots = %d, E = [%g, %g]",
                generator.name, n_knots, e_min, e_max,
            )
            raise InvalidSplineParametersError(
                f"[{generator.name}] needs 0 < e_min < e_max and n_knots >= 2 for its splines, "
                f"got e_min={e_min}, e_max={e_max}, n_knots={n_knots}",
            )
        return n_knots, e_min, e_max

    def _set_spline_mode(self, on_off: bool) -> None:
        self._using_splines = on_off
        self._selector.use_splines = on_off

    def valid_energy_range(self) -> Tuple[float, float]:
        """Union of the generators' validity ranges [GeV].

        Raises:
            InvalidEnergyRangeError: If the range is empty or inverted
        """
        self.assert_is_valid_init_state()

        e_min = float("inf")
        e_max = float("-inf")
        for generator in self._generator_list:
            e_min = min(e_min, max(self.config.spline_e_min_floor, generator.validity.e_min))
            e_max = max(e_max, generator.validity.e_max)

        if not (0.0 <= e_min < e_max):
            logger.critical("Invalid valid energy range [%g, %g]", e_min, e_max)
            raise InvalidEnergyRangeError(f"Empty or inverted energy range [{e_min}, {e_max}]")
        return e_min, e_max

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def summary(self) -> str:
        lines = ["EventGenerationDriver"]
        if self.is_valid_init_state():
            lines.append(f"  Neutrino PDG code ........: {self._probe_pdg}")
            lines.append(f"  Target PDG code ..........: {self._target.pdg_code}")
        else:
            lines.append("  *** The initial state was not defined properly ***")
        if self._filter is not None:
            lines.append(f"  Interaction filter .......: {self._filter}")
        lines.append(f"  Using cross section splines: {'on' if self._using_splines else 'off'}")
        lines.append(f"  Filtering unphysical events: {'on' if self._filter_unphysical else 'off'}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.summary()


def create_driver(
    probe_pdg: int,
    Z: int,
    A: int,
    config: Optional[DriverConfig] = None,
    **kwargs,
) -> EventGenerationDriver:
    """Create a driver with its initial state already set.

    Args:
        probe_pdg: Probe PDG code
        Z, A: Target
        config: Driver configuration
        **kwargs: Passed to EventGenerationDriver (generator_list, spline_list, rng)

    Returns:
        Configured EventGenerationDriver

    """
    driver = EventGenerationDriver(config, **kwargs)
    driver.set_initial_state(probe_pdg, Z, A)
    return driver
