"""Tests for EventGenerationDriver."""

import logging
import warnings
from dataclasses import replace

import numpy as np
import pytest
from numpy.testing import assert_allclose

from nuevg.config import ConfigurationError, DriverConfig
from nuevg.config.enums import InteractionType, ProcessType
from nuevg.core import pdg
from nuevg.core.initial_state import InitialState
from nuevg.core.target import Target
from nuevg.driver import EventGenerationDriver, GenerationAttempt, create_driver
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
from nuevg.generators import EventGeneratorList, InteractionFilter, SplineSettings
from nuevg.splines import XSecSplineList, get_global_spline_list

from conftest import (
    FailingVisitor,
    FinalStateVisitor,
    RandomlyFailingVisitor,
    beam,
    make_toy_generator,
)

# Total toy cross section on C12 per GeV:
# QES 6 n x 1.0 + RES 12 N x 2.0 + DIS 12 N x 0.5, in 1e-38 cm2
TOY_SUM_SLOPE = 36.0e-38


def single_generator_driver(visitors, max_retry_depth=1000, spline_list=None, **toy_kwargs):
    generator = make_toy_generator(
        "QES", ProcessType.QUASI_ELASTIC, InteractionType.WEAK_CC, 1.0e-38,
        hits=(pdg.NEUTRON,), visitors=visitors, **toy_kwargs,
    )
    config = DriverConfig(generator_list="Single", seed=1, max_retry_depth=max_retry_depth)
    driver = EventGenerationDriver(
        config,
        generator_list=EventGeneratorList([generator], profile="Single"),
        spline_list=spline_list if spline_list is not None else XSecSplineList(),
    )
    driver.set_initial_state(pdg.NU_MU, 6, 12)
    return driver


def algorithm_calls(driver):
    return sum(g.xsec_algorithm.n_calls for g in driver.generator_list)


class TestConstruction:
    """Tests for driver construction and configuration."""

    def test_invalid_config_rejected(self, toy_generator_list):
        with pytest.raises(ConfigurationError):
            EventGenerationDriver(DriverConfig(spline_knots=1), generator_list=toy_generator_list)

    def test_unknown_profile_rejected(self):
        with pytest.raises(ConfigurationError, match="not found"):
            EventGenerationDriver(DriverConfig(generator_list="Bogus"))

    def test_assembles_profile_from_config(self, spline_list):
        driver = EventGenerationDriver(DriverConfig(generator_list="NC"), spline_list=spline_list)
        assert driver.generator_list.names() == ["RES-NC", "DIS-NC"]

    def test_generators_path(self, tmp_path, spline_list):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "event_generators:\n"
            "  MyQE: {model: qel, current: CC, e_min: 0.0, e_max: 30.0}\n"
            "generator_lists:\n"
            "  Mine: [MyQE]\n"
        )
        config = DriverConfig(generator_list="Mine", generators_path=str(path))
        driver = EventGenerationDriver(config, spline_list=spline_list)
        assert driver.generator_list.names() == ["MyQE"]

    def test_defaults_to_global_spline_list(self, toy_generator_list):
        driver = EventGenerationDriver(DriverConfig(), generator_list=toy_generator_list)
        assert driver.spline_list is get_global_spline_list()

    def test_initial_flags(self, toy_driver):
        assert not toy_driver.using_splines
        assert toy_driver.filtering_unphysical
        assert toy_driver.filter is None
        assert toy_driver.xsec_sum_spline is None

    def test_configures_logging_messages(self, toy_generator_list, spline_list, caplog):
        with caplog.at_level(logging.INFO, logger="nuevg.driver.driver"):
            driver = EventGenerationDriver(
                DriverConfig(), generator_list=toy_generator_list, spline_list=spline_list,
            )
            driver.set_initial_state(pdg.NU_MU, 6, 12)
        assert "Set neutrino PDG code: 14" in caplog.text
        assert "Set target PDG code: 1000060120" in caplog.text


class TestInitialState:
    """Tests for initial state handling."""

    @pytest.mark.parametrize(
        "probe, Z, A",
        [(14, 6, 12), (-14, 8, 16), (12, 1, 1), (-12, 0, 1), (16, 26, 56)],
    )
    def test_valid_initial_states(self, toy_generator_list, spline_list, probe, Z, A):
        driver = EventGenerationDriver(generator_list=toy_generator_list, spline_list=spline_list)
        driver.set_initial_state(probe, Z, A)
        assert driver.is_valid_init_state()
        driver.assert_is_valid_init_state()

    @pytest.mark.parametrize("probe", [11, 13, 2212, 22, 0])
    def test_non_neutrino_probe_is_invalid(self, toy_generator_list, spline_list, probe):
        driver = EventGenerationDriver(generator_list=toy_generator_list, spline_list=spline_list)
        driver.set_initial_state(probe, 6, 12)
        assert not driver.is_valid_init_state()
        with pytest.raises(InvalidInitialStateError):
            driver.assert_is_valid_init_state()

    @pytest.mark.parametrize("Z, A", [(0, 0), (7, 6), (3, 1)])
    def test_invalid_target_rejected(self, toy_generator_list, spline_list, Z, A):
        driver = EventGenerationDriver(generator_list=toy_generator_list, spline_list=spline_list)
        with pytest.raises(InvalidInitialStateError, match="neither a valid nucleus"):
            driver.set_initial_state(pdg.NU_MU, Z, A)
        assert driver.target is None

    def test_unset_initial_state(self, toy_generator_list, spline_list):
        driver = EventGenerationDriver(generator_list=toy_generator_list, spline_list=spline_list)
        assert not driver.is_valid_init_state()
        with pytest.raises(InvalidInitialStateError):
            driver.generate_event(beam(1.0))
        with pytest.raises(InvalidInitialStateError):
            driver.xsec_sum(beam(1.0))

    def test_set_from_initial_state(self, toy_generator_list, spline_list):
        driver = EventGenerationDriver(generator_list=toy_generator_list, spline_list=spline_list)
        driver.set_initial_state_from(InitialState(pdg.NU_E, Target(8, 16)))
        assert driver.probe_pdg == pdg.NU_E
        assert driver.target == Target(8, 16)

    def test_create_driver(self, toy_generator_list, spline_list):
        driver = create_driver(
            pdg.NU_MU_BAR, 8, 16, generator_list=toy_generator_list, spline_list=spline_list,
        )
        assert driver.probe_pdg == pdg.NU_MU_BAR
        assert driver.target.pdg_code == pdg.ion_code(8, 16)

    def test_summary(self, toy_driver):
        text = str(toy_driver)
        assert "Neutrino PDG code" in text
        assert "14" in text
        assert "1000060120" in text

    def test_summary_without_initial_state(self, toy_generator_list, spline_list):
        driver = EventGenerationDriver(generator_list=toy_generator_list, spline_list=spline_list)
        assert "not defined properly" in driver.summary()


class TestGenerateEvent:
    """Tests for event generation."""

    def test_generates_record(self, toy_driver):
        record = toy_driver.generate_event(beam(5.0))
        assert not record.is_unphysical
        assert record.interaction.probe_energy == 5.0
        assert record.interaction.probe_pdg == pdg.NU_MU
        assert record.interaction.init_state.target.Z == 6
        assert record.interaction.init_state.target.A == 12
        assert record.xsec > 0.0
        assert len(record.particles) == 2

    def test_channel_frequencies(self, toy_driver):
        """Generated channels follow the cross section shares."""
        n_events = 3000
        counts = {ProcessType.QUASI_ELASTIC: 0, ProcessType.RESONANT: 0, ProcessType.DEEP_INELASTIC: 0}
        for _ in range(n_events):
            record = toy_driver.generate_event(beam(5.0))
            counts[record.interaction.process_info.process] += 1

        fractions = np.array([counts[p] for p in counts]) / n_events
        assert_allclose(fractions, [6 / 36, 24 / 36, 6 / 36], atol=0.03)

    def test_responsible_generator_builds_event(self, toy_driver):
        toy_driver.set_filter(InteractionFilter.create(processes=["DIS"]))
        record = toy_driver.generate_event(beam(5.0))
        assert record.interaction.process_info.process == ProcessType.DEEP_INELASTIC
        assert [p.pdg for p in record.particles] == [pdg.NU_MU, pdg.MUON]

    def test_filter_restricts_channels(self, toy_driver):
        interaction_filter = InteractionFilter.create(processes=["QES"])
        toy_driver.set_filter(interaction_filter)
        assert toy_driver.filter is interaction_filter
        for _ in range(50):
            record = toy_driver.generate_event(beam(5.0))
            assert record.interaction.process_info.process == ProcessType.QUASI_ELASTIC
        assert "proc=QES" in toy_driver.summary()

    def test_filter_can_be_cleared(self, toy_driver):
        toy_driver.set_filter(InteractionFilter.create(processes=["GLR"]))
        toy_driver.set_filter(None)
        assert toy_driver.generate_event(beam(5.0)) is not None

    def test_no_interaction_selected_is_fatal(self, toy_driver, caplog):
        toy_driver.set_filter(InteractionFilter.create(processes=["GLR"]))
        with caplog.at_level(logging.CRITICAL):
            with pytest.raises(NoInteractionSelectedError):
                toy_driver.generate_event(beam(5.0))
        assert any(r.levelno == logging.CRITICAL for r in caplog.records)

    def test_zero_cross_section_is_fatal(self, toy_driver):
        with pytest.raises(NoInteractionSelectedError):
            toy_driver.generate_event(beam(0.0))

    def test_no_generator_found_is_fatal(self, toy_driver):
        """Selected channel above every validity range of its process."""
        toy_driver.set_filter(InteractionFilter.create(processes=["QES"]))
        with pytest.raises(NoGeneratorFoundError, match="No event generator accepts"):
            toy_driver.generate_event(beam(150.0))

    def test_errors_share_base_class(self, toy_driver):
        toy_driver.set_filter(InteractionFilter.create(processes=["GLR"]))
        with pytest.raises(GenerationError):
            toy_driver.generate_event(beam(5.0))

    def test_reproducible_with_seed(self, toy_generators):
        def run():
            driver = EventGenerationDriver(
                DriverConfig(seed=99),
                generator_list=EventGeneratorList(toy_generators),
                spline_list=XSecSplineList(),
            )
            driver.set_initial_state(pdg.NU_MU, 6, 12)
            return [driver.generate_event(beam(5.0)).interaction.key for _ in range(30)]

        assert run() == run()


class TestUnphysicalEvents:
    """Tests for unphysical event filtering and the retry bound."""

    def test_unphysical_events_regenerated(self):
        failing = FailingVisitor(n_failures=3)
        driver = single_generator_driver([failing, FinalStateVisitor()], max_retry_depth=10)

        attempt = driver.try_generate_event(beam(2.0))

        assert isinstance(attempt, GenerationAttempt)
        assert not attempt.exceeded
        assert attempt.n_discarded == 3
        assert not attempt.record.is_unphysical
        assert failing.n_calls == 4

    def test_never_returns_unphysical(self):
        driver = single_generator_driver([RandomlyFailingVisitor(0.5), FinalStateVisitor()])
        for _ in range(100):
            record = driver.generate_event(beam(2.0))
            assert not record.is_unphysical

    def test_retry_limit_is_fatal(self, caplog):
        driver = single_generator_driver([FailingVisitor(n_failures=3)], max_retry_depth=2)
        with caplog.at_level(logging.CRITICAL):
            with pytest.raises(RetryLimitExceededError) as excinfo:
                driver.generate_event(beam(2.0))
        assert excinfo.value.n_attempts == 3
        assert "aborting" in caplog.text

    def test_retry_limit_reported_by_try(self):
        driver = single_generator_driver([FailingVisitor(n_failures=5)], max_retry_depth=2)
        attempt = driver.try_generate_event(beam(2.0))
        assert attempt.exceeded
        assert attempt.record is None
        assert attempt.n_discarded == 3

    def test_exactly_max_retry_depth_discards_succeeds(self):
        driver = single_generator_driver([FailingVisitor(n_failures=2)], max_retry_depth=2)
        attempt = driver.try_generate_event(beam(2.0))
        assert not attempt.exceeded
        assert attempt.n_discarded == 2

    def test_zero_retry_depth(self):
        driver = single_generator_driver([FailingVisitor(n_failures=1)], max_retry_depth=0)
        with pytest.raises(RetryLimitExceededError):
            driver.generate_event(beam(2.0))
        assert not driver.generate_event(beam(2.0)).is_unphysical

    def test_filter_off_returns_unphysical(self):
        driver = single_generator_driver([FailingVisitor(n_failures=1)])
        driver.filter_unphysical(False)
        assert not driver.filtering_unphysical

        record = driver.generate_event(beam(2.0))
        assert record.is_unphysical
        assert record.unphysical_reasons == ["forced failure"]

    def test_same_probe_momentum_reused(self):
        failing = FailingVisitor(n_failures=2)
        driver = single_generator_driver([failing, FinalStateVisitor()])
        record = driver.generate_event(beam(3.5))
        assert record.interaction.probe_energy == 3.5

    def test_discards_logged_as_warnings(self, caplog):
        driver = single_generator_driver([FailingVisitor(n_failures=1), FinalStateVisitor()])
        with caplog.at_level(logging.WARNING):
            driver.generate_event(beam(2.0))
        assert "unphysical event (forced failure)" in caplog.text


class TestXSecSum:
    """Tests for the cross section sum."""

    def test_direct_sum(self, toy_driver):
        assert_allclose(toy_driver.xsec_sum(beam(2.0)), TOY_SUM_SLOPE * 2.0, rtol=1e-12)

    def test_sum_ignores_filter(self, toy_driver):
        toy_driver.set_filter(InteractionFilter.create(processes=["QES"]))
        assert_allclose(toy_driver.xsec_sum(beam(2.0)), TOY_SUM_SLOPE * 2.0, rtol=1e-12)

    def test_sum_ignores_validity(self, toy_driver):
        """Channels are summed even outside their generator's validity range."""
        assert_allclose(toy_driver.xsec_sum(beam(150.0)), TOY_SUM_SLOPE * 150.0, rtol=1e-12)

    @pytest.mark.parametrize("energy", [1.5, 3.7, 42.0])
    def test_cached_matches_direct(self, toy_generators, energy):
        """Interpolated and directly computed sums agree."""
        direct = EventGenerationDriver(
            generator_list=EventGeneratorList(toy_generators), spline_list=XSecSplineList(),
        )
        direct.set_initial_state(pdg.NU_MU, 6, 12)
        expected = direct.xsec_sum(beam(energy))

        cached = EventGenerationDriver(
            generator_list=EventGeneratorList(toy_generators), spline_list=XSecSplineList(),
        )
        cached.set_initial_state(pdg.NU_MU, 6, 12)
        cached.create_splines()

        calls = algorithm_calls(cached)
        assert_allclose(cached.xsec_sum(beam(energy)), expected, rtol=1e-6)
        assert algorithm_calls(cached) == calls

    def test_sum_logged(self, toy_driver, caplog):
        with caplog.at_level(logging.INFO, logger="nuevg.driver.driver"):
            toy_driver.xsec_sum(beam(2.0))
        assert "SumXSec" in caplog.text
        assert "*computed*" in caplog.text


class TestSplines:
    """Tests for spline creation and use."""

    def test_create_splines_counts(self, toy_driver):
        assert toy_driver.create_splines() == 5
        assert toy_driver.using_splines
        assert len(toy_driver.spline_list) == 5

    def test_create_splines_twice(self, toy_driver):
        toy_driver.create_splines()
        assert toy_driver.create_splines() == 0
        assert len(toy_driver.spline_list) == 5

    def test_spline_energy_range(self, toy_driver):
        toy_driver.create_splines()
        dis = toy_driver.generator_list.get("DIS")
        qes = toy_driver.generator_list.get("QES")

        interaction = dis.create_interaction_list(InitialState(pdg.NU_MU, Target(6, 12)))[0]
        spline = toy_driver.spline_list.get_spline(dis.xsec_algorithm, interaction)
        assert spline.x_min == 1.0
        assert spline.x_max == 200.0

        interaction = qes.create_interaction_list(InitialState(pdg.NU_MU, Target(6, 12)))[0]
        spline = toy_driver.spline_list.get_spline(qes.xsec_algorithm, interaction)
        assert spline.x_min == pytest.approx(0.01)
        assert len(spline) == toy_driver.config.spline_knots

    def test_log_spacing_option(self, toy_driver):
        toy_driver.create_splines(use_log_e=False)
        assert not toy_driver.spline_list.use_log_energy
        qes = toy_driver.generator_list.get("QES")
        interaction = qes.create_interaction_list(InitialState(pdg.NU_MU, Target(6, 12)))[0]
        knots = toy_driver.spline_list.get_spline(qes.xsec_algorithm, interaction).knots
        assert_allclose(np.diff(knots), np.diff(knots)[0])

    def test_shared_cache_between_drivers(self, toy_generators, spline_list):
        first = create_driver(
            pdg.NU_MU, 6, 12, generator_list=EventGeneratorList(toy_generators), spline_list=spline_list,
        )
        second = create_driver(
            pdg.NU_MU, 6, 12, generator_list=EventGeneratorList(toy_generators), spline_list=spline_list,
        )
        assert first.create_splines() == 5
        assert second.create_splines() == 0
        assert second.using_splines

    def test_use_splines_without_cache_warns(self, toy_driver, caplog):
        with pytest.warns(SplineAvailabilityWarning, match="reverting to direct"):
            assert toy_driver.use_splines() is False
        assert not toy_driver.using_splines
        assert "No spline for" in caplog.text

    def test_use_splines_with_partial_cache(self, toy_generators, spline_list):
        partial = create_driver(
            pdg.NU_MU, 6, 12,
            generator_list=EventGeneratorList(toy_generators[:1]), spline_list=spline_list,
        )
        partial.create_splines()

        full = create_driver(
            pdg.NU_MU, 6, 12, generator_list=EventGeneratorList(toy_generators), spline_list=spline_list,
        )
        with pytest.warns(SplineAvailabilityWarning):
            assert full.use_splines() is False
        assert not full.using_splines

    def test_use_splines_with_full_cache(self, toy_generators, spline_list):
        loader = create_driver(
            pdg.NU_MU, 6, 12, generator_list=EventGeneratorList(toy_generators), spline_list=spline_list,
        )
        loader.create_splines()

        user = create_driver(
            pdg.NU_MU, 6, 12, generator_list=EventGeneratorList(toy_generators), spline_list=spline_list,
        )
        with warnings.catch_warnings():
            warnings.simplefilter("error", SplineAvailabilityWarning)
            assert user.use_splines() is True
        assert user.using_splines

    def test_use_splines_reverts_spline_mode(self, toy_driver):
        toy_driver.create_splines()
        toy_driver.set_initial_state(pdg.NU_MU_BAR, 6, 12)
        with pytest.warns(SplineAvailabilityWarning):
            toy_driver.use_splines()
        assert not toy_driver.using_splines

    def test_generation_in_spline_mode(self, toy_driver):
        toy_driver.create_splines()
        calls = algorithm_calls(toy_driver)
        record = toy_driver.generate_event(beam(5.0))
        assert not record.is_unphysical
        assert algorithm_calls(toy_driver) == calls

    def test_generator_spline_settings_override_config(self, spline_list):
        generator = replace(
            make_toy_generator("QES", ProcessType.QUASI_ELASTIC, InteractionType.WEAK_CC, 1.0e-38,
                               hits=(pdg.NEUTRON,)),
            spline_settings=SplineSettings(e_min=0.5, e_max=50.0, n_knots=120),
        )
        driver = create_driver(
            pdg.NU_MU, 6, 12, generator_list=EventGeneratorList([generator]), spline_list=spline_list,
        )
        driver.create_splines()

        interaction = generator.create_interaction_list(InitialState(pdg.NU_MU, Target(6, 12)))[0]
        spline = spline_list.get_spline(generator.xsec_algorithm, interaction)
        assert len(spline) == 120
        assert spline.x_min == 0.5
        assert spline.x_max == 50.0

    def test_spline_settings_floor_still_applies(self, spline_list):
        generator = replace(
            make_toy_generator("QES", ProcessType.QUASI_ELASTIC, InteractionType.WEAK_CC, 1.0e-38,
                               hits=(pdg.NEUTRON,)),
            spline_settings=SplineSettings(e_min=1.0e-4),
        )
        driver = create_driver(
            pdg.NU_MU, 6, 12, generator_list=EventGeneratorList([generator]), spline_list=spline_list,
        )
        driver.create_splines()
        interaction = generator.create_interaction_list(InitialState(pdg.NU_MU, Target(6, 12)))[0]
        assert spline_list.get_spline(generator.xsec_algorithm, interaction).x_min == pytest.approx(0.01)

    def test_range_below_floor_is_invalid(self, spline_list, caplog):
        driver = single_generator_driver([FinalStateVisitor()], spline_list=spline_list, e_max=0.005)
        with pytest.raises(InvalidSplineParametersError, match="QES"):
            driver.create_splines()
        assert len(spline_list) == 0
        assert not driver.using_splines
        assert "Invalid spline grid" in caplog.text

    def test_cache_not_reused_for_other_initial_state(self, toy_driver):
        toy_driver.create_splines()
        toy_driver.set_initial_state(pdg.NU_MU, 8, 16)
        assert toy_driver.create_splines() == 5
        assert len(toy_driver.spline_list) == 10


class TestXSecSumSpline:
    """Tests for create_xsec_sum_spline()."""

    def test_requires_spline_mode(self, toy_driver):
        calls = algorithm_calls(toy_driver)
        with pytest.raises(SplinesNotLoadedError):
            toy_driver.create_xsec_sum_spline(20, 1.0, 50.0)
        assert algorithm_calls(toy_driver) == calls
        assert toy_driver.xsec_sum_spline is None

    @pytest.mark.parametrize(
        "n_knots, e_min, e_max",
        [(2, 1.0, 50.0), (20, 0.0, 50.0), (20, -1.0, 50.0), (20, 50.0, 1.0), (20, 5.0, 5.0)],
    )
    def test_invalid_parameters(self, toy_driver, n_knots, e_min, e_max):
        toy_driver.create_splines()
        calls = algorithm_calls(toy_driver)
        with pytest.raises(InvalidSplineParametersError):
            toy_driver.create_xsec_sum_spline(n_knots, e_min, e_max)
        assert algorithm_calls(toy_driver) == calls
        assert toy_driver.xsec_sum_spline is None

    def test_invalid_parameters_are_value_errors(self, toy_driver):
        toy_driver.create_splines()
        with pytest.raises(ValueError):
            toy_driver.create_xsec_sum_spline(20, 10.0, 1.0)

    def test_sum_spline(self, toy_driver):
        toy_driver.create_splines()
        spline = toy_driver.create_xsec_sum_spline(20, 1.0, 50.0)
        assert toy_driver.xsec_sum_spline is spline
        assert len(spline) == 20
        assert_allclose(spline.knots[[0, -1]], [1.0, 50.0])
        assert_allclose(spline(10.0), TOY_SUM_SLOPE * 10.0, rtol=1e-6)

    def test_linear_knots(self, toy_driver):
        toy_driver.create_splines()
        spline = toy_driver.create_xsec_sum_spline(11, 1.0, 11.0, in_log_e=False)
        assert_allclose(np.diff(spline.knots), 1.0)

    def test_sum_spline_replaced(self, toy_driver):
        toy_driver.create_splines()
        first = toy_driver.create_xsec_sum_spline(10, 1.0, 50.0)
        second = toy_driver.create_xsec_sum_spline(15, 1.0, 50.0)
        assert toy_driver.xsec_sum_spline is second
        assert second is not first


class TestValidEnergyRange:
    """Tests for valid_energy_range()."""

    def test_union_of_ranges(self, toy_driver):
        e_min, e_max = toy_driver.valid_energy_range()
        assert e_min == pytest.approx(0.01)
        assert e_max == 200.0

    def test_floor_not_applied_above_it(self):
        driver = single_generator_driver([FinalStateVisitor()], e_min=2.0, e_max=30.0)
        assert driver.valid_energy_range() == (2.0, 30.0)

    def test_empty_generator_list(self, spline_list):
        driver = create_driver(
            pdg.NU_MU, 6, 12, generator_list=EventGeneratorList(), spline_list=spline_list,
        )
        with pytest.raises(InvalidEnergyRangeError):
            driver.valid_energy_range()

    def test_requires_initial_state(self, toy_generator_list, spline_list):
        driver = EventGenerationDriver(generator_list=toy_generator_list, spline_list=spline_list)
        with pytest.raises(InvalidInitialStateError):
            driver.valid_energy_range()


class TestPhysicsProfiles:
    """End-to-end runs with the packaged generator list profiles."""

    def test_carbon_scenario(self, spline_list):
        """nu_mu on C12 at 1 GeV with the Default profile."""
        driver = create_driver(pdg.NU_MU, 6, 12, DriverConfig(seed=2024), spline_list=spline_list)

        e_min, e_max = driver.valid_energy_range()
        assert e_min <= 1.0 <= e_max

        assert driver.xsec_sum(beam(1.0)) > 0.0
        for _ in range(50):
            record = driver.generate_event(beam(1.0))
            assert not record.is_unphysical
            assert record.interaction.probe_pdg == pdg.NU_MU
            assert record.interaction.init_state.target.pdg_code == 1000060120
            assert record.final_state()

    def test_carbon_just_above_qel_threshold(self, spline_list):
        """At 0.15 GeV every QEL recoil would be Pauli blocked; only RES-NC is open."""
        driver = create_driver(pdg.NU_MU, 6, 12, DriverConfig(seed=7), spline_list=spline_list)
        assert driver.xsec_sum(beam(0.15)) > 0.0
        for _ in range(20):
            record = driver.generate_event(beam(0.15))
            assert not record.is_unphysical
            info = record.interaction.process_info
            assert info.process == ProcessType.RESONANT
            assert info.current == InteractionType.WEAK_NC

    @pytest.mark.parametrize("energy", [5.0, 20.0, 100.0])
    def test_cached_matches_direct(self, energy):
        direct = create_driver(pdg.NU_MU, 6, 12, spline_list=XSecSplineList())
        cached = create_driver(pdg.NU_MU, 6, 12, spline_list=XSecSplineList())
        assert cached.create_splines() == 9

        assert_allclose(cached.xsec_sum(beam(energy)), direct.xsec_sum(beam(energy)), rtol=0.05)

    def test_glashow_resonance_for_anti_nu_e(self, spline_list):
        driver = create_driver(
            pdg.NU_E_BAR, 8, 16, DriverConfig(generator_list="GLRES", seed=5), spline_list=spline_list,
        )
        record = driver.generate_event(beam(6.3e6))
        assert record.interaction.process_info.process == ProcessType.GLASHOW_RESONANCE
        assert pdg.W_MINUS in [p.pdg for p in record.particles]

    def test_glashow_peak_cached_matches_direct(self):
        config = DriverConfig(generator_list="GLRES")
        direct = create_driver(pdg.NU_E_BAR, 8, 16, config, spline_list=XSecSplineList())
        cached = create_driver(pdg.NU_E_BAR, 8, 16, config, spline_list=XSecSplineList())
        assert cached.create_splines() == 1

        glres = cached.generator_list.get("GLRES")
        interaction = glres.create_interaction_list(InitialState(pdg.NU_E_BAR, Target(8, 16)))[0]
        assert len(cached.spline_list.get_spline(glres.xsec_algorithm, interaction)) == 5000

        for energy in (6.0e6, 6.3e6, 6.5e6):
            assert_allclose(cached.xsec_sum(beam(energy)), direct.xsec_sum(beam(energy)), rtol=0.01)

    def test_glashow_profile_empty_for_nu_mu(self, spline_list):
        driver = create_driver(
            pdg.NU_MU, 8, 16, DriverConfig(generator_list="GLRES"), spline_list=spline_list,
        )
        assert driver.xsec_sum(beam(6.3e6)) == 0.0
        with pytest.raises(NoInteractionSelectedError):
            driver.generate_event(beam(6.3e6))
