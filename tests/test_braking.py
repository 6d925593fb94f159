"""
Integration tests for the braking calculation pipeline.

Tests cover:
- Reference scenarios (dry 100 km/h, icy steep downhill, rolling resistance stop)
- Determinism and monotonicity
- Input resolution, fallbacks and validation errors
- Best/worst case comparison
- Era override, risk, warnings and auxiliary queries
"""

import math

import pytest
import numpy as np

from brakingsim.src import tables
from brakingsim.src.braking import (
    calculate,
    _calculate,
    resolve_inputs,
    get_surface_types,
    get_weather_presets,
    get_eu_grades,
    get_tyre_compounds,
)
from brakingsim.src.params import InputParameters, ParameterError
from brakingsim.src.solver import solve_stopping


@pytest.fixture
def default_result():
    return calculate()


@pytest.fixture
def icy_downhill_result():
    return calculate(speed_kmh=60.0, slope_degrees=-12.0, surface_type="ICE_SMOOTH", tyre_type="summer")


@pytest.fixture
def rolling_stop_result():
    return calculate(surface_type="GRAVEL_LOOSE", water_depth_mm=8.0, speed_kmh=200.0, slope_degrees=-1.5,
                     fuel_grade="E", tyre_type="winter", actual_psi=22.0, recommended_psi=32.0)


@pytest.mark.integration
class TestReferenceScenarios:
    """Tests for documented example scenarios."""

    def test_dry_100kmh(self, default_result):
        """Test the calibration anchor at 100 km/h on dry standard asphalt."""
        res = default_result
        assert res.can_stop
        assert res.can_stop_with_brakes
        assert not res.using_rolling_physics
        assert 30.0 < res.braking_distance_m < 45.0
        assert np.isclose(res.reaction_distance_m, 41.7)
        assert abs(res.total_stopping_distance_m - res.reaction_distance_m - res.braking_distance_m) <= 0.11
        assert res.risk.level == "MINIMAL"
        assert res.warnings == []

    def test_dry_100kmh_units(self, default_result):
        """Test unit conversions of the result."""
        res = default_result
        assert res.speed_mph == 62.0
        assert res.speed_ms == 27.8
        assert np.isclose(res.braking_distance_ft, res.braking_distance_m * 3.281, atol=0.2)
        assert np.isclose(res.car_lengths, res.total_stopping_distance_m / 4.5, atol=0.1)

    def test_icy_downhill_cannot_stop(self, icy_downhill_result):
        """Test that brakes cannot stop on smooth ice at -12 deg."""
        res = icy_downhill_result
        assert not res.can_stop_with_brakes
        assert res.raw_deceleration_ms2 <= 0.0
        assert res.using_rolling_physics
        assert res.rolling_physics is not None

    def test_icy_downhill_unbounded(self, icy_downhill_result):
        """Test the unbounded result variant."""
        res = icy_downhill_result
        assert not res.can_stop
        assert res.distance_unbounded
        assert res.braking_distance_m is None
        assert res.total_stopping_distance_m is None
        assert res.car_lengths is None
        assert res.rolling_physics.terminal_velocity_kmh > 0.0
        assert res.safe_speed_kmh == 0
        assert res.comparison.worst_case_m is None
        assert res.comparison.vs_best_percent is None
        assert res.warnings[0].severity == "extreme"
        assert res.warnings[0].factor == "physics"
        assert res.cannot_stop_reason.startswith("Cannot stop even with rolling resistance")

    def test_rolling_resistance_stop(self, rolling_stop_result):
        """Test the fallback solver stopping the vehicle on a gentle downhill."""
        res = rolling_stop_result
        assert res.hydroplaning.is_hydroplaning
        assert res.mu_effective == 0.01
        assert not res.can_stop_with_brakes
        assert res.can_stop
        assert res.rolling_physics.can_stop_eventually
        assert res.braking_distance_m > 1000.0
        assert math.isfinite(res.braking_distance_m)
        assert np.isclose(res.deceleration_ms2, res.rolling_physics.effective_deceleration, atol=0.01)
        assert res.risk.level == "EXTREME"
        assert res.risk.score == 100
        assert [w.factor for w in res.warnings[:3]] == ["physics", "rolling_physics", "rolling_physics"]
        assert res.warnings[0].severity == "critical"

    def test_never_inf_or_nan(self):
        """Test that no scenario surfaces inf or nan distances."""
        for surface in ("ICE_SMOOTH", "ICE_WET", "SNOW_DEEP", "GRAVEL_LOOSE"):
            for slope in np.arange(-30.0, 1.0, 3.0):
                res = calculate(surface_type=surface, slope_degrees=slope, speed_kmh=80.0)
                for d in (res.braking_distance_m, res.total_stopping_distance_m):
                    assert d is None or (math.isfinite(d) and d >= 0.0)
                assert math.isfinite(res.mu_effective)
                assert math.isfinite(res.deceleration_ms2)


@pytest.mark.integration
class TestProperties:
    """Tests for determinism, monotonicity and continuity."""

    def test_deterministic(self):
        """Test that two calls with the same input are identical."""
        opts = dict(speed_kmh=130.0, water_depth_mm=3.0, tread_depth_mm=2.5, slope_degrees=-4.0)
        assert calculate(**opts) == calculate(**opts)

    def test_increasing_in_speed(self):
        """Test that braking distance strictly increases with speed."""
        distances = [calculate(speed_kmh=v).braking_distance_m for v in range(20, 201, 10)]
        assert np.all(np.diff(distances) > 0.0)

    def test_decreasing_in_friction(self):
        """Test that braking distance strictly decreases with friction at a fixed speed."""
        inp = resolve_inputs(InputParameters(speed_kmh=100.0))
        distances = [solve_stopping(mu, inp).braking_distance_m for mu in np.linspace(0.1, 1.2, 12)]
        assert np.all(np.diff(distances) < 0.0)

    def test_continuous_at_damp_boundary(self):
        """Test that friction does not jump at 0.5 mm water."""
        below = calculate(water_depth_mm=0.5 - 1e-9, tyre_width_mm=285.0, tyre_compound="track")
        above = calculate(water_depth_mm=0.5 + 1e-9, tyre_width_mm=285.0, tyre_compound="track")
        assert abs(below.mu_effective - above.mu_effective) <= 2e-4

    @pytest.mark.parametrize("water_mm", [0.0, 1.0, 2.0, 2.49])
    def test_no_hydroplaning_below_standing_water(self, water_mm):
        """Test that hydroplaning is never active below 2.5 mm."""
        res = calculate(speed_kmh=220.0, water_depth_mm=water_mm, tread_depth_mm=1.0, actual_psi=18.0)
        assert not res.hydroplaning.is_hydroplaning
        assert res.hydroplaning.friction_multiplier == 1.0


@pytest.mark.integration
class TestComparison:
    """Tests for the best/worst case comparison."""

    @pytest.mark.parametrize("opts", [
        {},
        {"speed_kmh": 80.0, "water_depth_mm": 0.7},
        {"speed_kmh": 50.0, "slope_degrees": 3.0},
        {"speed_kmh": 120.0, "surface_type": "CONCRETE_STD", "slope_degrees": -2.0},
    ])
    def test_worst_total_best_ordering(self, opts):
        """Test worst >= total >= best for inputs not better than the best case profile."""
        res = calculate(**opts)
        comp = res.comparison
        assert comp.worst_case_m >= res.total_stopping_distance_m - 0.1
        assert res.total_stopping_distance_m >= comp.best_case_m - 0.1
        assert comp.vs_best_percent >= 100.0

    def test_comparison_sub_call_not_recursive(self):
        """Test that the internal entry point skips the comparison."""
        res = _calculate(InputParameters(), with_comparison=False)
        assert res.comparison.note == "Comparison not computed"
        assert res.comparison.best_case_m == res.total_stopping_distance_m


class TestInputResolution:
    """Tests for defaults, fallbacks and validation."""

    def test_weather_preset_overrides_water(self):
        """Test that a known preset sets the water depth."""
        res = calculate(weather_preset="STANDING", water_depth_mm=0.0)
        assert res.inputs["water_depth_mm"] == 4.0

    def test_unknown_preset_ignored(self):
        """Test that an unknown preset keeps the water depth."""
        res = calculate(weather_preset="MONSOON", water_depth_mm=1.0)
        assert res.inputs["water_depth_mm"] == 1.0

    def test_missing_pressure_and_load_defaults(self):
        """Test actual pressure and loaded mass fallbacks."""
        inp = resolve_inputs(InputParameters(actual_psi=None, recommended_psi=-1.0, loaded_mass_kg=0.0))
        assert inp.recommended_psi == 32.0
        assert inp.actual_psi == 32.0
        assert inp.loaded_mass_kg == inp.vehicle_mass_kg

    def test_unknown_codes_fall_back(self):
        """Test silent fallback of unknown codes."""
        res = calculate(surface_type="LAVA", eu_grade="Z", tyre_type="racing", tyre_compound="slick")
        ref = calculate()
        assert res.inputs["surface_type"] == "ASPHALT_STD"
        assert res.inputs["tyre_type"] == "summer"
        assert res.braking_distance_m == ref.braking_distance_m

    def test_negative_reaction_time(self):
        """Test that a negative reaction time counts as zero."""
        assert calculate(reaction_time_s=-1.0).reaction_distance_m == 0.0

    def test_params_object_with_overrides(self):
        """Test passing a parameter record plus single overrides."""
        params = InputParameters(speed_kmh=80.0)
        res = calculate(params, surface_type="ICE_ROUGH")
        assert res.speed_kmh == 80.0
        assert res.inputs["surface_type"] == "ICE_ROUGH"
        assert params.surface_type == "ASPHALT_STD"

    @pytest.mark.parametrize("opts", [
        {"speed_kmh": "fast"},
        {"speed_kmh": float("nan")},
        {"tread_depth_mm": float("inf")},
        {"speed_kmh": True},
        {"actual_psi": [30]},
        {"surface_type": 5},
        {"weather_preset": 3},
        {"has_abs": "false"},
        {"has_downforce": None},
        {"is_hot_climate": 2},
        {"top_speed": 300.0},
    ])
    def test_malformed_inputs_raise(self, opts):
        """Test descriptive validation errors."""
        with pytest.raises(ParameterError):
            calculate(**opts)

    def test_bool_flags(self):
        """Test that real flags and 0/1 are accepted for bool fields."""
        assert calculate(has_abs=0).mu_effective == calculate(has_abs=False).mu_effective
        assert calculate(has_abs=False).mu_effective < calculate(has_abs=True).mu_effective
        assert InputParameters(is_hot_climate=1).is_hot_climate is True

    def test_numeric_strings_accepted(self):
        """Test that numeric strings are coerced."""
        assert calculate(speed_kmh="100").braking_distance_m == calculate().braking_distance_m

    def test_error_is_value_error(self):
        """Test that validation errors are ValueErrors naming the field."""
        with pytest.raises(ValueError, match="speed_kmh"):
            InputParameters(speed_kmh="fast")


@pytest.mark.integration
class TestEraAndSafety:
    """Tests for the era override, risk, warnings, safe speed and sparks."""

    def test_era_overrides_friction(self):
        """Test that a pre-modern vehicle uses the historical friction coefficient."""
        res = calculate(vehicle_year=1975)
        assert res.mu_effective == 0.66
        assert res.factors["calibration"].impact == "era-adjusted"
        assert res.factors["vehicle_era"].value == 0.66

    def test_modern_vehicle_uses_calibration(self):
        """Test that a modern model year keeps the real-world calibration."""
        assert calculate(vehicle_year=2020).mu_effective == calculate().mu_effective

    @pytest.mark.parametrize("year", [0, -5])
    def test_zero_year_means_no_year(self, year):
        """Test that a zero or negative model year counts as not given."""
        res = calculate(vehicle_year=year)
        assert res.mu_effective == calculate().mu_effective
        assert res.inputs["vehicle_year"] is None
        assert res.factors["calibration"].impact != "era-adjusted"

    def test_factor_set_complete(self, default_result):
        """Test that all 17 factors carry an explanation."""
        names = {"surface", "weather", "grade", "age", "tread", "pressure", "width", "temperature", "speed", "load",
                 "slope", "brake_fade", "compound", "camber", "downforce", "vehicle_era", "calibration"}
        assert set(default_result.factors) == names
        assert all(f.explanation for f in default_result.factors.values())

    def test_warning_order(self):
        """Test warnings for old, worn and under-inflated tyres."""
        res = calculate(tyre_age_years=9.0, tread_depth_mm=1.0, water_depth_mm=1.0, actual_psi=20.0,
                        slope_degrees=-9.0)
        factors = [w.factor for w in res.warnings]
        assert factors == ["age", "tread", "pressure", "slope", "combined"]
        assert res.warnings[0].severity == "critical"

    def test_cold_summer_tyres_warning(self):
        """Test the wrong compound warning."""
        res = calculate(ambient_temp_c=-10.0, tyre_type="summer")
        assert any(w.factor == "temperature" and w.severity == "critical" for w in res.warnings)

    def test_hydroplaning_warning(self):
        """Test the hydroplaning warning and risk override."""
        res = calculate(speed_kmh=130.0, water_depth_mm=4.0)
        assert res.hydroplaning.is_hydroplaning
        assert res.risk.level == "EXTREME"
        assert any(w.factor == "hydroplaning" and w.severity == "critical" for w in res.warnings)

    def test_safe_speed(self, default_result):
        """Test the speed from which the car stops within 50 m of braking."""
        decel = default_result.raw_deceleration_ms2
        expected = math.sqrt(2.0 * decel * 50.0) * 3.6
        assert abs(default_result.safe_speed_kmh - expected) <= 1.0

    def test_sparks_need_speed(self):
        """Test no brake sparks at walking pace."""
        res = calculate(speed_kmh=20.0)
        assert res.brake_sparks.intensity == 0
        assert res.brake_sparks.level == "NONE"


class TestAuxiliaryQueries:
    """Tests for the read-only table accessors."""

    def test_surface_types(self):
        """Test surface listing."""
        surfaces = get_surface_types()
        assert len(surfaces) == 25
        assert all(s["peak"] > s["slide"] for s in surfaces)

    def test_weather_presets_derive_risk(self):
        """Test that the hydro risk flag follows the standing water threshold."""
        presets = {p["code"]: p for p in get_weather_presets()}
        for preset in presets.values():
            assert preset["hydro_risk"] == (preset["water_mm"] >= tables.STANDING_WATER_THRESHOLD_MM)
        assert presets["DOWNPOUR"]["hydro_risk"]
        assert not presets["HEAVY_RAIN"]["hydro_risk"]

    def test_eu_grades(self):
        """Test EU grade listing."""
        grades = {g["code"]: g for g in get_eu_grades()}
        assert set(grades) == {"A", "B", "C", "D", "E", "F"}
        assert grades["A"]["wet"] > grades["E"]["wet"]
        assert not grades["F"]["is_eu"]

    def test_tyre_compounds(self):
        """Test compound listing."""
        compounds = {c["code"]: c for c in get_tyre_compounds()}
        assert len(compounds) == 7
        assert compounds["track"]["dry"] > compounds["track"]["wet"]
