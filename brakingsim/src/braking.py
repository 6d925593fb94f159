"""
Braking and stopping distance calculation pipeline.

calculate() is the public entry point. It resolves the input parameters, evaluates the factor library and the
hydroplaning model, composes the effective friction coefficient, solves the braking phase (with the rolling
resistance + air drag fallback if the brakes cannot stop the vehicle) and derives comparison, risk, warnings and the
cosmetic brake sparks. The best/worst case comparison calls the internal _calculate() without comparison, so the
recursion depth is exactly one.
"""

import dataclasses
import math
from typing import Optional

from brakingsim.src import tables
from brakingsim.src._jit_kernels import KMH_TO_MS
from brakingsim.src.factors import EXPLANATIONS, damp_blend
from brakingsim.src.friction import calc_factors, compose_friction
from brakingsim.src.hydroplaning import calc_hydroplaning
from brakingsim.src.params import InputParameters
from brakingsim.src.results import CalculationResult, ComparisonResult
from brakingsim.src.risk import calc_risk, generate_warnings
from brakingsim.src.solver import solve_stopping, calc_reaction_distance, calc_safe_speed
from brakingsim.src.sparks import calc_brake_sparks

DEFAULT_RECOMMENDED_PSI = 32.0
DEFAULT_VEHICLE_MASS_KG = 1500.0
TYRE_TYPES = ("summer", "winter", "allseason")


def _round(value: Optional[float], digits: int) -> Optional[float]:
    return None if value is None else round(value, digits)


def resolve_inputs(params: InputParameters) -> InputParameters:
    """
    Apply the documented defaults and fallbacks: weather preset -> water depth, missing pressure -> recommended
    pressure, missing loaded mass -> vehicle mass, zero or negative model year -> no year, unknown codes -> default
    codes. Range clamping of the individual values is done by the factor functions.
    """

    if params.weather_preset in tables.WEATHER_PRESETS:
        water_mm = tables.WEATHER_PRESETS[params.weather_preset]["water_mm"]
    else:
        water_mm = max(0.0, params.water_depth_mm)

    recommended_psi = params.recommended_psi if params.recommended_psi > 0 else DEFAULT_RECOMMENDED_PSI
    actual_psi = params.actual_psi if params.actual_psi else recommended_psi
    vehicle_mass_kg = params.vehicle_mass_kg if params.vehicle_mass_kg > 0 else DEFAULT_VEHICLE_MASS_KG
    loaded_mass_kg = params.loaded_mass_kg if params.loaded_mass_kg and params.loaded_mass_kg > 0 else vehicle_mass_kg

    return dataclasses.replace(
        params,
        speed_kmh=max(0.0, params.speed_kmh),
        surface_type=params.surface_type if params.surface_type in tables.SURFACES else tables.TABLES["default_surface"],
        water_depth_mm=water_mm,
        eu_grade=params.eu_grade if params.eu_grade in tables.EU_GRADES else tables.TABLES["default_grade"],
        fuel_grade=(params.fuel_grade if params.fuel_grade in tables.FUEL_GRADE_RRC
                    else tables.TABLES["default_fuel_grade"]),
        tyre_type=params.tyre_type if params.tyre_type in TYRE_TYPES else "summer",
        tyre_compound=(params.tyre_compound if params.tyre_compound in tables.COMPOUNDS
                       else tables.TABLES["default_compound"]),
        actual_psi=actual_psi,
        recommended_psi=recommended_psi,
        vehicle_mass_kg=vehicle_mass_kg,
        loaded_mass_kg=loaded_mass_kg,
        reaction_time_s=max(0.0, params.reaction_time_s),
        vehicle_year=params.vehicle_year if params.vehicle_year and params.vehicle_year > 0 else None,
    )


def calculate(params: Optional[InputParameters] = None, **opts) -> CalculationResult:
    """
    Calculate braking and stopping distance.

    params:     InputParameters or a plain dict with (a subset of) its fields, None -> defaults
    opts:       single fields overriding the ones in params, e.g. calculate(speed_kmh=80.0, surface_type="ICE_ROUGH")

    Raises ParameterError for malformed or unknown fields.
    """

    if params is None:
        params = InputParameters.from_dict(opts)
    elif isinstance(params, dict):
        params = InputParameters.from_dict({**params, **opts})
    elif opts:
        params = InputParameters.from_dict({**params.to_dict(), **opts})

    return _calculate(params, with_comparison=True)


def _calculate(params: InputParameters, with_comparison: bool) -> CalculationResult:
    # ------------------------------------------------------------------------------------------------------------------
    # FACTORS AND FRICTION ---------------------------------------------------------------------------------------------
    # ------------------------------------------------------------------------------------------------------------------

    inp = resolve_inputs(params)
    blend = damp_blend(inp.water_depth_mm)
    speed_ms = inp.speed_kmh * KMH_TO_MS
    slope_rad = math.radians(inp.slope_degrees)

    factors = calc_factors(inp, blend)
    hydroplaning = calc_hydroplaning(speed_kmh=inp.speed_kmh,
                                     psi=inp.actual_psi,
                                     tread_mm=inp.tread_depth_mm,
                                     width_mm=inp.tyre_width_mm,
                                     water_mm=inp.water_depth_mm)

    mu, vehicle_era, calibration = compose_friction(factors, hydroplaning, inp)
    factors["vehicle_era"] = vehicle_era
    factors["calibration"] = calibration

    factors = {name: dataclasses.replace(factor, explanation=EXPLANATIONS.get(name, ""))
               for name, factor in factors.items()}

    # ------------------------------------------------------------------------------------------------------------------
    # DISTANCES --------------------------------------------------------------------------------------------------------
    # ------------------------------------------------------------------------------------------------------------------

    solution = solve_stopping(mu, inp)
    reaction_distance = calc_reaction_distance(speed_ms, inp.reaction_time_s)

    if solution.braking_distance_m is not None:
        braking_distance = solution.braking_distance_m
        total_distance = reaction_distance + braking_distance
    else:
        braking_distance = None
        total_distance = None

    if solution.can_stop_with_brakes:
        cannot_stop_reason = None
    elif solution.can_stop:
        cannot_stop_reason = (f"Brakes insufficient - using rolling resistance + air drag (slope: "
                              f"{inp.slope_degrees:g}°, μ: {mu:.2f})")
    else:
        cannot_stop_reason = f"Cannot stop even with rolling resistance - slope too steep ({inp.slope_degrees:g}°)"

    # ------------------------------------------------------------------------------------------------------------------
    # COMPARISON, SAFETY, SPARKS ---------------------------------------------------------------------------------------
    # ------------------------------------------------------------------------------------------------------------------

    if with_comparison:
        comparison = _calc_comparison(inp, total_distance, solution.can_stop)
    else:
        comparison = ComparisonResult(best_case_m=_round(total_distance, 1),
                                      worst_case_m=_round(total_distance, 1),
                                      vs_best_percent=None,
                                      extra_distance_m=None,
                                      extra_car_lengths=None,
                                      note="Comparison not computed")

    warnings = generate_warnings(inp, factors, hydroplaning, solution)
    risk = calc_risk(mu, hydroplaning.is_hydroplaning, solution.deceleration)
    brake_sparks = calc_brake_sparks(inp.speed_kmh, solution.deceleration, inp.has_abs)

    safe_speed = calc_safe_speed(mu, slope_rad, tables.PHYSICS["safe_speed_distance_m"]) if solution.can_stop else 0

    # ------------------------------------------------------------------------------------------------------------------
    # PRESENTATION -----------------------------------------------------------------------------------------------------
    # ------------------------------------------------------------------------------------------------------------------

    m_to_ft = tables.PHYSICS["m_to_ft"]

    rolling = solution.rolling_physics
    if rolling is not None:
        rolling = dataclasses.replace(
            rolling,
            stopping_distance_m=_round(rolling.stopping_distance_m, 1),
            stopping_time_s=_round(rolling.stopping_time_s, 1),
            rolling_resistance_coefficient=round(rolling.rolling_resistance_coefficient, 4),
            effective_deceleration=round(rolling.effective_deceleration, 3),
            required_friction_to_stop=round(rolling.required_friction_to_stop, 3),
            available_friction=round(rolling.available_friction, 3),
            terminal_velocity_kmh=_round(rolling.terminal_velocity_kmh, 0),
        )

    hydroplaning = dataclasses.replace(
        hydroplaning,
        threshold_speed_kmh=_round(hydroplaning.threshold_speed_kmh, 0),
        margin_kmh=_round(hydroplaning.margin_kmh, 0),
        friction_multiplier=round(hydroplaning.friction_multiplier, 2),
        nasa_base_speed_kmh=_round(hydroplaning.nasa_base_speed_kmh, 0),
    )

    return CalculationResult(
        braking_distance_m=_round(braking_distance, 1),
        reaction_distance_m=round(reaction_distance, 1),
        total_stopping_distance_m=_round(total_distance, 1),
        braking_distance_ft=None if braking_distance is None else round(braking_distance * m_to_ft, 1),
        total_stopping_distance_ft=None if total_distance is None else round(total_distance * m_to_ft, 1),
        car_lengths=None if total_distance is None else round(total_distance / tables.CAR_LENGTH_M, 1),
        distance_unbounded=braking_distance is None,
        can_stop=solution.can_stop,
        can_stop_with_brakes=solution.can_stop_with_brakes,
        using_rolling_physics=rolling is not None,
        rolling_physics=rolling,
        cannot_stop_reason=cannot_stop_reason,
        speed_kmh=inp.speed_kmh,
        speed_mph=round(inp.speed_kmh * tables.PHYSICS["kmh_to_mph"], 0),
        speed_ms=round(speed_ms, 1),
        mu_effective=round(mu, 4),
        deceleration_ms2=round(solution.deceleration, 2),
        deceleration_g=round(solution.deceleration / tables.G, 2),
        raw_deceleration_ms2=round(solution.raw_deceleration, 2),
        raw_deceleration_g=round(solution.raw_deceleration / tables.G, 2),
        factors=factors,
        hydroplaning=hydroplaning,
        comparison=comparison,
        risk=risk,
        warnings=warnings,
        safe_speed_kmh=safe_speed,
        brake_sparks=brake_sparks,
        inputs=inp.to_dict(),
    )


# ----------------------------------------------------------------------------------------------------------------------
# COMPARISON -----------------------------------------------------------------------------------------------------------
# ----------------------------------------------------------------------------------------------------------------------

def best_case_params(inp: InputParameters) -> InputParameters:
    """Ideal tyres, pressure and an alert driver at the same speed, surface, water depth and slope."""
    return InputParameters(speed_kmh=inp.speed_kmh,
                           surface_type=inp.surface_type,
                           water_depth_mm=inp.water_depth_mm,
                           eu_grade="A",
                           tyre_age_years=0.0,
                           tread_depth_mm=8.0,
                           actual_psi=32.0,
                           recommended_psi=32.0,
                           tyre_width_mm=195.0,
                           ambient_temp_c=20.0,
                           tyre_type="summer",
                           tyre_compound="performance",
                           slope_degrees=inp.slope_degrees,
                           has_abs=True,
                           reaction_time_s=1.0)


def worst_case_params(inp: InputParameters) -> InputParameters:
    """Old worn grade E tyres on the wrong compound, under-inflated, no ABS, warm brakes and a distracted driver.
    The slope is forced to be non-positive."""
    return InputParameters(speed_kmh=inp.speed_kmh,
                           surface_type=inp.surface_type,
                           water_depth_mm=inp.water_depth_mm,
                           eu_grade="E",
                           tyre_age_years=8.0,
                           tread_depth_mm=1.6,
                           actual_psi=22.0,
                           recommended_psi=32.0,
                           tyre_width_mm=285.0,
                           ambient_temp_c=2.0,
                           tyre_type="summer",
                           tyre_compound="economy",
                           slope_degrees=min(inp.slope_degrees, 0.0),
                           has_abs=False,
                           brake_fade_level=3.0,
                           reaction_time_s=2.5)


def _calc_comparison(inp: InputParameters, total_distance: Optional[float], can_stop: bool) -> ComparisonResult:
    best = _calculate(best_case_params(inp), with_comparison=False).total_stopping_distance_m

    if not can_stop or total_distance is None:
        return ComparisonResult(best_case_m=best,
                                worst_case_m=None,
                                vs_best_percent=None,
                                extra_distance_m=None,
                                extra_car_lengths=None,
                                note="Cannot stop - comparison not applicable")

    worst = _calculate(worst_case_params(inp), with_comparison=False).total_stopping_distance_m

    if not best:
        return ComparisonResult(best_case_m=best, worst_case_m=worst, vs_best_percent=None, extra_distance_m=None,
                                extra_car_lengths=None, note="Best case not applicable")

    extra = total_distance - best
    return ComparisonResult(best_case_m=best,
                            worst_case_m=worst,
                            vs_best_percent=round(total_distance / best * 100.0, 0),
                            extra_distance_m=round(extra, 1),
                            extra_car_lengths=round(extra / tables.CAR_LENGTH_M, 1))


# ----------------------------------------------------------------------------------------------------------------------
# AUXILIARY QUERIES ----------------------------------------------------------------------------------------------------
# ----------------------------------------------------------------------------------------------------------------------

def get_surface_types() -> list:
    return [{"code": code, "name": surface["name"], "peak": surface["peak"], "slide": surface["slide"]}
            for code, surface in tables.SURFACES.items()]


def get_weather_presets() -> list:
    """Weather presets, the hydroplaning risk flag is derived from the standing water threshold."""
    return [{"code": code, "name": preset["name"], "water_mm": preset["water_mm"],
             "hydro_risk": tables.is_standing_water(preset["water_mm"])}
            for code, preset in tables.WEATHER_PRESETS.items()]


def get_eu_grades() -> list:
    return [{"code": code, "label": grade["label"], "wet": grade["wet"], "color": grade["color"],
             "is_eu": grade["is_eu"]}
            for code, grade in tables.EU_GRADES.items()]


def get_tyre_compounds() -> list:
    return [{"code": code, "name": compound["name"], "dry": compound["dry"], "wet": compound["wet"],
             "description": compound["description"]}
            for code, compound in tables.COMPOUNDS.items()]
