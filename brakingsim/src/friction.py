"""
Friction composer.

The effective friction coefficient is the product of all factor values. An active hydroplaning collapse is applied on
top, followed by exactly one of two mutually exclusive adjustments: the historical era override (vehicle model year
given and older than the modern bracket) or the real-world calibration. The result is floored at a plausible minimum.
"""

from brakingsim.src import factors as fct
from brakingsim.src.params import InputParameters
from brakingsim.src.results import FactorResult, HydroplaningResult

# factors entering the product, slope is excluded since it acts through the slope angle in the solver
FRICTION_FACTORS = ("surface", "weather", "grade", "age", "tread", "pressure", "width", "temperature", "speed", "load",
                    "brake_fade", "compound", "camber", "downforce")

# minimum friction relative to the surface coefficient, and the absolute minimum when hydroplaning
SURFACE_FLOOR_SHARE = 0.05
HYDROPLANING_FLOOR = 0.01


def calc_factors(inp: InputParameters, blend: float) -> dict:
    """Evaluate the 15 factor functions for resolved input parameters. Returns dict name -> FactorResult."""

    return {
        "surface": fct.surface_factor(inp.surface_type, inp.has_abs),
        "weather": fct.weather_factor(inp.water_depth_mm),
        "grade": fct.grade_factor(inp.eu_grade, blend),
        "age": fct.age_factor(inp.tyre_age_years, inp.is_hot_climate),
        "tread": fct.tread_factor(inp.tread_depth_mm, blend),
        "pressure": fct.pressure_factor(inp.actual_psi, inp.recommended_psi),
        "width": fct.width_factor(inp.tyre_width_mm, inp.water_depth_mm, blend),
        "temperature": fct.temperature_factor(inp.ambient_temp_c, inp.tyre_type),
        "speed": fct.speed_factor(inp.speed_kmh, blend),
        "load": fct.load_factor(inp.loaded_mass_kg, inp.vehicle_mass_kg),
        "slope": fct.slope_factor(inp.slope_degrees),
        "brake_fade": fct.brake_fade_factor(inp.brake_fade_level),
        "compound": fct.compound_factor(inp.tyre_compound, blend),
        "camber": fct.camber_factor(inp.road_camber_degrees),
        "downforce": fct.downforce_factor(inp.speed_kmh, inp.has_downforce, inp.downforce_coefficient,
                                          inp.loaded_mass_kg),
    }


def compose_friction(factors: dict, hydroplaning: HydroplaningResult, inp: InputParameters) -> tuple:
    """
    Combine the factors into the effective friction coefficient.

    Returns (mu, vehicle_era, calibration) where the latter two are the FactorResults of the control factors. If the
    era override applies, the calibration record reports the implied scaling target_mu / mu_before instead of the
    real-world calibration.
    """

    mu = 1.0
    for name in FRICTION_FACTORS:
        mu *= factors[name].value

    if hydroplaning.is_hydroplaning:
        mu *= hydroplaning.friction_multiplier

    vehicle_era = fct.vehicle_era_factor(inp.vehicle_year, inp.has_abs)

    if inp.vehicle_year is not None and vehicle_era.value < 1.0:
        # historical friction from stopping distance tables replaces the modern calibration
        target_mu = vehicle_era.value
        calibration = FactorResult(
            name="calibration",
            value=target_mu / mu,
            impact="era-adjusted",
            status=f"Era target μ={target_mu:.2f} for {inp.vehicle_year} vehicle",
            details={"surface_condition": "dry", "tyre_type": inp.tyre_type},
        )
        mu = target_mu
    else:
        calibration = fct.calibration_factor(surface_type=inp.surface_type,
                                             water_mm=inp.water_depth_mm,
                                             tyre_type=inp.tyre_type,
                                             eu_grade=inp.eu_grade,
                                             speed_kmh=inp.speed_kmh)
        mu *= calibration.value

    if hydroplaning.is_hydroplaning:
        mu = max(HYDROPLANING_FLOOR, mu)
    else:
        mu = max(factors["surface"].value * SURFACE_FLOOR_SHARE, mu)

    return mu, vehicle_era, calibration
