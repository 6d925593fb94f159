"""
Factor library of the braking simulation.

Every factor function is a pure mapping from a slice of the input parameters to a FactorResult. The value is a
dimensionless multiplier of the friction coefficient, nominally <= 1.0 for grip losses and > 1.0 for grip gains
(downforce, premium compounds). Wet dependent factors never use a binary wet/dry flag but interpolate their dry and wet
curves with the dampness blend, so no factor jumps at the damp/wet boundary.
"""

import math

from brakingsim.src import tables
from brakingsim.src.results import FactorResult

EXPLANATIONS = {
    "surface": "Road surface texture determines base grip. Rough asphalt provides excellent friction; polished "
               "surfaces, gravel and especially ice dramatically reduce stopping power.",
    "weather": "Water creates a film between tyre and road. Even light rain reduces grip by 10-25%; heavy rain can "
               "halve your stopping power. Standing water risks hydroplaning.",
    "grade": "EU wet grip grades (A-E) indicate certified stopping performance. Grade A stops up to 18m shorter than "
             "Grade E from 80km/h.",
    "age": "Rubber oxidises from the inside out, hardening even unused tyres. A 6-year-old tyre has lost ~15% grip "
           "regardless of tread. The degradation accelerates with age.",
    "tread": "Tread grooves evacuate water, which is critical for wet grip. Performance holds to ~4mm, then "
             "collapses. At 1.6mm water evacuation is only about half of a new tyre.",
    "pressure": "Correct pressure ensures an optimal contact patch. Both under and over-inflation reduce grip, "
                "under-inflation slightly more.",
    "width": "Wide tyres grip better dry but worse wet. Narrow tyres cut through water, a 285mm tyre can have 16% "
             "less wet grip than a 205mm one.",
    "temperature": "Rubber compounds have optimal temperature ranges. Summer tyres harden below 7°C, winter tyres "
                   "soften above 15°C.",
    "speed": "The friction coefficient decreases at higher speeds as the tyre has less time to establish grip. Wet "
             "surfaces are affected more.",
    "load": "Weight theoretically cancels out, but heavy loads slightly reduce effective grip due to tyre load "
            "sensitivity.",
    "slope": "Gravity assists braking uphill and fights it downhill. A 10% downhill grade adds roughly 10% to the "
             "stopping distance.",
    "brake_fade": "Repeated hard braking heats the brake components. Fluid can boil and pads glaze over, mountain "
                  "descents and track driving are high risk.",
    "compound": "Economy compounds trade grip for longevity, performance compounds are softer and grippier. Track "
                "tyres excel dry but struggle wet.",
    "camber": "Road banking shifts the load between the tyres. Crowned roads aid drainage, off-camber sections "
              "reduce the usable grip.",
    "downforce": "Aerodynamic downforce pushes the car onto the road at high speed, increasing tyre load and grip. "
                 "Only significant on sports and race cars.",
    "vehicle_era": "Older vehicles lack modern tyre compounds, disc brakes and ABS. Their friction follows from "
                   "historical stopping distance tables.",
    "calibration": "Real-world calibration based on 285 validated tyre tests.",
}


def _impact(value: float, severe: float, moderate: float) -> str:
    if value < severe:
        return "severe"
    if value < moderate:
        return "moderate"
    return "minimal"


def _condition(blend: float) -> str:
    if blend <= 0.0:
        return "dry"
    if blend < 1.0:
        return "damp"
    return "wet"


def damp_blend(water_mm: float) -> float:
    """Continuous wetness in [0, 1]: 0 on a dry road, linear up to 1 at 0.5 mm water, 1 above."""
    if water_mm <= 0.0:
        return 0.0
    return min(1.0, water_mm / tables.DAMP_FULL_WET_MM)


# ----------------------------------------------------------------------------------------------------------------------
# FACTOR 1 - 5 ---------------------------------------------------------------------------------------------------------
# ----------------------------------------------------------------------------------------------------------------------

def surface_factor(surface_type: str, has_abs: bool) -> FactorResult:
    """Base friction of the road surface. ABS keeps the tyre at peak friction, locked wheels slide."""
    surface = tables.get_surface(surface_type)
    value = surface["peak"] if has_abs else surface["slide"]

    return FactorResult(
        name="surface",
        value=value,
        impact=_impact(value, 0.5, 0.7),
        status=surface["name"],
        details={"type": "peak" if has_abs else "slide", "surface_name": surface["name"]},
    )


def weather_factor(water_mm: float) -> FactorResult:
    """Water film on the road, piecewise linear in the water depth [mm] and floored at 0.05."""
    w = max(0.0, water_mm)

    if w <= 0.0:
        value, description = 1.00, "Dry surface"
    elif w <= 0.2:
        value, description = 1.00 - w * 0.50, "Damp - minimal film"
    elif w <= 0.5:
        value, description = 0.90 - (w - 0.2) * 0.50, "Light rain"
    elif w <= 1.0:
        value, description = 0.75 - (w - 0.5) * 0.30, "Moderate rain"
    elif w <= 2.0:
        value, description = 0.60 - (w - 1.0) * 0.15, "Heavy rain"
    elif w <= 3.0:
        value, description = 0.45 - (w - 2.0) * 0.12, "Very heavy rain"
    elif w <= 5.0:
        value, description = 0.33 - (w - 3.0) * 0.08, "Standing water"
    else:
        value, description = 0.17 - (w - 5.0) * 0.04, "Flooded"

    value = max(0.05, value)

    return FactorResult(
        name="weather",
        value=value,
        impact=_impact(value, 0.5, 0.75),
        status=description,
        details={"water_mm": w},
    )


def grade_factor(grade: str, blend: float) -> FactorResult:
    """
    EU wet grip grade. The label certifies wet braking, on a dry road the grade differences are only 40 % as
    pronounced. The dry and wet multipliers are interpolated with the dampness blend.
    """
    grade_data = tables.get_eu_grade(grade)
    wet = grade_data["wet"]
    dry = 1.0 + (wet - 1.0) * grade_data["dry_adjust"]
    value = dry + (wet - dry) * blend

    return FactorResult(
        name="grade",
        value=value,
        impact=_impact(value, 0.85, 0.95),
        status=grade_data["label"],
        details={
            "grade": grade if grade in tables.EU_GRADES else tables.TABLES["default_grade"],
            "label": grade_data["label"],
            "color": grade_data["color"],
            "is_eu": grade_data["is_eu"],
            "condition": _condition(blend),
            "damp_blend": round(blend, 2),
        },
    )


def age_factor(age_years: float, is_hot_climate: bool = False) -> FactorResult:
    """Accelerating rubber degradation with age, amplified by 35 % in hot climates. Floored at 0.35."""

    if age_years <= 0:
        value, rate = 1.00, 0.0
    elif age_years <= 2:
        value, rate = 1.00 - 0.010 * age_years, 1.0
    elif age_years <= 4:
        value, rate = 0.98 - 0.025 * (age_years - 2), 2.5
    elif age_years <= 6:
        value, rate = 0.93 - 0.040 * (age_years - 4), 4.0
    elif age_years <= 8:
        value, rate = 0.85 - 0.060 * (age_years - 6), 6.0
    elif age_years <= 10:
        value, rate = 0.73 - 0.070 * (age_years - 8), 7.0
    else:
        value, rate = 0.59 - 0.050 * (age_years - 10), 5.0

    if is_hot_climate and age_years > 0:
        value -= (1.0 - value) * 0.35

    value = max(0.35, value)

    if age_years >= 6:
        recommendation = "Replace soon"
    elif age_years >= 4:
        recommendation = "Monitor closely"
    else:
        recommendation = "OK"

    return FactorResult(
        name="age",
        value=value,
        impact=_impact(value, 0.75, 0.90),
        status=recommendation,
        details={
            "age_years": age_years,
            "grip_loss_percent": round((1.0 - value) * 100),
            "degradation_rate_per_year": rate,
            "is_hot_climate": is_hot_climate,
        },
    )


def _tread_dry(tread: float) -> float:
    # 8mm -> 1.00, bald -> 0.88
    return 0.88 + 0.015 * tread


def _tread_wet(tread: float) -> float:
    # calibrated to Continental test data: 8mm = 26m, 1.6mm = 37.6m (+44 % braking distance)
    if tread >= 8.0:
        return 1.00
    if tread >= 4.0:
        return 0.64 + 0.045 * tread
    # below 4mm the grip collapses faster, the same line is extrapolated below the legal minimum
    return 0.61 + 0.0525 * tread


def _water_evacuation_percent(tread: float) -> float:
    if tread >= 8.0:
        return 100.0
    if tread >= 4.0:
        return 55.0 + (tread - 4.0) * 11.25
    return max(15.0, 30.0 + tread * 10.4)


def tread_factor(tread_mm: float, blend: float) -> FactorResult:
    """
    Tread depth. Dry grip barely depends on tread (12 % loss when bald), wet grip is flat above 8mm, linear between
    4 and 8mm and falls off steeper below 4mm (cliff effect). Both curves are blended with the dampness blend and the
    result is clamped to [0.20, 1.00].
    """
    tread = max(0.0, min(12.0, tread_mm))

    dry = max(0.20, min(1.00, _tread_dry(tread)))
    wet = max(0.20, min(1.00, _tread_wet(tread)))
    value = max(0.20, min(1.00, dry + (wet - dry) * blend))

    evacuation = 100.0 + (_water_evacuation_percent(tread) - 100.0) * blend

    if tread >= 4.0:
        status = "Good"
    elif tread >= 3.0:
        status = "Replace soon"
    elif tread >= 1.5:
        status = "Critical - legal minimum"
    else:
        status = "ILLEGAL - Replace immediately!"

    return FactorResult(
        name="tread",
        value=value,
        impact=_impact(value, 0.60, 0.80),
        status=status,
        details={
            "tread_mm": tread,
            "condition": _condition(blend),
            "damp_blend": round(blend, 2),
            "water_evac_percent": round(evacuation),
            "nz_legal": tread >= 1.5,
            "eu_legal": tread >= 1.6,
        },
    )


# ----------------------------------------------------------------------------------------------------------------------
# FACTOR 6 - 10 --------------------------------------------------------------------------------------------------------
# ----------------------------------------------------------------------------------------------------------------------

def pressure_factor(actual_psi: float, recommended_psi: float) -> FactorResult:
    """
    Tyre pressure. Power law penalty (exponent 1.5) on the fractional deviation from the recommended pressure,
    under-inflation weighs more than over-inflation. Beyond +-30 % the value is fixed at 0.85 (under) / 0.88 (over).
    """
    if not actual_psi or actual_psi == recommended_psi:
        return FactorResult(
            name="pressure",
            value=1.00,
            impact="minimal",
            status="Optimal",
            details={"actual_psi": recommended_psi, "recommended_psi": recommended_psi, "deviation_percent": 0},
        )

    deviation = (actual_psi - recommended_psi) / recommended_psi

    if deviation < -0.30:
        value = 0.85
        status = "Severely under-inflated - DANGEROUS"
    elif deviation < 0.0:
        value = max(0.85, 1.0 - abs(deviation) ** 1.5 * 0.6)
        status = "Under-inflated - check pressure" if deviation < -0.15 else "Slightly under-inflated"
    elif deviation > 0.30:
        value = 0.88
        status = "Severely over-inflated - DANGEROUS"
    else:
        value = max(0.88, 1.0 - deviation ** 1.5 * 0.5)
        status = "Over-inflated - reduce pressure" if deviation > 0.15 else "Slightly over-inflated"

    return FactorResult(
        name="pressure",
        value=value,
        impact="moderate" if value < 0.90 else "minimal",
        status=status,
        details={
            "actual_psi": actual_psi,
            "recommended_psi": recommended_psi,
            "deviation_percent": round(deviation * 100),
        },
    )


def width_depth_scaler(water_mm: float) -> float:
    """Share of the wet width penalty that applies: 20 % on thin films, rising linearly to 100 % at 1.5mm."""
    if water_mm < 0.5:
        return 0.20
    if water_mm < 1.5:
        return 0.20 + (water_mm - 0.5) * 0.80
    return 1.00


def width_factor(width_mm: float, water_mm: float, blend: float) -> FactorResult:
    """
    Tyre width has opposite effects dry and wet. Dry: wider is better (25 % of the width deviation). Wet: narrower is
    better, but the penalty is scaled with the water depth so it does not double count the weather factor.
    """
    baseline = tables.PHYSICS["width_baseline_mm"]
    deviation = (width_mm - baseline) / baseline

    dry = max(0.85, min(1.15, 1.0 + deviation * 0.25))

    scaler = width_depth_scaler(water_mm)
    wet = max(0.75, min(1.10, 1.0 - deviation * 0.40 * scaler))

    value = dry + (wet - dry) * blend

    if blend > 0.0:
        status = (f"Wide tyres struggle in {water_mm}mm water ({round(scaler * 100)}% penalty applied)"
                  if deviation > 0 else "Narrow tyres cut through water effectively")
    else:
        status = "Wide tyres provide more contact area" if deviation > 0 else "Narrow tyres have less contact area"

    return FactorResult(
        name="width",
        value=value,
        impact="moderate" if value < 0.90 else "minimal",
        status=status,
        details={
            "width_mm": width_mm,
            "baseline_width_mm": baseline,
            "condition": _condition(blend),
            "damp_blend": round(blend, 2),
            "depth_scaler": scaler,
        },
    )


def temperature_factor(temp_c: float, tyre_type: str = "summer") -> FactorResult:
    """Compound temperature window, one piecewise profile per tyre type."""

    if tyre_type == "winter":
        optimal_range = "-10°C to 7°C"
        if temp_c < -25:
            value, status = 0.85, "Very cold - even winter compound stiffening"
        elif temp_c < -10:
            value, status = 0.92 + (temp_c + 25) * 0.005, "Cold - winter tyres optimal"
        elif temp_c < 7:
            value, status = 1.00, "Optimal temperature for winter tyres"
        elif temp_c < 15:
            value, status = 1.00 - (temp_c - 7) * 0.025, "Getting warm for winter compound"
        else:
            value = max(0.70, 0.80 - (temp_c - 15) * 0.015)
            status = "Too warm - winter compound too soft, excessive wear"

    elif tyre_type == "allseason":
        optimal_range = "5°C to 25°C"
        if temp_c < -10:
            value, status = 0.78, "Too cold for all-season compound"
        elif temp_c < 5:
            value, status = 0.85 + (temp_c + 10) * 0.01, "Cold - all-season compromise"
        elif temp_c < 25:
            value, status = 0.95 + (temp_c - 5) * 0.0025, "Good temperature for all-season"
        elif temp_c < 35:
            value, status = 1.00 - (temp_c - 25) * 0.005, "Warm - all-season OK"
        else:
            value, status = max(0.88, 0.95 - (temp_c - 35) * 0.007), "Hot - all-season softening"

    else:
        # summer and unknown tyre types
        tyre_type = "summer"
        optimal_range = "15°C to 35°C"
        if temp_c < -5:
            value, status = 0.50, "DANGEROUS - summer compound rock hard!"
        elif temp_c < 7:
            value, status = 0.50 + (temp_c + 5) * 0.033, "Too cold for summer tyres - reduced grip"
        elif temp_c < 15:
            value, status = 0.90 + (temp_c - 7) * 0.0125, "Cool - approaching optimal"
        elif temp_c <= 35:
            value, status = 1.00, "Optimal temperature for summer tyres"
        elif temp_c <= 45:
            value, status = 1.00 - (temp_c - 35) * 0.008, "Hot - compound softening slightly"
        else:
            value, status = max(0.88, 0.92 - (temp_c - 45) * 0.008), "Very hot - risk of compound breakdown"

    return FactorResult(
        name="temperature",
        value=value,
        impact=_impact(value, 0.80, 0.95),
        status=status,
        details={"temp_c": temp_c, "tyre_type": tyre_type, "optimal_range": optimal_range},
    )


def speed_factor(speed_kmh: float, blend: float) -> FactorResult:
    """Friction decays linearly above 40 km/h, faster on wet roads. Floored at 0.75."""
    onset = tables.PHYSICS["speed_decay_onset_kmh"]

    if speed_kmh <= onset:
        return FactorResult(
            name="speed",
            value=1.00,
            impact="minimal",
            status="No speed decay",
            details={"speed_kmh": speed_kmh, "decay_percent": 0, "damp_blend": round(blend, 2)},
        )

    dry_rate = 0.0012
    wet_rate = 0.0018
    rate = dry_rate + (wet_rate - dry_rate) * blend
    value = max(0.75, 1.0 - rate * (speed_kmh - onset))

    return FactorResult(
        name="speed",
        value=value,
        impact="moderate" if value < 0.90 else "minimal",
        status=f"{round((1.0 - value) * 100)}% friction decay at {speed_kmh:.0f} km/h",
        details={
            "speed_kmh": speed_kmh,
            "decay_percent": round((1.0 - value) * 100),
            "damp_blend": round(blend, 2),
            "condition": _condition(blend),
        },
    )


def load_factor(loaded_mass_kg: float, reference_mass_kg: float) -> FactorResult:
    """Tyre load sensitivity, ~7.5 % grip loss per 100 % overload, floored at 0.85."""
    if loaded_mass_kg <= reference_mass_kg:
        return FactorResult(
            name="load",
            value=1.00,
            impact="minimal",
            status="Within reference load",
            details={"loaded_mass_kg": loaded_mass_kg, "reference_mass_kg": reference_mass_kg,
                     "overload_percent": 0},
        )

    overload_ratio = (loaded_mass_kg - reference_mass_kg) / reference_mass_kg
    value = max(0.85, 1.0 - overload_ratio * 0.075)
    overload_percent = round(overload_ratio * 100)

    return FactorResult(
        name="load",
        value=value,
        impact="moderate" if value < 0.95 else "minimal",
        status="Significantly overloaded" if overload_percent > 30 else "Loaded",
        details={"loaded_mass_kg": loaded_mass_kg, "reference_mass_kg": reference_mass_kg,
                 "overload_percent": overload_percent},
    )


# ----------------------------------------------------------------------------------------------------------------------
# FACTOR 11 - 15 -------------------------------------------------------------------------------------------------------
# ----------------------------------------------------------------------------------------------------------------------

def slope_factor(slope_degrees: float) -> FactorResult:
    """
    Sign of the road gradient (+1 uphill, -1 downhill). Only used for classification and warnings, the physical slope
    contribution enters the deceleration through sin/cos of the signed angle.
    """
    value = 1 if slope_degrees >= 0 else -1
    abs_deg = abs(slope_degrees)

    if abs_deg < 2:
        status = "Level"
    elif abs_deg < 5:
        status = "Gentle uphill" if slope_degrees > 0 else "Gentle downhill"
    elif abs_deg < 10:
        status = "Moderate uphill" if slope_degrees > 0 else "Moderate downhill"
    else:
        status = "Steep uphill" if slope_degrees > 0 else "Steep downhill - CAUTION"

    return FactorResult(
        name="slope",
        value=value,
        impact="moderate" if abs_deg > 5 and slope_degrees < 0 else "minimal",
        status=status,
        details={
            "slope_degrees": round(slope_degrees, 1),
            "slope_percent": round(math.tan(math.radians(slope_degrees)) * 100, 1),
        },
    )


def brake_fade_factor(fade_level: float) -> FactorResult:
    """Heat fade of the brakes on a 0 (cold) to 10 (severely faded) scale, floored at 0.40."""
    level = max(0.0, min(10.0, fade_level))

    if level <= 2:
        value, status = 1.00 - level * 0.01, "Brakes cold/normal"
    elif level <= 4:
        value, status = 0.98 - (level - 2) * 0.03, "Brakes warm"
    elif level <= 6:
        value, status = 0.92 - (level - 4) * 0.06, "Brakes hot - allow cooling"
    elif level <= 8:
        value, status = 0.80 - (level - 6) * 0.08, "Brake fade occurring!"
    else:
        value, status = 0.64 - (level - 8) * 0.12, "SEVERE BRAKE FADE - DANGER!"

    value = max(0.40, value)

    return FactorResult(
        name="brake_fade",
        value=value,
        impact=_impact(value, 0.80, 0.95),
        status=status,
        details={"fade_level": level, "grip_loss_percent": round((1.0 - value) * 100)},
    )


def compound_factor(compound: str, blend: float) -> FactorResult:
    data = tables.get_compound(compound)
    value = data["dry"] + (data["wet"] - data["dry"]) * blend

    return FactorResult(
        name="compound",
        value=value,
        impact="moderate" if value < 0.90 else "minimal",
        status=data["name"],
        details={
            "compound": compound if compound in tables.COMPOUNDS else tables.TABLES["default_compound"],
            "description": data["description"],
            "condition": _condition(blend),
            "damp_blend": round(blend, 2),
        },
    )


def camber_factor(camber_degrees: float) -> FactorResult:
    """Crowned roads (positive) give up to 2.5 % bonus, off-camber (negative) costs 1.5 % per degree."""
    camber = max(-15.0, min(15.0, camber_degrees))

    if abs(camber) < 2:
        value, status = 1.00, "Flat/normal road"
    elif camber > 0:
        value, status = 1.00 + min(camber, 5.0) * 0.005, "Crowned road - good drainage"
    else:
        value = 1.00 - abs(camber) * 0.015
        status = "Off-camber - reduced grip" if abs(camber) > 5 else "Slight off-camber"

    value = max(0.75, min(1.05, value))

    return FactorResult(
        name="camber",
        value=value,
        impact="moderate" if value < 0.95 else "minimal",
        status=status,
        details={"camber_degrees": camber},
    )


def downforce_factor(speed_kmh: float, has_downforce: bool, cl_a: float, vehicle_mass_kg: float) -> FactorResult:
    """
    Aerodynamic downforce 0.5 * rho * v^2 * ClA converted to an equivalent load increase. 10 % more load gives 8 %
    more grip, the bonus is capped at +40 %. No effect below 80 km/h.
    """
    if not has_downforce or cl_a <= 0 or speed_kmh < 80:
        return FactorResult(
            name="downforce",
            value=1.00,
            impact="minimal",
            status="No significant downforce",
            details={"downforce_n": 0, "downforce_kg": 0, "effective_weight_increase": 0},
        )

    vel = speed_kmh / 3.6
    downforce_n = 0.5 * tables.PHYSICS["rho_air"] * vel * vel * cl_a
    downforce_kg = downforce_n / tables.G
    weight_increase_ratio = downforce_kg / vehicle_mass_kg

    value = min(1.40, 1.00 + weight_increase_ratio * 0.8)

    if weight_increase_ratio < 0.05:
        status = "Minimal downforce effect"
    elif weight_increase_ratio < 0.15:
        status = "Moderate downforce benefit"
    elif weight_increase_ratio < 0.30:
        status = "Significant downforce - grip enhanced"
    else:
        status = "High downforce - maximum grip mode"

    return FactorResult(
        name="downforce",
        value=value,
        impact="beneficial" if value > 1.10 else "minimal",
        status=status,
        details={
            "downforce_n": round(downforce_n),
            "downforce_kg": round(downforce_kg),
            "effective_weight_increase": round(weight_increase_ratio * 100),
        },
    )


# ----------------------------------------------------------------------------------------------------------------------
# CONTROL FACTORS ------------------------------------------------------------------------------------------------------
# ----------------------------------------------------------------------------------------------------------------------

def vehicle_era_factor(vehicle_year, has_abs: bool) -> FactorResult:
    """
    Historical technology bracket of the vehicle. The value is the friction coefficient implied by regulatory stopping
    distance tables of that era (e.g. UK Highway Code 1978: 75m at 70mph -> mu = 0.66). Without a model year the
    vehicle counts as modern.
    """
    era = tables.VEHICLE_ERAS[-1]
    if vehicle_year is not None:
        for bracket in tables.VEHICLE_ERAS:
            if bracket["year_below"] is None or vehicle_year < bracket["year_below"]:
                era = bracket
                break

    value = era["value"]
    era_abs = has_abs if era["abs"] is None else era["abs"]

    if value < 0.7:
        impact = "severe"
    elif value < 0.85:
        impact = "significant"
    elif value < 0.95:
        impact = "moderate"
    else:
        impact = "none"

    return FactorResult(
        name="vehicle_era",
        value=value,
        impact=impact,
        status=era["reason"],
        details={"effective_year": vehicle_year, "has_abs": era_abs},
    )


def calibration_factor(surface_type: str, water_mm: float, tyre_type: str, eu_grade: str,
                       speed_kmh: float) -> FactorResult:
    """
    Real-world calibration. The multiplicative model is systematically conservative compared to measured braking
    distances of professional tyre tests, this correction reconciles both while preserving the relative influence of
    all factors.
    """
    cal = tables.CALIBRATION
    code = (surface_type or "").lower()
    is_ice = "ice" in code
    is_snow = "snow" in code
    is_wet = water_mm > cal["wet_threshold_mm"]

    tyre = (tyre_type or "summer").lower()
    if tyre not in ("winter", "allseason"):
        tyre = "summer"

    if is_ice:
        condition = "ice"
        value = cal["ice"][tyre]
        reason = {"winter": "Winter tyre ice calibration (studded/siped compounds)",
                  "allseason": "All-season tyre ice calibration",
                  "summer": "Summer tyre ice (base physics)"}[tyre]

    elif is_snow:
        condition = "snow"
        value = cal["snow"][tyre]
        reason = {"winter": "Winter tyre snow calibration",
                  "allseason": "All-season tyre snow calibration",
                  "summer": "Summer tyre snow (no calibration - poor performance expected)"}[tyre]

    elif is_wet:
        condition = "wet"
        wet = cal["wet"]
        if tyre == "winter":
            value, reason = wet["winter"], "Winter tyre wet calibration (silica compound excels)"
        elif tyre == "allseason":
            value, reason = wet["allseason"], "All-season tyre wet calibration"
        else:
            # discrepancy of the summer tyre model grows with speed
            if speed_kmh >= wet["summer_high_kmh"]:
                value = min(wet["summer_max"],
                            wet["summer_ref"] + (speed_kmh - wet["summer_ref_kmh"]) * wet["summer_slope_per_kmh"])
            elif speed_kmh >= wet["summer_ref_kmh"]:
                value = wet["summer_ref"]
            else:
                value = (wet["summer_low_base"]
                         + speed_kmh / wet["summer_ref_kmh"] * (wet["summer_ref"] - wet["summer_low_base"]))

            if eu_grade in wet["grade_penalty"]:
                value *= wet["grade_penalty"][eu_grade]
                reason = f"Grade {eu_grade} tyre wet penalty at {speed_kmh:.0f}km/h"
            else:
                reason = f"Summer tyre wet calibration at {speed_kmh:.0f}km/h"

    else:
        condition = "dry"
        dry = cal["dry"]
        if tyre == "winter":
            value, reason = dry["winter"], "Winter tyre dry calibration"
        elif tyre == "allseason":
            value, reason = dry["allseason"], "All-season tyre dry calibration"
        else:
            value = dry["summer_grade"].get(eu_grade, dry["summer_default"])
            reason = f"Summer tyre dry calibration (Grade {eu_grade})"

    if value > 1.5:
        impact = "significant"
    elif value > 1.2:
        impact = "moderate"
    else:
        impact = "minimal"

    return FactorResult(
        name="calibration",
        value=value,
        impact=impact,
        status=reason,
        details={"surface_condition": condition, "tyre_type": tyre},
    )
