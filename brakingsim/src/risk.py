"""
Risk assessment and safety warnings.
"""

from brakingsim.src import tables
from brakingsim.src.params import InputParameters
from brakingsim.src.results import RiskAssessment, SafetyWarning, HydroplaningResult, HYDRO_WARNING

# (upper bound, level, color, score), evaluated on min(mu, deceleration in g)
RISK_TIERS = (
    (0.15, "EXTREME", "#7f1d1d", 95),
    (0.25, "VERY HIGH", "#dc2626", 80),
    (0.35, "HIGH", "#ea580c", 65),
    (0.50, "MODERATE", "#ca8a04", 45),
    (0.65, "LOW", "#65a30d", 25),
)
RISK_MINIMAL = ("MINIMAL", "#16a34a", 10)


def calc_risk(mu: float, is_hydroplaning: bool, deceleration: float) -> RiskAssessment:
    """Six tier classification, hydroplaning is always EXTREME."""
    if is_hydroplaning:
        return RiskAssessment(level="EXTREME", color="#7f1d1d", score=100)

    indicator = min(mu, deceleration / tables.G)
    for bound, level, color, score in RISK_TIERS:
        if indicator < bound:
            return RiskAssessment(level=level, color=color, score=score)

    level, color, score = RISK_MINIMAL
    return RiskAssessment(level=level, color=color, score=score)


def generate_warnings(inp: InputParameters, factors: dict, hydroplaning: HydroplaningResult, solution) -> list:
    """
    Ordered list of SafetyWarnings. Every check runs independently, nothing is deduplicated. A vehicle that cannot be
    stopped by its brakes always produces the first entries.
    """

    warnings = []
    rolling = solution.rolling_physics

    if not solution.can_stop_with_brakes:
        if rolling.can_stop_eventually:
            warnings.append(SafetyWarning(
                severity="critical",
                factor="physics",
                message="BRAKES CANNOT STOP VEHICLE on this slope! Using rolling resistance + air drag physics "
                        "instead.",
                icon="⚠️",
            ))
            warnings.append(SafetyWarning(
                severity="info",
                factor="rolling_physics",
                message=f"Rolling stop distance: {round(rolling.stopping_distance_m)}m | "
                        f"Required μ: {rolling.required_friction_to_stop:.2f} | "
                        f"Available μ: {rolling.available_friction:.2f}",
                icon="🛞",
            ))
            warnings.append(SafetyWarning(severity="info", factor="rolling_physics", message=rolling.reason,
                                          icon="ℹ️"))
        else:
            warnings.append(SafetyWarning(
                severity="extreme",
                factor="physics",
                message="CANNOT STOP! Slope too steep - vehicle will accelerate even without brakes!",
                icon="☠️",
            ))
            warnings.append(SafetyWarning(severity="extreme", factor="rolling_physics", message=rolling.reason,
                                          icon="⛔"))

    # tyre age
    if factors["age"].value < 0.70:
        warnings.append(SafetyWarning(severity="critical", factor="age",
                                      message=f"Tyres are {inp.tyre_age_years:g} years old - REPLACE IMMEDIATELY",
                                      icon="🚨"))
    elif factors["age"].value < 0.85:
        warnings.append(SafetyWarning(severity="warning", factor="age",
                                      message=f"Tyres are {inp.tyre_age_years:g} years old - replacement recommended",
                                      icon="⚠️"))

    # tread
    if factors["tread"].value < 0.50:
        warnings.append(SafetyWarning(
            severity="critical", factor="tread",
            message=f"Tread depth {inp.tread_depth_mm:g}mm is at/below legal minimum - DANGEROUS in wet!", icon="🚨"))
    elif factors["tread"].value < 0.72:
        warnings.append(SafetyWarning(
            severity="warning", factor="tread",
            message=f"Tread depth {inp.tread_depth_mm:g}mm significantly reduces wet grip", icon="⚠️"))

    # pressure
    if factors["pressure"].value < 0.88:
        warnings.append(SafetyWarning(severity="warning", factor="pressure", message=factors["pressure"].status,
                                      icon="⚠️"))

    # temperature
    if factors["temperature"].value < 0.75:
        warnings.append(SafetyWarning(
            severity="critical", factor="temperature",
            message=f"{inp.tyre_type} tyres at {inp.ambient_temp_c:g}°C - WRONG COMPOUND!", icon="🚨"))
    elif factors["temperature"].value < 0.90:
        warnings.append(SafetyWarning(severity="warning", factor="temperature",
                                      message=factors["temperature"].status, icon="⚠️"))

    # width, only relevant on a wet road
    if factors["width"].value < 0.90 and factors["weather"].value < 0.90:
        warnings.append(SafetyWarning(severity="info", factor="width",
                                      message=f"Wide tyres ({inp.tyre_width_mm:g}mm) reduce wet grip", icon="ℹ️"))

    # hydroplaning
    if hydroplaning.is_hydroplaning:
        warnings.append(SafetyWarning(
            severity="critical", factor="hydroplaning",
            message=f"HYDROPLANING! Speed exceeds safe threshold of {round(hydroplaning.threshold_speed_kmh)} km/h",
            icon="🌊"))
    elif hydroplaning.risk_level == HYDRO_WARNING:
        warnings.append(SafetyWarning(severity="warning", factor="hydroplaning",
                                      message="Approaching hydroplaning threshold - reduce speed", icon="🌊"))

    # slope
    if inp.slope_degrees < -8:
        warnings.append(SafetyWarning(
            severity="warning", factor="slope",
            message=f"Steep downhill ({abs(inp.slope_degrees):g}°) - extended braking distance", icon="⛰️"))

    # several moderate tyre issues compound each other
    if factors["age"].value * factors["tread"].value * factors["pressure"].value < 0.60:
        warnings.append(SafetyWarning(
            severity="critical", factor="combined",
            message="Multiple tyre issues compounding - stopping distance severely compromised", icon="☠️"))

    return warnings
