"""
Brake spark intensity estimate from speed and deceleration. Purely descriptive, the result does not feed back into the
braking physics.
"""

from brakingsim.src import tables
from brakingsim.src.results import SparkResult

# (upper intensity bound, level, color, particles per intensity point, description)
SPARK_TIERS = (
    (15, "MINIMAL", "#ffa500", 0.5, "Faint glow from brake rotors"),
    (35, "LIGHT", "#ff8c00", 1.0, "Light sparks from brake pads"),
    (55, "MODERATE", "#ff6600", 1.5, "Visible sparks from hard braking"),
    (75, "HEAVY", "#ff4400", 2.0, "Heavy sparks - emergency braking"),
    (90, "INTENSE", "#ff2200", 2.5, "Intense sparking - extreme braking force"),
)
SPARK_EXTREME = ("EXTREME", "#ff0000", 3.0, "Maximum sparks - track-level braking")


def _speed_spark_factor(speed_kmh: float) -> float:
    if speed_kmh < 30:
        return 0.0
    if speed_kmh < 60:
        return (speed_kmh - 30) / 60
    if speed_kmh < 120:
        return 0.5 + (speed_kmh - 60) / 120
    if speed_kmh < 200:
        return 1.0 + (speed_kmh - 120) / 160
    return 1.5 + (speed_kmh - 200) / 200


def _decel_spark_factor(decel_g: float) -> float:
    if decel_g < 0.2:
        return 0.0
    if decel_g < 0.4:
        return (decel_g - 0.2) / 0.4
    if decel_g < 0.7:
        return 0.5 + (decel_g - 0.4) / 0.6
    if decel_g < 1.0:
        return 1.0 + (decel_g - 0.7) / 0.6
    return 1.5 + (decel_g - 1.0) / 0.5


def calc_brake_sparks(speed_kmh: float, deceleration: float, has_abs: bool) -> SparkResult:
    """
    Cosmetic brake spark intensity (0 - 100) for visual effects. Sparks need both speed and braking force, ABS pulsing
    reduces the peak intensity. The result never feeds back into the physics.
    """

    decel_g = deceleration / tables.G
    speed_factor = _speed_spark_factor(speed_kmh)
    decel_factor = _decel_spark_factor(decel_g)

    raw_intensity = speed_factor * decel_factor * 50.0
    if has_abs and raw_intensity > 30:
        raw_intensity *= 0.85

    intensity = min(100, max(0, round(raw_intensity)))

    if intensity == 0:
        level, color, particle_count, description = "NONE", "transparent", 0, "No brake sparks"
    else:
        level, color, per_point, description = SPARK_EXTREME
        for bound, tier_level, tier_color, tier_per_point, tier_description in SPARK_TIERS:
            if intensity < bound:
                level, color, per_point, description = tier_level, tier_color, tier_per_point, tier_description
                break
        particle_count = round(intensity * per_point)

    return SparkResult(
        intensity=intensity,
        level=level,
        color=color,
        particle_count=particle_count,
        description=description,
        speed_factor=round(speed_factor, 2),
        decel_factor=round(decel_factor, 2),
        deceleration_g=round(decel_g, 2),
    )
