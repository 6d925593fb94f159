"""
Deceleration and distance solver.

Braking deceleration on a slope is a = g * (mu * cos(theta) + sin(theta)). If it is positive the braking distance
follows from constant deceleration kinematics, otherwise the brakes cannot stop the vehicle and the rolling resistance
+ air drag fallback takes over.
"""

import math
from dataclasses import dataclass
from typing import Optional

from brakingsim.src import tables
from brakingsim.src._jit_kernels import _raw_deceleration, _kinematic_distance, KMH_TO_MS, MS_TO_KMH
from brakingsim.src.params import InputParameters
from brakingsim.src.results import RollingPhysicsResult
from brakingsim.src.rolling import calc_rolling_stop


@dataclass
class StoppingSolution:
    raw_deceleration: float  # [m/s^2], may be <= 0
    deceleration: float  # [m/s^2], raw value or the rolling fallback deceleration at rest
    can_stop_with_brakes: bool
    can_stop: bool
    braking_distance_m: Optional[float]  # None = unbounded
    rolling_physics: Optional[RollingPhysicsResult]


def calc_raw_deceleration(mu: float, slope_rad: float) -> float:
    return _raw_deceleration(mu, slope_rad, tables.G)


def calc_reaction_distance(speed_ms: float, reaction_time_s: float) -> float:
    return speed_ms * reaction_time_s


def solve_stopping(mu: float, inp: InputParameters) -> StoppingSolution:
    """Solve the braking phase for the effective friction coefficient mu and resolved input parameters."""

    speed_ms = inp.speed_kmh * KMH_TO_MS
    slope_rad = math.radians(inp.slope_degrees)
    raw_decel = calc_raw_deceleration(mu, slope_rad)

    if raw_decel > 0.0:
        return StoppingSolution(
            raw_deceleration=raw_decel,
            deceleration=raw_decel,
            can_stop_with_brakes=True,
            can_stop=True,
            braking_distance_m=_kinematic_distance(speed_ms, raw_decel),
            rolling_physics=None,
        )

    rolling = calc_rolling_stop(speed_ms=speed_ms,
                                slope_rad=slope_rad,
                                mu_available=mu,
                                fuel_grade=inp.fuel_grade,
                                tyre_type=inp.tyre_type,
                                surface_type=inp.surface_type,
                                actual_psi=inp.actual_psi,
                                recommended_psi=inp.recommended_psi,
                                vehicle_mass_kg=inp.loaded_mass_kg)

    return StoppingSolution(
        raw_deceleration=raw_decel,
        deceleration=rolling.effective_deceleration,
        can_stop_with_brakes=False,
        can_stop=rolling.can_stop_eventually,
        braking_distance_m=rolling.stopping_distance_m,
        rolling_physics=rolling,
    )


def calc_safe_speed(mu: float, slope_rad: float, target_distance_m: float) -> int:
    """Speed [km/h] from which the vehicle stops within target_distance_m by braking (v = sqrt(2 * a * d)). 0 if the
    brakes cannot decelerate the vehicle at all."""
    decel = calc_raw_deceleration(mu, slope_rad)
    if decel <= 0.0:
        return 0
    return round(math.sqrt(2.0 * decel * target_distance_m) * MS_TO_KMH)
