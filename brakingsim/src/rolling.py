"""
Rolling resistance + air drag fallback.

Only used if the brakes cannot overcome gravity (steep downhill and low grip). The vehicle then decelerates by rolling
resistance and aerodynamic drag alone, i.e. dv/dt = -(a0 + k * v^2) with the constant term
a0 = Crr * g * cos(theta) + g * sin(theta) and k = 0.5 * rho * c_d * A / m. The motion is integrated exactly.
"""

import math

from brakingsim.src import tables
from brakingsim.src._jit_kernels import _rolling_drag_distance, _rolling_drag_time, _terminal_velocity
from brakingsim.src.results import RollingPhysicsResult


def calc_rolling_resistance_coefficient(fuel_grade: str, tyre_type: str, surface_type: str, actual_psi: float,
                                        recommended_psi: float) -> float:
    """Crr from the EU fuel economy grade, plus tyre type addition, times surface multiplier and pressure deficit."""
    rr = tables.ROLLING_RESISTANCE

    c_rr = tables.get_fuel_grade_rrc(fuel_grade)
    c_rr += rr["tyre_type_addition"].get(tyre_type, 0.0)
    c_rr *= rr["surfaces"].get(surface_type, 1.0)

    # roughly 1 % more rolling resistance per psi below the recommended pressure
    if actual_psi < recommended_psi:
        c_rr *= 1.0 + (recommended_psi - actual_psi) * rr["pressure_factor"]

    return c_rr


def calc_drag_constant(vehicle_mass_kg: float) -> float:
    """k = 0.5 * rho * c_d * A / m [1/m]."""
    air = tables.AIR_DRAG
    return 0.5 * air["rho_air"] * air["c_d"] * air["frontal_area"] / vehicle_mass_kg


def calc_rolling_stop(speed_ms: float, slope_rad: float, mu_available: float, fuel_grade: str, tyre_type: str,
                      surface_type: str, actual_psi: float, recommended_psi: float,
                      vehicle_mass_kg: float) -> RollingPhysicsResult:
    air = tables.AIR_DRAG
    g = tables.G

    c_rr = calc_rolling_resistance_coefficient(fuel_grade=fuel_grade,
                                               tyre_type=tyre_type,
                                               surface_type=surface_type,
                                               actual_psi=actual_psi,
                                               recommended_psi=recommended_psi)

    cos_slope = math.cos(slope_rad)
    sin_slope = math.sin(slope_rad)

    # friction needed to hold the vehicle on this slope: g * (mu * cos + sin) = 0
    required_mu = -math.tan(slope_rad)

    # deceleration at rest (no drag), negative sin for downhill
    a0 = c_rr * g * cos_slope + g * sin_slope
    k = calc_drag_constant(vehicle_mass_kg)

    if a0 > 0.0:
        distance = _rolling_drag_distance(speed_ms, a0, k)
        time = _rolling_drag_time(speed_ms, a0, k)

        if k > 0.0:
            reason = f"Exact integration: rolling (Crr={c_rr:.3f}) + drag. Time: {time:.1f}s"
        else:
            reason = f"Stopping via rolling resistance only (Crr={c_rr:.3f})"

        return RollingPhysicsResult(
            can_stop_eventually=True,
            stopping_distance_m=distance,
            stopping_time_s=time,
            rolling_resistance_coefficient=c_rr,
            effective_deceleration=max(0.01, a0),
            required_friction_to_stop=required_mu,
            available_friction=mu_available,
            terminal_velocity_kmh=None,
            reason=reason,
        )

    # slope too steep even for rolling resistance, the vehicle accelerates towards its terminal velocity
    v_term = _terminal_velocity(vehicle_mass_kg, g, sin_slope, cos_slope, c_rr,
                                air["rho_air"], air["c_d"], air["frontal_area"])

    if v_term > 0.0:
        terminal_kmh = v_term * 3.6
        reason = f"Cannot stop - slope too steep. Vehicle will reach terminal velocity of ~{round(terminal_kmh)} km/h"
    else:
        terminal_kmh = None
        reason = "Cannot stop - slope exceeds maximum angle for rolling resistance"

    return RollingPhysicsResult(
        can_stop_eventually=False,
        stopping_distance_m=None,
        stopping_time_s=None,
        rolling_resistance_coefficient=c_rr,
        effective_deceleration=0.0,
        required_friction_to_stop=required_mu,
        available_friction=mu_available,
        terminal_velocity_kmh=terminal_kmh,
        reason=reason,
    )
