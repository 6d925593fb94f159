"""
Numba JIT-compiled kernels for the closed-form braking physics.

All functions are standalone @njit(cache=True) functions operating on plain floats so they can be called from the
solver modules as well as from vectorised sweeps without any Python object overhead.
"""

import math

from numba import njit


# ======================================================================================
# Unit conversion constants
# ======================================================================================

KMH_TO_MS = 1.0 / 3.6
MS_TO_KMH = 3.6


# ======================================================================================
# JIT-compiled kernel functions
# ======================================================================================

@njit(cache=True)
def _raw_deceleration(mu, slope_rad, g):
    """
    Braking deceleration in m/s^2 on a slope: a = g * (mu * cos(theta) + sin(theta)).
    The signed angle is used directly, uphill (theta > 0) adds to the deceleration, downhill subtracts.
    """
    return g * (mu * math.cos(slope_rad) + math.sin(slope_rad))


@njit(cache=True)
def _kinematic_distance(vel, a):
    """Distance in m to stop from vel [m/s] under constant deceleration a > 0 [m/s^2]."""
    return vel * vel / (2.0 * a)


@njit(cache=True)
def _rolling_drag_distance(v0, a0, k):
    """
    Exact stopping distance in m for dv/dt = -(a0 + k * v^2) with a0 > 0 [m/s^2] and k >= 0 [1/m]:
    d = 1 / (2k) * ln(1 + k * v0^2 / a0). For k = 0 the constant deceleration limit v0^2 / (2 * a0) is returned.
    """
    if k <= 0.0:
        return v0 * v0 / (2.0 * a0)
    return math.log1p(k * v0 * v0 / a0) / (2.0 * k)


@njit(cache=True)
def _rolling_drag_time(v0, a0, k):
    """Exact stopping time in s for dv/dt = -(a0 + k * v^2): t = 1 / sqrt(a0 * k) * atan(v0 * sqrt(k / a0))."""
    if k <= 0.0:
        return v0 / a0
    return math.atan(v0 * math.sqrt(k / a0)) / math.sqrt(a0 * k)


@njit(cache=True)
def _terminal_velocity(m, g, sin_slope, cos_slope, c_rr, rho_air, c_d, area):
    """
    Velocity in m/s at which air drag balances the net downhill force:
    0.5 * rho * c_d * A * v^2 = m * g * (|sin(theta)| - c_rr * cos(theta)). Returns -1.0 if there is no net force.
    """
    f_net = m * g * (abs(sin_slope) - c_rr * cos_slope)
    if f_net <= 0.0 or rho_air * c_d * area <= 0.0:
        return -1.0
    return math.sqrt(2.0 * f_net / (rho_air * c_d * area))


@njit(cache=True)
def _hydroplaning_threshold(psi, tread_mm, width_mm, water_mm, mph_to_kmh):
    """
    Hydroplaning threshold speed in km/h. Starts from the NASA formula V_p [mph] = 10.35 * sqrt(PSI) and is reduced
    by worn tread, wide tyres and deep water. Returns (threshold, nasa_base, tread_factor, width_factor, water_factor).
    """
    psi_c = min(50.0, max(15.0, psi))
    nasa_kmh = 10.35 * math.sqrt(psi_c) * mph_to_kmh

    # tread: 1.0 at 8 mm -> 0.80 at 1.6 mm
    tread_ratio = min(1.0, max(0.2, tread_mm / 8.0))
    tread_factor = 0.75 + 0.25 * tread_ratio

    # width: 0 at 205 mm, up to 15 % reduction for wide tyres
    width_penalty = min(0.15, max(0.0, (width_mm - 205.0) / 200.0 * 0.15))
    width_factor = 1.0 - width_penalty

    # water: only significant above 1 mm
    water_factor = 1.0
    if water_mm > 1.0:
        water_factor = max(0.6, 1.0 - (water_mm - 1.0) * 0.10)

    threshold = max(35.0, nasa_kmh * tread_factor * width_factor * water_factor)
    return threshold, nasa_kmh, tread_factor, width_factor, water_factor
