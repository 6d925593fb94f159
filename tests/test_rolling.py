"""
Unit tests for the rolling resistance + air drag fallback.

Tests cover:
- Rolling resistance coefficient composition
- Closed-form stopping distance and time against a numerical integration
- Drag-free limit
- Terminal velocity when even rolling resistance cannot stop the vehicle
"""

import math

import pytest
import numpy as np
from scipy.integrate import solve_ivp

from brakingsim.src._jit_kernels import _rolling_drag_distance, _rolling_drag_time, _terminal_velocity
from brakingsim.src.rolling import calc_rolling_resistance_coefficient, calc_drag_constant, calc_rolling_stop


def integrate_stop(v0, a0, k):
    """Integrate dv/dt = -(a0 + k * v^2), dx/dt = v until standstill. Returns (distance, time)."""

    def rhs(t, y):
        return [y[1], -(a0 + k * y[1] ** 2)]

    def stopped(t, y):
        return y[1]
    stopped.terminal = True
    stopped.direction = -1

    sol = solve_ivp(rhs, (0.0, 1e5), [0.0, v0], events=stopped, rtol=1e-10, atol=1e-10, max_step=1.0)
    return sol.y_events[0][0][0], sol.t_events[0][0]


class TestRollingResistanceCoefficient:
    """Tests for the Crr composition."""

    def test_fuel_grade_base(self):
        """Test the EU fuel grade base values."""
        assert calc_rolling_resistance_coefficient("A", "summer", "ASPHALT_STD", 32.0, 32.0) == 0.00585
        assert calc_rolling_resistance_coefficient("E", "summer", "ASPHALT_STD", 32.0, 32.0) == 0.01166

    def test_tyre_type_surface_and_pressure(self):
        """Test tyre type addition, surface multiplier and pressure deficit."""
        c_rr = calc_rolling_resistance_coefficient("C", "winter", "GRAVEL_LOOSE", 22.0, 32.0)
        assert np.isclose(c_rr, (0.00840 + 0.004) * 2.5 * 1.10)

    def test_over_inflation_no_effect(self):
        """Test that over-inflation does not change Crr."""
        assert calc_rolling_resistance_coefficient("C", "summer", "ASPHALT_STD", 40.0, 32.0) == 0.00840


class TestClosedForm:
    """Tests for the exact integration of rolling + quadratic drag."""

    @pytest.mark.parametrize("v0, a0, k", [
        (30.0, 0.5, 2.7e-4),
        (55.6, 0.12, 2.7e-4),
        (10.0, 2.0, 1e-3),
    ])
    def test_matches_numerical_integration(self, v0, a0, k):
        """Test closed-form distance and time against solve_ivp."""
        d_ref, t_ref = integrate_stop(v0, a0, k)
        assert np.isclose(_rolling_drag_distance(v0, a0, k), d_ref, rtol=1e-5)
        assert np.isclose(_rolling_drag_time(v0, a0, k), t_ref, rtol=1e-5)

    def test_drag_free_limit(self):
        """Test convergence to v0^2 / (2 * a0) for k -> 0."""
        v0, a0 = 25.0, 0.8
        limit = v0 ** 2 / (2.0 * a0)

        errors = [abs(_rolling_drag_distance(v0, a0, k) - limit) for k in (1e-3, 1e-4, 1e-5, 1e-6, 1e-7)]
        assert np.all(np.diff(errors) < 0.0)
        assert errors[-1] / limit < 1e-4

    def test_zero_drag(self):
        """Test that k = 0 gives the kinematic result."""
        assert _rolling_drag_distance(25.0, 0.8, 0.0) == 25.0 ** 2 / 1.6
        assert _rolling_drag_time(25.0, 0.8, 0.0) == 25.0 / 0.8

    def test_drag_shortens_distance(self):
        """Test that air drag always shortens the stop."""
        assert _rolling_drag_distance(40.0, 0.3, 2.7e-4) < 40.0 ** 2 / 0.6


class TestRollingStop:
    """Tests for the fallback solver."""

    def test_gentle_slope_can_stop(self):
        """Test that high rolling resistance stops the vehicle on a gentle downhill."""
        slope_rad = math.radians(-0.5)
        res = calc_rolling_stop(speed_ms=20.0, slope_rad=slope_rad, mu_available=0.002, fuel_grade="C",
                                tyre_type="summer", surface_type="GRAVEL_LOOSE", actual_psi=32.0,
                                recommended_psi=32.0, vehicle_mass_kg=1500.0)
        assert res.can_stop_eventually
        assert res.stopping_distance_m > 0.0
        assert math.isfinite(res.stopping_distance_m)
        assert res.terminal_velocity_kmh is None
        assert np.isclose(res.required_friction_to_stop, math.tan(math.radians(0.5)))

        a0 = res.rolling_resistance_coefficient * 9.81 * math.cos(slope_rad) + 9.81 * math.sin(slope_rad)
        assert np.isclose(res.effective_deceleration, a0)
        assert np.isclose(res.stopping_distance_m,
                          _rolling_drag_distance(20.0, a0, calc_drag_constant(1500.0)))

    def test_steep_slope_cannot_stop(self):
        """Test unbounded distance and terminal velocity on a steep downhill."""
        res = calc_rolling_stop(speed_ms=60.0 / 3.6, slope_rad=math.radians(-12.0), mu_available=0.05,
                                fuel_grade="C", tyre_type="summer", surface_type="ICE_SMOOTH", actual_psi=32.0,
                                recommended_psi=32.0, vehicle_mass_kg=1500.0)
        assert not res.can_stop_eventually
        assert res.stopping_distance_m is None
        assert res.stopping_time_s is None
        assert res.effective_deceleration == 0.0
        assert res.terminal_velocity_kmh > 0.0
        assert "terminal velocity" in res.reason

    def test_terminal_velocity_force_balance(self):
        """Test that drag balances the net downhill force at terminal velocity."""
        m, g, c_rr = 1500.0, 9.81, 0.008
        slope = math.radians(-10.0)
        v = _terminal_velocity(m, g, math.sin(slope), math.cos(slope), c_rr, 1.225, 0.30, 2.2)
        f_drag = 0.5 * 1.225 * 0.30 * 2.2 * v ** 2
        f_net = m * g * (abs(math.sin(slope)) - c_rr * math.cos(slope))
        assert np.isclose(f_drag, f_net)

    def test_terminal_velocity_no_net_force(self):
        """Test the no-net-force marker."""
        assert _terminal_velocity(1500.0, 9.81, 0.0, 1.0, 0.01, 1.225, 0.30, 2.2) == -1.0
