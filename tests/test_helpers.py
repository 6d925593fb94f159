"""
Tests for the parameter sweep helpers.
"""

import pytest
import numpy as np

from brakingsim.src.params import InputParameters, ParameterError
from helpers.simulation import run_parameter_sweep, run_speed_sweep


@pytest.mark.integration
class TestSweeps:
    """Tests for speed and parameter sweeps."""

    def test_speed_sweep_arrays(self):
        """Test array shapes and monotone distances over speed."""
        speeds = np.arange(20.0, 201.0, 20.0)
        sweep = run_speed_sweep(speeds)

        assert sweep.parameter == "speed_kmh"
        assert sweep.braking_distance_m.shape == speeds.shape
        assert sweep.can_stop.dtype == bool
        assert np.all(np.diff(sweep.braking_distance_m) > 0.0)
        assert np.all(sweep.total_stopping_distance_m > sweep.braking_distance_m)

    def test_first_hydroplaning_speed(self):
        """Test detection of the hydroplaning onset in standing water."""
        sweep = run_speed_sweep(np.arange(40.0, 161.0, 5.0), water_depth_mm=4.0)
        v_hydro = sweep.first_hydroplaning_value()
        assert v_hydro == 70.0
        assert np.all(sweep.risk_score[sweep.is_hydroplaning] == 100)

    def test_no_hydroplaning_on_dry(self):
        """Test that a dry sweep never hydroplanes."""
        assert run_speed_sweep([50.0, 150.0, 250.0]).first_hydroplaning_value() is None

    def test_unbounded_is_nan(self):
        """Test that unbounded distances become nan."""
        sweep = run_parameter_sweep("slope_degrees", [0.0, -12.0], surface_type="ICE_SMOOTH", speed_kmh=60.0)
        assert np.isfinite(sweep.braking_distance_m[0])
        assert np.isnan(sweep.braking_distance_m[1])
        assert not sweep.can_stop[1]

    def test_base_params(self):
        """Test a sweep on top of a parameter record."""
        base = InputParameters(speed_kmh=100.0, tyre_type="winter")
        sweep = run_parameter_sweep("water_depth_mm", [0.0, 1.0, 2.0], base_params=base)
        assert np.all(np.diff(sweep.mu_effective) != 0.0)

    def test_unknown_parameter(self):
        """Test that sweeping an unknown field raises."""
        with pytest.raises(ParameterError):
            run_parameter_sweep("top_speed", [1.0, 2.0])

    def test_print(self, capsys):
        """Test the optional result table."""
        run_speed_sweep([50.0, 100.0], use_print=True)
        out = capsys.readouterr().out
        assert "Sweeping speed_kmh" in out
