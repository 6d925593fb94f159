"""Helper modules for parameter sweeps."""

from helpers.simulation import (
    run_parameter_sweep,
    run_speed_sweep,
    SweepResult,
)
