"""
Parameter sweeps on top of the braking calculation.

Runs the calculation once per value of a swept input parameter and collects the scalar results into numpy arrays, e.g.
for sensitivity plots. Unbounded distances (vehicle cannot stop) are stored as nan.
"""

import numpy as np
from dataclasses import dataclass

from brakingsim.src.braking import calculate
from brakingsim.src.params import InputParameters, ParameterError


@dataclass
class SweepResult:
    """Container for sweep results, one array entry per swept value."""

    parameter: str  # name of the swept InputParameters field
    values: np.ndarray

    braking_distance_m: np.ndarray  # nan = unbounded
    total_stopping_distance_m: np.ndarray  # nan = unbounded
    mu_effective: np.ndarray
    deceleration_ms2: np.ndarray
    hydroplaning_multiplier: np.ndarray

    is_hydroplaning: np.ndarray  # bool
    can_stop: np.ndarray  # bool
    can_stop_with_brakes: np.ndarray  # bool
    risk_score: np.ndarray  # int

    def first_hydroplaning_value(self):
        """First swept value at which hydroplaning is active, None if it never is."""
        inds = np.flatnonzero(self.is_hydroplaning)
        return self.values[inds[0]] if inds.size else None


def _nan_if_none(value) -> float:
    return np.nan if value is None else value


def run_parameter_sweep(parameter: str, values, base_params: InputParameters = None, use_print: bool = False,
                        **opts) -> SweepResult:
    """
    Run the braking calculation for every value of one input parameter.

    Args:
        parameter: Name of the InputParameters field to sweep (e.g. "speed_kmh", "water_depth_mm")
        values: Iterable of values for that field
        base_params: Parameters for all other fields, None -> defaults
        use_print: Print one result line per value
        **opts: Single fields overriding the ones in base_params

    Returns:
        SweepResult with numpy arrays of the scalar results
    """

    if base_params is None:
        base = InputParameters.from_dict(opts).to_dict()
    else:
        base = {**base_params.to_dict(), **opts}

    if parameter not in base:
        raise ParameterError(f"Unknown sweep parameter '{parameter}'")

    values = list(values)
    no_values = len(values)

    braking = np.zeros(no_values)
    total = np.zeros(no_values)
    mu = np.zeros(no_values)
    decel = np.zeros(no_values)
    hydro_mult = np.ones(no_values)
    is_hydro = np.zeros(no_values, dtype=bool)
    can_stop = np.zeros(no_values, dtype=bool)
    can_stop_brakes = np.zeros(no_values, dtype=bool)
    risk_score = np.zeros(no_values, dtype=int)

    if use_print:
        print(f"INFO: Sweeping {parameter} over {no_values} values")
        print(f"  {parameter:>16} {'braking [m]':>12} {'total [m]':>10} {'mu':>7} {'risk':>10}")

    for i, value in enumerate(values):
        res = calculate({**base, parameter: value})

        braking[i] = _nan_if_none(res.braking_distance_m)
        total[i] = _nan_if_none(res.total_stopping_distance_m)
        mu[i] = res.mu_effective
        decel[i] = res.deceleration_ms2
        hydro_mult[i] = res.hydroplaning.friction_multiplier
        is_hydro[i] = res.hydroplaning.is_hydroplaning
        can_stop[i] = res.can_stop
        can_stop_brakes[i] = res.can_stop_with_brakes
        risk_score[i] = res.risk.score

        if use_print:
            print(f"  {value!s:>16} {braking[i]:>12.1f} {total[i]:>10.1f} {mu[i]:>7.3f} {res.risk.level:>10}")

    return SweepResult(
        parameter=parameter,
        values=np.asarray(values),
        braking_distance_m=braking,
        total_stopping_distance_m=total,
        mu_effective=mu,
        deceleration_ms2=decel,
        hydroplaning_multiplier=hydro_mult,
        is_hydroplaning=is_hydro,
        can_stop=can_stop,
        can_stop_with_brakes=can_stop_brakes,
        risk_score=risk_score,
    )


def run_speed_sweep(speeds_kmh, base_params: InputParameters = None, use_print: bool = False,
                    **opts) -> SweepResult:
    """Sweep the vehicle speed [km/h], shorthand for run_parameter_sweep("speed_kmh", ...)."""
    return run_parameter_sweep("speed_kmh", speeds_kmh, base_params=base_params, use_print=use_print, **opts)
