"""
Hydroplaning model. Starts from the NASA threshold speed for the tyre pressure, reduces it for worn tread, wide
tyres and deep water and collapses the available friction cubically above the threshold. Only evaluated on standing
water.
"""

from brakingsim.src import tables
from brakingsim.src._jit_kernels import _hydroplaning_threshold
from brakingsim.src.results import HydroplaningResult, HYDRO_NONE, HYDRO_WARNING, HYDRO_ACTIVE, HYDRO_CRITICAL

# friction collapse exponent above the threshold speed
COLLAPSE_EXPONENT = 3.0
# minimum remaining friction share when hydroplaning
MIN_MULTIPLIER = 0.05
# margin [%] below the threshold speed in which a warning is issued
WARNING_MARGIN_PERCENT = 15.0


def calc_hydroplaning(speed_kmh: float, psi: float, tread_mm: float, width_mm: float,
                      water_mm: float) -> HydroplaningResult:
    """
    Hydroplaning model based on the NASA formula V_p = 10.35 * sqrt(PSI) [mph].

    The formula was derived for water depths exceeding the tyre groove depth, the model is therefore only evaluated on
    standing water (tables.is_standing_water). Below that, reduced grip originates from the water film and worn tread,
    which are covered by the weather and tread factors, and a neutral result is returned.

    speed_kmh:  vehicle speed [km/h]
    psi:        effective tyre pressure [psi], clamped to [15, 50]
    tread_mm:   tread depth [mm]
    width_mm:   tyre width [mm]
    water_mm:   effective water depth [mm]
    """

    if not tables.is_standing_water(water_mm):
        return HydroplaningResult(
            is_hydroplaning=False,
            threshold_speed_kmh=None,
            margin_kmh=None,
            friction_multiplier=1.0,
            risk_level=HYDRO_NONE,
            psi_used=psi,
            note=f"Water depth {water_mm}mm < {tables.STANDING_WATER_THRESHOLD_MM}mm - hydroplaning model not "
                 f"applicable (reduced grip from film/tread, not full aquaplaning)",
        )

    threshold, nasa_kmh, tread_factor, width_factor, water_factor = _hydroplaning_threshold(
        psi, tread_mm, width_mm, water_mm, tables.PHYSICS["mph_to_kmh"]
    )
    psi_used = min(50.0, max(15.0, psi))

    is_hydroplaning = speed_kmh > threshold
    friction_multiplier = 1.0
    risk_level = HYDRO_NONE

    margin_percent = (threshold - speed_kmh) / threshold * 100.0
    if 0.0 <= margin_percent < WARNING_MARGIN_PERCENT:
        risk_level = HYDRO_WARNING

    if is_hydroplaning:
        friction_multiplier = max(MIN_MULTIPLIER, (threshold / speed_kmh) ** COLLAPSE_EXPONENT)
        risk_level = HYDRO_CRITICAL if friction_multiplier < 0.3 else HYDRO_ACTIVE

    return HydroplaningResult(
        is_hydroplaning=is_hydroplaning,
        threshold_speed_kmh=threshold,
        margin_kmh=threshold - speed_kmh,
        friction_multiplier=friction_multiplier,
        risk_level=risk_level,
        nasa_base_speed_kmh=nasa_kmh,
        psi_used=psi_used,
        breakdown={
            "psi_effect": f"NASA base: {round(nasa_kmh)} km/h from {psi_used:g} PSI",
            "tread_effect": f"x{round(tread_factor, 2)} ({tread_mm:g}mm tread)",
            "width_effect": f"x{round(width_factor, 2)} ({width_mm:g}mm width)",
            "water_effect": f"x{round(water_factor, 2)} ({water_mm:g}mm water)",
        },
    )
