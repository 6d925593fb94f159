"""
Input parameter record of the braking simulation.

All fields have a default, callers may omit any of them. Numeric fields are validated on construction so that a
malformed value fails fast with a descriptive error instead of producing NaN somewhere inside the calculation.
Physically implausible (but numeric) values are not rejected here, they are clamped by the factor functions that
consume them.
"""

import math
from dataclasses import dataclass, fields, asdict
from typing import Optional


class ParameterError(ValueError):
    """Raised when an input field is malformed (non-numeric, NaN, infinite or of the wrong type)."""


_NUMERIC_FIELDS = (
    "speed_kmh",
    "water_depth_mm",
    "tyre_age_years",
    "tread_depth_mm",
    "tyre_width_mm",
    "recommended_psi",
    "ambient_temp_c",
    "slope_degrees",
    "vehicle_mass_kg",
    "reaction_time_s",
    "brake_fade_level",
    "road_camber_degrees",
    "downforce_coefficient",
)
_OPTIONAL_NUMERIC_FIELDS = ("actual_psi", "loaded_mass_kg", "vehicle_year")
_BOOL_FIELDS = ("is_hot_climate", "has_abs", "has_downforce")
_CODE_FIELDS = ("surface_type", "eu_grade", "fuel_grade", "tyre_type", "tyre_compound")


def _to_float(name: str, value) -> float:
    # bool is a subclass of int but a True speed is certainly a caller mistake
    if isinstance(value, bool):
        raise ParameterError(f"Parameter '{name}' must be numeric, got bool {value!r}")
    try:
        x = float(value)
    except (TypeError, ValueError):
        raise ParameterError(f"Parameter '{name}' must be numeric, got {value!r}") from None
    if not math.isfinite(x):
        raise ParameterError(f"Parameter '{name}' must be finite, got {value!r}")
    return x


def _to_bool(name: str, value) -> bool:
    # strings like "false" would be truthy, only real flags and 0/1 are accepted
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ParameterError(f"Parameter '{name}' must be a bool, got {value!r}")


@dataclass
class InputParameters:
    """Flat configuration record of one braking calculation."""

    # speed
    speed_kmh: float = 100.0

    # surface & weather (weather_preset overrides water_depth_mm if it is a known preset code)
    surface_type: str = "ASPHALT_STD"
    water_depth_mm: float = 0.0
    weather_preset: Optional[str] = None

    # tyre specification
    eu_grade: str = "C"  # EU wet grip grade A-E (F = non-EU)
    fuel_grade: str = "C"  # EU fuel economy grade A-E, only used for rolling resistance
    tyre_age_years: float = 0.0
    tread_depth_mm: float = 8.0
    tyre_width_mm: float = 205.0
    tyre_type: str = "summer"  # summer, winter, allseason

    # pressure [psi], actual_psi None -> recommended pressure
    actual_psi: Optional[float] = None
    recommended_psi: float = 32.0

    # environment
    ambient_temp_c: float = 20.0
    is_hot_climate: bool = False

    # road geometry [deg], positive = uphill
    slope_degrees: float = 0.0

    # vehicle [kg]
    vehicle_mass_kg: float = 1500.0
    loaded_mass_kg: Optional[float] = None

    # systems & driver
    has_abs: bool = True
    reaction_time_s: float = 1.5

    # advanced factors
    brake_fade_level: float = 0.0  # 0 = cold brakes, 10 = severely faded
    tyre_compound: str = "touring"
    road_camber_degrees: float = 0.0  # positive = crowned, negative = off-camber
    has_downforce: bool = False
    downforce_coefficient: float = 0.0  # Cl * A [m^2]

    # model year, selects the historical friction override
    vehicle_year: Optional[int] = None

    def __post_init__(self):
        for name in _NUMERIC_FIELDS:
            setattr(self, name, _to_float(name, getattr(self, name)))

        for name in _OPTIONAL_NUMERIC_FIELDS:
            value = getattr(self, name)
            if value is not None:
                setattr(self, name, _to_float(name, value))
        if self.vehicle_year is not None:
            self.vehicle_year = int(self.vehicle_year)

        for name in _BOOL_FIELDS:
            setattr(self, name, _to_bool(name, getattr(self, name)))

        for name in _CODE_FIELDS:
            if not isinstance(getattr(self, name), str):
                raise ParameterError(f"Parameter '{name}' must be a string code, got {getattr(self, name)!r}")
        if self.weather_preset is not None and not isinstance(self.weather_preset, str):
            raise ParameterError(f"Parameter 'weather_preset' must be a string code, got {self.weather_preset!r}")

    @classmethod
    def from_dict(cls, opts: dict) -> "InputParameters":
        """Build the record from a plain dict, unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(opts) - known)
        if unknown:
            raise ParameterError(f"Unknown parameter(s): {', '.join(unknown)}")
        return cls(**opts)

    def to_dict(self) -> dict:
        return asdict(self)
