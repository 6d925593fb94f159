"""
Result records of the braking simulation.

Every record is created fresh by a calculation and never modified afterwards, derived variants (e.g. factors with
attached explanations) are built as copies. Distances that are unbounded (vehicle cannot stop at all) are
represented by None.
"""

from dataclasses import dataclass, field
from typing import Optional

# hydroplaning risk levels
HYDRO_NONE = "NONE"
HYDRO_WARNING = "WARNING"
HYDRO_ACTIVE = "ACTIVE"
HYDRO_CRITICAL = "CRITICAL"


@dataclass
class FactorResult:
    """Dimensionless multiplier of one modelled effect plus descriptive metadata."""

    name: str
    value: float
    impact: str  # minimal, moderate, severe (beneficial for downforce)
    status: str = ""
    details: dict = field(default_factory=dict)
    explanation: str = ""


@dataclass
class HydroplaningResult:
    is_hydroplaning: bool
    threshold_speed_kmh: Optional[float]  # None if the model is not applicable (no standing water)
    margin_kmh: Optional[float]
    friction_multiplier: float
    risk_level: str
    nasa_base_speed_kmh: Optional[float] = None
    psi_used: Optional[float] = None
    breakdown: dict = field(default_factory=dict)
    note: str = ""


@dataclass
class RollingPhysicsResult:
    """Outcome of the rolling resistance + air drag fallback, only created if the brakes cannot stop the vehicle."""

    can_stop_eventually: bool
    stopping_distance_m: Optional[float]  # None = unbounded
    stopping_time_s: Optional[float]
    rolling_resistance_coefficient: float
    effective_deceleration: float  # [m/s^2] deceleration at rest (a0)
    required_friction_to_stop: float
    available_friction: float
    terminal_velocity_kmh: Optional[float]
    reason: str


@dataclass
class SafetyWarning:
    severity: str  # info, warning, critical, extreme
    factor: str
    message: str
    icon: str


@dataclass
class RiskAssessment:
    level: str
    color: str
    score: int


@dataclass
class ComparisonResult:
    best_case_m: Optional[float]
    worst_case_m: Optional[float]
    vs_best_percent: Optional[float]
    extra_distance_m: Optional[float]
    extra_car_lengths: Optional[float]
    note: str = ""


@dataclass
class SparkResult:
    intensity: int  # 0 - 100
    level: str
    color: str
    particle_count: int
    description: str
    speed_factor: float
    decel_factor: float
    deceleration_g: float


@dataclass
class CalculationResult:
    """Aggregated output of one braking calculation."""

    # primary distances [m], None if unbounded
    braking_distance_m: Optional[float]
    reaction_distance_m: float
    total_stopping_distance_m: Optional[float]
    braking_distance_ft: Optional[float]
    total_stopping_distance_ft: Optional[float]
    car_lengths: Optional[float]
    distance_unbounded: bool

    # stop feasibility
    can_stop: bool
    can_stop_with_brakes: bool
    using_rolling_physics: bool
    rolling_physics: Optional[RollingPhysicsResult]
    cannot_stop_reason: Optional[str]

    # speed
    speed_kmh: float
    speed_mph: float
    speed_ms: float

    # physics values
    mu_effective: float
    deceleration_ms2: float
    deceleration_g: float
    raw_deceleration_ms2: float
    raw_deceleration_g: float

    factors: dict
    hydroplaning: HydroplaningResult
    comparison: ComparisonResult

    # safety
    risk: RiskAssessment
    warnings: list
    safe_speed_kmh: int

    brake_sparks: SparkResult
    inputs: dict
