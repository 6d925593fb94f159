"""
Constant tables of the braking simulation.

The tables are stored as python literals in brakingsim/input/braking_tables.ini and are loaded once on import. The
loaded structure is recursively frozen (MappingProxyType / tuple) so it can be shared by any number of calculations
without being modified.
"""

import ast
import configparser
import os
from types import MappingProxyType

DEFAULT_TABLES_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "input", "braking_tables.ini"
)

# (section, option) of every table in the ini file
_TABLE_KEYS = {
    "physics": ("PHYSICS", "physics"),
    "surfaces": ("SURFACES", "surfaces"),
    "default_surface": ("SURFACES", "default_surface"),
    "eu_grades": ("EU_GRADES", "eu_grades"),
    "default_grade": ("EU_GRADES", "default_grade"),
    "weather_presets": ("WEATHER_PRESETS", "weather_presets"),
    "fuel_grade_rrc": ("FUEL_GRADE_RRC", "fuel_grade_rrc"),
    "default_fuel_grade": ("FUEL_GRADE_RRC", "default_fuel_grade"),
    "rolling_resistance": ("ROLLING_RESISTANCE", "rolling_resistance"),
    "air_drag": ("AIR_DRAG", "air_drag"),
    "compounds": ("COMPOUNDS", "compounds"),
    "default_compound": ("COMPOUNDS", "default_compound"),
    "vehicle_eras": ("VEHICLE_ERAS", "vehicle_eras"),
    "calibration": ("CALIBRATION", "calibration"),
}


def _freeze(obj):
    """Recursively convert dicts to read-only mappings and lists to tuples."""
    if isinstance(obj, dict):
        return MappingProxyType({key: _freeze(val) for key, val in obj.items()})
    if isinstance(obj, (list, tuple)):
        return tuple(_freeze(val) for val in obj)
    return obj


def load_tables(ini_path: str = DEFAULT_TABLES_PATH) -> MappingProxyType:
    """Read all constant tables from the given .ini file. Returns a frozen mapping table name -> table."""

    parser = configparser.ConfigParser()
    if not parser.read(ini_path):
        raise RuntimeError(f"Braking table file not found: {ini_path}")

    tables = {}
    for name, (section, option) in _TABLE_KEYS.items():
        tables[name] = ast.literal_eval(parser.get(section, option))

    return _freeze(tables)


# ----------------------------------------------------------------------------------------------------------------------
# PROCESS-WIDE TABLES --------------------------------------------------------------------------------------------------
# ----------------------------------------------------------------------------------------------------------------------

TABLES = load_tables()

PHYSICS = TABLES["physics"]
G = PHYSICS["g"]
STANDING_WATER_THRESHOLD_MM = PHYSICS["standing_water_threshold_mm"]
DAMP_FULL_WET_MM = PHYSICS["damp_full_wet_mm"]
CAR_LENGTH_M = PHYSICS["car_length_m"]

SURFACES = TABLES["surfaces"]
EU_GRADES = TABLES["eu_grades"]
WEATHER_PRESETS = TABLES["weather_presets"]
FUEL_GRADE_RRC = TABLES["fuel_grade_rrc"]
ROLLING_RESISTANCE = TABLES["rolling_resistance"]
AIR_DRAG = TABLES["air_drag"]
COMPOUNDS = TABLES["compounds"]
VEHICLE_ERAS = TABLES["vehicle_eras"]
CALIBRATION = TABLES["calibration"]


def get_surface(surface_type: str) -> MappingProxyType:
    """Surface entry for the given code, unknown codes fall back to standard asphalt."""
    return SURFACES.get(surface_type, SURFACES[TABLES["default_surface"]])


def get_eu_grade(grade: str) -> MappingProxyType:
    return EU_GRADES.get(grade, EU_GRADES[TABLES["default_grade"]])


def get_compound(compound: str) -> MappingProxyType:
    return COMPOUNDS.get(compound, COMPOUNDS[TABLES["default_compound"]])


def get_fuel_grade_rrc(fuel_grade: str) -> float:
    return FUEL_GRADE_RRC.get(fuel_grade, FUEL_GRADE_RRC[TABLES["default_fuel_grade"]])


def is_standing_water(water_mm: float) -> bool:
    """Single place where the hydroplaning water depth threshold is evaluated."""
    return water_mm >= STANDING_WATER_THRESHOLD_MM
