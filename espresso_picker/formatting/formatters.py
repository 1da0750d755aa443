# espresso_picker/formatting/formatters.py

"""Display formatting for espresso machine specifications.

Every function here is total: any input, including ``None`` and values
in legacy shapes, maps to a display string and nothing is raised.
"""

import math
from typing import Any

UNKNOWN = "Unknown"
NOT_AVAILABLE = "N/A"

_BOILER_TYPES: dict[str, str] = {
    "Single boiler": "Single Boiler",
    "Dual boiler": "Dual Boiler",
    "Heat-exchange": "Heat Exchange",
    # Legacy values
    "single": "Single Boiler",
    "dual": "Dual Boiler",
    "heat_exchanger": "Heat Exchange",
    "thermojet": "ThermoJet",
}

_HEATING_SYSTEMS: dict[str, str] = {
    "Classic tank": "Classic Tank",
    "Thermoblock": "Thermoblock",
    "Thermocoil": "Thermocoil",
    "Thermojet": "ThermoJet",
    "Quick Heat boiler": "Quick Heat Boiler",
}

_MACHINE_TYPES: dict[str, str] = {
    "Semi-automatic": "Semi-Automatic",
    "Semi-Automatic": "Semi-Automatic",
    "Super-automatic": "Super-Automatic",
    "Super-Automatic": "Super-Automatic",
    "Automatic": "Automatic",
    "Manual": "Manual",
}

_STEAM_WANDS: dict[str, str] = {
    "manual": "Manual",
    "auto-frother": "Auto Frother",
    "cool-touch": "Cool Touch",
}

_GRINDERS: dict[str, str] = {
    "built-in": "Yes (built-in)",
    "external": "Yes (external)",
    "none": "No",
}

_PRE_INFUSION_TOKENS: dict[str, str] = {
    "none": "No",
    "mechanical": "Yes (Mechanical)",
    "programmable": "Yes (Programmable)",
}


# ── Helpers ──────────────────────────────────────────────


def to_number(value: Any) -> float | None:
    """Coerce a loosely typed numeric field, ``None`` when impossible."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def plain_number(value: float) -> str:
    """Render a number without a trailing ``.0`` (``2.0`` -> ``2``)."""
    if value.is_integer():
        return str(int(value))
    return str(value)


def grouped_number(value: float) -> str:
    """Render a number with thousands separators (``1899`` -> ``1,899``)."""
    rounded = round(value, 3)
    if rounded.is_integer():
        return f"{int(rounded):,}"
    return f"{rounded:,}"


def _lookup(table: dict[str, str], value: Any, default: str) -> str:
    """Exact-match table lookup; unmatched values pass through."""
    if isinstance(value, str) and value in table:
        return table[value]
    if not value:
        return default
    return str(value)


def _with_unit(value: Any, unit: str, sentinel: str = UNKNOWN) -> str:
    number = to_number(value)
    if not number:
        return sentinel
    return f"{plain_number(number)}{unit}"


# ── Durations ────────────────────────────────────────────


def format_heatup_time(seconds: Any) -> str:
    """Format a heat-up time in seconds as ``45s`` / ``1m 30s`` / ``2m``."""
    total = to_number(seconds)
    if not total:
        return UNKNOWN

    if total < 60:
        return f"{plain_number(total)}s"

    minutes = int(total // 60)
    remaining = total % 60
    if remaining == 0:
        return f"{minutes}m"
    return f"{minutes}m {plain_number(remaining)}s"


# ── Enumerations ─────────────────────────────────────────


def format_boiler_type(boiler_type: Any) -> str:
    """Map current and legacy boiler type values to a display label."""
    return _lookup(_BOILER_TYPES, boiler_type, UNKNOWN)


def format_heating_system(heating_system: Any) -> str:
    """Map a heating system value to a display label."""
    return _lookup(_HEATING_SYSTEMS, heating_system, UNKNOWN)


def format_machine_type(machine_type: Any) -> str:
    return _lookup(_MACHINE_TYPES, machine_type, UNKNOWN)


def format_steam_wand(wand_type: Any) -> str:
    # A missing wand type means a plain manual wand.
    return _lookup(_STEAM_WANDS, wand_type, "Manual")


def format_built_in_grinder(grinder: Any) -> str:
    """Describe whether a machine has a grinder, and what kind."""
    if grinder is None:
        return "No"
    return _lookup(_GRINDERS, grinder, UNKNOWN)


def format_pre_infusion(pre_infusion: Any) -> str:
    """Format pre-infusion from a boolean or a legacy text token.

    Unrecognised tokens fall back to their truthiness, so any
    non-empty string reads as ``Yes``.
    """
    if isinstance(pre_infusion, bool):
        return "Yes" if pre_infusion else "No"
    if isinstance(pre_infusion, str) and pre_infusion in _PRE_INFUSION_TOKENS:
        return _PRE_INFUSION_TOKENS[pre_infusion]
    return "Yes" if pre_infusion else "No"


def format_yes_no(value: Any) -> str:
    if value is None:
        return UNKNOWN
    return "Yes" if value else "No"


# ── Counts and text ──────────────────────────────────────


def format_number_of_boilers(count: Any) -> str:
    number = to_number(count)
    if not number:
        return UNKNOWN
    if number == 1:
        return "1 boiler"
    return f"{plain_number(number)} boilers"


def format_warranty(warranty: Any) -> str:
    """Format warranty years (number) or pass warranty text through."""
    if not warranty:
        return "No warranty info"
    if isinstance(warranty, (int, float)) and not isinstance(warranty, bool):
        return f"{plain_number(float(warranty))}-year limited"
    return str(warranty)


def format_dimensions(dimensions: Any) -> str:
    return str(dimensions) if dimensions else UNKNOWN


# ── Quantities with units ────────────────────────────────


def format_water_tank(liters: Any) -> str:
    return _with_unit(liters, "L")


def format_weight(lbs: Any) -> str:
    return _with_unit(lbs, " lbs")


def format_power(watts: Any) -> str:
    return _with_unit(watts, "W")


def format_portafilter(mm: Any) -> str:
    return _with_unit(mm, "mm")


def format_price(price: Any) -> str:
    """Format a USD price with thousands separators, ``N/A`` if unset."""
    number = to_number(price)
    if not number:
        return NOT_AVAILABLE
    return f"${grouped_number(number)}"
