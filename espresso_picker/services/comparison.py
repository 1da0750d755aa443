# espresso_picker/services/comparison.py

"""Side-by-side spec comparison and catalog lookups."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from espresso_picker.formatting import formatters as fmt
from espresso_picker.formatting.vendors import format_offer_price
from espresso_picker.models.machine import MachineRecord
from espresso_picker.models.vendor_offer import VendorOffer


def _warranty(machine: MachineRecord) -> str:
    # Older rows only carry warranty_years.
    return fmt.format_warranty(machine.warranty or machine.warranty_years)


def _vendor_label(offer: VendorOffer) -> str:
    price = format_offer_price(offer.price)
    return f"{offer.name} ({price})" if price else offer.name


def _vendors(machine: MachineRecord) -> str:
    labels = [_vendor_label(v) for v in machine.vendors]
    return ", ".join(labels) or "None listed"


SPEC_ROWS: list[tuple[str, Callable[[MachineRecord], str]]] = [
    ("Brand", lambda m: m.brand or fmt.UNKNOWN),
    ("Model", lambda m: m.model_name or fmt.UNKNOWN),
    ("Price", lambda m: fmt.format_price(m.price_usd)),
    ("Type", lambda m: fmt.format_machine_type(m.machine_type)),
    ("Boiler", lambda m: fmt.format_boiler_type(m.boiler_type)),
    ("Boilers", lambda m: fmt.format_number_of_boilers(m.number_of_boilers)),
    ("Heating", lambda m: fmt.format_heating_system(m.heating_system)),
    ("Heat-up", lambda m: fmt.format_heatup_time(m.heat_up_seconds)),
    ("PID", lambda m: fmt.format_yes_no(m.has_pid)),
    ("Grinder", lambda m: fmt.format_built_in_grinder(m.built_in_grinder)),
    ("Pre-infusion", lambda m: fmt.format_pre_infusion(m.pre_infusion)),
    ("Portafilter", lambda m: fmt.format_portafilter(m.portafilter_mm)),
    ("Steam wand", lambda m: fmt.format_steam_wand(m.steam_wand_type)),
    ("Plumbable", lambda m: fmt.format_yes_no(m.is_plumbable)),
    ("Water tank", lambda m: fmt.format_water_tank(m.water_tank_l)),
    ("Water filter", lambda m: fmt.format_yes_no(m.has_water_filter)),
    ("Dimensions", lambda m: fmt.format_dimensions(m.dimensions)),
    ("Weight", lambda m: fmt.format_weight(m.weight_lbs)),
    ("Power", lambda m: fmt.format_power(m.power_watts)),
    ("Material", lambda m: m.build_material or fmt.UNKNOWN),
    ("Warranty", _warranty),
    ("Vendors", _vendors),
]


@dataclass
class ComparisonRow:
    """One spec line with a display value per compared machine."""

    label: str
    values: list[str]


def build_comparison(machines: list[MachineRecord]) -> list[ComparisonRow]:
    """Format every spec row for each machine, in the given order."""
    return [
        ComparisonRow(label=label, values=[render(m) for m in machines])
        for label, render in SPEC_ROWS
    ]


def find_machines(
    machines: list[MachineRecord], machine_ids: list[str]
) -> list[MachineRecord]:
    """Pick machines by id in the requested order; unknown ids are skipped."""
    by_id = {m.id: m for m in machines}
    return [by_id[mid] for mid in machine_ids if mid in by_id]


def search_machines(
    machines: list[MachineRecord], text: str
) -> list[MachineRecord]:
    """Case-insensitive substring match on brand, name and model."""
    needle = text.strip().lower()
    if not needle:
        return list(machines)
    return [
        m
        for m in machines
        if needle in f"{m.brand} {m.name} {m.model_name}".lower()
    ]


def summary_row(machine: MachineRecord) -> dict[str, Any]:
    """Compact formatted fields used by catalog listings."""
    return {
        "id": machine.id,
        "name": machine.display_name,
        "brand": machine.brand,
        "price": fmt.format_price(machine.price_usd),
        "boiler": fmt.format_boiler_type(machine.boiler_type),
        "heat_up": fmt.format_heatup_time(machine.heat_up_seconds),
        "grinder": fmt.format_built_in_grinder(machine.built_in_grinder),
    }
