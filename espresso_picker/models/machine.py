# espresso_picker/models/machine.py

"""Espresso machine catalog records."""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any

from espresso_picker.formatting.vendors import normalize_vendors
from espresso_picker.models.vendor_offer import VendorOffer

# Columns whose values are copied into the record as-is.
_SPEC_COLUMNS: tuple[str, ...] = (
    "release_year",
    "machine_type",
    "price_usd",
    "asin",
    "image_url",
    "image_path",
    "image_caption",
    "image_source",
    "boiler_type",
    "number_of_boilers",
    "heating_system",
    "heat_up_seconds",
    "has_pid",
    "built_in_grinder",
    "pre_infusion",
    "portafilter_mm",
    "steam_wand_type",
    "is_plumbable",
    "water_tank_l",
    "has_water_filter",
    "dimensions",
    "weight_lbs",
    "power_watts",
    "build_material",
    "warranty",
    "warranty_years",
)


@dataclass
class MachineRecord:
    """One espresso machine with its specifications and vendor offers."""

    id: str
    name: str = ""
    brand: str = ""
    model_name: str = ""
    release_year: int | None = None
    machine_type: str | None = None
    price_usd: float | None = None
    asin: str | None = None
    image_url: str | None = None
    image_path: str | None = None
    image_caption: str | None = None
    image_source: str | None = None
    boiler_type: str | None = None
    number_of_boilers: int | None = None
    heating_system: str | None = None
    heat_up_seconds: float | None = None
    has_pid: bool | None = None
    built_in_grinder: str | None = None
    pre_infusion: bool | str | None = None
    portafilter_mm: float | None = None
    steam_wand_type: str | None = None
    is_plumbable: bool | None = None
    water_tank_l: float | None = None
    has_water_filter: bool | None = None
    dimensions: str | None = None
    weight_lbs: float | None = None
    power_watts: float | None = None
    build_material: str | None = None
    warranty: str | None = None
    warranty_years: int | None = None
    vendors: list[VendorOffer] = field(
        default_factory=lambda: list[VendorOffer]()
    )
    extra: dict[str, Any] = field(
        default_factory=lambda: dict[str, Any]()
    )

    @property
    def display_name(self) -> str:
        """Human-readable name, falling back to brand + model."""
        if self.name:
            return self.name
        return f"{self.brand} {self.model_name}".strip() or self.id

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "MachineRecord":
        """Build a record from a raw table row.

        This is the only place legacy vendor shapes are normalised;
        columns this model does not know about are kept in ``extra``.
        """
        # A remote column named "extra" is data, not this container.
        known = {f.name for f in fields(cls)} - {"extra"}
        specs = {col: row.get(col) for col in _SPEC_COLUMNS}
        extra = {k: v for k, v in row.items() if k not in known}
        return cls(
            id=str(row.get("id") or ""),
            name=str(row.get("name") or ""),
            brand=str(row.get("brand") or ""),
            model_name=str(row.get("model_name") or ""),
            vendors=normalize_vendors(row.get("vendors")),
            extra=extra,
            **specs,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise back to a JSON-ready row."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "brand": self.brand,
            "model_name": self.model_name,
        }
        for col in _SPEC_COLUMNS:
            data[col] = getattr(self, col)
        data["vendors"] = [v.to_dict() for v in self.vendors]
        data.update(self.extra)
        return data


@dataclass
class ImageInfo:
    """A signed image URL plus its attribution."""

    url: str
    image_caption: str | None = None
    image_source: str | None = None
