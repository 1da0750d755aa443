# espresso_picker/models/vendor_offer.py

"""Retailer listing attached to a machine record."""

from dataclasses import dataclass
from typing import Any


@dataclass
class VendorOffer:
    """One retailer's listing (URL, display name, optional price)."""

    url: str
    name: str
    price: float | None = None
    last_updated: str | None = None
    vendor_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the row shape stored in the ``vendors`` column."""
        data: dict[str, Any] = {"url": self.url, "name": self.name}
        if self.price is not None:
            data["price"] = self.price
        if self.last_updated is not None:
            data["last_updated"] = self.last_updated
        if self.vendor_id is not None:
            data["id"] = self.vendor_id
        return data
