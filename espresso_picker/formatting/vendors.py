# espresso_picker/formatting/vendors.py

"""Vendor name derivation and vendor list normalisation."""

import logging
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlparse

from espresso_picker.formatting.formatters import grouped_number, to_number
from espresso_picker.models.vendor_offer import VendorOffer

logger = logging.getLogger("espresso_picker.vendors")

UNKNOWN_VENDOR = "Unknown Vendor"
INVALID_VENDOR = "Invalid Vendor"

VENDOR_NAMES: dict[str, str] = {
    "amazon.com": "Amazon",
    "amazon.co.uk": "Amazon UK",
    "amazon.ca": "Amazon Canada",
    "amazon.de": "Amazon Germany",
    "williams-sonoma.com": "Williams Sonoma",
    "seattlecoffeegear.com": "Seattle Coffee Gear",
    "clivecoffee.com": "Clive Coffee",
    "wholelattelove.com": "Whole Latte Love",
    "espressooutlet.com": "Espresso Outlet",
    "lamarzocco.com": "La Marzocco",
    "bedbathandbeyond.com": "Bed Bath & Beyond",
    "target.com": "Target",
    "walmart.com": "Walmart",
    "bestbuy.com": "Best Buy",
    "surlatable.com": "Sur La Table",
    "crateandbarrel.com": "Crate & Barrel",
    "wayfair.com": "Wayfair",
    "coffeefool.com": "Coffee Fool",
    "sweetmarias.com": "Sweet Maria's",
    "bluebottlecoffee.com": "Blue Bottle Coffee",
    "intelligentsia.com": "Intelligentsia",
    "stumptowncoffee.com": "Stumptown Coffee",
    "counterculturecoffee.com": "Counter Culture Coffee",
}

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_SEPARATORS = re.compile(r"[-_]")


def _humanize_label(label: str) -> str:
    """Turn ``coffee-fool`` / ``coffeeFool`` into ``Coffee Fool``."""
    spaced = _CAMEL_BOUNDARY.sub(r"\1 \2", label)
    spaced = _SEPARATORS.sub(" ", spaced)
    return " ".join(word[:1].upper() + word[1:] for word in spaced.split(" "))


def extract_vendor_name(url: Any) -> str:
    """Derive a retailer display name from a listing URL.

    Known domains map to their brand name; anything else is built
    from the first DNS label. Malformed URLs resolve to
    ``Unknown Vendor``.
    """
    try:
        parsed = urlparse(str(url).strip())
        hostname = parsed.hostname
    except ValueError:
        logger.warning("Malformed vendor URL: %r", url)
        return UNKNOWN_VENDOR

    if not parsed.scheme or not hostname:
        logger.warning("Malformed vendor URL: %r", url)
        return UNKNOWN_VENDOR

    domain = hostname.lower()
    if domain.startswith("www."):
        domain = domain[len("www."):]

    if domain in VENDOR_NAMES:
        return VENDOR_NAMES[domain]

    return _humanize_label(domain.split(".")[0])


def format_offer_price(price: Any) -> str:
    """Price label for a vendor row; blank when the vendor has no price."""
    number = to_number(price)
    if not number:
        return ""
    return f"${grouped_number(number)}"


def _normalize_one(raw: Any) -> VendorOffer:
    # Legacy shape: a bare URL string.
    if isinstance(raw, str):
        return VendorOffer(url=raw, name=extract_vendor_name(raw))

    if isinstance(raw, Mapping):
        url = str(raw.get("url") or "")
        vendor_id = raw.get("id")
        return VendorOffer(
            url=url,
            name=str(raw.get("name") or extract_vendor_name(url)),
            price=to_number(raw.get("price")),
            last_updated=raw.get("last_updated"),
            vendor_id=str(vendor_id) if vendor_id is not None else None,
        )

    return VendorOffer(url="", name=INVALID_VENDOR, price=0)


def normalize_vendors(raw_vendors: Any) -> list[VendorOffer]:
    """Normalise a ``vendors`` column in any known shape to offers.

    Accepts a list mixing bare URL strings and vendor objects; other
    entries become ``Invalid Vendor`` placeholders. Anything that is
    not a list yields an empty list.
    """
    if not isinstance(raw_vendors, list):
        return []
    return [_normalize_one(raw) for raw in raw_vendors]
