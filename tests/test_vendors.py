# tests/test_vendors.py

"""Tests for vendor name derivation and vendor list normalisation."""

import unittest

from espresso_picker.formatting.vendors import (
    extract_vendor_name,
    format_offer_price,
    normalize_vendors,
)


class TestExtractVendorName(unittest.TestCase):
    """Domain table lookup and humanised fallback."""

    def test_known_domain_with_www(self) -> None:
        self.assertEqual(
            extract_vendor_name("https://www.amazon.com/dp/X"), "Amazon"
        )

    def test_known_domain_without_www(self) -> None:
        self.assertEqual(
            extract_vendor_name("https://seattlecoffeegear.com/p/1"),
            "Seattle Coffee Gear",
        )
        self.assertEqual(
            extract_vendor_name("https://www.amazon.co.uk/x"), "Amazon UK"
        )

    def test_hostname_is_case_insensitive(self) -> None:
        self.assertEqual(
            extract_vendor_name("https://WWW.Target.COM/p"), "Target"
        )

    def test_unknown_domain_is_humanised(self) -> None:
        self.assertEqual(
            extract_vendor_name("https://www.prima-coffee.com/x"),
            "Prima Coffee",
        )
        self.assertEqual(
            extract_vendor_name("https://shop_espresso.net/"),
            "Shop Espresso",
        )
        self.assertEqual(
            extract_vendor_name("https://homebarista.io/"), "Homebarista"
        )

    def test_malformed_urls_resolve_to_sentinel(self) -> None:
        for bad in ["not a url", "", "/relative/path", "http://[::1"]:
            with self.subTest(url=bad):
                self.assertEqual(extract_vendor_name(bad), "Unknown Vendor")

    def test_non_string_input(self) -> None:
        self.assertEqual(extract_vendor_name(None), "Unknown Vendor")


class TestFormatOfferPrice(unittest.TestCase):

    def test_blank_without_price(self) -> None:
        self.assertEqual(format_offer_price(None), "")
        self.assertEqual(format_offer_price(0), "")

    def test_grouped_price(self) -> None:
        self.assertEqual(format_offer_price(1899), "$1,899")


class TestNormalizeVendors(unittest.TestCase):
    """Legacy and current vendor shapes."""

    def test_bare_url_string(self) -> None:
        offers = normalize_vendors(["https://www.walmart.com/ip/1"])
        self.assertEqual(len(offers), 1)
        self.assertEqual(offers[0].url, "https://www.walmart.com/ip/1")
        self.assertEqual(offers[0].name, "Walmart")
        self.assertIsNone(offers[0].price)

    def test_object_with_name_and_price(self) -> None:
        offers = normalize_vendors([
            {
                "id": "amazon_us",
                "name": "Amazon",
                "url": "https://www.amazon.com/dp/B07RQ3NLB6",
                "price": 449.0,
                "last_updated": "2024-01-15T10:30:00Z",
            }
        ])
        offer = offers[0]
        self.assertEqual(offer.name, "Amazon")
        self.assertEqual(offer.price, 449.0)
        self.assertEqual(offer.vendor_id, "amazon_us")
        self.assertEqual(offer.last_updated, "2024-01-15T10:30:00Z")

    def test_object_without_name_derives_it(self) -> None:
        offers = normalize_vendors([{"url": "https://clivecoffee.com/x"}])
        self.assertEqual(offers[0].name, "Clive Coffee")

    def test_invalid_entries_become_placeholders(self) -> None:
        offers = normalize_vendors([42, None])
        self.assertEqual([o.name for o in offers], ["Invalid Vendor"] * 2)
        self.assertEqual(offers[0].url, "")
        self.assertEqual(offers[0].price, 0)

    def test_order_is_preserved(self) -> None:
        offers = normalize_vendors([
            "https://www.target.com/a",
            {"url": "https://www.bestbuy.com/b"},
        ])
        self.assertEqual([o.name for o in offers], ["Target", "Best Buy"])

    def test_non_list_yields_empty(self) -> None:
        self.assertEqual(normalize_vendors(None), [])
        self.assertEqual(normalize_vendors("https://amazon.com"), [])


if __name__ == "__main__":
    unittest.main()
