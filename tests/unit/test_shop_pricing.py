"""Tests for SKU generation and unit pricing."""

from __future__ import annotations

from decimal import Decimal

from loro.db.models import Product
from loro.shop.service import generate_sku, unit_price_for


class TestGenerateSku:
    def test_format(self) -> None:
        assert generate_sku("hardware", "drill", 7, 42) == "HAR-DRI-007-000042"

    def test_without_reseller(self) -> None:
        assert generate_sku("tools", "saw", None, 1) == "TOO-SAW-000-000001"

    def test_short_names(self) -> None:
        assert generate_sku("ab", "x", None, 5) == "AB-X-000-000005"


class TestUnitPrice:
    def test_list_price(self) -> None:
        product = Product(price=Decimal("100.00"), sale_price=Decimal("80.00"), is_on_promotion=False)
        assert unit_price_for(product) == Decimal("100.00")

    def test_promotion_price(self) -> None:
        product = Product(price=Decimal("100.00"), sale_price=Decimal("80.00"), is_on_promotion=True)
        assert unit_price_for(product) == Decimal("80.00")

    def test_promotion_without_sale_price(self) -> None:
        product = Product(price=Decimal("100.00"), sale_price=None, is_on_promotion=True)
        assert unit_price_for(product) == Decimal("100.00")
