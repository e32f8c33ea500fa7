"""
Unit tests for order numbering and inventory reservation

These tests exercise the pure helpers of the order service; no database is needed.
"""
import re
from datetime import datetime, timezone

import pytest

from store_admin.services.order_service import generate_order_number, release_inventory, reserve_inventory


class TestGenerateOrderNumber:
    """Order number formats"""

    def test_first_sequential_number_uses_default_start(self):
        assert generate_order_number(None, None) == "01000"

    def test_first_sequential_number_uses_configured_start(self):
        assert generate_order_number({"orderNumberStartValue": 42}, None) == "00042"

    def test_sequential_increments_first_digit_run(self):
        settings = {"orderNumberPrefix": "ORD-", "orderNumberSuffix": "-X"}

        assert generate_order_number(settings, "ORD-01041-X") == "ORD-01042-X"

    def test_sequential_widens_past_five_digits(self):
        assert generate_order_number({}, "99999") == "100000"

    def test_sequential_without_digits_restarts_at_one(self):
        assert generate_order_number({}, "manual") == "00001"

    def test_date_based(self):
        """YYYYMMDD followed by the last four digits of the epoch millis"""
        now = datetime(2025, 3, 14, 9, 26, 53, 589000, tzinfo=timezone.utc)
        millis = str(int(now.timestamp() * 1000))

        number = generate_order_number({"orderNumberFormat": "date-based", "orderNumberPrefix": "#"}, "00001", now=now)

        assert number == f"#20250314{millis[-4:]}"

    def test_random(self):
        number = generate_order_number({"orderNumberFormat": "random"}, None)

        assert re.fullmatch(r"[A-Z0-9]{8}", number)


class TestInventory:
    """Reserve on create, release on cancel"""

    @pytest.fixture
    def inventory(self):
        return [
            {"sku": "A", "quantity": 10, "reservedQuantity": 1, "trackQuantity": True},
            {"sku": "B", "quantity": 5, "reservedQuantity": 0, "trackQuantity": False},
        ]

    def test_reserve_moves_quantity_for_tracked_skus(self, inventory):
        updated = reserve_inventory(inventory, [("A", 3), ("B", 2), (None, 9), ("Z", 1)])

        assert updated[0]["quantity"] == 7
        assert updated[0]["reservedQuantity"] == 4
        assert updated[1] == inventory[1]

    def test_reserve_does_not_mutate_input(self, inventory):
        reserve_inventory(inventory, [("A", 3)])

        assert inventory[0]["quantity"] == 10

    def test_release_is_inverse_of_reserve(self, inventory):
        reserved = reserve_inventory(inventory, [("A", 3)])

        released = release_inventory(reserved, [("A", 3)])

        assert released == inventory

    def test_release_never_goes_below_zero_reserved(self, inventory):
        released = release_inventory(inventory, [("A", 5)])

        assert released[0]["quantity"] == 15
        assert released[0]["reservedQuantity"] == 0

    def test_missing_inventory(self):
        assert reserve_inventory(None, [("A", 1)]) == []
