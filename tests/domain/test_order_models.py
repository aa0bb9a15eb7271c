import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from protein_orders.domain.models import (
    Order, OrderItem, OrderStatus, PaymentDetails, Product, generate_order_id
)


class TestOrderId:
    def test_format_has_date_prefix_and_hex_suffix(self):
        order_id = generate_order_id(datetime(2025, 5, 11, 13, 0, tzinfo=timezone.utc))
        assert re.fullmatch(r"ORD-20250511-[0-9A-F]{6}", order_id)

    def test_date_is_taken_in_utc(self):
        lisbon_summer = timezone(timedelta(hours=1))
        order_id = generate_order_id(datetime(2025, 5, 12, 0, 30, tzinfo=lisbon_summer))
        assert order_id.startswith("ORD-20250511-")

    def test_suffixes_vary(self):
        now = datetime(2025, 5, 11, tzinfo=timezone.utc)
        ids = {generate_order_id(now) for _ in range(50)}
        assert len(ids) > 1


class TestOrderItem:
    def test_subtotal(self):
        item = OrderItem(product_id="PZ004", name="Berry", quantity=3, price_per_item=Decimal("2.50"))
        assert item.subtotal == Decimal("7.50")

    @pytest.mark.parametrize("quantity", [0, -1, 1001])
    def test_quantity_out_of_range(self, quantity):
        with pytest.raises(ValidationError):
            OrderItem(product_id="PZ001", name="Choco", quantity=quantity, price_per_item=Decimal("2"))


class TestProduct:
    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            Product(id="PZ001", name="Choco", price=Decimal("-1"), currency="EUR", in_stock=True)

    def test_price_is_rendered_as_number(self):
        product = Product(id="PZ004", name="Berry", price=Decimal("2.50"), currency="EUR", in_stock=True)
        dumped = product.model_dump(mode="json", exclude_none=True)
        assert dumped == {"id": "PZ004", "name": "Berry", "price": 2.5, "currency": "EUR", "in_stock": True}


def test_order_json_shape():
    now = datetime(2025, 5, 11, 13, 0, tzinfo=timezone.utc)
    order = Order(
        order_id="ORD-20250511-00A1B2",
        customer_name="Ana",
        desk_location="Desk 2",
        items=[OrderItem(product_id="PZ001", name="Choco", quantity=2, price_per_item=Decimal("2.00"))],
        total_price=Decimal("4.00"),
        currency="EUR",
        status=OrderStatus.PENDING_CONFIRMATION,
        payment_details=PaymentDetails(method="MBWAY", notes="sent"),
        created_at=now,
        updated_at=now,
    )
    dumped = order.model_dump(mode="json")
    assert dumped["status"] == "pending_confirmation"
    assert dumped["total_price"] == 4.0
    assert dumped["items"][0]["price_per_item"] == 2.0
    assert Order.model_validate(dumped) == order


def test_status_values():
    assert {s.value for s in OrderStatus} == {
        "pending_confirmation",
        "payment_verified",
        "preparing_delivery",
        "delivered",
        "cancelled",
    }
