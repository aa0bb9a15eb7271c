from unittest.mock import AsyncMock

import pytest

from protein_orders.application.create_order import CreateOrderDTO, CreateOrderUseCase
from protein_orders.application.get_order import GetOrderUseCase
from protein_orders.application.list_orders import ListOrdersUseCase
from protein_orders.application.list_products import ListProductsUseCase
from protein_orders.application.update_order_status import UpdateOrderStatusUseCase
from protein_orders.domain.exceptions import (
    CatalogUnavailableError, OrderNotFoundError, StoreUnavailableError
)
from protein_orders.domain.models import OrderStatus
from protein_orders.infrastructure.db_schema import ORDERS
from protein_orders.infrastructure.repositories import StoreProductRepository


@pytest.fixture
def place_order(products, orders, clock):
    use_case = CreateOrderUseCase(products, orders, currency="EUR", clock=clock)

    async def _place(customer_name="Ana", product_id="PZ001", quantity=1):
        return await use_case(CreateOrderDTO.model_validate({
            "customer_name": customer_name,
            "desk_location": "Desk 2",
            "items": [{"product_id": product_id, "quantity": quantity}],
            "payment_details": {"method": "MBWAY", "notes": "sent"},
        }))

    return _place


class TestListProducts:
    async def test_only_in_stock_products(self, products):
        listed = await ListProductsUseCase(products)()
        assert [p.id for p in listed] == ["PZ001", "PZ002", "PZ004"]
        assert all(p.in_stock for p in listed)

    async def test_empty_catalog_is_empty_list(self, store):
        assert await ListProductsUseCase(StoreProductRepository(store))() == []

    async def test_store_failure_is_catalog_unavailable(self):
        products = AsyncMock()
        products.list_in_stock.side_effect = StoreUnavailableError("timeout")

        with pytest.raises(CatalogUnavailableError, match="timeout"):
            await ListProductsUseCase(products)()


class TestGetOrder:
    async def test_round_trip(self, place_order, orders):
        created = await place_order(quantity=4)
        assert await GetOrderUseCase(orders)(created.order_id) == created

    async def test_missing_order(self, orders):
        with pytest.raises(OrderNotFoundError) as exc_info:
            await GetOrderUseCase(orders)("ORD-20250511-FFFFFF")
        assert exc_info.value.order_id == "ORD-20250511-FFFFFF"


class TestListOrders:
    async def test_no_orders(self, orders):
        assert await ListOrdersUseCase(orders)() == []
        assert await ListOrdersUseCase(orders)("delivered") == []

    async def test_filter_by_status(self, place_order, orders, clock):
        first = await place_order("Ana")
        second = await place_order("Rui")
        third = await place_order("Sara")
        update = UpdateOrderStatusUseCase(orders, clock=clock)
        await update(first.order_id, OrderStatus.DELIVERED)
        await update(third.order_id, OrderStatus.DELIVERED)

        delivered = await ListOrdersUseCase(orders)("delivered")
        assert {o.order_id for o in delivered} == {first.order_id, third.order_id}
        assert all(o.status == OrderStatus.DELIVERED for o in delivered)

        pending = await ListOrdersUseCase(orders)("pending_confirmation")
        assert [o.order_id for o in pending] == [second.order_id]

    async def test_without_filter_returns_everything(self, place_order, orders):
        placed = {(await place_order(name)).order_id for name in ("Ana", "Rui")}
        listed = await ListOrdersUseCase(orders)()
        assert {o.order_id for o in listed} == placed


class TestUpdateOrderStatus:
    async def test_delivered_moves_updated_at_forward(self, place_order, orders, clock):
        created = await place_order()

        result = await UpdateOrderStatusUseCase(orders, clock=clock)(created.order_id, OrderStatus.DELIVERED)

        assert result.order_id == created.order_id
        assert result.new_status == OrderStatus.DELIVERED
        stored = await orders.get_by_id(created.order_id)
        assert stored.status == OrderStatus.DELIVERED
        assert stored.updated_at > created.updated_at
        assert stored.updated_at == result.updated_at
        assert stored.created_at == created.created_at

    async def test_any_status_may_follow_any_other(self, place_order, orders, clock):
        created = await place_order()
        update = UpdateOrderStatusUseCase(orders, clock=clock)

        await update(created.order_id, OrderStatus.DELIVERED)
        result = await update(created.order_id, OrderStatus.PENDING_CONFIRMATION)

        assert result.new_status == OrderStatus.PENDING_CONFIRMATION

    async def test_missing_order_leaves_collection_unchanged(self, place_order, orders, seeded_store, clock):
        await place_order()
        before = await seeded_store.scan(ORDERS)

        with pytest.raises(OrderNotFoundError):
            await UpdateOrderStatusUseCase(orders, clock=clock)("ORD-X", OrderStatus.DELIVERED)

        assert await seeded_store.scan(ORDERS) == before

    async def test_unknown_status_value_rejected(self, orders):
        with pytest.raises(ValueError):
            await UpdateOrderStatusUseCase(orders)("ORD-X", "lost_in_transit")
