from typing import Optional, List
from datetime import datetime

from protein_orders.domain.models import Order, OrderStatus, Product
from protein_orders.infrastructure.db_schema import ORDERS, PRODUCTS
from protein_orders.application.interfaces import (
    OrderRepository, ProductRepository, Record, RecordStore
)


class StoreProductRepository(ProductRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        record = await self._store.get(PRODUCTS, product_id)
        return self._to_domain(record) if record else None

    async def list_in_stock(self) -> List[Product]:
        records = await self._store.query(PRODUCTS, "in_stock", "true")
        return [self._to_domain(record) for record in records]

    def _to_domain(self, record: Record) -> Product:
        """Трансформация DB → Domain"""
        return Product(
            id=record["id"],
            name=record["name"],
            price=record["price"],
            currency=record["currency"],
            in_stock=str(record["in_stock"]).lower() == "true",
            description=record.get("description"),
            image_url=record.get("image_url")
        )


class StoreOrderRepository(OrderRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        record = await self._store.get(ORDERS, order_id)
        return self._to_domain(record) if record else None

    async def save(self, order: Order) -> None:
        await self._store.put(ORDERS, self._to_record(order))

    async def list_all(self) -> List[Order]:
        records = await self._store.scan(ORDERS)
        return [self._to_domain(record) for record in records]

    async def list_by_status(self, status: str) -> List[Order]:
        records = await self._store.query(ORDERS, "status", status)
        return [self._to_domain(record) for record in records]

    async def update_status(self, order_id: str, status: OrderStatus, updated_at: datetime) -> Order:
        record = await self._store.update_fields(
            ORDERS,
            order_id,
            {"status": status.value, "updated_at": updated_at.isoformat()}
        )
        return self._to_domain(record)

    def _to_record(self, order: Order) -> Record:
        """Трансформация Domain → DB"""
        record = order.model_dump(mode="json")
        # Numeric-колонка принимает Decimal без потери точности
        record["total_price"] = order.total_price
        return record

    def _to_domain(self, record: Record) -> Order:
        return Order.model_validate(record)
