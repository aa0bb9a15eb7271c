from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from protein_orders.domain.models import Order, OrderStatus, Product

Record = Dict[str, Any]


class RecordStore(ABC):
    @abstractmethod
    async def get(self, collection: str, key: str) -> Optional[Record]:
        pass

    @abstractmethod
    async def put(self, collection: str, record: Record) -> None:
        pass

    @abstractmethod
    async def query(self, collection: str, attribute: str, value: Any) -> List[Record]:
        pass

    @abstractmethod
    async def update_fields(self, collection: str, key: str, fields: Record) -> Record:
        pass

    @abstractmethod
    async def scan(self, collection: str) -> List[Record]:
        pass


class ProductRepository(ABC):
    @abstractmethod
    async def get_by_id(self, product_id: str) -> Optional[Product]:
        pass

    @abstractmethod
    async def list_in_stock(self) -> List[Product]:
        pass


class OrderRepository(ABC):
    @abstractmethod
    async def get_by_id(self, order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def save(self, order: Order) -> None:
        pass

    @abstractmethod
    async def list_all(self) -> List[Order]:
        pass

    @abstractmethod
    async def list_by_status(self, status: str) -> List[Order]:
        pass

    @abstractmethod
    async def update_status(self, order_id: str, status: OrderStatus, updated_at: datetime) -> Order:
        pass
