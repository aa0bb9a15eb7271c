import logging
from typing import List, Optional

from protein_orders.domain.models import Order
from protein_orders.application.interfaces import OrderRepository

logger = logging.getLogger(__name__)


class ListOrdersUseCase:
    """Админская выборка заказов.

    Без фильтра читает всю коллекцию целиком: данных немного, пагинации нет.
    """

    def __init__(self, orders: OrderRepository):
        self._orders = orders

    async def __call__(self, status: Optional[str] = None) -> List[Order]:
        if status:
            orders = await self._orders.list_by_status(status)
        else:
            orders = await self._orders.list_all()
        logger.info(f"Найдено заказов: {len(orders)} (фильтр по статусу: {status})")
        return orders
