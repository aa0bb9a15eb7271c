import logging
from typing import Callable
from datetime import datetime

from protein_orders.domain.models import OrderStatus, OrderStatusUpdate, utc_now
from protein_orders.domain.exceptions import OrderNotFoundError, RecordNotFoundError
from protein_orders.application.interfaces import OrderRepository


logger = logging.getLogger(__name__)


class UpdateOrderStatusUseCase:
    # Переходы между статусами не проверяются: допустим любой статус из OrderStatus
    def __init__(self, orders: OrderRepository, clock: Callable[[], datetime] = utc_now):
        self._orders = orders
        self._clock = clock

    async def __call__(self, order_id: str, status: OrderStatus) -> OrderStatusUpdate:
        status = OrderStatus(status)
        now = self._clock()
        try:
            order = await self._orders.update_status(order_id, status, now)
        except RecordNotFoundError:
            logger.warning(f"Заказ {order_id} не найден, статус не обновлен")
            raise OrderNotFoundError(order_id)

        logger.info(f"Статус заказа {order_id} обновлен: {order.status.value}")
        return OrderStatusUpdate(
            order_id=order.order_id,
            new_status=order.status,
            updated_at=order.updated_at
        )
