from protein_orders.domain.models import Order
from protein_orders.domain.exceptions import OrderNotFoundError
from protein_orders.application.interfaces import OrderRepository


class GetOrderUseCase:
    def __init__(self, orders: OrderRepository):
        self._orders = orders

    async def __call__(self, order_id: str) -> Order:
        order = await self._orders.get_by_id(order_id)
        if not order:
            raise OrderNotFoundError(order_id)
        return order
