import logging
from decimal import Decimal
from typing import Callable, List
from datetime import datetime
from pydantic import BaseModel

from protein_orders.domain.models import (
    MAX_ITEM_QUANTITY, Order, OrderItem, OrderStatus, PaymentDetails, generate_order_id, utc_now
)
from protein_orders.domain.exceptions import InvalidOrderError, ProductNotFoundError
from protein_orders.application.interfaces import OrderRepository, ProductRepository


logger = logging.getLogger(__name__)


class RequestedItemDTO(BaseModel):
    product_id: str
    quantity: int


class CreateOrderDTO(BaseModel):
    customer_name: str
    desk_location: str
    items: List[RequestedItemDTO]
    payment_details: PaymentDetails


class CreateOrderUseCase:
    def __init__(
        self,
        products: ProductRepository,
        orders: OrderRepository,
        currency: str,
        clock: Callable[[], datetime] = utc_now
    ):
        self._products = products
        self._orders = orders
        self._currency = currency
        self._clock = clock

    async def __call__(self, order_data: CreateOrderDTO) -> Order:
        logger.info(f"Создание заказа для {order_data.customer_name!r} ({order_data.desk_location})")

        # 1. Проверка входных данных до обращения к хранилищу
        self._validate(order_data)

        # 2. Цены берем из каталога и копируем в позиции заказа
        order_items: List[OrderItem] = []
        total_price = Decimal("0")
        for requested in order_data.items:
            product = await self._products.get_by_id(requested.product_id)
            if not product:
                logger.warning(f"Товар {requested.product_id} не найден, заказ не создан")
                raise ProductNotFoundError(requested.product_id)

            item = OrderItem(
                product_id=product.id,
                name=product.name,
                quantity=requested.quantity,
                price_per_item=product.price
            )
            order_items.append(item)
            total_price += item.subtotal

        # 3. Создание заказа: единственная запись в хранилище
        now = self._clock()
        order = Order(
            order_id=generate_order_id(now),
            customer_name=order_data.customer_name,
            desk_location=order_data.desk_location,
            items=order_items,
            total_price=total_price,
            currency=self._currency,
            status=OrderStatus.PENDING_CONFIRMATION,
            payment_details=order_data.payment_details,
            created_at=now,
            updated_at=now
        )
        await self._orders.save(order)
        logger.info(f"Заказ создан: {order.order_id}, сумма {order.total_price} {order.currency}")
        return order

    @staticmethod
    def _validate(order_data: CreateOrderDTO) -> None:
        if not order_data.customer_name.strip():
            raise InvalidOrderError("customer_name must not be empty")
        if not order_data.desk_location.strip():
            raise InvalidOrderError("desk_location must not be empty")
        if not order_data.items:
            raise InvalidOrderError("An order must contain at least one item")
        for item in order_data.items:
            if item.quantity < 1:
                raise InvalidOrderError(
                    f"Quantity for product {item.product_id} must be a positive integer"
                )
            if item.quantity > MAX_ITEM_QUANTITY:
                raise InvalidOrderError(
                    f"Quantity for product {item.product_id} must not exceed {MAX_ITEM_QUANTITY}"
                )
