import json
import logging
from typing import Any, Dict, List, Optional

from mcp.server.fastmcp.exceptions import ToolError
from pydantic import ValidationError

from protein_orders.application.create_order import CreateOrderDTO, CreateOrderUseCase
from protein_orders.application.get_order import GetOrderUseCase
from protein_orders.application.list_orders import ListOrdersUseCase
from protein_orders.application.list_products import ListProductsUseCase
from protein_orders.application.update_order_status import UpdateOrderStatusUseCase
from protein_orders.domain.exceptions import InvalidOrderError, NotFoundError, StoreUnavailableError
from protein_orders.domain.models import OrderStatus
from protein_orders.presentation.schemas import OrderItemParams, PaymentDetailsParams

logger = logging.getLogger(__name__)

ORDER_RECEIVED_MESSAGE = "Order received. Awaiting payment confirmation and delivery."

WELCOME_TEXT = """
Welcome to the Office Protein Bar Ordering System! As an AI assistant, I can help you with the following:

1. View available protein bars in stock
2. Place a new order for protein bars with delivery to your desk
3. For admins: View and manage existing orders

What would you like to do today? For example, you could say:
- "Show me the available protein bars"
- "I'd like to order 2 Choco Blast bars and 1 Peanut Butter Power bar"
- "Check the status of my recent order"
"""


def render(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def error_payload(code: str, message: str, details: Optional[Any] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"error": code, "message": message}
    if details is not None:
        payload["details"] = details
    return payload


class ToolFailure(Exception):
    """Текст исключения и есть JSON-payload результата с isError"""

    def __init__(self, payload: Dict[str, Any]):
        self.payload = payload
        super().__init__(render(payload))


def failure_from(tool_name: str, error: BaseException) -> ToolFailure:
    """Исключение инструмента → ToolFailure с {error, message[, details]}"""
    if isinstance(error, ToolFailure):
        return error
    if isinstance(error, ValidationError):
        logger.info(f"Некорректные параметры для {tool_name}: {error.error_count()} ошибок")
        details = json.loads(error.json(include_url=False))
        return ToolFailure(error_payload("validation_error", f"Invalid parameters for {tool_name}", details))
    if isinstance(error, (InvalidOrderError, NotFoundError)):
        logger.info(f"{tool_name}: {error.code}: {error}")
        return ToolFailure(error_payload(error.code, str(error)))
    if isinstance(error, StoreUnavailableError):
        logger.error(f"{tool_name}: хранилище недоступно: {error}")
        return ToolFailure(error_payload(error.code, str(error)))
    if isinstance(error, ToolError):
        # Ошибка самого SDK, например неизвестный инструмент
        logger.warning(f"{tool_name}: {error}")
        return ToolFailure(error_payload("tool_error", str(error)))

    logger.error(f"{tool_name}: непредвиденная ошибка", exc_info=error)
    return ToolFailure(error_payload("internal_error", f"Internal error while executing {tool_name}"))


class ToolDispatcher:
    """Параметры инструмента → use case → payload ответа."""

    def __init__(
        self,
        list_products: ListProductsUseCase,
        create_order: CreateOrderUseCase,
        list_orders: ListOrdersUseCase,
        get_order: GetOrderUseCase,
        update_order_status: UpdateOrderStatusUseCase
    ):
        self._list_products = list_products
        self._create_order = create_order
        self._list_orders = list_orders
        self._get_order = get_order
        self._update_order_status = update_order_status

    async def list_products(self) -> Dict[str, Any]:
        products = await self._list_products()
        return {"data": [p.model_dump(mode="json", exclude_none=True) for p in products]}

    async def create_order(
        self,
        customer_name: str,
        desk_location: str,
        items: List[OrderItemParams],
        payment_details: PaymentDetailsParams
    ) -> Dict[str, Any]:
        order_data = CreateOrderDTO.model_validate({
            "customer_name": customer_name,
            "desk_location": desk_location,
            "items": [item.model_dump() for item in items],
            "payment_details": payment_details.model_dump(),
        })
        order = await self._create_order(order_data)
        return {
            "data": {
                "order_id": order.order_id,
                "status": order.status.value,
                "message": ORDER_RECEIVED_MESSAGE,
            }
        }

    async def list_orders(self, status: Optional[str] = None) -> Dict[str, Any]:
        orders = await self._list_orders(status)
        return {"data": [o.model_dump(mode="json") for o in orders]}

    async def get_order(self, order_id: str) -> Dict[str, Any]:
        order = await self._get_order(order_id)
        return {"data": order.model_dump(mode="json")}

    async def update_order_status(self, order_id: str, status: OrderStatus) -> Dict[str, Any]:
        update = await self._update_order_status(order_id, status)
        return {"data": update.model_dump(mode="json")}
