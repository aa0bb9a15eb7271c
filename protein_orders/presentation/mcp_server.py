from typing import Annotated, Any, Callable, Dict, List, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.server.transport_security import TransportSecuritySettings
from pydantic import Field

from protein_orders.config import Settings
from protein_orders.domain.models import OrderStatus
from protein_orders.presentation.dispatcher import WELCOME_TEXT, ToolDispatcher, failure_from, render
from protein_orders.presentation.schemas import OrderItemParams, PaymentDetailsParams

WELCOME_DESCRIPTION = "Welcome message explaining available protein bar ordering tools"


class OrderingServer(FastMCP):
    """FastMCP, у которого любая ошибка инструмента становится JSON-payload с isError"""

    async def call_tool(self, name: str, arguments: Dict[str, Any]):
        try:
            return await super().call_tool(name, arguments)
        except ToolError as e:
            raise failure_from(name, e.__cause__ or e) from e


def build_mcp_server(app_settings: Settings, dispatcher: Callable[[], ToolDispatcher]) -> OrderingServer:
    """Инструменты и промпт сервиса заказов.

    dispatcher вызывается на каждый запрос: use cases собираются в lifespan,
    уже после создания сервера.
    """
    server = OrderingServer(
        name=app_settings.SERVER_NAME,
        instructions="Order protein bars for delivery to an office desk",
        stateless_http=True,
        json_response=True,
        # Заголовок Host не проверяется
        transport_security=TransportSecuritySettings(enable_dns_rebinding_protection=False),
    )

    @server.tool(
        name="list-products",
        description="Get a list of available protein bars",
        structured_output=False,
    )
    async def list_products() -> str:
        return render(await dispatcher().list_products())

    @server.tool(
        name="create-order",
        description="Submit a new protein bar order",
        structured_output=False,
    )
    async def create_order(
        customer_name: Annotated[str, Field(
            min_length=1, description="Name or fun alias of the customer ordering the protein bars"
        )],
        desk_location: Annotated[str, Field(
            min_length=1, description="Desk location where the protein bars should be delivered"
        )],
        items: Annotated[List[OrderItemParams], Field(
            min_length=1, description="List of protein bars and quantities to order"
        )],
        payment_details: Annotated[PaymentDetailsParams, Field(
            description="Details about how payment was made"
        )],
    ) -> str:
        return render(await dispatcher().create_order(customer_name, desk_location, items, payment_details))

    @server.tool(
        name="list-orders",
        description="Admin function to list protein bar orders",
        structured_output=False,
    )
    async def list_orders(
        status: Annotated[Optional[str], Field(
            description='Filter orders by status (e.g., "pending_confirmation", "delivered")'
        )] = None,
    ) -> str:
        return render(await dispatcher().list_orders(status))

    @server.tool(
        name="get-order",
        description="Admin function to view details of a specific order",
        structured_output=False,
    )
    async def get_order(
        order_id: Annotated[str, Field(min_length=1, description="ID of the order to retrieve")],
    ) -> str:
        return render(await dispatcher().get_order(order_id))

    @server.tool(
        name="update-order-status",
        description="Admin function to update the status of an order",
        structured_output=False,
    )
    async def update_order_status(
        order_id: Annotated[str, Field(min_length=1, description="ID of the order to update")],
        status: Annotated[OrderStatus, Field(description="New status for the order")],
    ) -> str:
        return render(await dispatcher().update_order_status(order_id, status))

    @server.prompt(name="welcome", description=WELCOME_DESCRIPTION)
    def welcome() -> str:
        return WELCOME_TEXT

    return server
