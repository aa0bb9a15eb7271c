import logging
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from protein_orders.config import Settings, settings
from protein_orders.database import create_engine, create_record_store
from protein_orders.application.create_order import CreateOrderUseCase
from protein_orders.application.get_order import GetOrderUseCase
from protein_orders.application.list_orders import ListOrdersUseCase
from protein_orders.application.list_products import ListProductsUseCase
from protein_orders.application.update_order_status import UpdateOrderStatusUseCase
from protein_orders.infrastructure.repositories import StoreOrderRepository, StoreProductRepository
from protein_orders.presentation.api import McpEndpoint, router
from protein_orders.presentation.dispatcher import ToolDispatcher
from protein_orders.presentation.mcp_server import build_mcp_server

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def create_app(app_settings: Settings = settings) -> FastAPI:
    mcp_server = build_mcp_server(app_settings, lambda: app.state.dispatcher)
    mcp_app = mcp_server.streamable_http_app()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Управление жизненным циклом приложения"""
        # 1. Хранилище: движок + таблицы
        engine = create_engine(app_settings)
        store = await create_record_store(engine, app_settings)
        logger.info(f"Таблицы готовы: {app_settings.PRODUCTS_TABLE}, {app_settings.ORDERS_TABLE}")

        # 2. Собираем use cases и диспетчер
        products = StoreProductRepository(store)
        orders = StoreOrderRepository(store)
        app.state.dispatcher = ToolDispatcher(
            list_products=ListProductsUseCase(products),
            create_order=CreateOrderUseCase(products, orders, app_settings.ORDER_CURRENCY),
            list_orders=ListOrdersUseCase(orders),
            get_order=GetOrderUseCase(orders),
            update_order_status=UpdateOrderStatusUseCase(orders)
        )

        # 3. Менеджер сессий MCP живет столько же, сколько приложение
        async with mcp_server.session_manager.run():
            yield

        logger.info("Приложение останавливается...")
        await engine.dispose()

    app = FastAPI(
        title="Protein Bar Ordering Service",
        description="MCP-сервис заказов протеиновых батончиков",
        version=app_settings.SERVER_VERSION,
        lifespan=lifespan
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Mcp-Session-Id", "Mcp-Protocol-Version"],
        expose_headers=["Mcp-Session-Id"],
    )
    app.include_router(router)
    # POST /mcp обслуживает SDK; /health и остальные методы /mcp есть в router
    app.mount("/", McpEndpoint(mcp_app))
    return app


app = create_app()


def run():
    logger.info(f"MCP-сервер слушает порт {settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
