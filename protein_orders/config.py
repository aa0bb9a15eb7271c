import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    # Database
    POSTGRES_CONNECTION_STRING: str = os.getenv("POSTGRES_CONNECTION_STRING", "")
    SQLITE_FALLBACK_URL: str = "sqlite+aiosqlite:///./protein_orders.db"

    # Tables
    PRODUCTS_TABLE: str = os.getenv("PRODUCTS_TABLE", "protein_products")
    ORDERS_TABLE: str = os.getenv("ORDERS_TABLE", "protein_orders")

    # Orders
    ORDER_CURRENCY: str = os.getenv("ORDER_CURRENCY", "EUR")

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8080"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    SERVER_NAME: str = "protein-bar-ordering-mcp-server"
    SERVER_VERSION: str = "1.0.0"

    def __init__(self, **overrides):
        for name, value in overrides.items():
            if not hasattr(self, name):
                raise AttributeError(f"Unknown setting {name}")
            setattr(self, name, value)

    @property
    def DATABASE_URL(self) -> str:
        """Асинхронный URL для приложения"""
        if not self.POSTGRES_CONNECTION_STRING:
            return self.SQLITE_FALLBACK_URL
        return self.POSTGRES_CONNECTION_STRING.replace("postgres://", "postgresql+asyncpg://")


settings = Settings()
