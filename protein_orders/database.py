from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from protein_orders.config import Settings
from protein_orders.infrastructure.db_schema import build_schema
from protein_orders.infrastructure.record_store import SQLAlchemyRecordStore


def create_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(settings.DATABASE_URL, pool_pre_ping=True)


async def create_record_store(engine: AsyncEngine, settings: Settings) -> SQLAlchemyRecordStore:
    """Создает таблицы (если их нет) и возвращает хранилище поверх движка"""
    metadata, collections = build_schema(settings.PRODUCTS_TABLE, settings.ORDERS_TABLE)
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    return SQLAlchemyRecordStore(session_factory, collections)
