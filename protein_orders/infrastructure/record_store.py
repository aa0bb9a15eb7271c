import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import select, insert, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from protein_orders.application.interfaces import Record, RecordStore
from protein_orders.domain.exceptions import RecordNotFoundError, StoreUnavailableError
from protein_orders.infrastructure.db_schema import Collection

logger = logging.getLogger(__name__)

# Ошибки драйвера/сети, которые считаем временной недоступностью хранилища
STORE_ERRORS = (SQLAlchemyError, OSError)


class SQLAlchemyRecordStore(RecordStore):
    """Key-value доступ к таблицам: get / put / query / update_fields / scan.

    Одна сессия на операцию, транзакций между вызовами нет.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], collections: Dict[str, Collection]):
        self._session_factory = session_factory
        self._collections = collections

    async def get(self, collection: str, key: str) -> Optional[Record]:
        coll = self._collection(collection)
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(coll.table).where(coll.table.c[coll.key] == key)
                )
                row = result.fetchone()
        except STORE_ERRORS as e:
            raise self._unavailable("get", collection, e) from e
        return dict(row._mapping) if row else None

    async def put(self, collection: str, record: Record) -> None:
        coll = self._collection(collection)
        values = self._values(coll, record)
        key = values[coll.key]
        if key is None:
            raise ValueError(f"Record for {collection!r} has no {coll.key!r}")

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    # Upsert с полной перезаписью
                    result = await session.execute(
                        update(coll.table)
                        .where(coll.table.c[coll.key] == key)
                        .values(**values)
                    )
                    if result.rowcount == 0:
                        await session.execute(insert(coll.table).values(**values))
        except STORE_ERRORS as e:
            raise self._unavailable("put", collection, e) from e

    async def query(self, collection: str, attribute: str, value: Any) -> List[Record]:
        coll = self._collection(collection)
        column = coll.table.c.get(attribute)
        if column is None or not (column.index or column.primary_key):
            raise ValueError(f"Attribute {attribute!r} is not indexed in {collection!r}")

        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(coll.table)
                    .where(column == value)
                    .order_by(coll.table.c[coll.key])
                )
                rows = result.fetchall()
        except STORE_ERRORS as e:
            raise self._unavailable("query", collection, e) from e
        return [dict(row._mapping) for row in rows]

    async def update_fields(self, collection: str, key: str, fields: Record) -> Record:
        coll = self._collection(collection)
        unknown = set(fields) - set(coll.table.c.keys())
        if unknown:
            raise ValueError(f"Unknown fields for {collection!r}: {sorted(unknown)}")

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(
                        update(coll.table)
                        .where(coll.table.c[coll.key] == key)
                        .values(**fields)
                    )
                    if result.rowcount == 0:
                        raise RecordNotFoundError(collection, key)

                    result = await session.execute(
                        select(coll.table).where(coll.table.c[coll.key] == key)
                    )
                    row = result.fetchone()
        except STORE_ERRORS as e:
            raise self._unavailable("update", collection, e) from e
        return dict(row._mapping)

    async def scan(self, collection: str) -> List[Record]:
        coll = self._collection(collection)
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(coll.table).order_by(coll.table.c[coll.key])
                )
                rows = result.fetchall()
        except STORE_ERRORS as e:
            raise self._unavailable("scan", collection, e) from e
        return [dict(row._mapping) for row in rows]

    def _collection(self, name: str) -> Collection:
        try:
            return self._collections[name]
        except KeyError:
            raise ValueError(f"Unknown collection {name!r}")

    @staticmethod
    def _values(coll: Collection, record: Record) -> Record:
        return {column.name: record.get(column.name) for column in coll.table.columns}

    @staticmethod
    def _unavailable(operation: str, collection: str, error: Exception) -> StoreUnavailableError:
        logger.error(f"Хранилище недоступно ({operation} {collection}): {error}")
        return StoreUnavailableError(f"Record store {operation} on {collection!r} failed: {error}")
