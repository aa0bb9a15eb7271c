from dataclasses import dataclass
from sqlalchemy import Table, Column, String, Numeric, JSON, MetaData

PRODUCTS = "products"
ORDERS = "orders"


@dataclass(frozen=True)
class Collection:
    table: Table
    key: str


def build_schema(products_table: str, orders_table: str):
    """Таблицы products/orders с вторичными индексами in_stock и status.

    Возвращает MetaData и словарь «логическое имя коллекции → Collection».
    """
    metadata = MetaData()

    products_tbl = Table(
        products_table,
        metadata,
        Column("id", String, primary_key=True),
        Column("name", String, nullable=False),
        Column("price", Numeric(10, 2), nullable=False),
        Column("currency", String(3), nullable=False),
        # "true"/"false" строкой: по этой колонке строится индекс
        Column("in_stock", String(5), nullable=False, index=True),
        Column("description", String, nullable=True),
        Column("image_url", String, nullable=True)
    )

    orders_tbl = Table(
        orders_table,
        metadata,
        Column("order_id", String, primary_key=True),
        Column("customer_name", String, nullable=False),
        Column("desk_location", String, nullable=False),
        Column("items", JSON, nullable=False),
        Column("total_price", Numeric(18, 2), nullable=False),
        Column("currency", String(3), nullable=False),
        Column("status", String, nullable=False, index=True),
        Column("payment_details", JSON, nullable=False),
        Column("created_at", String, nullable=False),
        Column("updated_at", String, nullable=False)
    )

    collections = {
        PRODUCTS: Collection(products_tbl, "id"),
        ORDERS: Collection(orders_tbl, "order_id"),
    }
    return metadata, collections
