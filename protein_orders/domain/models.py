import secrets
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, PlainSerializer

# Верхняя граница количества в одной позиции заказа
MAX_ITEM_QUANTITY = 1000

# Деньги: Decimal внутри домена, число в JSON
Money = Annotated[
    Decimal,
    Field(ge=0),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class OrderStatus(str, Enum):
    PENDING_CONFIRMATION = "pending_confirmation"
    PAYMENT_VERIFIED = "payment_verified"
    PREPARING_DELIVERY = "preparing_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Product(BaseModel):
    """Value Object — батончик из каталога"""
    id: str
    name: str
    price: Money
    currency: str
    in_stock: bool
    description: Optional[str] = None
    image_url: Optional[str] = None


class OrderItem(BaseModel):
    product_id: str
    name: str
    quantity: int = Field(gt=0, le=MAX_ITEM_QUANTITY)
    price_per_item: Money

    @property
    def subtotal(self) -> Decimal:
        return self.price_per_item * self.quantity


class PaymentDetails(BaseModel):
    method: str
    notes: str


class Order(BaseModel):
    """Domain Entity — заказ"""
    order_id: str
    customer_name: str
    desk_location: str
    items: List[OrderItem]
    total_price: Money
    currency: str
    status: OrderStatus
    payment_details: PaymentDetails
    created_at: datetime
    updated_at: datetime


class OrderStatusUpdate(BaseModel):
    order_id: str
    new_status: OrderStatus
    updated_at: datetime


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_order_id(now: datetime) -> str:
    """ORD-YYYYMMDD-XXXXXX: дата создания (UTC) + 6 случайных hex-символов"""
    suffix = secrets.token_hex(3).upper()
    return f"ORD-{now.astimezone(timezone.utc):%Y%m%d}-{suffix}"
