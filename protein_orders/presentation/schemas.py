from pydantic import BaseModel, Field

from protein_orders.domain.models import MAX_ITEM_QUANTITY


class OrderItemParams(BaseModel):
    product_id: str = Field(min_length=1, description="ID of the protein bar")
    quantity: int = Field(
        strict=True, gt=0, le=MAX_ITEM_QUANTITY, description="Number of items to order"
    )


class PaymentDetailsParams(BaseModel):
    method: str = Field(description='Payment method (e.g., "MBWAY")')
    notes: str = Field(description="Payment notes or confirmation")
