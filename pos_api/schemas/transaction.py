from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from pos_api.core.constants import MAX_DB_INT


class CheckoutItem(BaseModel):
    product_id: int = Field(le=MAX_DB_INT)
    # Non-positive quantities are rejected by the checkout service.
    quantity: int = Field(le=MAX_DB_INT)


class CheckoutRequest(BaseModel):
    items: List[CheckoutItem] = Field(default_factory=list)


class TransactionDetailRead(BaseModel):
    id: int
    transaction_id: int
    product_id: int
    product_name: str
    quantity: int
    subtotal: int

    model_config = ConfigDict(from_attributes=True)


class TransactionRead(BaseModel):
    id: int
    total_amount: int
    created_at: Optional[datetime] = None
    details: List[TransactionDetailRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
