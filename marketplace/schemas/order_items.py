from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class OrderItemCreate(BaseModel):
    order_id: int = Field(gt=0)
    substance_id: int = Field(gt=0)
    quantity: int = Field(ge=1)
    unitPrice: Decimal = Field(gt=0, max_digits=10, decimal_places=2)

class OrderItemUpdate(BaseModel):
    quantity: Optional[int] = Field(default=None, ge=1)
    unitPrice: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)

class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    order_id: int
    substance_id: int
    quantity: int
    unitPrice: float
    subTotal: float
