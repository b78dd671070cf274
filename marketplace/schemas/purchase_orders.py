from datetime import datetime
from decimal import Decimal
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field

PurchaseOrderStatus = Literal["pending", "confirmed", "shipped", "received", "cancelled"]

class PurchaseOrderCreate(BaseModel):
    provider_id: int = Field(gt=0)
    substance_id: int = Field(gt=0)
    providerTransport_id: Optional[int] = Field(default=None, gt=0)
    quantityOrdered: int = Field(ge=1)
    unitCost: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    paymentMethod: Optional[str] = None

class PurchaseOrderUpdate(BaseModel):
    paymentStatus: Optional[bool] = None
    paymentMethod: Optional[str] = None
    paymentDate: Optional[datetime] = None
    status: Optional[PurchaseOrderStatus] = None

class PurchaseOrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    dealer_id: int
    provider_id: int
    substance_id: int
    providerTransport_id: Optional[int] = None
    quantityOrdered: int
    unitCost: float
    transportCost: float
    totalCost: float
    orderDate: Optional[datetime] = None
    paymentStatus: bool
    paymentMethod: Optional[str] = None
    paymentDate: Optional[datetime] = None
    status: PurchaseOrderStatus
