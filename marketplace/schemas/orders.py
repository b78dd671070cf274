from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field

from .order_items import OrderItemOut
from .shipments import ShipmentOut

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]
PaymentStatus = Literal["pending", "paid", "failed", "refunded"]

class OrderItemIn(BaseModel):
    substance_id: int = Field(gt=0)
    quantity: int = Field(ge=1)
    unitPrice: Decimal = Field(gt=0, max_digits=10, decimal_places=2)

class OrderCreate(BaseModel):
    dealer_id: int = Field(gt=0)
    items: List[OrderItemIn] = Field(min_length=1)
    deliveryAddress: Optional[str] = None
    paymentMethod: Optional[str] = None
    shippingCost: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)

class OrderUpdate(BaseModel):
    orderStatus: Optional[OrderStatus] = None
    paymentStatus: Optional[PaymentStatus] = None
    paymentMethod: Optional[str] = None
    paymentDate: Optional[datetime] = None
    transactionReference: Optional[str] = None

class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    customer_id: int
    dealer_id: int
    orderDate: Optional[datetime] = None
    orderStatus: OrderStatus
    totalAmount: float = 0.0
    shippingCost: float = 0.0
    deliveryAddress: Optional[str] = None
    paymentMethod: Optional[str] = None
    paymentStatus: PaymentStatus
    paymentDate: Optional[datetime] = None
    transactionReference: Optional[str] = None
    items: List[OrderItemOut] = []
    shipment: Optional[ShipmentOut] = None
