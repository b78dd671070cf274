from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field

ShipmentStatus = Literal["preparing", "in_transit", "delivered", "failed"]

class ShipmentCreate(BaseModel):
    order_id: int = Field(gt=0)
    carrier: Optional[str] = None
    status: Optional[ShipmentStatus] = None

class ShipmentUpdate(BaseModel):
    carrier: Optional[str] = None
    status: Optional[ShipmentStatus] = None

class ShipmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    order_id: int
    carrier: Optional[str] = None
    status: ShipmentStatus
