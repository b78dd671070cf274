from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, constr

class TransportCreate(BaseModel):
    transportMethod: constr(strip_whitespace=True, min_length=1, max_length=100)
    transportCost: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    costPerKG: Decimal = Field(gt=0, max_digits=10, decimal_places=2)

class TransportUpdate(BaseModel):
    transportMethod: Optional[constr(strip_whitespace=True, min_length=1, max_length=100)] = None
    transportCost: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    costPerKG: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)

class TransportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    provider_id: int
    transportMethod: str
    transportCost: float
    costPerKG: float
