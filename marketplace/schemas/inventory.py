from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class InventoryCreate(BaseModel):
    substance_id: int = Field(gt=0)
    quantityAvailable: int = Field(default=0, ge=0)
    warehouse: Optional[str] = None

class InventoryUpdate(BaseModel):
    quantityAvailable: Optional[int] = Field(default=None, ge=0)
    warehouse: Optional[str] = None

class InventoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    dealer_id: int
    substance_id: int
    quantityAvailable: int
    warehouse: Optional[str] = None
    image_url: Optional[str] = None
