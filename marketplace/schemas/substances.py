from typing import Optional
from pydantic import BaseModel, ConfigDict, constr

NameStr = constr(strip_whitespace=True, min_length=1, max_length=255)

class SubstanceCreate(BaseModel):
    substanceName: NameStr
    category: Optional[str] = None
    description: Optional[str] = None

class SubstanceUpdate(BaseModel):
    substanceName: Optional[NameStr] = None
    category: Optional[str] = None
    description: Optional[str] = None

class SubstanceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    provider_id: int
    substanceName: str
    category: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
