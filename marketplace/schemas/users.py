from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, EmailStr, Field, constr

# helper types
Username = constr(strip_whitespace=True, min_length=2, max_length=64)
Password = constr(min_length=6, max_length=128)
UserType = Literal["customer", "dealer", "provider"]
AccountStatus = Literal["active", "inactive", "suspended"]

# ---------- registration / login ----------

class RegisterBase(BaseModel):
    username: Username
    email: EmailStr
    password: Password

class CustomerRegister(RegisterBase):
    address: Optional[str] = None

class DealerRegister(RegisterBase):
    warehouse: Optional[str] = None

class ProviderRegister(RegisterBase):
    businessName: constr(strip_whitespace=True, min_length=1, max_length=255)

class LoginPayload(BaseModel):
    username: Username
    password: str = Field(min_length=1)
    userType: str

class LoginResponse(BaseModel):
    message: str = "Login successful"
    userType: UserType
    userId: int
    username: str
    email: str

# ---------- profiles ----------

class CustomerUpdate(BaseModel):
    username: Optional[Username] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    password: Optional[Password] = None

class DealerUpdate(BaseModel):
    username: Optional[Username] = None
    email: Optional[EmailStr] = None
    warehouse: Optional[str] = None
    status: Optional[AccountStatus] = None
    password: Optional[Password] = None

class ProviderUpdate(BaseModel):
    username: Optional[Username] = None
    email: Optional[EmailStr] = None
    businessName: Optional[str] = None
    status: Optional[AccountStatus] = None
    password: Optional[Password] = None

class CustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    username: str
    email: str
    address: Optional[str] = None
    status: str

class DealerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    username: str
    email: str
    warehouse: Optional[str] = None
    status: str
    rating: float = 0.0

class ProviderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    username: str
    email: str
    businessName: str
    status: str
