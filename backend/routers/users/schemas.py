from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Union
from datetime import datetime
from routers.auth.schemas import UserResponse


class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=32)
    password: Optional[str] = None

class VerificationCodeInput(BaseModel):
    code: Union[str, int]

class BecomeSellerInput(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone_number: str = Field(..., min_length=1, max_length=32)
    bank_account_number: str = Field(..., min_length=1, max_length=20)
    bank_code: str = Field(..., min_length=1, max_length=20)
    payment_type: str = Field(..., min_length=1, max_length=100)


# Address / profile schemas
class AddressInput(BaseModel):
    address_line1: Optional[str] = Field(None, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)

class ProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=32)
    address: Optional[AddressInput] = None

class AddressResponse(BaseModel):
    id: int
    user_id: int
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ProfileResponse(BaseModel):
    message: str
    user: UserResponse
    address: Optional[AddressResponse] = None

class UserDetailResponse(BaseModel):
    message: str
    user: UserResponse

class UserListResponse(BaseModel):
    message: str
    users: List[UserResponse]
    count: int

class BecomeSellerResponse(BaseModel):
    message: str
    user: UserResponse
    token: str

class MessageResponse(BaseModel):
    message: str
