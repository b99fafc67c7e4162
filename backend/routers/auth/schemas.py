from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

# Request schemas
class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserRegister(UserLogin):
    first_name: str = ""
    last_name: str = ""
    phone: str = Field(..., min_length=1, max_length=32)

# Response schemas
class UserResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    user_type: str = "buyer"
    verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AuthResponse(BaseModel):
    message: str
    user: UserResponse
    token: str
