from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class CartItemCreate(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, ge=1)

class CartUpdate(BaseModel):
    # product_id is checked by the service so a missing id reads as a cart error
    product_id: Optional[int] = None
    quantity: Optional[int] = Field(None, ge=1)
    price: Optional[float] = Field(None, gt=0)

class CartItemResponse(BaseModel):
    id: int
    user_id: int
    seller_id: int
    product_id: int
    name: str
    image_url: str = ""
    price: float
    quantity: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CartItemDetailResponse(BaseModel):
    message: str
    data: CartItemResponse

class CartListResponse(BaseModel):
    message: str
    data: List[CartItemResponse]
    count: int

class MessageResponse(BaseModel):
    message: str
