from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class Pagination(BaseModel):
    take: int
    skip: int
    total: int


# Category Schemas
class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    parent_id: Optional[int] = None
    image_url: str = ""
    display_order: int = 0
    description: str = ""

class CategoryUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    parent_id: Optional[int] = None
    image_url: Optional[str] = None
    display_order: Optional[int] = None
    description: Optional[str] = None

class CategoryResponse(BaseModel):
    id: int
    name: str
    parent_id: Optional[int] = None
    image_url: str = ""
    seller_id: int
    display_order: int = 0
    description: str = ""
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class CategoryDetailResponse(BaseModel):
    message: str
    data: CategoryResponse

class CategoryListResponse(BaseModel):
    """Response schema for category listing"""
    message: str
    data: List[CategoryResponse]
    pagination: Pagination


# Product Schemas
class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    price: float = Field(..., gt=0)
    category_id: int = Field(..., gt=0)
    stock: int = Field(0, ge=0)
    image_url: str = ""

class ProductUpdate(ProductCreate):
    """Full replacement body for PUT; blank description/image keep the stored value"""
    pass

class ProductPatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(None, gt=0)
    category_id: Optional[int] = Field(None, gt=0)
    stock: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None

class ProductResponse(BaseModel):
    id: int
    name: str
    description: str = ""
    price: float
    category_id: int
    stock: int
    image_url: str = ""
    seller_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class ProductDetailResponse(BaseModel):
    message: str
    data: ProductResponse

class ProductListResponse(BaseModel):
    message: str
    data: List[ProductResponse]
    pagination: Pagination

class MessageResponse(BaseModel):
    message: str


class CatalogueFilter(BaseModel):
    """Search, date range and page window shared by category and product listings"""
    search: Optional[str] = None
    beginning: Optional[datetime] = None
    ending: Optional[datetime] = None
    parent_id: Optional[int] = None
    skip: int = 0
    take: int = 10
