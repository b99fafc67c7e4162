from fastapi import APIRouter, Depends, status, Query
from typing import Optional
from dependencies.services import get_catalogue_service
from dependencies.rbac import require_seller
from models import User
from utils.errors import ValidationError
from utils.response_helpers import safe_model_validate, safe_model_validate_list, pagination_meta, parse_iso_datetime
from routers.products.service import CatalogueService
from routers.products.schemas import (
    CatalogueFilter, CategoryCreate, CategoryUpdate, CategoryResponse, CategoryDetailResponse, CategoryListResponse,
    ProductCreate, ProductUpdate, ProductPatch, ProductResponse, ProductDetailResponse, ProductListResponse,
    MessageResponse,
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Catalogue"])
seller_router = APIRouter(prefix="/seller", tags=["Seller Catalogue"], dependencies=[Depends(require_seller)])


def catalogue_filter(
    search: Optional[str] = Query(None, description="Case-insensitive match on name or description"),
    beginning: Optional[str] = Query(None, description="Created at or after (ISO 8601)"),
    ending: Optional[str] = Query(None, description="Created at or before (ISO 8601)"),
    skip: int = Query(0),
    take: int = Query(10),
) -> CatalogueFilter:
    try:
        return CatalogueFilter(
            search=search,
            beginning=parse_iso_datetime(beginning, "beginning"),
            ending=parse_iso_datetime(ending, "ending"),
            skip=skip,
            take=take,
        )
    except ValueError as e:
        raise ValidationError(str(e), "Validation failed")


# =================
# CATEGORY ROUTES (PUBLIC)
# =================

@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(
    parent_id: Optional[int] = Query(None),
    filters: CatalogueFilter = Depends(catalogue_filter),
    service: CatalogueService = Depends(get_catalogue_service)
):
    """List categories ordered by display order, newest first within the same order"""
    filters = filters.model_copy(update={"parent_id": parent_id})
    categories, total, applied = await service.list_categories(filters)

    return CategoryListResponse(
        message="Categories retrieved successfully",
        data=safe_model_validate_list(CategoryResponse, categories),
        pagination=pagination_meta(applied.take, applied.skip, total)
    )


@router.get("/categories/{category_id}", response_model=CategoryDetailResponse)
async def get_category(
    category_id: int,
    service: CatalogueService = Depends(get_catalogue_service)
):
    category = await service.get_category(category_id)
    return CategoryDetailResponse(
        message="Category retrieved successfully",
        data=safe_model_validate(CategoryResponse, category)
    )


# =================
# PRODUCT ROUTES (PUBLIC)
# =================

@router.get("/products", response_model=ProductListResponse)
async def list_products(
    filters: CatalogueFilter = Depends(catalogue_filter),
    service: CatalogueService = Depends(get_catalogue_service)
):
    products, total, applied = await service.list_products(filters)

    return ProductListResponse(
        message="Products retrieved successfully",
        data=safe_model_validate_list(ProductResponse, products),
        pagination=pagination_meta(applied.take, applied.skip, total)
    )


@router.get("/products/{product_id}", response_model=ProductDetailResponse)
async def get_product(
    product_id: int,
    service: CatalogueService = Depends(get_catalogue_service)
):
    product = await service.get_product(product_id)
    return ProductDetailResponse(
        message="Product retrieved successfully",
        data=safe_model_validate(ProductResponse, product)
    )


# =================
# SELLER CATEGORY ROUTES
# =================

@seller_router.post("/categories", response_model=CategoryDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    seller: User = Depends(require_seller),
    service: CatalogueService = Depends(get_catalogue_service)
):
    category = await service.create_category(seller.id, category_data)
    return CategoryDetailResponse(
        message="Category created successfully",
        data=safe_model_validate(CategoryResponse, category)
    )


@seller_router.get("/categories/{category_id}", response_model=CategoryDetailResponse)
async def get_seller_category(
    category_id: int,
    service: CatalogueService = Depends(get_catalogue_service)
):
    category = await service.get_category(category_id)
    return CategoryDetailResponse(
        message="Category retrieved successfully",
        data=safe_model_validate(CategoryResponse, category)
    )


@seller_router.patch("/categories/{category_id}", response_model=CategoryDetailResponse)
async def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    service: CatalogueService = Depends(get_catalogue_service)
):
    category = await service.update_category(category_id, category_data)
    return CategoryDetailResponse(
        message="Category updated successfully",
        data=safe_model_validate(CategoryResponse, category)
    )


@seller_router.delete("/categories/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: int,
    service: CatalogueService = Depends(get_catalogue_service)
):
    await service.delete_category(category_id)
    return MessageResponse(message="Category deleted successfully")


# =================
# SELLER PRODUCT ROUTES
# =================

@seller_router.post("/products", response_model=ProductDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    seller: User = Depends(require_seller),
    service: CatalogueService = Depends(get_catalogue_service)
):
    product = await service.create_product(seller.id, product_data)
    return ProductDetailResponse(
        message="Product created successfully",
        data=safe_model_validate(ProductResponse, product)
    )


@seller_router.get("/products", response_model=ProductListResponse)
async def list_seller_products(
    filters: CatalogueFilter = Depends(catalogue_filter),
    service: CatalogueService = Depends(get_catalogue_service)
):
    products, total, applied = await service.list_products(filters)

    return ProductListResponse(
        message="Products retrieved successfully",
        data=safe_model_validate_list(ProductResponse, products),
        pagination=pagination_meta(applied.take, applied.skip, total)
    )


@seller_router.get("/products/{product_id}", response_model=ProductDetailResponse)
async def get_seller_product(
    product_id: int,
    service: CatalogueService = Depends(get_catalogue_service)
):
    product = await service.get_product(product_id)
    return ProductDetailResponse(
        message="Product retrieved successfully",
        data=safe_model_validate(ProductResponse, product)
    )


@seller_router.put("/products/{product_id}", response_model=ProductDetailResponse)
async def update_product(
    product_id: int,
    product_data: ProductUpdate,
    seller: User = Depends(require_seller),
    service: CatalogueService = Depends(get_catalogue_service)
):
    product = await service.update_product(product_id, seller.id, product_data)
    return ProductDetailResponse(
        message="Product updated successfully",
        data=safe_model_validate(ProductResponse, product)
    )


@seller_router.patch("/products/{product_id}", response_model=ProductDetailResponse)
async def patch_product(
    product_id: int,
    product_data: ProductPatch,
    seller: User = Depends(require_seller),
    service: CatalogueService = Depends(get_catalogue_service)
):
    """Update only the fields present in the request body"""
    product = await service.patch_product(product_id, seller.id, product_data)
    return ProductDetailResponse(
        message="Product updated successfully",
        data=safe_model_validate(ProductResponse, product)
    )


@seller_router.delete("/products/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: int,
    service: CatalogueService = Depends(get_catalogue_service)
):
    await service.delete_product(product_id)
    return MessageResponse(message="Product deleted successfully")
