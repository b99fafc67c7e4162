"""
Catalogue rules for sellers' categories and products.
"""
from typing import List, Tuple
from models import Category, Product
from utils.errors import ConflictError, UnauthorizedError, ValidationError, not_found
from utils.response_helpers import get_limit, get_offset
from .repository import CatalogueRepository
from .schemas import CatalogueFilter, CategoryCreate, CategoryUpdate, ProductCreate, ProductUpdate, ProductPatch
import logging

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = ("name", "description", "price", "category_id", "stock", "image_url")


def normalize_filter(filters: CatalogueFilter) -> CatalogueFilter:
    return filters.model_copy(update={
        "take": get_limit(filters.take),
        "skip": get_offset(filters.skip),
    })


class CatalogueService:
    def __init__(self, repo: CatalogueRepository):
        self.repo = repo

    # Categories
    async def create_category(self, seller_id: int, data: CategoryCreate) -> Category:
        if not seller_id:
            raise ValidationError("seller id is required")
        if not data.name.strip():
            raise ValidationError("category name is required")

        category = Category(
            name=data.name,
            parent_id=data.parent_id,
            image_url=data.image_url or "",
            seller_id=seller_id,
            display_order=data.display_order or 0,
            description=data.description or "",
        )
        return await self.repo.create_category(category)

    async def get_category(self, category_id: int) -> Category:
        category = await self.repo.find_category_by_id(category_id)
        if not category:
            raise not_found("Category")
        return category

    async def list_categories(self, filters: CatalogueFilter) -> Tuple[List[Category], int, CatalogueFilter]:
        filters = normalize_filter(filters)
        categories, total = await self.repo.find_all_categories(filters)
        return categories, total, filters

    async def update_category(self, category_id: int, data: CategoryUpdate) -> Category:
        category = await self.get_category(category_id)

        # Name is always replaced; blank or missing optional fields keep what is stored
        changes = {"name": data.name}
        if data.description:
            changes["description"] = data.description
        if data.image_url:
            changes["image_url"] = data.image_url
        if data.parent_id is not None:
            if data.parent_id == category_id:
                raise ValidationError("a category cannot be its own parent")
            changes["parent_id"] = data.parent_id
        if data.display_order is not None:
            changes["display_order"] = data.display_order

        return await self.repo.update_category(category, changes)

    async def delete_category(self, category_id: int) -> None:
        await self.get_category(category_id)

        product_count = await self.repo.count_products_by_category(category_id)
        if product_count > 0:
            logger.warning(f"Refusing to delete category {category_id} with {product_count} products")
            raise ConflictError(
                "category has associated products",
                "This category has associated products. Please remove or reassign products before deleting the category."
            )

        await self.repo.delete_category(category_id)
        logger.info(f"Category {category_id} deleted successfully")

    # Products
    async def create_product(self, seller_id: int, data: ProductCreate) -> Product:
        if not seller_id:
            raise ValidationError("seller id is required")
        if not data.name.strip():
            raise ValidationError("product name is required")

        product = Product(
            name=data.name,
            description=data.description or "",
            price=data.price,
            category_id=data.category_id,
            stock=data.stock,
            image_url=data.image_url or "",
            seller_id=seller_id,
        )
        return await self.repo.create_product(product)

    async def get_product(self, product_id: int) -> Product:
        product = await self.repo.find_product_by_id(product_id)
        if not product:
            raise not_found("Product")
        return product

    async def list_products(self, filters: CatalogueFilter) -> Tuple[List[Product], int, CatalogueFilter]:
        filters = normalize_filter(filters)
        products, total = await self.repo.find_all_products(filters)
        return products, total, filters

    async def update_product(self, product_id: int, seller_id: int, data: ProductUpdate) -> Product:
        product = await self.get_product(product_id)
        if product.seller_id != seller_id:
            logger.warning(f"Seller {seller_id} attempted to update product {product_id} owned by {product.seller_id}")
            raise UnauthorizedError("unauthorized", "you can only update your own products")

        changes = {
            "name": data.name,
            "price": data.price,
            "category_id": data.category_id,
            "stock": data.stock,
        }
        if data.description:
            changes["description"] = data.description
        if data.image_url:
            changes["image_url"] = data.image_url

        return await self.repo.update_product(product, changes)

    async def patch_product(self, product_id: int, seller_id: int, data: ProductPatch) -> Product:
        """Merge only the fields sent in the request over the stored product, then update"""
        product = await self.get_product(product_id)

        merged = {field: getattr(product, field) for field in PRODUCT_FIELDS}
        for field in data.model_fields_set:
            value = getattr(data, field)
            if value is not None:
                merged[field] = value

        return await self.update_product(product_id, seller_id, ProductUpdate(**merged))

    async def delete_product(self, product_id: int) -> None:
        # No ownership check here; any seller may delete
        deleted = await self.repo.delete_product(product_id)
        if not deleted:
            raise not_found("Product")
        logger.info(f"Product {product_id} deleted successfully")
