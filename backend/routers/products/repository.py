from typing import List, Optional, Protocol, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, delete, func, or_
from models import Category, Product
from utils.errors import translate_integrity_error
from .schemas import CatalogueFilter
import logging

logger = logging.getLogger(__name__)


class CatalogueRepository(Protocol):
    async def create_category(self, category: Category) -> Category: ...
    async def find_category_by_id(self, category_id: int) -> Optional[Category]: ...
    async def find_all_categories(self, filters: CatalogueFilter) -> Tuple[List[Category], int]: ...
    async def update_category(self, category: Category, changes: dict) -> Category: ...
    async def delete_category(self, category_id: int) -> bool: ...
    async def count_products_by_category(self, category_id: int) -> int: ...
    async def create_product(self, product: Product) -> Product: ...
    async def find_product_by_id(self, product_id: int) -> Optional[Product]: ...
    async def find_all_products(self, filters: CatalogueFilter) -> Tuple[List[Product], int]: ...
    async def update_product(self, product: Product, changes: dict) -> Product: ...
    async def delete_product(self, product_id: int) -> bool: ...


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so search text only matches literally"""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def apply_common_filters(query, model, filters: CatalogueFilter):
    """Text search over name/description plus an inclusive created_at window"""
    if filters.search:
        pattern = f"%{escape_like(filters.search)}%"
        query = query.where(or_(
            model.name.ilike(pattern, escape="\\"),
            model.description.ilike(pattern, escape="\\"),
        ))
    if filters.beginning:
        query = query.where(model.created_at >= filters.beginning)
    if filters.ending:
        query = query.where(model.created_at <= filters.ending)
    return query


class SQLCatalogueRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _commit(self):
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Integrity error: {str(e.orig)}")
            raise translate_integrity_error(e)

    async def _paginate(self, query, filters: CatalogueFilter, order_by) -> Tuple[list, int]:
        # Total is counted over the filtered set before the page window is applied
        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.db.execute(count_query)).scalar() or 0

        result = await self.db.execute(
            query.order_by(*order_by).offset(filters.skip).limit(filters.take)
        )
        return list(result.scalars().all()), total

    # Categories
    async def create_category(self, category: Category) -> Category:
        self.db.add(category)
        await self._commit()
        await self.db.refresh(category)
        logger.info("Category created successfully")
        return category

    async def find_category_by_id(self, category_id: int) -> Optional[Category]:
        result = await self.db.execute(select(Category).where(Category.id == category_id))
        return result.scalar_one_or_none()

    async def find_all_categories(self, filters: CatalogueFilter) -> Tuple[List[Category], int]:
        query = apply_common_filters(select(Category), Category, filters)
        if filters.parent_id is not None:
            query = query.where(Category.parent_id == filters.parent_id)

        return await self._paginate(
            query,
            filters,
            (Category.display_order.asc(), Category.created_at.desc(), Category.id.desc())
        )

    async def update_category(self, category: Category, changes: dict) -> Category:
        for field, value in changes.items():
            setattr(category, field, value)
        await self._commit()
        await self.db.refresh(category)
        logger.info(f"Category {category.id} updated successfully")
        return category

    async def delete_category(self, category_id: int) -> bool:
        result = await self.db.execute(delete(Category).where(Category.id == category_id))
        await self._commit()
        return result.rowcount > 0

    async def count_products_by_category(self, category_id: int) -> int:
        result = await self.db.execute(
            select(func.count(Product.id)).where(Product.category_id == category_id)
        )
        return result.scalar() or 0

    # Products
    async def create_product(self, product: Product) -> Product:
        self.db.add(product)
        await self._commit()
        await self.db.refresh(product)
        logger.info("Product created successfully")
        return product

    async def find_product_by_id(self, product_id: int) -> Optional[Product]:
        result = await self.db.execute(select(Product).where(Product.id == product_id))
        return result.scalar_one_or_none()

    async def find_all_products(self, filters: CatalogueFilter) -> Tuple[List[Product], int]:
        query = apply_common_filters(select(Product), Product, filters)
        return await self._paginate(query, filters, (Product.created_at.desc(), Product.id.desc()))

    async def update_product(self, product: Product, changes: dict) -> Product:
        for field, value in changes.items():
            setattr(product, field, value)
        await self._commit()
        await self.db.refresh(product)
        logger.info(f"Product {product.id} updated successfully")
        return product

    async def delete_product(self, product_id: int) -> bool:
        result = await self.db.execute(delete(Product).where(Product.id == product_id))
        await self._commit()
        return result.rowcount > 0
