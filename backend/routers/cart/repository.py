from typing import List, Optional, Protocol
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, delete, and_
from models import CartItem
from utils.errors import translate_integrity_error
import logging

logger = logging.getLogger(__name__)


class CartRepository(Protocol):
    async def find_item(self, user_id: int, product_id: int) -> Optional[CartItem]: ...
    async def find_all_items(self, user_id: int) -> List[CartItem]: ...
    async def create_item(self, item: CartItem) -> CartItem: ...
    async def update_item(self, item: CartItem, changes: dict) -> CartItem: ...
    async def delete_item(self, user_id: int, product_id: int) -> bool: ...
    async def clear(self, user_id: int) -> int: ...


class SQLCartRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _commit(self):
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Integrity error: {str(e.orig)}")
            raise translate_integrity_error(e)

    async def find_item(self, user_id: int, product_id: int) -> Optional[CartItem]:
        result = await self.db.execute(
            select(CartItem).where(
                and_(CartItem.user_id == user_id, CartItem.product_id == product_id)
            )
        )
        return result.scalar_one_or_none()

    async def find_all_items(self, user_id: int) -> List[CartItem]:
        result = await self.db.execute(
            select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.id)
        )
        return list(result.scalars().all())

    async def create_item(self, item: CartItem) -> CartItem:
        self.db.add(item)
        await self._commit()
        await self.db.refresh(item)
        logger.info(f"Cart item for product {item.product_id} created for user {item.user_id}")
        return item

    async def update_item(self, item: CartItem, changes: dict) -> CartItem:
        for field, value in changes.items():
            setattr(item, field, value)
        await self._commit()
        await self.db.refresh(item)
        return item

    async def delete_item(self, user_id: int, product_id: int) -> bool:
        result = await self.db.execute(
            delete(CartItem).where(
                and_(CartItem.user_id == user_id, CartItem.product_id == product_id)
            )
        )
        await self._commit()
        return result.rowcount > 0

    async def clear(self, user_id: int) -> int:
        result = await self.db.execute(delete(CartItem).where(CartItem.user_id == user_id))
        await self._commit()
        return result.rowcount
