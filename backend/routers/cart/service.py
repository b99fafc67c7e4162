"""
Cart rules: one line per (user, product), merged on repeat adds, with a
quantity floor of 1 on decrement.
"""
from typing import List
from models import CartItem
from routers.products.repository import CatalogueRepository
from utils.errors import ValidationError, not_found
from .repository import CartRepository
from .schemas import CartUpdate
import logging

logger = logging.getLogger(__name__)


class CartService:
    def __init__(self, repo: CartRepository, products: CatalogueRepository):
        self.repo = repo
        self.products = products

    async def add_to_cart(self, user_id: int, product_id: int, quantity: int = 1) -> CartItem:
        if quantity < 1:
            raise ValidationError("quantity must be at least 1")

        product = await self.products.find_product_by_id(product_id)
        if not product:
            raise not_found("Product")

        existing = await self.repo.find_item(user_id, product_id)
        if existing:
            # Snapshot fields stay as they were on the first add
            return await self.repo.update_item(existing, {"quantity": existing.quantity + quantity})

        item = CartItem(
            user_id=user_id,
            seller_id=product.seller_id,
            product_id=product.id,
            name=product.name,
            image_url=product.image_url or "",
            price=product.price,
            quantity=quantity,
        )
        return await self.repo.create_item(item)

    async def get_item(self, user_id: int, product_id: int) -> CartItem:
        item = await self.repo.find_item(user_id, product_id)
        if not item:
            raise not_found("Cart item")
        return item

    async def list_items(self, user_id: int) -> List[CartItem]:
        return await self.repo.find_all_items(user_id)

    async def update_cart(self, user_id: int, data: CartUpdate) -> CartItem:
        if not data.product_id:
            raise ValidationError("product id is required", "Validation failed")

        item = await self.get_item(user_id, data.product_id)

        changes = {}
        if data.quantity is not None:
            changes["quantity"] = data.quantity
        if data.price is not None:
            changes["price"] = data.price

        if not changes:
            return item
        return await self.repo.update_item(item, changes)

    async def increment(self, user_id: int, product_id: int) -> CartItem:
        item = await self.get_item(user_id, product_id)
        return await self.repo.update_item(item, {"quantity": item.quantity + 1})

    async def decrement(self, user_id: int, product_id: int) -> CartItem:
        item = await self.get_item(user_id, product_id)
        if item.quantity <= 1:
            raise ValidationError(
                "quantity cannot go below 1; delete the item instead",
                "Use DELETE /cart/{product_id} to remove the item"
            )
        return await self.repo.update_item(item, {"quantity": item.quantity - 1})

    async def delete_item(self, user_id: int, product_id: int) -> None:
        deleted = await self.repo.delete_item(user_id, product_id)
        if not deleted:
            raise not_found("Cart item")

    async def clear(self, user_id: int) -> None:
        removed = await self.repo.clear(user_id)
        logger.info(f"Cleared {removed} cart items for user {user_id}")
