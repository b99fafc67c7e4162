"""
In-memory repositories standing in for the SQL ones in service tests.
"""
from datetime import datetime, timedelta, timezone
from itertools import count
from typing import List, Optional, Tuple
from models import User, Address, BankAccount, Category, Product, CartItem, BUYER
from routers.products.schemas import CatalogueFilter
from utils.errors import ConflictError, ValidationError


class Clock:
    """Monotonic fake clock so created_at ordering is deterministic"""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def tick(self, **delta) -> datetime:
        self.now = self.now + timedelta(**(delta or {"seconds": 1}))
        return self.now


class RecordingNotifier:
    def __init__(self, result: bool = True):
        self.result = result
        self.sent = []

    def __call__(self, to: str, body: str) -> bool:
        self.sent.append((to, body))
        return self.result


def _stamp(row, ids, clock):
    row.id = next(ids)
    row.created_at = clock.tick()
    row.updated_at = row.created_at
    return row


class InMemoryUserRepository:
    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or Clock()
        self.users = {}
        self.addresses = {}
        self.bank_accounts = []
        self._ids = count(1)

    def _check_unique(self, user: User, exclude_id: Optional[int] = None):
        for other in self.users.values():
            if other.id == exclude_id:
                continue
            if other.email == user.email:
                raise ConflictError("Email already exists")
            if other.phone == user.phone:
                raise ConflictError("Phone number already exists")

    async def create_user(self, user: User) -> User:
        self._check_unique(user)
        if user.verified is None:
            user.verified = False
        if user.user_type is None:
            user.user_type = BUYER
        _stamp(user, self._ids, self.clock)
        self.users[user.id] = user
        return user

    async def find_user_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    async def find_user_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    async def find_all_users(self) -> List[User]:
        return sorted(self.users.values(), key=lambda u: u.id)

    async def update_user(self, user: User, changes: dict) -> User:
        for field, value in changes.items():
            setattr(user, field, value)
        self._check_unique(user, exclude_id=user.id)
        user.updated_at = self.clock.tick()
        return user

    async def delete_user(self, user_id: int) -> bool:
        self.addresses.pop(user_id, None)
        return self.users.pop(user_id, None) is not None

    async def promote_to_seller(self, user: User, changes: dict, bank_account: BankAccount) -> User:
        await self.update_user(user, changes)
        bank_account.id = len(self.bank_accounts) + 1
        self.bank_accounts.append(bank_account)
        return user

    async def count_bank_accounts(self, user_id: int) -> int:
        return sum(1 for account in self.bank_accounts if account.user_id == user_id)

    async def find_address(self, user_id: int) -> Optional[Address]:
        return self.addresses.get(user_id)

    async def create_address(self, address: Address) -> Address:
        _stamp(address, self._ids, self.clock)
        self.addresses[address.user_id] = address
        return address

    async def update_address(self, address: Address, changes: dict) -> Address:
        for field, value in changes.items():
            setattr(address, field, value)
        return address


class InMemoryCatalogueRepository:
    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or Clock()
        self.categories = {}
        self.products = {}
        self._ids = count(1)

    @staticmethod
    def _matches(row, filters: CatalogueFilter) -> bool:
        if filters.search:
            needle = filters.search.lower()
            if needle not in (row.name or "").lower() and needle not in (row.description or "").lower():
                return False
        if filters.beginning and row.created_at < filters.beginning:
            return False
        if filters.ending and row.created_at > filters.ending:
            return False
        return True

    @staticmethod
    def _page(rows: list, filters: CatalogueFilter) -> list:
        return rows[filters.skip:filters.skip + filters.take]

    async def create_category(self, category: Category) -> Category:
        if category.parent_id is not None and category.parent_id not in self.categories:
            raise ValidationError("Invalid category")
        _stamp(category, self._ids, self.clock)
        self.categories[category.id] = category
        return category

    async def find_category_by_id(self, category_id: int) -> Optional[Category]:
        return self.categories.get(category_id)

    async def find_all_categories(self, filters: CatalogueFilter) -> Tuple[List[Category], int]:
        rows = [c for c in self.categories.values() if self._matches(c, filters)]
        if filters.parent_id is not None:
            rows = [c for c in rows if c.parent_id == filters.parent_id]
        rows.sort(key=lambda c: c.id, reverse=True)
        rows.sort(key=lambda c: c.created_at, reverse=True)
        rows.sort(key=lambda c: c.display_order)
        return self._page(rows, filters), len(rows)

    async def update_category(self, category: Category, changes: dict) -> Category:
        for field, value in changes.items():
            setattr(category, field, value)
        return category

    async def delete_category(self, category_id: int) -> bool:
        return self.categories.pop(category_id, None) is not None

    async def count_products_by_category(self, category_id: int) -> int:
        return sum(1 for p in self.products.values() if p.category_id == category_id)

    async def create_product(self, product: Product) -> Product:
        if product.category_id not in self.categories:
            raise ValidationError("Invalid category")
        _stamp(product, self._ids, self.clock)
        self.products[product.id] = product
        return product

    async def find_product_by_id(self, product_id: int) -> Optional[Product]:
        return self.products.get(product_id)

    async def find_all_products(self, filters: CatalogueFilter) -> Tuple[List[Product], int]:
        rows = [p for p in self.products.values() if self._matches(p, filters)]
        rows.sort(key=lambda p: (p.created_at, p.id), reverse=True)
        return self._page(rows, filters), len(rows)

    async def update_product(self, product: Product, changes: dict) -> Product:
        if "category_id" in changes and changes["category_id"] not in self.categories:
            raise ValidationError("Invalid category")
        for field, value in changes.items():
            setattr(product, field, value)
        return product

    async def delete_product(self, product_id: int) -> bool:
        return self.products.pop(product_id, None) is not None


class InMemoryCartRepository:
    def __init__(self):
        self.items = {}
        self._ids = count(1)

    async def find_item(self, user_id: int, product_id: int) -> Optional[CartItem]:
        return self.items.get((user_id, product_id))

    async def find_all_items(self, user_id: int) -> List[CartItem]:
        return sorted((i for i in self.items.values() if i.user_id == user_id), key=lambda i: i.id)

    async def create_item(self, item: CartItem) -> CartItem:
        key = (item.user_id, item.product_id)
        if key in self.items:
            raise ConflictError("Item already in cart")
        item.id = next(self._ids)
        self.items[key] = item
        return item

    async def update_item(self, item: CartItem, changes: dict) -> CartItem:
        for field, value in changes.items():
            setattr(item, field, value)
        return item

    async def delete_item(self, user_id: int, product_id: int) -> bool:
        return self.items.pop((user_id, product_id), None) is not None

    async def clear(self, user_id: int) -> int:
        keys = [key for key in self.items if key[0] == user_id]
        for key in keys:
            del self.items[key]
        return len(keys)
