"""
Per-request wiring of repositories and services.

Each request gets repositories bound to its own session; tests override
these providers through app.dependency_overrides.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from config import get_db
from utils.notifications import send_sms
from routers.users.repository import SQLUserRepository
from routers.users.service import UserService
from routers.products.repository import SQLCatalogueRepository
from routers.products.service import CatalogueService
from routers.cart.repository import SQLCartRepository
from routers.cart.service import CartService


def get_notifier():
    return send_sms


async def get_user_service(
    db: AsyncSession = Depends(get_db),
    notifier = Depends(get_notifier)
) -> UserService:
    return UserService(SQLUserRepository(db), notifier=notifier)


async def get_catalogue_service(db: AsyncSession = Depends(get_db)) -> CatalogueService:
    return CatalogueService(SQLCatalogueRepository(db))


async def get_cart_service(db: AsyncSession = Depends(get_db)) -> CartService:
    return CartService(SQLCartRepository(db), SQLCatalogueRepository(db))
