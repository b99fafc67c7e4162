from typing import List, Optional, Protocol
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, delete, func
from models import User, Address, BankAccount
from utils.errors import translate_integrity_error
import logging

logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    async def create_user(self, user: User) -> User: ...
    async def find_user_by_email(self, email: str) -> Optional[User]: ...
    async def find_user_by_id(self, user_id: int) -> Optional[User]: ...
    async def find_all_users(self) -> List[User]: ...
    async def update_user(self, user: User, changes: dict) -> User: ...
    async def delete_user(self, user_id: int) -> bool: ...
    async def promote_to_seller(self, user: User, changes: dict, bank_account: BankAccount) -> User: ...
    async def count_bank_accounts(self, user_id: int) -> int: ...
    async def find_address(self, user_id: int) -> Optional[Address]: ...
    async def create_address(self, address: Address) -> Address: ...
    async def update_address(self, address: Address, changes: dict) -> Address: ...


class SQLUserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _commit(self):
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Integrity error: {str(e.orig)}")
            raise translate_integrity_error(e)

    async def create_user(self, user: User) -> User:
        self.db.add(user)
        await self._commit()
        await self.db.refresh(user)
        logger.info("User created successfully")
        return user

    async def find_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_user_by_id(self, user_id: int) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find_all_users(self) -> List[User]:
        result = await self.db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def update_user(self, user: User, changes: dict) -> User:
        for field, value in changes.items():
            setattr(user, field, value)
        await self._commit()
        await self.db.refresh(user)
        return user

    async def delete_user(self, user_id: int) -> bool:
        result = await self.db.execute(delete(User).where(User.id == user_id))
        await self._commit()
        return result.rowcount > 0

    async def promote_to_seller(self, user: User, changes: dict, bank_account: BankAccount) -> User:
        for field, value in changes.items():
            setattr(user, field, value)
        self.db.add(bank_account)
        await self._commit()
        await self.db.refresh(user)
        logger.info(f"Bank account created successfully for user {user.id}")
        return user

    async def count_bank_accounts(self, user_id: int) -> int:
        result = await self.db.execute(
            select(func.count(BankAccount.id)).where(BankAccount.user_id == user_id)
        )
        return result.scalar() or 0

    async def find_address(self, user_id: int) -> Optional[Address]:
        result = await self.db.execute(
            select(Address).where(Address.user_id == user_id).order_by(Address.id).limit(1)
        )
        return result.scalar_one_or_none()

    async def create_address(self, address: Address) -> Address:
        self.db.add(address)
        await self._commit()
        await self.db.refresh(address)
        return address

    async def update_address(self, address: Address, changes: dict) -> Address:
        for field, value in changes.items():
            setattr(address, field, value)
        await self._commit()
        await self.db.refresh(address)
        return address
