"""
User business rules: registration, login, verification codes, profile and
the one-way buyer -> seller upgrade.
"""
from fastapi.concurrency import run_in_threadpool
from typing import Callable, List, Optional, Tuple
from datetime import datetime, timedelta
from models import User, Address, BankAccount, BUYER, SELLER, utc_now
from config import VERIFICATION_CODE_EXPIRE_MINUTES
from routers.auth.helpers import AuthHelpers, auth_helpers
from routers.auth.schemas import UserRegister
from routers.users.repository import UserRepository
from routers.users.schemas import UserUpdate, BecomeSellerInput, AddressInput, ProfileUpdate
from routers.users.helpers import format_phone_to_e164, as_utc
from utils.errors import ConflictError, InternalError, UnauthorizedError, ValidationError, not_found
from utils.notifications import send_sms, get_verification_code_sms
import logging

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ("address_line1", "address_line2", "city", "state", "country", "postal_code")


class UserService:
    def __init__(
        self,
        repo: UserRepository,
        auth: AuthHelpers = auth_helpers,
        notifier: Callable[[str, str], bool] = send_sms,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repo = repo
        self.auth = auth
        self.notifier = notifier
        self.clock = clock

    async def register(self, data: UserRegister) -> User:
        logger.info(f"Registering user {data.email}")
        hashed_password = self.auth.hash_password(data.password)

        user = User(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone,
            password=hashed_password,
            user_type=BUYER,
            verified=False,
        )
        return await self.repo.create_user(user)

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        user = await self.repo.find_user_by_email(email)
        if not user:
            raise UnauthorizedError("user does not exist with the provided email id")

        if not self.auth.verify_password(password, user.password):
            raise UnauthorizedError("invalid password")

        token = self.issue_token(user)
        return user, token

    def issue_token(self, user: User) -> str:
        return self.auth.create_access_token(user.id, user.email, user.user_type)

    async def find_user_by_id(self, user_id: int) -> User:
        user = await self.repo.find_user_by_id(user_id)
        if not user:
            raise not_found("User")
        return user

    async def find_user_by_email(self, email: str) -> User:
        user = await self.repo.find_user_by_email(email)
        if not user:
            raise not_found("User")
        return user

    async def find_all_users(self) -> List[User]:
        return await self.repo.find_all_users()

    async def update_user(self, user_id: int, data: UserUpdate) -> User:
        user = await self.find_user_by_id(user_id)

        changes = {
            field: getattr(data, field)
            for field in data.model_fields_set
            if getattr(data, field) is not None
        }

        if "email" in changes and changes["email"] != user.email:
            existing = await self.repo.find_user_by_email(changes["email"])
            if existing and existing.id != user_id:
                raise ConflictError(
                    "Email already exists",
                    "This email address is already registered to another user. Please use a different email address."
                )

        if "password" in changes:
            changes["password"] = self.auth.hash_password(changes["password"])

        if not changes:
            return user
        return await self.repo.update_user(user, changes)

    async def delete_user(self, user_id: int) -> None:
        deleted = await self.repo.delete_user(user_id)
        if not deleted:
            raise not_found("User")
        logger.info(f"User {user_id} deleted")

    async def get_verification_code(self, user_id: int) -> None:
        user = await self.find_user_by_id(user_id)
        if user.verified:
            raise ConflictError("user is already verified")

        code = self.auth.generate_verification_code()
        expiry = self.clock() + timedelta(minutes=VERIFICATION_CODE_EXPIRE_MINUTES)
        user = await self.repo.update_user(user, {"code": code, "expiry": expiry})

        # The code stays stored even when delivery fails
        phone = format_phone_to_e164(user.phone)
        body = get_verification_code_sms(code, VERIFICATION_CODE_EXPIRE_MINUTES)
        sent = await run_in_threadpool(self.notifier, phone, body)
        if not sent:
            raise InternalError(
                "failed to send verification code",
                f"SMS delivery to {phone} failed"
            )
        logger.info(f"Verification code sent to user {user_id}")

    async def verify_code(self, user_id: int, code) -> bool:
        user = await self.find_user_by_id(user_id)
        if user.verified:
            raise ConflictError("user is already verified")

        submitted = str(code).strip().zfill(6)
        if not user.code or user.code != submitted:
            raise ValidationError("invalid verification code")

        if user.expiry is None or as_utc(user.expiry) <= self.clock():
            raise ValidationError("verification code has expired")

        await self.repo.update_user(user, {"verified": True})
        logger.info(f"User {user_id} verified")
        return True

    async def become_seller(self, user_id: int, data: BecomeSellerInput) -> Tuple[User, str]:
        user = await self.find_user_by_id(user_id)
        if user.user_type == SELLER:
            raise ConflictError("user is already a seller")

        changes = {
            "first_name": data.first_name,
            "last_name": data.last_name,
            "phone": data.phone_number,
            "user_type": SELLER,
        }
        bank_account = BankAccount(
            user_id=user.id,
            bank_name=data.payment_type,
            bank_account_number=data.bank_account_number,
            bank_code=data.bank_code,
        )
        user = await self.repo.promote_to_seller(user, changes, bank_account)
        logger.info(f"User {user_id} joined the seller program")

        return user, self.issue_token(user)

    async def get_profile(self, user_id: int) -> Tuple[User, Optional[Address]]:
        user = await self.find_user_by_id(user_id)
        address = await self.repo.find_address(user_id)
        return user, address

    async def create_profile(self, user_id: int, data: AddressInput) -> Tuple[User, Address]:
        user = await self.find_user_by_id(user_id)
        if await self.repo.find_address(user_id):
            raise ConflictError(
                "Address already exists",
                "An address is already on file. Use PATCH /users/profile to update it."
            )

        address = Address(user_id=user_id, **data.model_dump())
        address = await self.repo.create_address(address)
        return user, address

    async def update_profile(self, user_id: int, data: ProfileUpdate) -> Tuple[User, Optional[Address]]:
        user = await self.find_user_by_id(user_id)

        user_changes = {
            field: getattr(data, field)
            for field in ("first_name", "last_name", "phone")
            if field in data.model_fields_set and getattr(data, field) is not None
        }
        if user_changes:
            user = await self.repo.update_user(user, user_changes)

        address = await self.repo.find_address(user_id)
        if data.address is not None:
            address_changes = {
                field: getattr(data.address, field)
                for field in data.address.model_fields_set
                if field in ADDRESS_FIELDS
            }
            if address is None:
                address = await self.repo.create_address(Address(user_id=user_id, **address_changes))
            elif address_changes:
                address = await self.repo.update_address(address, address_changes)

        return user, address
