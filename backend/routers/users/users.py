from fastapi import APIRouter, Depends, Query
from typing import Optional
from dependencies.services import get_user_service
from dependencies.rbac import require_verified
from routers.auth.auth import get_current_user
from routers.auth.schemas import UserResponse
from routers.users.service import UserService
from utils.errors import UnauthorizedError
from utils.response_helpers import safe_model_validate, safe_model_validate_list
from .schemas import (
    UserUpdate, VerificationCodeInput, BecomeSellerInput, AddressInput, ProfileUpdate,
    AddressResponse, ProfileResponse, UserDetailResponse, UserListResponse,
    BecomeSellerResponse, MessageResponse,
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

# Routes that live at the root for existing clients
root_router = APIRouter(tags=["Users"])


def ensure_self(current_user: dict, user_id: int):
    if current_user["user_id"] != user_id:
        logger.warning(f"User {current_user['user_id']} attempted to modify user {user_id}")
        raise UnauthorizedError("unauthorized", "you can only modify your own account")


def profile_response(message: str, user, address) -> ProfileResponse:
    return ProfileResponse(
        message=message,
        user=safe_model_validate(UserResponse, user),
        address=safe_model_validate(AddressResponse, address) if address else None
    )


@router.get("", response_model=UserListResponse)
async def list_users(
    email: Optional[str] = Query(None, description="Return only the user with this email"),
    current_user = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    if email:
        users = [await service.find_user_by_email(email)]
    else:
        users = await service.find_all_users()

    return UserListResponse(
        message="Users retrieved successfully",
        users=safe_model_validate_list(UserResponse, users),
        count=len(users)
    )


# Fixed paths are declared before /{user_id}
async def get_verification_code(
    current_user = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Send a fresh one-time code to the caller's phone"""
    await service.get_verification_code(current_user["user_id"])
    return MessageResponse(message="Verification code sent successfully")


async def verify_code(
    payload: VerificationCodeInput,
    current_user = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    await service.verify_code(current_user["user_id"], payload.code)
    return MessageResponse(message="User verified successfully")


for _router in (router, root_router):
    _router.add_api_route("/verify", get_verification_code, methods=["GET"], response_model=MessageResponse)
    _router.add_api_route("/verify", verify_code, methods=["POST"], response_model=MessageResponse)


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    current_user = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    user, address = await service.get_profile(current_user["user_id"])
    return profile_response("Profile retrieved successfully", user, address)


@router.post("/profile", response_model=ProfileResponse, status_code=201)
async def create_profile(
    address_data: AddressInput,
    current_user = Depends(get_current_user),
    _verified = Depends(require_verified),
    service: UserService = Depends(get_user_service)
):
    user, address = await service.create_profile(current_user["user_id"], address_data)
    return profile_response("Profile created successfully", user, address)


@router.patch("/profile", response_model=ProfileResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    current_user = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    user, address = await service.update_profile(current_user["user_id"], profile_data)
    return profile_response("Profile updated successfully", user, address)


@router.get("/{user_id}", response_model=UserDetailResponse)
async def get_user(
    user_id: int,
    current_user = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    user = await service.find_user_by_id(user_id)
    return UserDetailResponse(
        message="User retrieved successfully",
        user=safe_model_validate(UserResponse, user)
    )


@router.put("/{user_id}", response_model=UserDetailResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    current_user = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    ensure_self(current_user, user_id)
    user = await service.update_user(user_id, user_data)
    return UserDetailResponse(
        message="User updated successfully",
        user=safe_model_validate(UserResponse, user)
    )


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    current_user = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    ensure_self(current_user, user_id)
    await service.delete_user(user_id)
    return MessageResponse(message="User deleted successfully")


@root_router.post("/become-seller", response_model=BecomeSellerResponse)
async def become_seller(
    seller_data: BecomeSellerInput,
    current_user = Depends(get_current_user),
    _verified = Depends(require_verified),
    service: UserService = Depends(get_user_service)
):
    """
    Upgrade the caller to a seller and record their payout bank account.

    The response carries a fresh token because the old one still says "buyer".
    """
    user, token = await service.become_seller(current_user["user_id"], seller_data)
    return BecomeSellerResponse(
        message="You are now a seller",
        user=safe_model_validate(UserResponse, user),
        token=token
    )
