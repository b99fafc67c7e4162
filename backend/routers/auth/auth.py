from fastapi import APIRouter, Depends, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from dependencies.services import get_user_service
from routers.users.service import UserService
from utils.errors import UnauthorizedError
from utils.response_helpers import safe_model_validate
from .schemas import UserRegister, UserLogin, AuthResponse, UserResponse
from .helpers import auth_helpers
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])

security = HTTPBearer(auto_error=False)

async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
):
    """Get current user from JWT token"""
    if credentials is None or not credentials.credentials:
        logger.warning(f"Missing bearer token on {request.method} {request.url.path}")
        raise UnauthorizedError("authorization failed", "authorization header is missing or malformed")

    current_user = auth_helpers.verify_token(credentials.credentials)
    logger.debug(f"User {current_user['user_id']} authenticated with role: {current_user['role']}")

    return current_user

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    service: UserService = Depends(get_user_service)
):
    user = await service.register(user_data)
    token = service.issue_token(user)

    return AuthResponse(
        message="User registered successfully",
        user=safe_model_validate(UserResponse, user),
        token=token
    )

@router.post("/login", response_model=AuthResponse)
async def login(
    user_data: UserLogin,
    service: UserService = Depends(get_user_service)
):
    try:
        user, token = await service.login(user_data.email, user_data.password)
    except UnauthorizedError as e:
        logger.warning(f"Login failed for {user_data.email}: {e.message}")
        raise UnauthorizedError("Invalid email or password", "invalid credentials")

    return AuthResponse(
        message="Login successful",
        user=safe_model_validate(UserResponse, user),
        token=token
    )
