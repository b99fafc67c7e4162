"""
RBAC dependencies for FastAPI routes
Role-based access control implemented as dependencies that run after authentication.
Roles are re-read from the database so a stale token role never grants access.
"""
from fastapi import Depends, Request
from models import BUYER, SELLER
from routers.auth.auth import get_current_user
from routers.users.service import UserService
from dependencies.services import get_user_service
from utils.errors import UnauthorizedError, NotFoundError
import logging

logger = logging.getLogger(__name__)

RESOURCES_FOR_ROLES = {
    SELLER: {
        'users': ['read', 'write', 'delete'],
        'users/profiles': ['read', 'write'],
        'users/verify': ['read', 'write'],
        'categories': ['read'],
        'products': ['read'],
        'cart': ['read', 'write', 'delete'],
        'banks': ['read', 'write'],
        'seller/categories': ['read', 'write', 'delete'],
        'seller/products': ['read', 'write', 'delete'],
    },
    BUYER: {
        'users': ['read', 'write', 'delete'],
        'users/profiles': ['read', 'write'],
        'users/verify': ['read', 'write'],
        'categories': ['read'],
        'products': ['read'],
        'cart': ['read', 'write', 'delete'],
        'banks': ['read', 'write'],
    },
}

def normalize_path(path: str) -> str:
    """Normalize request path for RBAC checking"""
    path = path.strip('/')
    segments = path.split('/')

    if segments[0] == 'seller':
        if len(segments) >= 2:
            return f'seller/{segments[1]}'
        return 'seller'

    elif segments[0] == 'users':
        if len(segments) >= 2:
            if segments[1] == 'profile':
                return 'users/profiles'
            elif segments[1] == 'verify':
                return 'users/verify'
        return 'users'

    elif segments[0] == 'verify':
        return 'users/verify'

    return segments[0]

def translate_method_to_action(method: str) -> str:
    """Map HTTP methods to RBAC actions"""
    method_permission_mapping = {
        'GET': 'read',
        'POST': 'write',
        'PUT': 'write',
        'PATCH': 'write',
        'DELETE': 'delete',
    }
    return method_permission_mapping.get(method.upper(), 'read')

def has_permission(user_role: str, resource_name: str, required_permission: str) -> bool:
    """Check if user role has permission for the resource and action"""
    if user_role not in RESOURCES_FOR_ROLES:
        return False

    user_permissions = RESOURCES_FOR_ROLES[user_role]

    if resource_name in user_permissions:
        return required_permission in user_permissions[resource_name]

    parent_resource = resource_name.split('/')[0] if '/' in resource_name else resource_name
    if parent_resource in user_permissions:
        return required_permission in user_permissions[parent_resource]

    return False

async def require_seller(
    request: Request,
    current_user: dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """
    Allow the request only when the stored user is a seller with access to the
    requested seller resource
    """
    try:
        user = await service.find_user_by_id(current_user["user_id"])
    except NotFoundError:
        logger.warning(f"Seller check failed - user {current_user['user_id']} no longer exists")
        raise UnauthorizedError("unauthorized", "please join seller program to manage products")

    path = request.url.path
    root_path = request.scope.get("root_path", "")
    if root_path and path.startswith(root_path):
        path = path[len(root_path):]

    resource_name = normalize_path(path)
    required_permission = translate_method_to_action(request.method)

    logger.info(f"RBAC Check - User: {user.user_type}, Resource: {resource_name}, Permission: {required_permission}")

    if not has_permission(user.user_type, resource_name, required_permission):
        logger.warning(f"Access denied - User: {user.id} ({user.user_type}), Resource: {resource_name}")
        raise UnauthorizedError("unauthorized", "please join seller program to manage products")

    return user

async def require_verified(
    current_user: dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Allow the request only when the stored user has verified their phone"""
    user = await service.find_user_by_id(current_user["user_id"])
    if not user.verified:
        logger.warning(f"Unverified user {user.id} attempted a verified-only action")
        raise UnauthorizedError("user is not verified", "please verify your phone number to continue")
    return user
