from fastapi import APIRouter, Depends, status
from dependencies.services import get_cart_service
from routers.auth.auth import get_current_user
from routers.cart.service import CartService
from utils.response_helpers import safe_model_validate, safe_model_validate_list
from .schemas import CartItemCreate, CartUpdate, CartItemResponse, CartItemDetailResponse, CartListResponse, MessageResponse
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cart", tags=["Cart"], dependencies=[Depends(get_current_user)])


def item_response(message: str, item) -> CartItemDetailResponse:
    return CartItemDetailResponse(message=message, data=safe_model_validate(CartItemResponse, item))


@router.get("", response_model=CartListResponse)
async def list_cart_items(
    current_user = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    items = await service.list_items(current_user["user_id"])
    return CartListResponse(
        message="Cart retrieved successfully",
        data=safe_model_validate_list(CartItemResponse, items),
        count=len(items)
    )


@router.post("", response_model=CartItemDetailResponse, status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    item_data: CartItemCreate,
    current_user = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    """Add a product to the cart, merging into the existing line if there is one"""
    item = await service.add_to_cart(current_user["user_id"], item_data.product_id, item_data.quantity)
    return item_response("Item added to cart", item)


@router.put("", response_model=CartItemDetailResponse)
async def update_cart(
    cart_data: CartUpdate,
    current_user = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    item = await service.update_cart(current_user["user_id"], cart_data)
    return item_response("Cart updated successfully", item)


@router.delete("", response_model=MessageResponse)
async def clear_cart(
    current_user = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    await service.clear(current_user["user_id"])
    return MessageResponse(message="Cart cleared successfully")


@router.get("/{product_id}", response_model=CartItemDetailResponse)
async def get_cart_item(
    product_id: int,
    current_user = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    item = await service.get_item(current_user["user_id"], product_id)
    return item_response("Cart item retrieved successfully", item)


@router.patch("/{product_id}/increment", response_model=CartItemDetailResponse)
async def increment_cart_item(
    product_id: int,
    current_user = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    item = await service.increment(current_user["user_id"], product_id)
    return item_response("Cart item quantity increased", item)


@router.patch("/{product_id}/decrement", response_model=CartItemDetailResponse)
async def decrement_cart_item(
    product_id: int,
    current_user = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    item = await service.decrement(current_user["user_id"], product_id)
    return item_response("Cart item quantity decreased", item)


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_cart_item(
    product_id: int,
    current_user = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    await service.delete_item(current_user["user_id"], product_id)
    return MessageResponse(message="Cart item deleted successfully")
