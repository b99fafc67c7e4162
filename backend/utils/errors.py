"""
Application error taxonomy and store-error translation.

Services raise these errors; main.py renders them as
{"message": ..., "error": ..., "error_full": ...} with the matching status.
"""
from typing import Optional
from fastapi import status
import logging

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, error: Optional[str] = None, error_full: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error or message
        self.error_full = error_full

    def to_dict(self) -> dict:
        body = {"message": self.message, "error": self.error}
        if self.error_full:
            body["error_full"] = self.error_full
        return body


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UnavailableError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def not_found(resource: str) -> NotFoundError:
    return NotFoundError(
        f"{resource} not found",
        "The requested resource does not exist. Please check the ID and try again."
    )


def translate_integrity_error(exc: Exception) -> AppError:
    """Map a unique/foreign-key violation from the store to a user-facing error"""
    raw = str(getattr(exc, "orig", None) or exc)
    lowered = raw.lower()

    is_duplicate = "duplicate key" in lowered or "unique constraint" in lowered
    if is_duplicate and ("uni_users_email" in lowered or "users.email" in lowered):
        return ConflictError(
            "Email already exists",
            "This email address is already registered to another user. Please use a different email address.",
            raw
        )
    if is_duplicate and ("uni_users_phone" in lowered or "users.phone" in lowered):
        return ConflictError(
            "Phone number already exists",
            "This phone number is already registered. Please use a different phone number.",
            raw
        )
    if is_duplicate and ("uq_cart_items_user_product" in lowered or "cart_items.user_id" in lowered):
        return ConflictError(
            "Item already in cart",
            "This product is already in your cart. Increment it instead.",
            raw
        )

    if "foreign key" in lowered:
        if "delete on table" in lowered and "categories" in lowered:
            return ConflictError(
                "Cannot delete category",
                "This category has associated products. Please remove or reassign products before deleting the category.",
                raw
            )
        # SQLite does not name the constraint, so an unnamed insert failure is taken as a bad category
        if "fk_categories_products" in lowered or "delete on table" not in lowered:
            return ValidationError(
                "Invalid category",
                "The specified category does not exist. Please provide a valid category ID.",
                raw
            )

    logger.error(f"Unclassified integrity error: {raw}")
    return ConflictError(
        "Operation not allowed",
        "This operation cannot be completed due to existing relationships in the database.",
        raw
    )
