"""
Response helper utilities for model validation and pagination
"""
from typing import Any, Dict, List, Optional, Type
from datetime import datetime, timezone
from pydantic import BaseModel

DEFAULT_TAKE = 10
MAX_TAKE = 100


def model_to_dict(obj: Any) -> Dict[str, Any]:
    """
    Convert a SQLAlchemy model (or plain object) to a dict of its public columns
    """
    if isinstance(obj, dict):
        return dict(obj)
    return {key: value for key, value in vars(obj).items() if not key.startswith('_')}


def safe_model_validate(model_class: Type[BaseModel], data: Any) -> BaseModel:
    """
    Validate a response model from an ORM row or dict, skipping SQLAlchemy internals
    """
    return model_class.model_validate(model_to_dict(data))


def safe_model_validate_list(model_class: Type[BaseModel], data_list: List[Any]) -> List[BaseModel]:
    return [safe_model_validate(model_class, item) for item in data_list]


def get_limit(take: Optional[int]) -> int:
    if take is None or take < 1:
        return DEFAULT_TAKE
    if take > MAX_TAKE:
        return MAX_TAKE
    return take


def get_offset(skip: Optional[int]) -> int:
    if skip is None or skip < 0:
        return 0
    return skip


def pagination_meta(take: int, skip: int, total: int) -> Dict[str, int]:
    return {"take": take, "skip": skip, "total": total}


def parse_iso_datetime(value: Optional[str], field: str) -> Optional[datetime]:
    """Parse an ISO 8601 query value; raises ValueError naming the field"""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(
            f"Invalid {field} date format. Use ISO 8601 format (e.g., 2024-01-01T00:00:00Z)"
        )
    # Timestamps are stored in UTC
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed
