from config import DEFAULT_DIAL_CODE
from datetime import datetime, timezone
import re


def format_phone_to_e164(phone: str, dial_code: str = DEFAULT_DIAL_CODE) -> str:
    """
    Format a phone number to E.164.

    Numbers that already start with "+" are returned as is. A single local
    trunk "0" is dropped and the default dial code is prepended when missing.
    """
    phone = (phone or "").strip()
    if not phone:
        return phone

    if phone.startswith("+"):
        return phone

    phone = re.sub(r"[\s\-()]", "", phone)
    if phone.startswith("0"):
        phone = phone[1:]

    if phone.startswith(dial_code):
        return f"+{phone}"

    return f"+{dial_code}{phone}"


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps coming back from the store as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
