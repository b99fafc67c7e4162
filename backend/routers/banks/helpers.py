from fastapi.concurrency import run_in_threadpool
from typing import Dict, Iterator, List, Optional
from config import FLUTTERWAVE_SECRET_KEY, DEFAULT_COUNTRY_CODE
from utils.errors import InternalError, ValidationError
from utils.flutterwave import FlutterwaveClient, FlutterwaveError
import logging

logger = logging.getLogger(__name__)


class BankService:
    """Bank lookups backed by the Flutterwave API"""

    def __init__(self, client: FlutterwaveClient):
        self.client = client

    async def list_banks(self, country: Optional[str] = None) -> List[Dict[str, str]]:
        country = (country or DEFAULT_COUNTRY_CODE).upper()
        try:
            banks = await run_in_threadpool(self.client.get_banks, country)
        except FlutterwaveError as e:
            logger.error(f"Failed to fetch banks for {country}: {e}")
            raise InternalError("failed to fetch banks", str(e), str(e))

        return [
            {"code": str(bank.get("code", "")), "name": bank.get("name", "")}
            for bank in banks
        ]

    async def verify_account(self, account_number: str, bank_code: str) -> Dict[str, str]:
        try:
            data = await run_in_threadpool(self.client.verify_account, account_number, bank_code)
        except FlutterwaveError as e:
            logger.error(f"Failed to verify account {account_number} at bank {bank_code}: {e}")
            raise ValidationError("failed to verify account", str(e), str(e))

        return {
            "account_number": data.get("account_number") or account_number,
            "account_name": data.get("account_name", ""),
            "bank_code": bank_code,
        }


def get_bank_service() -> Iterator[Optional[BankService]]:
    """Bank verification is optional; None means no secret key is configured"""
    if not FLUTTERWAVE_SECRET_KEY:
        yield None
        return

    client = FlutterwaveClient(FLUTTERWAVE_SECRET_KEY)
    try:
        yield BankService(client)
    finally:
        client.close()
