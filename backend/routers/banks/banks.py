from fastapi import APIRouter, Depends, Query
from typing import Optional
from routers.auth.auth import get_current_user
from utils.errors import UnavailableError
from .helpers import BankService, get_bank_service
from .schemas import BankListResponse, AccountVerificationRequest, AccountVerificationResponse
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/banks", tags=["Banks"])


def require_bank_service(service: Optional[BankService] = Depends(get_bank_service)) -> BankService:
    if service is None:
        logger.warning("Bank verification requested but FLUTTERWAVE_SECRET_KEY is not set")
        raise UnavailableError("bank service is not available", "bank verification is not configured")
    return service


@router.get("", response_model=BankListResponse)
async def list_banks(
    country: Optional[str] = Query(None, description="ISO country code, defaults to NG"),
    service: BankService = Depends(require_bank_service)
):
    banks = await service.list_banks(country)
    return BankListResponse(message="Banks retrieved successfully", data=banks)


@router.post("/verify", response_model=AccountVerificationResponse)
async def verify_account(
    payload: AccountVerificationRequest,
    current_user = Depends(get_current_user),
    service: BankService = Depends(require_bank_service)
):
    """Resolve an account number/bank code pair to the account holder's name"""
    account = await service.verify_account(payload.account_number, payload.bank_code)
    return AccountVerificationResponse(message="Account verified successfully", data=account)
