from pydantic import BaseModel, Field
from typing import List


class Bank(BaseModel):
    code: str
    name: str

class BankListResponse(BaseModel):
    message: str
    data: List[Bank]

class AccountVerificationRequest(BaseModel):
    account_number: str = Field(..., min_length=1, max_length=20)
    bank_code: str = Field(..., min_length=1, max_length=20)

class AccountVerification(BaseModel):
    account_number: str
    account_name: str
    bank_code: str

class AccountVerificationResponse(BaseModel):
    message: str
    data: AccountVerification
