"""Pydantic request/response schemas for reg_token."""

from pydantic import BaseModel, Field


class ApproveRequest(BaseModel):
    spender: str
    amount: int = Field(..., ge=0)


class TransferRequest(BaseModel):
    recipient: str
    amount: int = Field(..., ge=0)


class BalanceResponse(BaseModel):
    address: str
    balance: int


class AllowanceResponse(BaseModel):
    owner: str
    spender: str
    amount: int
