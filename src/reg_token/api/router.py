"""reg_token REST endpoints.

GET  /token/balance/{address}  — token balance
POST /token/approve            — set an allowance for a spender
POST /token/transfer           — move tokens from the bearer
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.reg_common.codecs import normalize_address
from src.reg_common.database import get_db_session
from src.reg_common.response import ApiResponse, respond
from src.reg_gateway.auth.dependencies import get_current_caller
from src.reg_token.application.schemas import (
    AllowanceResponse,
    ApproveRequest,
    BalanceResponse,
    TransferRequest,
)
from src.reg_token.application.service import TokenService

router = APIRouter(prefix="/token", tags=["token"])

_service = TokenService()


@router.get("/balance/{address}")
async def get_balance(
    address: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    balance = await _service.balance_of(db, address)
    data = BalanceResponse(address=normalize_address(address), balance=balance)
    return respond(request, data.model_dump())


@router.post("/approve")
async def approve(
    body: ApproveRequest,
    caller: Annotated[str, Depends(get_current_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    amount = await _service.approve(db, caller, body.spender, body.amount)
    data = AllowanceResponse(
        owner=caller, spender=normalize_address(body.spender), amount=amount
    )
    return respond(request, data.model_dump())


@router.post("/transfer")
async def transfer(
    body: TransferRequest,
    caller: Annotated[str, Depends(get_current_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    balance = await _service.transfer(db, caller, body.recipient, body.amount)
    data = BalanceResponse(address=caller, balance=balance)
    return respond(request, data.model_dump())
