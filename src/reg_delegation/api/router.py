"""Chain endpoints — what a wallet needs to sign delegations, and the event feed.

GET /chain         — EIP-712 domain, EULA and the current block
GET /chain/events  — committed registry events after a cursor
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.reg_common.chain import BlockClock
from src.reg_common.database import get_db_session
from src.reg_common.events import list_events
from src.reg_common.response import ApiResponse, respond
from src.reg_delegation.domain.verifier import live_context

router = APIRouter(prefix="/chain", tags=["chain"])

_clock = BlockClock()


class ChainInfoResponse(BaseModel):
    chain_id: int
    verifying_contract: str
    eip712_name: str
    eip712_version: str
    eula: str
    presigned_txn_max_age: int
    current_block: int


class EventResponse(BaseModel):
    id: int
    block_number: int
    event: str
    args: dict


@router.get("")
async def get_chain_info(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    context = live_context()
    data = ChainInfoResponse(
        chain_id=context.chain_id,
        verifying_contract=context.verifying_contract,
        eip712_name=settings.EIP712_NAME,
        eip712_version=settings.EIP712_VERSION,
        eula=settings.EULA,
        presigned_txn_max_age=settings.PRESIGNED_TXN_MAX_AGE,
        current_block=await _clock.current(db),
    )
    return respond(request, data.model_dump())


@router.get("/events")
async def get_events(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    after: int = Query(0, ge=0, description="Return events with id greater than this"),
    limit: int = Query(100, ge=1, le=1000),
) -> ApiResponse:
    records = await list_events(db, after, limit)
    events = [
        EventResponse(
            id=r.id, block_number=r.block_number, event=r.event_type, args=r.payload
        ).model_dump()
        for r in records
    ]
    next_after = records[-1].id if records else after
    return respond(request, {"events": events, "next_after": next_after})
