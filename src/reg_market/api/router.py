"""reg_market REST endpoints.

POST /markets                                          — create a market
GET  /markets/{market_id}                              — market detail
GET  /markets/by-maker/{maker}                         — market a maker works for
POST /markets/{market_id}/actors                       — join as the bearer
POST /markets/{market_id}/actors/delegated             — join from a member's signature
GET  /markets/{market_id}/actors/{actor}/{actor_type}  — join record (joined=0 if absent)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.reg_common.codecs import market_id_hex, normalize_address
from src.reg_common.database import get_db_session
from src.reg_common.enums import ActorType
from src.reg_common.response import ApiResponse, respond
from src.reg_gateway.auth.dependencies import get_current_caller
from src.reg_market.application.schemas import (
    CreateMarketRequest,
    CreateMarketResponse,
    JoinMarketForRequest,
    JoinMarketRequest,
    JoinMarketResponse,
    MakerMarketResponse,
    MarketActorResponse,
    MarketResponse,
)
from src.reg_market.application.service import MarketRegistry

router = APIRouter(prefix="/markets", tags=["markets"])

_service = MarketRegistry()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_market(
    body: CreateMarketRequest,
    caller: Annotated[str, Depends(get_current_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    market, event = await _service.create_market(
        db,
        caller=caller,
        market_id=body.market_id,
        token=body.token,
        terms=body.terms,
        meta=body.meta,
        maker=body.maker,
        provider_security=body.provider_security,
        consumer_security=body.consumer_security,
        market_fee=body.market_fee,
    )
    data = CreateMarketResponse.from_result(market, event)
    return respond(request, data.model_dump(), "Market created")


@router.get("/by-maker/{maker}")
async def get_market_by_maker(
    maker: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    market_id = await _service.get_market_by_maker(db, maker)
    data = MakerMarketResponse(
        maker=normalize_address(maker),
        market_id=market_id_hex(market_id) if market_id is not None else None,
    )
    return respond(request, data.model_dump())


@router.get("/{market_id}")
async def get_market(
    market_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    market = await _service.get_market(db, market_id)
    return respond(request, MarketResponse.from_domain(market).model_dump())


@router.post("/{market_id}/actors", status_code=status.HTTP_201_CREATED)
async def join_market(
    market_id: str,
    body: JoinMarketRequest,
    caller: Annotated[str, Depends(get_current_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    actor, event = await _service.join_market(
        db, caller, market_id, body.actor_type, body.meta
    )
    data = JoinMarketResponse.from_result(actor, event)
    return respond(request, data.model_dump(), "Actor joined")


@router.post("/{market_id}/actors/delegated", status_code=status.HTTP_201_CREATED)
async def join_market_for(
    market_id: str,
    body: JoinMarketForRequest,
    caller: Annotated[str, Depends(get_current_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    actor, event = await _service.join_market_for(
        db,
        sender=caller,
        member=body.member,
        joined=body.joined,
        market_id=market_id,
        actor_type=body.actor_type,
        meta=body.meta,
        signature=body.signature,
        chain_id=body.chain_id,
        verifying_contract=body.verifying_contract,
    )
    data = JoinMarketResponse.from_result(actor, event)
    return respond(request, data.model_dump(), "Actor joined")


@router.get("/{market_id}/actors/{actor}/{actor_type}")
async def get_market_actor(
    market_id: str,
    actor: str,
    actor_type: ActorType,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    record = await _service.get_market_actor(db, market_id, actor, actor_type)
    return respond(request, MarketActorResponse.from_domain(record).model_dump())
