"""Pydantic request/response schemas for reg_market.

Market ids travel as 0x-prefixed 32-hex-digit strings; amounts are plain
integers in token base units.
"""

from pydantic import BaseModel, Field

from src.reg_common.codecs import market_id_hex
from src.reg_common.enums import ActorType
from src.reg_common.events import ActorJoined, MarketCreated, event_log
from src.reg_market.domain.models import Market, MarketActor

_MARKET_ID_PATTERN = r"^0x[0-9a-fA-F]{32}$"


class CreateMarketRequest(BaseModel):
    market_id: str = Field(..., pattern=_MARKET_ID_PATTERN)
    token: str
    terms: str = ""
    meta: str = ""
    maker: str
    provider_security: int = Field(0, ge=0)
    consumer_security: int = Field(0, ge=0)
    market_fee: int = Field(0, ge=0)


class JoinMarketRequest(BaseModel):
    actor_type: ActorType
    meta: str = ""


class JoinMarketForRequest(BaseModel):
    """Join relayed by the bearer on behalf of ``member``."""

    member: str
    joined: int = Field(
        ..., ge=0, le=2**256 - 1, description="Block number the member signed at"
    )
    actor_type: ActorType
    meta: str = ""
    signature: str = Field(..., description="0x-hex 65-byte EIP-712 signature")
    chain_id: int | None = None
    verifying_contract: str | None = None


class MarketResponse(BaseModel):
    market_id: str
    token: str
    terms: str
    meta: str
    maker: str
    owner: str
    provider_security: int
    consumer_security: int
    market_fee: int
    status: str
    created_at: int

    @classmethod
    def from_domain(cls, market: Market) -> "MarketResponse":
        return cls(
            market_id=market_id_hex(market.id),
            token=market.token,
            terms=market.terms,
            meta=market.meta,
            maker=market.maker,
            owner=market.owner,
            provider_security=market.provider_security,
            consumer_security=market.consumer_security,
            market_fee=market.market_fee,
            status=market.status.value,
            created_at=market.created_at,
        )


class MarketActorResponse(BaseModel):
    market_id: str
    actor: str
    actor_type: str
    joined: int
    security: int
    meta: str

    @classmethod
    def from_domain(cls, actor: MarketActor) -> "MarketActorResponse":
        return cls(
            market_id=market_id_hex(actor.market_id),
            actor=actor.actor,
            actor_type=actor.actor_type.value,
            joined=actor.joined,
            security=actor.security,
            meta=actor.meta,
        )


class CreateMarketResponse(BaseModel):
    market: MarketResponse
    events: list[dict]

    @classmethod
    def from_result(cls, market: Market, event: MarketCreated) -> "CreateMarketResponse":
        return cls(market=MarketResponse.from_domain(market), events=[event_log(event)])


class JoinMarketResponse(BaseModel):
    actor: MarketActorResponse
    events: list[dict]

    @classmethod
    def from_result(cls, actor: MarketActor, event: ActorJoined) -> "JoinMarketResponse":
        return cls(actor=MarketActorResponse.from_domain(actor), events=[event_log(event)])


class MakerMarketResponse(BaseModel):
    maker: str
    market_id: str | None
