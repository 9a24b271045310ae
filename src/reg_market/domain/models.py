"""Domain models for reg_market — pure dataclasses, no business logic."""

from dataclasses import dataclass

from src.reg_common.enums import ActorType, MarketStatus


@dataclass
class Market:
    id: bytes                # 16-byte opaque id
    token: str               # escrow token the securities are paid in
    terms: str
    meta: str
    maker: str
    owner: str               # member that created the market
    provider_security: int   # token units escrowed per provider
    consumer_security: int   # token units escrowed per consumer
    market_fee: int
    status: MarketStatus
    created_at: int          # block number

    def security_for(self, actor_type: ActorType) -> int:
        if actor_type == ActorType.PROVIDER:
            return self.provider_security
        return self.consumer_security


@dataclass
class MarketActor:
    """One (market, actor, actor_type) join record.

    ``joined == 0`` is the "not joined" reading of a key with no record.
    """

    market_id: bytes
    actor: str
    actor_type: ActorType
    joined: int = 0
    security: int = 0
    meta: str = ""

    @property
    def is_joined(self) -> bool:
        return self.joined != 0
