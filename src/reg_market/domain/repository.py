"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.reg_common.enums import ActorType
from src.reg_market.domain.models import Market, MarketActor


class MarketRepositoryProtocol(Protocol):
    async def get_market(self, db: AsyncSession, market_id: bytes) -> Market | None: ...

    async def insert_market(self, db: AsyncSession, market: Market) -> None: ...

    async def get_market_by_maker(self, db: AsyncSession, maker: str) -> bytes | None: ...

    async def bind_maker(self, db: AsyncSession, maker: str, market_id: bytes) -> None: ...

    async def get_market_actor(
        self,
        db: AsyncSession,
        market_id: bytes,
        actor: str,
        actor_type: ActorType,
    ) -> MarketActor | None: ...

    async def insert_market_actor(self, db: AsyncSession, actor: MarketActor) -> None: ...
