"""MarketRepository — concrete implementation of MarketRepositoryProtocol.

All queries use raw text() SQL (no ORM). Market ids are stored as 0x-hex
text; amounts as NUMERIC and read back through int().
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.reg_common.codecs import market_id_hex
from src.reg_common.enums import ActorType, MarketStatus
from src.reg_market.domain.models import Market, MarketActor

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_GET_MARKET_SQL = text("""
    SELECT id, token, terms, meta, maker, owner,
           provider_security, consumer_security, market_fee,
           status, created_at
    FROM markets
    WHERE id = :market_id
""")

_INSERT_MARKET_SQL = text("""
    INSERT INTO markets
        (id, token, terms, meta, maker, owner,
         provider_security, consumer_security, market_fee,
         status, created_at)
    VALUES
        (:id, :token, :terms, :meta, :maker, :owner,
         :provider_security, :consumer_security, :market_fee,
         :status, :created_at)
""")

_GET_MARKET_BY_MAKER_SQL = text("""
    SELECT market_id FROM markets_by_maker WHERE maker = :maker
""")

_BIND_MAKER_SQL = text("""
    INSERT INTO markets_by_maker (maker, market_id)
    VALUES (:maker, :market_id)
""")

_GET_ACTOR_SQL = text("""
    SELECT market_id, actor, actor_type, joined, security, meta
    FROM market_actors
    WHERE market_id = :market_id
      AND actor = :actor
      AND actor_type = :actor_type
""")

_INSERT_ACTOR_SQL = text("""
    INSERT INTO market_actors (market_id, actor, actor_type, joined, security, meta)
    VALUES (:market_id, :actor, :actor_type, :joined, :security, :meta)
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------

def _row_to_market(row: object) -> Market:
    return Market(
        id=bytes.fromhex(row.id[2:]),  # type: ignore[attr-defined]
        token=row.token,  # type: ignore[attr-defined]
        terms=row.terms,  # type: ignore[attr-defined]
        meta=row.meta,  # type: ignore[attr-defined]
        maker=row.maker,  # type: ignore[attr-defined]
        owner=row.owner,  # type: ignore[attr-defined]
        provider_security=int(row.provider_security),  # type: ignore[attr-defined]
        consumer_security=int(row.consumer_security),  # type: ignore[attr-defined]
        market_fee=int(row.market_fee),  # type: ignore[attr-defined]
        status=MarketStatus(row.status),  # type: ignore[attr-defined]
        created_at=int(row.created_at),  # type: ignore[attr-defined]
    )


def _row_to_actor(row: object) -> MarketActor:
    return MarketActor(
        market_id=bytes.fromhex(row.market_id[2:]),  # type: ignore[attr-defined]
        actor=row.actor,  # type: ignore[attr-defined]
        actor_type=ActorType(row.actor_type),  # type: ignore[attr-defined]
        joined=int(row.joined),  # type: ignore[attr-defined]
        security=int(row.security),  # type: ignore[attr-defined]
        meta=row.meta,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class MarketRepository:
    """Concrete repository — writes run in the caller's transaction."""

    async def get_market(self, db: AsyncSession, market_id: bytes) -> Market | None:
        result = await db.execute(_GET_MARKET_SQL, {"market_id": market_id_hex(market_id)})
        row = result.fetchone()
        return _row_to_market(row) if row else None

    async def insert_market(self, db: AsyncSession, market: Market) -> None:
        await db.execute(
            _INSERT_MARKET_SQL,
            {
                "id": market_id_hex(market.id),
                "token": market.token,
                "terms": market.terms,
                "meta": market.meta,
                "maker": market.maker,
                "owner": market.owner,
                "provider_security": market.provider_security,
                "consumer_security": market.consumer_security,
                "market_fee": market.market_fee,
                "status": market.status.value,
                "created_at": market.created_at,
            },
        )

    async def get_market_by_maker(self, db: AsyncSession, maker: str) -> bytes | None:
        result = await db.execute(_GET_MARKET_BY_MAKER_SQL, {"maker": maker})
        value = result.scalar_one_or_none()
        return bytes.fromhex(value[2:]) if value is not None else None

    async def bind_maker(self, db: AsyncSession, maker: str, market_id: bytes) -> None:
        await db.execute(
            _BIND_MAKER_SQL, {"maker": maker, "market_id": market_id_hex(market_id)}
        )

    async def get_market_actor(
        self,
        db: AsyncSession,
        market_id: bytes,
        actor: str,
        actor_type: ActorType,
    ) -> MarketActor | None:
        result = await db.execute(
            _GET_ACTOR_SQL,
            {
                "market_id": market_id_hex(market_id),
                "actor": actor,
                "actor_type": actor_type.value,
            },
        )
        row = result.fetchone()
        return _row_to_actor(row) if row else None

    async def insert_market_actor(self, db: AsyncSession, actor: MarketActor) -> None:
        await db.execute(
            _INSERT_ACTOR_SQL,
            {
                "market_id": market_id_hex(actor.market_id),
                "actor": actor.actor,
                "actor_type": actor.actor_type.value,
                "joined": actor.joined,
                "security": actor.security,
                "meta": actor.meta,
            },
        )
