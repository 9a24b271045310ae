"""Integration-test fixtures.

Scenario tests run the real raw-SQL repositories against an in-memory
SQLite database built from the ORM table models. A StaticPool keeps the
single connection (and with it the in-memory database) alive for the
whole test.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Importing the model modules registers their tables on Base.metadata
import src.reg_common.db_models  # noqa: F401
import src.reg_market.infrastructure.db_models  # noqa: F401
import src.reg_member.infrastructure.db_models  # noqa: F401
import src.reg_token.infrastructure.db_models  # noqa: F401
from src.main import app
from src.reg_common.chain import BlockClock
from src.reg_common.codecs import parse_market_id
from src.reg_common.database import Base, WriteGate, get_db_session
from src.reg_common.enums import ActorType
from src.reg_delegation.domain.messages import (
    DomainContext,
    build_market_join,
    build_member_register,
)
from src.reg_delegation.domain.signer import sign_delegation
from src.reg_delegation.domain.verifier import live_context
from src.reg_market.application.service import MarketRegistry
from src.reg_member.application.service import MemberRegistry
from src.reg_token.application.service import TokenService
from src.reg_token.infrastructure.persistence import TokenLedger


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def gate() -> WriteGate:
    return WriteGate()


@pytest.fixture
def members(gate: WriteGate) -> MemberRegistry:
    return MemberRegistry(gate=gate)


@pytest.fixture
def ledger() -> TokenLedger:
    return TokenLedger()


@pytest.fixture
def markets(members: MemberRegistry, ledger: TokenLedger, gate: WriteGate) -> MarketRegistry:
    return MarketRegistry(members=members, escrow=ledger, gate=gate)


@pytest.fixture
def tokens(ledger: TokenLedger, gate: WriteGate) -> TokenService:
    return TokenService(ledger=ledger, gate=gate)


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests hit the in-memory database."""

    async def _override() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture
def sign_register():
    """Factory: 0x-hex signature of a member-register message."""

    def _sign(
        key: bytes,
        member: str,
        registered: int,
        eula: str,
        profile: str,
        context: DomainContext | None = None,
    ) -> str:
        context = context or live_context()
        msg = build_member_register(context, member, registered, eula, profile)
        return "0x" + sign_delegation(key, msg, context).hex()

    return _sign


@pytest.fixture
def sign_join():
    """Factory: 0x-hex signature of a market-join message."""

    def _sign(
        key: bytes,
        member: str,
        joined: int,
        market_id: str,
        actor_type: ActorType,
        meta: str,
        context: DomainContext | None = None,
    ) -> str:
        context = context or live_context()
        msg = build_market_join(
            context, member, joined, parse_market_id(market_id), actor_type, meta
        )
        return "0x" + sign_delegation(key, msg, context).hex()

    return _sign


@pytest.fixture
def snapshot():
    """Factory: row counts and clock of every registry table, for zero-change checks."""

    async def _snapshot(db: AsyncSession) -> dict[str, int]:
        counts = {}
        for table in (
            "members",
            "markets",
            "markets_by_maker",
            "market_actors",
            "registry_events",
            "token_allowances",
        ):
            result = await db.execute(text(f"SELECT COUNT(*) FROM {table}"))
            counts[table] = int(result.scalar_one())
        result = await db.execute(text("SELECT COALESCE(SUM(balance), 0) FROM token_balances"))
        counts["supply"] = int(result.scalar_one())
        counts["block"] = await BlockClock().current(db)
        return counts

    return _snapshot
