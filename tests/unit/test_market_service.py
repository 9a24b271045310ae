"""Unit tests for MarketRegistry using mock repositories, escrow and session."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from eth_account.signers.local import LocalAccount

from config.settings import settings
from src.reg_common.database import WriteGate
from src.reg_common.enums import ActorType, MarketStatus, MemberLevel
from src.reg_common.errors import (
    AlreadyJoinedError,
    InsufficientApprovalError,
    InvalidMarketIdError,
    InvalidMarketTermsError,
    InvalidSignatureError,
    MakerAlreadyBoundError,
    MarketAlreadyExistsError,
    MarketNotActiveError,
    MarketNotFoundError,
    NotAMemberError,
)
from src.reg_common.events import ActorJoined, MarketCreated
from src.reg_delegation.domain.messages import build_market_join
from src.reg_delegation.domain.signer import sign_delegation
from src.reg_delegation.domain.verifier import live_context
from src.reg_market.application.service import MarketRegistry
from src.reg_market.domain.models import Market, MarketActor
from src.reg_member.domain.models import Member

MARKET_ID = bytes.fromhex("a1" * 16)
MARKET_HEX = "0x" + "a1" * 16
TOKEN = "0x00000000000000000000000000000000000000aa"


def _make_market(**kwargs) -> Market:
    defaults = dict(
        id=MARKET_ID, token=TOKEN, terms="", meta="",
        maker="0x0000000000000000000000000000000000000002",
        owner="0x0000000000000000000000000000000000000003",
        provider_security=0, consumer_security=0, market_fee=0,
        status=MarketStatus.ACTIVE, created_at=2,
    )
    defaults.update(kwargs)
    return Market(**defaults)


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_repo() -> MagicMock:
    repo = MagicMock()
    repo.get_market = AsyncMock(return_value=None)
    repo.insert_market = AsyncMock()
    repo.get_market_by_maker = AsyncMock(return_value=None)
    repo.bind_maker = AsyncMock()
    repo.get_market_actor = AsyncMock(return_value=None)
    repo.insert_market_actor = AsyncMock()
    return repo


@pytest.fixture
def mock_members() -> MagicMock:
    members = MagicMock()
    members.get_member = AsyncMock(
        side_effect=lambda db, address: Member(
            address=address, level=MemberLevel.ACTIVE, registered_at=1
        )
    )
    return members


@pytest.fixture
def escrow() -> MagicMock:
    escrow = MagicMock()
    escrow.transfer_from = AsyncMock(return_value=True)
    return escrow


@pytest.fixture
def clock() -> MagicMock:
    clock = MagicMock()
    clock.current = AsyncMock(return_value=10)
    clock.advance = AsyncMock(return_value=11)
    return clock


@pytest.fixture
def svc(mock_repo, mock_members, escrow, clock) -> MarketRegistry:
    return MarketRegistry(
        repo=mock_repo, members=mock_members, escrow=escrow, clock=clock, gate=WriteGate()
    )


async def _create(svc: MarketRegistry, db, caller: str, maker: str, **kwargs):
    params = dict(
        market_id=MARKET_HEX, token=TOKEN, terms="terms", meta="meta", maker=maker,
        provider_security=0, consumer_security=0, market_fee=0,
    )
    params.update(kwargs)
    return await svc.create_market(db, caller, **params)


class TestCreateMarket:
    @pytest.mark.asyncio
    async def test_success(
        self, svc, db, mock_repo, alice: LocalAccount, bob: LocalAccount
    ) -> None:
        market, event = await _create(svc, db, alice.address, bob.address, consumer_security=7)
        assert market.owner == alice.address
        assert market.maker == bob.address
        assert market.status == MarketStatus.ACTIVE
        assert market.created_at == 11
        assert market.consumer_security == 7
        assert event == MarketCreated(market_id=MARKET_HEX, maker=bob.address, token=market.token)
        mock_repo.bind_maker.assert_awaited_once_with(db, bob.address, MARKET_ID)
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_id(self, svc, db, mock_repo, alice, bob) -> None:
        mock_repo.get_market.return_value = _make_market()
        with pytest.raises(MarketAlreadyExistsError):
            await _create(svc, db, alice.address, bob.address)
        mock_repo.insert_market.assert_not_awaited()
        db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_non_member_caller(self, svc, db, mock_members, alice, bob) -> None:
        mock_members.get_member.side_effect = lambda db, address: Member.absent(address)
        with pytest.raises(NotAMemberError):
            await _create(svc, db, alice.address, bob.address)

    @pytest.mark.asyncio
    async def test_maker_already_bound(self, svc, db, mock_repo, alice, bob) -> None:
        mock_repo.get_market_by_maker.return_value = bytes.fromhex("b2" * 16)
        with pytest.raises(MakerAlreadyBoundError):
            await _create(svc, db, alice.address, bob.address)
        mock_repo.insert_market.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_zero_id(self, svc, db, alice, bob) -> None:
        with pytest.raises(InvalidMarketIdError):
            await _create(svc, db, alice.address, bob.address, market_id="0x" + "00" * 16)

    @pytest.mark.asyncio
    async def test_negative_security(self, svc, db, alice, bob) -> None:
        with pytest.raises(InvalidMarketTermsError):
            await _create(svc, db, alice.address, bob.address, provider_security=-1)
        db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fee_over_cap(self, svc, db, alice, bob) -> None:
        with pytest.raises(InvalidMarketTermsError):
            await _create(
                svc, db, alice.address, bob.address, market_fee=settings.MAX_MARKET_FEE + 1
            )


class TestJoinMarket:
    @pytest.mark.asyncio
    async def test_pulls_role_security(
        self, svc, db, mock_repo, escrow, alice: LocalAccount, registry_address: str
    ) -> None:
        mock_repo.get_market.return_value = _make_market(
            provider_security=3, consumer_security=5
        )
        record, event = await svc.join_market(db, alice.address, MARKET_HEX, ActorType.PROVIDER, "m")
        escrow.transfer_from.assert_awaited_once_with(
            db, registry_address, alice.address, registry_address, 3
        )
        assert record.joined == 11
        assert record.security == 3
        assert event == ActorJoined(
            market_id=MARKET_HEX, actor=alice.address, actor_type="PROVIDER", security=3
        )

    @pytest.mark.asyncio
    async def test_unknown_market(self, svc, db, alice) -> None:
        with pytest.raises(MarketNotFoundError):
            await svc.join_market(db, alice.address, MARKET_HEX, ActorType.CONSUMER, "")

    @pytest.mark.asyncio
    async def test_closed_market(self, svc, db, mock_repo, alice) -> None:
        mock_repo.get_market.return_value = _make_market(status=MarketStatus.CLOSED)
        with pytest.raises(MarketNotActiveError):
            await svc.join_market(db, alice.address, MARKET_HEX, ActorType.CONSUMER, "")

    @pytest.mark.asyncio
    async def test_non_member(self, svc, db, mock_repo, mock_members, alice) -> None:
        mock_repo.get_market.return_value = _make_market()
        mock_members.get_member.side_effect = lambda db, address: Member.absent(address)
        with pytest.raises(NotAMemberError):
            await svc.join_market(db, alice.address, MARKET_HEX, ActorType.CONSUMER, "")

    @pytest.mark.asyncio
    async def test_already_joined(self, svc, db, mock_repo, escrow, alice) -> None:
        mock_repo.get_market.return_value = _make_market()
        mock_repo.get_market_actor.return_value = MarketActor(
            market_id=MARKET_ID, actor=alice.address, actor_type=ActorType.CONSUMER, joined=3
        )
        with pytest.raises(AlreadyJoinedError):
            await svc.join_market(db, alice.address, MARKET_HEX, ActorType.CONSUMER, "")
        escrow.transfer_from.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_escrow_failure_aborts(self, svc, db, mock_repo, escrow, clock, alice) -> None:
        mock_repo.get_market.return_value = _make_market(consumer_security=5)
        escrow.transfer_from.side_effect = InsufficientApprovalError(5, 0)
        with pytest.raises(InsufficientApprovalError):
            await svc.join_market(db, alice.address, MARKET_HEX, ActorType.CONSUMER, "")
        mock_repo.insert_market_actor.assert_not_awaited()
        clock.advance.assert_not_awaited()
        db.rollback.assert_awaited_once()


class TestJoinMarketFor:
    def _signed(self, key, member: str, joined: int = 10, actor_type=ActorType.CONSUMER) -> str:
        msg = build_market_join(live_context(), member, joined, MARKET_ID, actor_type, "m")
        return "0x" + sign_delegation(key, msg, live_context()).hex()

    @pytest.mark.asyncio
    async def test_deposit_pulled_from_member(
        self, svc, db, mock_repo, escrow, alice, relayer, registry_address
    ) -> None:
        mock_repo.get_market.return_value = _make_market(consumer_security=4)
        record, event = await svc.join_market_for(
            db, relayer.address, alice.address, 10, MARKET_HEX, ActorType.CONSUMER, "m",
            self._signed(alice.key, alice.address),
        )
        escrow.transfer_from.assert_awaited_once_with(
            db, registry_address, alice.address, registry_address, 4
        )
        assert record.actor == alice.address
        assert event.actor == alice.address

    @pytest.mark.asyncio
    async def test_actor_type_swap_rejected(self, svc, db, mock_repo, escrow, alice, relayer) -> None:
        mock_repo.get_market.return_value = _make_market()
        with pytest.raises(InvalidSignatureError):
            await svc.join_market_for(
                db, relayer.address, alice.address, 10, MARKET_HEX, ActorType.PROVIDER, "m",
                self._signed(alice.key, alice.address, actor_type=ActorType.CONSUMER),
            )
        escrow.transfer_from.assert_not_awaited()
        mock_repo.insert_market_actor.assert_not_awaited()


class TestGetMarketActor:
    @pytest.mark.asyncio
    async def test_absent_reads_as_not_joined(self, svc, db, alice) -> None:
        record = await svc.get_market_actor(db, MARKET_HEX, alice.address, ActorType.PROVIDER)
        assert record.joined == 0
        assert not record.is_joined
