"""MarketRegistry — market creation and actor joins, direct or delegated.

Every mutating call runs inside ``WriteGate.transaction``. A join pulls the
security deposit through the escrow and writes the actor record in the same
transaction: an escrow failure aborts the join, and a failed record write
rolls the transfer back.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.reg_common.chain import BlockClock
from src.reg_common.codecs import (
    market_id_hex,
    normalize_address,
    parse_market_id,
    parse_signature,
)
from src.reg_common.database import WriteGate, write_gate
from src.reg_common.enums import ActorType, MarketStatus
from src.reg_common.errors import (
    AlreadyJoinedError,
    InvalidMarketTermsError,
    MakerAlreadyBoundError,
    MarketAlreadyExistsError,
    MarketNotActiveError,
    MarketNotFoundError,
    NotAMemberError,
)
from src.reg_common.events import ActorJoined, MarketCreated, record_event
from src.reg_delegation.application.service import DelegationService
from src.reg_delegation.domain.messages import build_market_join
from src.reg_delegation.domain.verifier import live_context
from src.reg_market.domain.models import Market, MarketActor
from src.reg_market.domain.repository import MarketRepositoryProtocol
from src.reg_market.infrastructure.persistence import MarketRepository
from src.reg_member.application.service import MemberRegistry
from src.reg_token.domain.repository import AssetEscrowProtocol
from src.reg_token.infrastructure.persistence import TokenLedger

logger = logging.getLogger(__name__)


class MarketRegistry:
    def __init__(
        self,
        repo: MarketRepositoryProtocol | None = None,
        members: MemberRegistry | None = None,
        escrow: AssetEscrowProtocol | None = None,
        clock: BlockClock | None = None,
        delegation: DelegationService | None = None,
        gate: WriteGate | None = None,
    ) -> None:
        self._repo: MarketRepositoryProtocol = repo or MarketRepository()
        self._members = members or MemberRegistry()
        self._escrow: AssetEscrowProtocol = escrow or TokenLedger()
        self._clock = clock or BlockClock()
        self._delegation = delegation or DelegationService()
        self._gate = gate or write_gate

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_market(self, db: AsyncSession, market_id: str | bytes) -> Market:
        mid = parse_market_id(market_id)
        market = await self._repo.get_market(db, mid)
        if market is None:
            raise MarketNotFoundError(market_id_hex(mid))
        return market

    async def get_market_by_maker(self, db: AsyncSession, maker: str) -> bytes | None:
        return await self._repo.get_market_by_maker(db, normalize_address(maker))

    async def get_market_actor(
        self,
        db: AsyncSession,
        market_id: str | bytes,
        actor: str,
        actor_type: ActorType,
    ) -> MarketActor:
        """Join record for the key; an unjoined key reads as ``joined == 0``."""
        mid = parse_market_id(market_id)
        actor = normalize_address(actor)
        record = await self._repo.get_market_actor(db, mid, actor, actor_type)
        if record is None:
            return MarketActor(market_id=mid, actor=actor, actor_type=actor_type)
        return record

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_market(
        self,
        db: AsyncSession,
        caller: str,
        market_id: str | bytes,
        token: str,
        terms: str,
        meta: str,
        maker: str,
        provider_security: int,
        consumer_security: int,
        market_fee: int,
    ) -> tuple[Market, MarketCreated]:
        caller = normalize_address(caller)
        token = normalize_address(token)
        maker = normalize_address(maker)
        mid = parse_market_id(market_id)
        if provider_security < 0 or consumer_security < 0:
            raise InvalidMarketTermsError("security amounts must be non-negative")
        if not 0 <= market_fee <= settings.MAX_MARKET_FEE:
            raise InvalidMarketTermsError(f"market fee out of range: {market_fee}")

        async with self._gate.transaction(db):
            if await self._repo.get_market(db, mid) is not None:
                raise MarketAlreadyExistsError(market_id_hex(mid))
            owner = await self._members.get_member(db, caller)
            if not owner.is_member:
                raise NotAMemberError(caller)
            bound = await self._repo.get_market_by_maker(db, maker)
            if bound is not None:
                raise MakerAlreadyBoundError(maker, market_id_hex(bound))

            block = await self._clock.advance(db)
            market = Market(
                id=mid,
                token=token,
                terms=terms,
                meta=meta,
                maker=maker,
                owner=caller,
                provider_security=provider_security,
                consumer_security=consumer_security,
                market_fee=market_fee,
                status=MarketStatus.ACTIVE,
                created_at=block,
            )
            await self._repo.insert_market(db, market)
            await self._repo.bind_maker(db, maker, mid)
            event = MarketCreated(market_id=market_id_hex(mid), maker=maker, token=token)
            await record_event(event, block, db)

        logger.info(
            "Market created: id=%s maker=%s owner=%s (block %d)",
            market_id_hex(mid),
            maker,
            caller,
            block,
        )
        return market, event

    async def join_market(
        self,
        db: AsyncSession,
        caller: str,
        market_id: str | bytes,
        actor_type: ActorType,
        meta: str,
    ) -> tuple[MarketActor, ActorJoined]:
        caller = normalize_address(caller)
        mid = parse_market_id(market_id)
        async with self._gate.transaction(db):
            record, event = await self._join(db, caller, mid, actor_type, meta)
        logger.info(
            "Actor joined: market=%s actor=%s type=%s security=%d",
            market_id_hex(mid),
            caller,
            actor_type.value,
            record.security,
        )
        return record, event

    async def join_market_for(
        self,
        db: AsyncSession,
        sender: str,
        member: str,
        joined: int,
        market_id: str | bytes,
        actor_type: ActorType,
        meta: str,
        signature: str | bytes,
        chain_id: int | None = None,
        verifying_contract: str | None = None,
    ) -> tuple[MarketActor, ActorJoined]:
        """Join ``member`` to a market from a signature it produced offline.

        The deposit is pulled from ``member``; ``sender`` only relays the call
        and leaves no trace in the record or the event.
        """
        sender = normalize_address(sender)
        member = normalize_address(member)
        mid = parse_market_id(market_id)
        if verifying_contract is not None:
            verifying_contract = normalize_address(verifying_contract)
        live = live_context()
        claimed = self._delegation.claimed_context(live, chain_id, verifying_contract)
        message = build_market_join(claimed, member, joined, mid, actor_type, meta)

        async with self._gate.transaction(db):
            self._delegation.authorize(message, parse_signature(signature), live)
            self._delegation.check_freshness(joined, await self._clock.current(db))
            record, event = await self._join(db, member, mid, actor_type, meta)
        logger.info(
            "Actor joined: market=%s actor=%s type=%s security=%d relayed by %s",
            market_id_hex(mid),
            member,
            actor_type.value,
            record.security,
            sender,
        )
        return record, event

    async def _join(
        self,
        db: AsyncSession,
        actor: str,
        market_id: bytes,
        actor_type: ActorType,
        meta: str,
    ) -> tuple[MarketActor, ActorJoined]:
        market = await self._repo.get_market(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id_hex(market_id))
        if market.status != MarketStatus.ACTIVE:
            raise MarketNotActiveError(market_id_hex(market_id))
        member = await self._members.get_member(db, actor)
        if not member.is_member:
            raise NotAMemberError(actor)
        existing = await self._repo.get_market_actor(db, market_id, actor, actor_type)
        if existing is not None and existing.is_joined:
            raise AlreadyJoinedError(market_id_hex(market_id), actor, actor_type.value)

        amount = market.security_for(actor_type)
        registry = live_context().verifying_contract
        await self._escrow.transfer_from(db, registry, actor, registry, amount)

        block = await self._clock.advance(db)
        record = MarketActor(
            market_id=market_id,
            actor=actor,
            actor_type=actor_type,
            joined=block,
            security=amount,
            meta=meta,
        )
        await self._repo.insert_market_actor(db, record)
        event = ActorJoined(
            market_id=market_id_hex(market_id),
            actor=actor,
            actor_type=actor_type.value,
            security=amount,
        )
        await record_event(event, block, db)
        return record, event
