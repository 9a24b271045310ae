"""MemberRegistry — onboarding, directly or on a member's signed behalf.

Mutating calls run inside ``WriteGate.transaction``: they are serialized
against every other registry write and commit state + event together, or
roll back and leave nothing behind.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.reg_common.chain import BlockClock
from src.reg_common.codecs import normalize_address, parse_signature
from src.reg_common.database import WriteGate, write_gate
from src.reg_common.enums import MemberLevel
from src.reg_common.errors import AlreadyMemberError, InvalidEulaError
from src.reg_common.events import MemberRegistered, record_event
from src.reg_delegation.application.service import DelegationService
from src.reg_delegation.domain.messages import build_member_register
from src.reg_delegation.domain.verifier import live_context
from src.reg_member.domain.models import Member
from src.reg_member.domain.repository import MemberRepositoryProtocol
from src.reg_member.infrastructure.persistence import MemberRepository

logger = logging.getLogger(__name__)


class MemberRegistry:
    def __init__(
        self,
        repo: MemberRepositoryProtocol | None = None,
        clock: BlockClock | None = None,
        delegation: DelegationService | None = None,
        gate: WriteGate | None = None,
    ) -> None:
        self._repo: MemberRepositoryProtocol = repo or MemberRepository()
        self._clock = clock or BlockClock()
        self._delegation = delegation or DelegationService()
        self._gate = gate or write_gate

    async def get_member(self, db: AsyncSession, address: str) -> Member:
        address = normalize_address(address)
        member = await self._repo.get_member(db, address)
        return member if member is not None else Member.absent(address)

    async def register_member(
        self, db: AsyncSession, caller: str, eula: str, profile: str
    ) -> tuple[Member, MemberRegistered]:
        caller = normalize_address(caller)
        async with self._gate.transaction(db):
            member, event = await self._register(db, caller, eula, profile)
        logger.info("Member registered: %s (block %d)", caller, member.registered_at)
        return member, event

    async def register_member_for(
        self,
        db: AsyncSession,
        sender: str,
        member: str,
        registered: int,
        eula: str,
        profile: str,
        signature: str | bytes,
        chain_id: int | None = None,
        verifying_contract: str | None = None,
    ) -> tuple[Member, MemberRegistered]:
        """Register ``member`` from a signature ``member`` produced offline.

        ``sender`` only relays the call; the record and event are exactly
        those of a direct registration by ``member``.
        """
        sender = normalize_address(sender)
        member = normalize_address(member)
        if verifying_contract is not None:
            verifying_contract = normalize_address(verifying_contract)
        live = live_context()
        claimed = self._delegation.claimed_context(live, chain_id, verifying_contract)
        message = build_member_register(claimed, member, registered, eula, profile)

        async with self._gate.transaction(db):
            self._delegation.authorize(message, parse_signature(signature), live)
            self._delegation.check_freshness(registered, await self._clock.current(db))
            record, event = await self._register(db, member, eula, profile)
        logger.info(
            "Member registered: %s (block %d) relayed by %s",
            member,
            record.registered_at,
            sender,
        )
        return record, event

    async def _register(
        self, db: AsyncSession, address: str, eula: str, profile: str
    ) -> tuple[Member, MemberRegistered]:
        existing = await self._repo.get_member(db, address)
        if existing is not None and existing.is_member:
            raise AlreadyMemberError(address)
        if eula != settings.EULA:
            raise InvalidEulaError(eula)

        block = await self._clock.advance(db)
        member = Member(
            address=address,
            level=MemberLevel.ACTIVE,
            eula=eula,
            profile=profile,
            registered_at=block,
        )
        await self._repo.insert_member(db, member)
        event = MemberRegistered(member=address)
        await record_event(event, block, db)
        return member, event
