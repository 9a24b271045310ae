"""TokenService — holder-facing calls on the escrow ledger.

Approvals and transfers go through the registry's write gate so they never
interleave with a join that is pulling a deposit from the same holder.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.reg_common.codecs import normalize_address
from src.reg_common.database import WriteGate, write_gate
from src.reg_token.domain.repository import AssetEscrowProtocol
from src.reg_token.infrastructure.persistence import TokenLedger

logger = logging.getLogger(__name__)


class TokenService:
    def __init__(
        self,
        ledger: AssetEscrowProtocol | None = None,
        gate: WriteGate | None = None,
    ) -> None:
        self._ledger: AssetEscrowProtocol = ledger or TokenLedger()
        self._gate = gate or write_gate

    async def balance_of(self, db: AsyncSession, address: str) -> int:
        return await self._ledger.balance_of(db, normalize_address(address))

    async def allowance(self, db: AsyncSession, owner: str, spender: str) -> int:
        return await self._ledger.allowance(
            db, normalize_address(owner), normalize_address(spender)
        )

    async def approve(
        self, db: AsyncSession, caller: str, spender: str, amount: int
    ) -> int:
        """Set the allowance of ``spender`` over the caller's balance."""
        caller = normalize_address(caller)
        spender = normalize_address(spender)
        async with self._gate.transaction(db):
            await self._ledger.approve(db, caller, spender, amount)
        return amount

    async def transfer(
        self, db: AsyncSession, caller: str, recipient: str, amount: int
    ) -> int:
        """Move ``amount`` from the caller to ``recipient``; returns the caller's new balance."""
        caller = normalize_address(caller)
        recipient = normalize_address(recipient)
        async with self._gate.transaction(db):
            await self._ledger.transfer(db, caller, recipient, amount)
            balance = await self._ledger.balance_of(db, caller)
        logger.info("Transfer: %s -> %s amount=%d", caller, recipient, amount)
        return balance
