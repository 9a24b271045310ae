"""TokenLedger — SQL implementation of AssetEscrowProtocol.

Runs inside the caller's transaction: the registry's join and the deposit
pull commit or roll back together. Checks happen before any write, so a
failed transfer leaves balances and allowances untouched even before the
surrounding rollback.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.reg_common.errors import (
    InsufficientApprovalError,
    InsufficientBalanceError,
    InternalError,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_GET_BALANCE_SQL = text("""
    SELECT balance FROM token_balances WHERE address = :address
""")

_CREDIT_SQL = text("""
    INSERT INTO token_balances (address, balance)
    VALUES (:address, :amount)
    ON CONFLICT (address) DO UPDATE
        SET balance = token_balances.balance + excluded.balance
""")

_DEBIT_SQL = text("""
    UPDATE token_balances
    SET balance = balance - :amount
    WHERE address = :address AND balance >= :amount
    RETURNING balance
""")

_GET_ALLOWANCE_SQL = text("""
    SELECT amount FROM token_allowances
    WHERE owner = :owner AND spender = :spender
""")

_SET_ALLOWANCE_SQL = text("""
    INSERT INTO token_allowances (owner, spender, amount)
    VALUES (:owner, :spender, :amount)
    ON CONFLICT (owner, spender) DO UPDATE
        SET amount = excluded.amount
""")

_SPEND_ALLOWANCE_SQL = text("""
    UPDATE token_allowances
    SET amount = amount - :amount
    WHERE owner = :owner AND spender = :spender AND amount >= :amount
    RETURNING amount
""")


class TokenLedger:
    """Concrete escrow — balances and allowances in two tables."""

    async def balance_of(self, db: AsyncSession, address: str) -> int:
        result = await db.execute(_GET_BALANCE_SQL, {"address": address})
        value = result.scalar_one_or_none()
        return int(value) if value is not None else 0

    async def allowance(self, db: AsyncSession, owner: str, spender: str) -> int:
        result = await db.execute(
            _GET_ALLOWANCE_SQL, {"owner": owner, "spender": spender}
        )
        value = result.scalar_one_or_none()
        return int(value) if value is not None else 0

    async def deposit(self, db: AsyncSession, address: str, amount: int) -> int:
        """Credit newly issued tokens to ``address``; returns the new balance."""
        await db.execute(_CREDIT_SQL, {"address": address, "amount": amount})
        return await self.balance_of(db, address)

    async def approve(
        self, db: AsyncSession, owner: str, spender: str, amount: int
    ) -> bool:
        await db.execute(
            _SET_ALLOWANCE_SQL, {"owner": owner, "spender": spender, "amount": amount}
        )
        logger.info("Approval set: owner=%s spender=%s amount=%d", owner, spender, amount)
        return True

    async def transfer(
        self, db: AsyncSession, src: str, dst: str, amount: int
    ) -> bool:
        available = await self.balance_of(db, src)
        if available < amount:
            raise InsufficientBalanceError(amount, available)
        await self._move(db, src, dst, amount)
        return True

    async def transfer_from(
        self, db: AsyncSession, spender: str, src: str, dst: str, amount: int
    ) -> bool:
        approved = await self.allowance(db, src, spender)
        if approved < amount:
            raise InsufficientApprovalError(amount, approved)
        available = await self.balance_of(db, src)
        if available < amount:
            raise InsufficientBalanceError(amount, available)
        if amount == 0:
            return True

        result = await db.execute(
            _SPEND_ALLOWANCE_SQL, {"owner": src, "spender": spender, "amount": amount}
        )
        if result.fetchone() is None:
            raise InternalError("Allowance changed between check and spend")
        await self._move(db, src, dst, amount)
        return True

    async def _move(self, db: AsyncSession, src: str, dst: str, amount: int) -> None:
        if amount == 0:
            return
        result = await db.execute(_DEBIT_SQL, {"address": src, "amount": amount})
        if result.fetchone() is None:
            raise InternalError("Balance changed between check and debit")
        await db.execute(_CREDIT_SQL, {"address": dst, "amount": amount})
        logger.debug("Moved %d from %s to %s", amount, src, dst)
