"""AssetEscrow Protocol — the token ledger the registry pulls deposits through.

The registry only ever calls ``transfer_from``; the other primitives exist
so holders can fund and approve before joining a market.
Unit tests inject a mock that conforms to this Protocol.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession


class AssetEscrowProtocol(Protocol):
    async def balance_of(self, db: AsyncSession, address: str) -> int: ...

    async def allowance(self, db: AsyncSession, owner: str, spender: str) -> int: ...

    async def approve(
        self, db: AsyncSession, owner: str, spender: str, amount: int
    ) -> bool: ...

    async def transfer(
        self, db: AsyncSession, src: str, dst: str, amount: int
    ) -> bool: ...

    async def transfer_from(
        self, db: AsyncSession, spender: str, src: str, dst: str, amount: int
    ) -> bool: ...
