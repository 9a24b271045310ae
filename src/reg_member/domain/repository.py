"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.reg_member.domain.models import Member


class MemberRepositoryProtocol(Protocol):
    async def get_member(self, db: AsyncSession, address: str) -> Member | None: ...

    async def insert_member(self, db: AsyncSession, member: Member) -> None: ...
