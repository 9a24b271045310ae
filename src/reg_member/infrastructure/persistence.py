"""MemberRepository — concrete implementation of MemberRepositoryProtocol.

Raw text() SQL. The members PK on address is the final guard against a
second registration slipping past the service-level check.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.reg_common.enums import MemberLevel
from src.reg_member.domain.models import Member

_GET_MEMBER_SQL = text("""
    SELECT address, level, eula, profile, registered_at
    FROM members
    WHERE address = :address
""")

_INSERT_MEMBER_SQL = text("""
    INSERT INTO members (address, level, eula, profile, registered_at)
    VALUES (:address, :level, :eula, :profile, :registered_at)
""")


def _row_to_member(row: object) -> Member:
    return Member(
        address=row.address,  # type: ignore[attr-defined]
        level=MemberLevel(row.level),  # type: ignore[attr-defined]
        eula=row.eula,  # type: ignore[attr-defined]
        profile=row.profile,  # type: ignore[attr-defined]
        registered_at=int(row.registered_at),  # type: ignore[attr-defined]
    )


class MemberRepository:
    async def get_member(self, db: AsyncSession, address: str) -> Member | None:
        result = await db.execute(_GET_MEMBER_SQL, {"address": address})
        row = result.fetchone()
        return _row_to_member(row) if row else None

    async def insert_member(self, db: AsyncSession, member: Member) -> None:
        await db.execute(
            _INSERT_MEMBER_SQL,
            {
                "address": member.address,
                "level": member.level.value,
                "eula": member.eula,
                "profile": member.profile,
                "registered_at": member.registered_at,
            },
        )
