"""SQLAlchemy ORM model for the members table.

Used for schema creation in tests and type reference — persistence.py uses
raw text() SQL. Alembic migration 001 is the authoritative DDL source.
"""

from sqlalchemy import BigInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.reg_common.database import Base


class MemberORM(Base):
    __tablename__ = "members"

    address: Mapped[str] = mapped_column(String(42), primary_key=True)
    level: Mapped[str] = mapped_column(String(16), nullable=False)
    eula: Mapped[str] = mapped_column(Text, nullable=False)
    profile: Mapped[str] = mapped_column(Text, nullable=False)
    registered_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
