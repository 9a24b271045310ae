"""SQLAlchemy ORM models for the shared chain_state and registry_events tables.

Used to build the schema in tests (Base.metadata.create_all) and for type
reference — repositories use raw text() SQL.
Alembic migration 001 is the authoritative PostgreSQL DDL.
"""

from sqlalchemy import JSON, BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.reg_common.database import Base


class ChainStateORM(Base):
    __tablename__ = "chain_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    block_number: Mapped[int] = mapped_column(BigInteger, nullable=False)


class RegistryEventORM(Base):
    __tablename__ = "registry_events"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    block_number: Mapped[int] = mapped_column(BigInteger, nullable=False)
    event_type: Mapped[str] = mapped_column(String(32), nullable=False)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)
