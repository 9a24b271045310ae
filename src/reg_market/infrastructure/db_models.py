"""SQLAlchemy ORM models for the market tables.

Used for schema creation in tests and type reference — persistence.py uses
raw text() SQL. Alembic migration 001 is the authoritative DDL source.
"""

from sqlalchemy import BigInteger, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.reg_common.database import Base


class MarketORM(Base):
    __tablename__ = "markets"

    id: Mapped[str] = mapped_column(String(34), primary_key=True)
    token: Mapped[str] = mapped_column(String(42), nullable=False)
    terms: Mapped[str] = mapped_column(Text, nullable=False)
    meta: Mapped[str] = mapped_column(Text, nullable=False)
    maker: Mapped[str] = mapped_column(String(42), nullable=False)
    owner: Mapped[str] = mapped_column(String(42), nullable=False)
    provider_security: Mapped[int] = mapped_column(Numeric(78, 0), nullable=False)
    consumer_security: Mapped[int] = mapped_column(Numeric(78, 0), nullable=False)
    market_fee: Mapped[int] = mapped_column(Numeric(78, 0), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)


class MarketByMakerORM(Base):
    __tablename__ = "markets_by_maker"

    maker: Mapped[str] = mapped_column(String(42), primary_key=True)
    market_id: Mapped[str] = mapped_column(String(34), nullable=False)


class MarketActorORM(Base):
    __tablename__ = "market_actors"

    market_id: Mapped[str] = mapped_column(String(34), primary_key=True)
    actor: Mapped[str] = mapped_column(String(42), primary_key=True)
    actor_type: Mapped[str] = mapped_column(String(16), primary_key=True)
    joined: Mapped[int] = mapped_column(BigInteger, nullable=False)
    security: Mapped[int] = mapped_column(Numeric(78, 0), nullable=False)
    meta: Mapped[str] = mapped_column(Text, nullable=False)
