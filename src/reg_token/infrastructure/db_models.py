"""SQLAlchemy ORM models for the token ledger tables.

Used for schema creation in tests and type reference — persistence.py uses
raw text() SQL. Alembic migration 001 is the authoritative DDL source.
"""

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from src.reg_common.database import Base


class TokenBalanceORM(Base):
    __tablename__ = "token_balances"

    address: Mapped[str] = mapped_column(String(42), primary_key=True)
    balance: Mapped[int] = mapped_column(Numeric(78, 0), nullable=False, default=0)


class TokenAllowanceORM(Base):
    __tablename__ = "token_allowances"

    owner: Mapped[str] = mapped_column(String(42), primary_key=True)
    spender: Mapped[str] = mapped_column(String(42), primary_key=True)
    amount: Mapped[int] = mapped_column(Numeric(78, 0), nullable=False, default=0)
