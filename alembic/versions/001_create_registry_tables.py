"""001: create registry tables

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE chain_state (
            id              INT             PRIMARY KEY,
            block_number    BIGINT          NOT NULL,
            CONSTRAINT ck_chain_state_singleton CHECK (id = 1),
            CONSTRAINT ck_chain_state_block_gte_0 CHECK (block_number >= 0)
        );
    """)
    op.execute("INSERT INTO chain_state (id, block_number) VALUES (1, 0);")

    op.execute("""
        CREATE TABLE members (
            address         VARCHAR(42)     PRIMARY KEY,
            level           VARCHAR(16)     NOT NULL,
            eula            TEXT            NOT NULL,
            profile         TEXT            NOT NULL,
            registered_at   BIGINT          NOT NULL,
            CONSTRAINT ck_members_level CHECK (
                level IN ('NULL', 'ACTIVE', 'VERIFIED', 'RETIRED', 'PENALTY', 'BLOCKED')
            )
        );
    """)

    op.execute("""
        CREATE TABLE markets (
            id                  VARCHAR(34)     PRIMARY KEY,
            token               VARCHAR(42)     NOT NULL,
            terms               TEXT            NOT NULL,
            meta                TEXT            NOT NULL,
            maker               VARCHAR(42)     NOT NULL,
            owner               VARCHAR(42)     NOT NULL REFERENCES members (address),
            provider_security   NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            consumer_security   NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            market_fee          NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            status              VARCHAR(16)     NOT NULL,
            created_at          BIGINT          NOT NULL,
            CONSTRAINT ck_markets_status CHECK (status IN ('NULL', 'ACTIVE', 'CLOSED')),
            CONSTRAINT ck_markets_security_gte_0 CHECK (
                provider_security >= 0 AND consumer_security >= 0
            ),
            CONSTRAINT ck_markets_fee_gte_0 CHECK (market_fee >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_markets_owner ON markets (owner);")

    op.execute("""
        CREATE TABLE markets_by_maker (
            maker           VARCHAR(42)     PRIMARY KEY,
            market_id       VARCHAR(34)     NOT NULL REFERENCES markets (id)
        );
    """)

    op.execute("""
        CREATE TABLE market_actors (
            market_id       VARCHAR(34)     NOT NULL REFERENCES markets (id),
            actor           VARCHAR(42)     NOT NULL REFERENCES members (address),
            actor_type      VARCHAR(16)     NOT NULL,
            joined          BIGINT          NOT NULL,
            security        NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            meta            TEXT            NOT NULL,
            PRIMARY KEY (market_id, actor, actor_type),
            CONSTRAINT ck_market_actors_type CHECK (actor_type IN ('PROVIDER', 'CONSUMER')),
            CONSTRAINT ck_market_actors_joined_gt_0 CHECK (joined > 0)
        );
    """)

    op.execute("""
        CREATE TABLE token_balances (
            address         VARCHAR(42)     PRIMARY KEY,
            balance         NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            CONSTRAINT ck_token_balances_gte_0 CHECK (balance >= 0)
        );
    """)

    op.execute("""
        CREATE TABLE token_allowances (
            owner           VARCHAR(42)     NOT NULL,
            spender         VARCHAR(42)     NOT NULL,
            amount          NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            PRIMARY KEY (owner, spender),
            CONSTRAINT ck_token_allowances_gte_0 CHECK (amount >= 0)
        );
    """)

    op.execute("""
        CREATE TABLE registry_events (
            id              BIGSERIAL       PRIMARY KEY,
            block_number    BIGINT          NOT NULL,
            event_type      VARCHAR(32)     NOT NULL,
            payload         JSONB           NOT NULL,
            CONSTRAINT ck_registry_events_type CHECK (
                event_type IN ('MemberRegistered', 'MarketCreated', 'ActorJoined')
            )
        );
    """)
    op.execute("CREATE INDEX idx_registry_events_block ON registry_events (block_number);")
    op.execute("COMMENT ON TABLE registry_events IS 'Committed registry events, in commit order';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS registry_events CASCADE;")
    op.execute("DROP TABLE IF EXISTS token_allowances CASCADE;")
    op.execute("DROP TABLE IF EXISTS token_balances CASCADE;")
    op.execute("DROP TABLE IF EXISTS market_actors CASCADE;")
    op.execute("DROP TABLE IF EXISTS markets_by_maker CASCADE;")
    op.execute("DROP TABLE IF EXISTS markets CASCADE;")
    op.execute("DROP TABLE IF EXISTS members CASCADE;")
    op.execute("DROP TABLE IF EXISTS chain_state CASCADE;")
