"""004: create charity_ledger table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE charity_ledger (
            id                  VARCHAR(64)     PRIMARY KEY,
            source_market_id    VARCHAR(64)     REFERENCES markets(id),
            amount              BIGINT          NOT NULL,
            status              VARCHAR(16)     NOT NULL DEFAULT 'PENDING',
            recipient_name      VARCHAR(200),
            recipient_address   VARCHAR(200),
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            distributed_at      TIMESTAMPTZ,
            CONSTRAINT ck_charity_amount CHECK (amount > 0),
            CONSTRAINT ck_charity_status CHECK (status IN ('PENDING', 'DISTRIBUTED')),
            CONSTRAINT ck_charity_distributed
                CHECK ((status = 'DISTRIBUTED') = (distributed_at IS NOT NULL))
        );
    """)
    # one fee entry per settled market; manual donations carry no market
    op.execute("""
        CREATE UNIQUE INDEX uq_charity_source_market
            ON charity_ledger (source_market_id) WHERE source_market_id IS NOT NULL;
    """)
    op.execute("CREATE INDEX idx_charity_status_created ON charity_ledger (status, created_at DESC);")
    op.execute("COMMENT ON TABLE charity_ledger IS 'Append-only charity fee ledger (cents)';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS charity_ledger CASCADE;")
