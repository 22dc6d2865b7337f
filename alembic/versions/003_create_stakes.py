"""003: create stakes table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE stakes (
            id              VARCHAR(64)     PRIMARY KEY,
            market_id       VARCHAR(64)     NOT NULL REFERENCES markets(id),
            bettor_id       VARCHAR(128)    NOT NULL,
            side            VARCHAR(8)      NOT NULL,
            amount          BIGINT          NOT NULL,
            placed_at       TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            quoted_odds     NUMERIC(16, 4)  NOT NULL,
            quoted_payout   BIGINT          NOT NULL,
            payout          BIGINT,
            settled_at      TIMESTAMPTZ,
            CONSTRAINT ck_stakes_side   CHECK (side IN ('YES', 'NO')),
            CONSTRAINT ck_stakes_amount CHECK (amount > 0),
            CONSTRAINT ck_stakes_payout CHECK (payout IS NULL OR payout >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_stakes_market ON stakes (market_id, placed_at, id);")
    op.execute("CREATE INDEX idx_stakes_bettor ON stakes (bettor_id, placed_at DESC);")
    op.execute("COMMENT ON TABLE stakes IS 'Immutable stake records; payout written once at settlement';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS stakes CASCADE;")
