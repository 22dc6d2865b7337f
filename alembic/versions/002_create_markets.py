"""002: create markets table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE markets (
            id                      VARCHAR(64)     PRIMARY KEY,
            title                   VARCHAR(500)    NOT NULL,
            description             TEXT,
            city                    VARCHAR(100),
            province                VARCHAR(100),
            weather_condition       VARCHAR(100),
            crop                    VARCHAR(100),
            deadline                TIMESTAMPTZ     NOT NULL,
            status                  VARCHAR(16)     NOT NULL DEFAULT 'OPEN',
            yes_pool                BIGINT          NOT NULL DEFAULT 0,
            no_pool                 BIGINT          NOT NULL DEFAULT 0,
            outcome                 VARCHAR(8),
            charity_fee_bps         INT             NOT NULL DEFAULT 100,
            charity_contribution    BIGINT          NOT NULL DEFAULT 0,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            closed_at               TIMESTAMPTZ,
            settled_at              TIMESTAMPTZ,
            cancelled_at            TIMESTAMPTZ,
            CONSTRAINT ck_markets_status
                CHECK (status IN ('OPEN', 'CLOSED', 'SETTLED', 'CANCELLED')),
            CONSTRAINT ck_markets_outcome CHECK (outcome IS NULL OR outcome IN ('YES', 'NO')),
            CONSTRAINT ck_markets_outcome_settled
                CHECK ((status = 'SETTLED') = (outcome IS NOT NULL)),
            CONSTRAINT ck_markets_pools CHECK (yes_pool >= 0 AND no_pool >= 0),
            CONSTRAINT ck_markets_fee_bps CHECK (charity_fee_bps >= 0 AND charity_fee_bps < 10000),
            CONSTRAINT ck_markets_charity_cap CHECK (
                charity_contribution >= 0
                AND charity_contribution * 10000 <= (yes_pool + no_pool) * charity_fee_bps
            )
        );
    """)
    op.execute("CREATE INDEX idx_markets_status_created ON markets (status, created_at DESC, id DESC);")
    op.execute("CREATE INDEX idx_markets_open_deadline ON markets (deadline) WHERE status = 'OPEN';")
    op.execute("""
        CREATE TRIGGER trg_markets_updated_at
            BEFORE UPDATE ON markets
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE markets IS 'Binary weather markets with YES/NO pari-mutuel pools (cents)';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS markets CASCADE;")
