"""004: create bids table

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
        CREATE TABLE bids (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            product_id      VARCHAR(64)     NOT NULL REFERENCES products (id),
            bidder_id       VARCHAR(64)     NOT NULL REFERENCES users (id),
            amount          BIGINT          NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_bids_amount_gt_0 CHECK (amount > 0)
        );
    """)
    op.execute("CREATE INDEX idx_bids_product_amount ON bids (product_id, amount DESC);")
    op.execute("CREATE INDEX idx_bids_bidder_time ON bids (bidder_id, created_at DESC);")
    op.execute("COMMENT ON TABLE bids IS 'Bid history, append-only';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bids CASCADE;")
