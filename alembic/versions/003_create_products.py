"""003: create products table

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
        CREATE TABLE products (
            id                    VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            seller_id             VARCHAR(64)     NOT NULL REFERENCES users (id),
            title                 VARCHAR(200)    NOT NULL,
            description           TEXT            NOT NULL,
            category              VARCHAR(64)     NOT NULL,
            condition             VARCHAR(64)     NOT NULL,
            starting_price        BIGINT          NOT NULL,
            current_price         BIGINT          NOT NULL,
            end_time              TIMESTAMPTZ     NOT NULL,
            ai_status             VARCHAR(20)     NOT NULL DEFAULT 'pending',
            ai_message            VARCHAR(1000),
            ai_verified           BOOLEAN         NOT NULL DEFAULT FALSE,
            ai_verified_at        TIMESTAMPTZ,
            ai_status_updated_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            video_urls            JSONB           NOT NULL DEFAULT '[]'::jsonb,
            created_at            TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at            TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_products_starting_price_gt_0 CHECK (starting_price > 0),
            CONSTRAINT ck_products_price_floor CHECK (current_price >= starting_price),
            CONSTRAINT ck_products_ai_status CHECK (
                ai_status IN ('pending', 'processing', 'accepted', 'rejected', 'error')
            )
        );
    """)
    op.execute("""
        CREATE INDEX idx_products_active
        ON products (created_at DESC)
        WHERE ai_status = 'accepted';
    """)
    op.execute("CREATE INDEX idx_products_seller ON products (seller_id, created_at DESC);")
    op.execute("""
        CREATE INDEX idx_products_unfinished_verification
        ON products (ai_status_updated_at)
        WHERE ai_status IN ('pending', 'processing');
    """)
    op.execute("""
        CREATE TRIGGER trg_products_updated_at
            BEFORE UPDATE ON products
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE products IS 'Auction listings, prices in cents';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS products CASCADE;")
