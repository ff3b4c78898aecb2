"""005: create transactions table

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transactions (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users (id),
            type            VARCHAR(20)     NOT NULL,
            amount          BIGINT          NOT NULL,
            status          VARCHAR(20)     NOT NULL DEFAULT 'completed',
            balance_after   BIGINT          NOT NULL,
            reference_type  VARCHAR(30),
            reference_id    VARCHAR(64),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transactions_type CHECK (type IN ('DEPOSIT', 'BID')),
            CONSTRAINT ck_transactions_sign CHECK (
                (type = 'DEPOSIT' AND amount > 0) OR (type = 'BID' AND amount < 0)
            ),
            CONSTRAINT ck_transactions_balance_gte_0 CHECK (balance_after >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_transactions_user ON transactions (user_id, id DESC);")
    op.execute("""
        CREATE INDEX idx_transactions_reference
        ON transactions (reference_type, reference_id)
        WHERE reference_id IS NOT NULL;
    """)
    op.execute(
        "COMMENT ON TABLE transactions IS 'Wallet ledger, append-only, signed amounts in cents';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
