"""allow duplicate card keys, add product pricing flags

Revision ID: 20261009_allow_duplicate_card_keys
Revises: 20261001_init
Create Date: 2026-10-09 14:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261009_allow_duplicate_card_keys"
down_revision: Union[str, Sequence[str], None] = "20261001_init"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("DROP INDEX IF EXISTS cards_product_id_card_key_uq")
    op.add_column("products", sa.Column("compare_at_price", sa.Numeric(10, 2), nullable=True))
    op.add_column(
        "products",
        sa.Column("is_hot", sa.Boolean(), nullable=False, server_default=sa.text("false")),
    )
    op.alter_column("products", "is_hot", server_default=None)


def downgrade() -> None:
    op.drop_column("products", "is_hot")
    op.drop_column("products", "compare_at_price")
    # Recreating the unique index fails while duplicate keys exist; clean those up first.
    op.create_index("cards_product_id_card_key_uq", "cards", ["product_id", "card_key"], unique=True)
