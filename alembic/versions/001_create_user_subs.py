"""Create user_subs table

Revision ID: 001
Revises:
Create Date: 2025-07-14

WHY: user_subs holds every subscription the billing total is computed from.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create user_subs with its lookup and period indexes."""
    op.create_table(
        'user_subs',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('service_name', sa.Text(), nullable=False),
        sa.Column('price', sa.BigInteger(), nullable=False),
        sa.Column('user_id', sa.Text(), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_index('ix_user_subs_id', 'user_subs', ['id'])
    op.create_index('ix_user_subs_user_id', 'user_subs', ['user_id'])
    # Overlap scans filter on both ends of the interval
    op.create_index('ix_user_subs_period', 'user_subs', ['start_date', 'end_date'])


def downgrade() -> None:
    op.drop_index('ix_user_subs_period', table_name='user_subs')
    op.drop_index('ix_user_subs_user_id', table_name='user_subs')
    op.drop_index('ix_user_subs_id', table_name='user_subs')
    op.drop_table('user_subs')
