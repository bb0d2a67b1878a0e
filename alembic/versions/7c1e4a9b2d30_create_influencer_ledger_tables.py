"""create_influencer_ledger_tables

Revision ID: 7c1e4a9b2d30
Revises:
Create Date: 2026-10-18 09:12:44.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = '7c1e4a9b2d30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('referral_codes',
    sa.Column('code', sa.String(length=64), nullable=False),
    sa.Column('total_signups', sa.Integer(), nullable=False),
    sa.Column('total_purchases', sa.Integer(), nullable=False),
    sa.Column('total_revenue', sa.Numeric(precision=14, scale=4), server_default=sa.text('0'), nullable=False),
    sa.Column('commission_rate', sa.Numeric(precision=5, scale=4), server_default=sa.text('0.20'), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('last_purchase_at', sa.DateTime(timezone=True), nullable=True),
    sa.CheckConstraint('total_purchases >= 0', name='ck_referral_codes_purchases_non_negative'),
    sa.CheckConstraint('total_signups >= 0', name='ck_referral_codes_signups_non_negative'),
    sa.CheckConstraint('total_revenue >= 0', name='ck_referral_codes_revenue_non_negative'),
    sa.CheckConstraint('commission_rate >= 0 AND commission_rate <= 1', name='ck_referral_codes_commission_rate_range'),
    sa.PrimaryKeyConstraint('code')
    )
    op.create_table('referral_purchases',
    sa.Column('id', sa.UUID(), server_default=sa.text('gen_random_uuid()'), nullable=False),
    sa.Column('code', sa.String(length=64), nullable=False),
    sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
    sa.Column('product_id', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
    sa.Column('amount', sa.Numeric(precision=14, scale=4), nullable=False),
    sa.Column('commission', sa.Numeric(precision=14, scale=4), nullable=False),
    sa.Column('event_type', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['code'], ['referral_codes.code'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_referral_purchases_code_created', 'referral_purchases', ['code', 'created_at'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_referral_purchases_code_created', table_name='referral_purchases')
    op.drop_table('referral_purchases')
    op.drop_table('referral_codes')
