"""initial schema

Revision ID: 3c7a1e5d9b20
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c7a1e5d9b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('assets',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('class', sa.String(), nullable=False),
    sa.Column('sub_class', sa.String(), nullable=False),
    sa.Column('isin', sa.String(), nullable=True),
    sa.Column('account_entity', sa.String(), nullable=False),
    sa.Column('account_bank', sa.String(), nullable=False),
    sa.Column('beneficiary', sa.String(), nullable=False),
    sa.Column('origin_currency', sa.String(length=3), nullable=False),
    sa.Column('quantity', sa.Numeric(precision=20, scale=8), nullable=False),
    sa.Column('price', sa.Numeric(precision=20, scale=8), nullable=True),
    sa.Column('factor', sa.Numeric(precision=6, scale=4), nullable=True),
    sa.Column('maturity_date', sa.Date(), nullable=True),
    sa.Column('ytw', sa.Numeric(precision=10, scale=6), nullable=True),
    sa.Column('pe_company_value', sa.Numeric(precision=20, scale=2), nullable=True),
    sa.Column('pe_holding_percentage', sa.Numeric(precision=9, scale=6), nullable=True),
    sa.Column('is_cash_equivalent', sa.Boolean(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_assets_name'), 'assets', ['name'], unique=False)

    op.create_table('fx_rates',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('currency', sa.String(length=3), nullable=False),
    sa.Column('to_usd_rate', sa.Numeric(precision=18, scale=8), nullable=False),
    sa.Column('to_ils_rate', sa.Numeric(precision=18, scale=8), nullable=False),
    sa.Column('source', sa.String(), nullable=False),
    sa.Column('is_manual_override', sa.Boolean(), nullable=False),
    sa.Column('last_updated', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_fx_rates_currency'), 'fx_rates', ['currency'], unique=True)

    op.create_table('portfolio_snapshots',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('snapshot_date', sa.DateTime(), nullable=True),
    sa.Column('assets', sa.JSON(), nullable=False),
    sa.Column('fx_rates', sa.JSON(), nullable=False),
    sa.Column('total_value_usd', sa.Numeric(precision=20, scale=2), nullable=False),
    sa.Column('liquid_fixed_income_value_usd', sa.Numeric(precision=20, scale=2), nullable=False),
    sa.Column('private_equity_value_usd', sa.Numeric(precision=20, scale=2), nullable=False),
    sa.Column('real_estate_value_usd', sa.Numeric(precision=20, scale=2), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )

    op.create_table('limited_liquidity_assets',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('asset_name', sa.String(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_limited_liquidity_assets_asset_name'), 'limited_liquidity_assets', ['asset_name'], unique=True)

    op.create_table('asset_liquidation_settings',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('asset_name', sa.String(), nullable=False),
    sa.Column('liquidation_year', sa.String(length=8), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_asset_liquidation_settings_asset_name'), 'asset_liquidation_settings', ['asset_name'], unique=True)

    op.create_table('projection_settings',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('key', sa.String(), nullable=False),
    sa.Column('value', sa.Text(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_projection_settings_key'), 'projection_settings', ['key'], unique=True)

    op.create_table('account_update_tracker',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('account_entity', sa.String(), nullable=False),
    sa.Column('account_bank', sa.String(), nullable=False),
    sa.Column('last_updated', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('account_entity', 'account_bank', name='uix_account_entity_bank')
    )

    op.create_table('pending_assets',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('asset_class', sa.String(), nullable=False),
    sa.Column('value_usd', sa.Numeric(precision=20, scale=2), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )

    op.create_table('sessions',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('session_token', sa.String(length=64), nullable=False),
    sa.Column('expires_at', sa.DateTime(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_sessions_session_token'), 'sessions', ['session_token'], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_sessions_session_token'), table_name='sessions')
    op.drop_table('sessions')
    op.drop_table('pending_assets')
    op.drop_table('account_update_tracker')
    op.drop_index(op.f('ix_projection_settings_key'), table_name='projection_settings')
    op.drop_table('projection_settings')
    op.drop_index(op.f('ix_asset_liquidation_settings_asset_name'), table_name='asset_liquidation_settings')
    op.drop_table('asset_liquidation_settings')
    op.drop_index(op.f('ix_limited_liquidity_assets_asset_name'), table_name='limited_liquidity_assets')
    op.drop_table('limited_liquidity_assets')
    op.drop_table('portfolio_snapshots')
    op.drop_index(op.f('ix_fx_rates_currency'), table_name='fx_rates')
    op.drop_table('fx_rates')
    op.drop_index(op.f('ix_assets_name'), table_name='assets')
    op.drop_table('assets')
