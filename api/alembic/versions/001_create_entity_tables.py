"""create_entity_tables

Revision ID: 001
Revises:
Create Date: 2026-03-02 10:12:41.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _sync_columns(with_profile: bool = True) -> list:
    columns = [
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.String(length=40), nullable=False),
        sa.Column('updated_at', sa.String(length=40), nullable=False),
        sa.Column('deleted_at', sa.String(length=40), nullable=True),
    ]
    if with_profile:
        columns.append(sa.Column('profile_id', sa.String(length=64), nullable=False))
    return columns


def _create(name: str, *columns, with_profile: bool = True) -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    if inspector.has_table(name):
        return

    op.create_table(
        name,
        *_sync_columns(with_profile),
        *columns,
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f(f'ix_{name}_updated_at'), name, ['updated_at'], unique=False)
    op.create_index(op.f(f'ix_{name}_deleted_at'), name, ['deleted_at'], unique=False)
    if with_profile:
        op.create_index(op.f(f'ix_{name}_profile_id'), name, ['profile_id'], unique=False)


def upgrade() -> None:
    """Upgrade schema."""
    _create(
        'profiles',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('password_hint', sa.String(length=255), nullable=True),
        sa.Column('last_accessed_at', sa.String(length=40), nullable=True),
        with_profile=False,
    )
    _create(
        'accounts',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('budget_type', sa.String(length=20), nullable=True),
        sa.Column('account_type', sa.String(length=50), nullable=True),
        sa.Column('balance', sa.Float(), nullable=True),
        sa.Column('interest_rate', sa.Float(), nullable=True),
        sa.Column('credit_limit', sa.Float(), nullable=True),
        sa.Column('payment_due_date', sa.String(length=40), nullable=True),
        sa.Column('minimum_payment', sa.Float(), nullable=True),
        sa.Column('website_url', sa.String(length=512), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    _create(
        'categories',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('budget_type', sa.String(length=20), nullable=True),
        sa.Column('bucket_id', sa.String(length=64), nullable=True),
        sa.Column('category_group', sa.String(length=100), nullable=True),
        sa.Column('monthly_budget', sa.Float(), nullable=True),
        sa.Column('is_fixed_expense', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Integer(), nullable=True),
        sa.Column('tax_deductible_by_default', sa.Integer(), nullable=True),
        sa.Column('is_income_category', sa.Integer(), nullable=True),
        sa.Column('exclude_from_budget', sa.Integer(), nullable=True),
        sa.Column('icon', sa.String(length=50), nullable=True),
    )
    _create(
        'transactions',
        sa.Column('date', sa.String(length=40), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('category_id', sa.String(length=64), nullable=True),
        sa.Column('bucket_id', sa.String(length=64), nullable=True),
        sa.Column('budget_type', sa.String(length=20), nullable=True),
        sa.Column('account_id', sa.String(length=64), nullable=True),
        sa.Column('to_account_id', sa.String(length=64), nullable=True),
        sa.Column('linked_transaction_id', sa.String(length=64), nullable=True),
        sa.Column('project_id', sa.String(length=64), nullable=True),
        sa.Column('income_source_id', sa.String(length=64), nullable=True),
        sa.Column('tax_deductible', sa.Integer(), nullable=True),
        sa.Column('reconciled', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    op.create_index(op.f('ix_transactions_date'), 'transactions', ['date'], unique=False)
    _create(
        'income_sources',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('budget_type', sa.String(length=20), nullable=True),
        sa.Column('income_type', sa.String(length=50), nullable=True),
        sa.Column('category_id', sa.String(length=64), nullable=True),
        sa.Column('expected_amount', sa.Float(), nullable=True),
        sa.Column('frequency', sa.String(length=50), nullable=True),
        sa.Column('next_expected_date', sa.String(length=40), nullable=True),
        sa.Column('client_source', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Integer(), nullable=True),
    )
    _create(
        'projects',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('budget_type', sa.String(length=20), nullable=True),
        sa.Column('project_type_id', sa.String(length=64), nullable=True),
        sa.Column('status_id', sa.String(length=64), nullable=True),
        sa.Column('income_source_id', sa.String(length=64), nullable=True),
        sa.Column('budget', sa.Float(), nullable=True),
        sa.Column('date_created', sa.String(length=40), nullable=True),
        sa.Column('date_completed', sa.String(length=40), nullable=True),
        sa.Column('commission_paid', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    _create(
        'project_types',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('budget_type', sa.String(length=20), nullable=True),
        sa.Column('allowed_statuses', sa.Text(), nullable=True),
    )
    _create(
        'project_statuses',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
    )


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    for name in (
        'project_statuses',
        'project_types',
        'projects',
        'income_sources',
        'transactions',
        'categories',
        'accounts',
        'profiles',
    ):
        if inspector.has_table(name):
            op.drop_table(name)
