"""baseline_migration

Revision ID: 7c1e0b54d2a9
Revises: 
Create Date: 2026-09-02 10:14:27.118402

Production-safe migration: Only creates tables that do not exist yet.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '7c1e0b54d2a9'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    """Create the builder, billing and deliverable tables."""
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('email', sa.String(), nullable=True),
            sa.Column('full_name', sa.String(), nullable=True),
            sa.Column('linkedin_link', sa.String(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    if not table_exists('profiles'):
        op.create_table('profiles',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=False),
            sa.Column('phone', sa.String(), nullable=True),
            sa.Column('location', sa.String(), nullable=True),
            sa.Column('headline', sa.String(), nullable=True),
            sa.Column('about_text', sa.Text(), nullable=True),
            sa.Column('high_school', sa.String(), nullable=True),
            sa.Column('graduation_year', sa.String(), nullable=True),
            sa.Column('skills', sa.JSON(), nullable=True),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_profiles_user_id'), 'profiles', ['user_id'], unique=True)

    if not table_exists('experiences'):
        op.create_table('experiences',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=False),
            sa.Column('type', sa.String(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('organization', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('start_date', sa.String(), nullable=True),
            sa.Column('end_date', sa.String(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_experiences_user_id'), 'experiences', ['user_id'], unique=False)

    if not table_exists('certifications'):
        op.create_table('certifications',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('issuer', sa.String(), nullable=True),
            sa.Column('date_issued', sa.String(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_certifications_user_id'), 'certifications', ['user_id'], unique=False)

    if not table_exists('resumes'):
        op.create_table('resumes',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('status', sa.String(), nullable=False),
            sa.Column('shareable_link', sa.String(length=36), nullable=True),
            sa.Column('stripe_session_id', sa.String(), nullable=True),
            sa.Column('version', sa.Integer(), nullable=False),
            sa.Column('pdf_url', sa.String(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('shareable_link'),
            sa.UniqueConstraint('user_id', 'version', name='uq_resumes_user_version')
        )
        op.create_index('idx_resumes_user_status', 'resumes', ['user_id', 'status'], unique=False)
        op.create_index(op.f('ix_resumes_created_at'), 'resumes', ['created_at'], unique=False)
        op.create_index(op.f('ix_resumes_stripe_session_id'), 'resumes', ['stripe_session_id'], unique=False)
        op.create_index(op.f('ix_resumes_user_id'), 'resumes', ['user_id'], unique=False)

    if not table_exists('user_payments'):
        op.create_table('user_payments',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=False),
            sa.Column('has_paid', sa.Boolean(), nullable=False),
            sa.Column('payment_amount', sa.Numeric(precision=10, scale=2), nullable=True),
            sa.Column('stripe_payment_intent_id', sa.String(), nullable=True),
            sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_user_payments_user_id'), 'user_payments', ['user_id'], unique=True)

    if not table_exists('subscriptions'):
        op.create_table('subscriptions',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=False),
            sa.Column('stripe_subscription_id', sa.String(), nullable=False),
            sa.Column('stripe_customer_id', sa.String(), nullable=True),
            sa.Column('status', sa.String(), nullable=True),
            sa.Column('current_period_start', sa.DateTime(timezone=True), nullable=True),
            sa.Column('current_period_end', sa.DateTime(timezone=True), nullable=True),
            sa.Column('cancel_at_period_end', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('stripe_subscription_id')
        )
        op.create_index(op.f('ix_subscriptions_stripe_customer_id'), 'subscriptions', ['stripe_customer_id'], unique=False)
        op.create_index(op.f('ix_subscriptions_user_id'), 'subscriptions', ['user_id'], unique=False)

    if not table_exists('career_roadmaps'):
        op.create_table('career_roadmaps',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=False),
            sa.Column('career_name', sa.String(), nullable=False),
            sa.Column('roadmap_data', sa.JSON(), nullable=False),
            sa.Column('infographic_url', sa.String(), nullable=True),
            sa.Column('milestone_roadmap_url', sa.String(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_roadmaps_user_created', 'career_roadmaps', ['user_id', 'created_at'], unique=False)
        op.create_index(op.f('ix_career_roadmaps_created_at'), 'career_roadmaps', ['created_at'], unique=False)
        op.create_index(op.f('ix_career_roadmaps_user_id'), 'career_roadmaps', ['user_id'], unique=False)


def downgrade() -> None:
    """Drop tables in reverse dependency order."""
    for table in ('career_roadmaps', 'subscriptions', 'user_payments', 'resumes',
                  'certifications', 'experiences', 'profiles', 'users'):
        if table_exists(table):
            op.drop_table(table)
