"""add_resume_generation_status

Revision ID: b43f9e6a1c07
Revises: 7c1e0b54d2a9
Create Date: 2026-09-19 16:41:03.552190

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'b43f9e6a1c07'
down_revision: Union[str, None] = '7c1e0b54d2a9'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Track the deliverable pipeline state on resumes."""
    from sqlalchemy import inspect

    # Check if column already exists (idempotent migration)
    bind = op.get_bind()
    inspector = inspect(bind)
    columns = [col['name'] for col in inspector.get_columns('resumes')]

    if 'generation_status' not in columns:
        op.add_column('resumes', sa.Column('generation_status', sa.String(), nullable=False, server_default='pending'))

    # Rows that already carry a PDF were published before the column existed
    op.execute("UPDATE resumes SET generation_status = 'published' WHERE pdf_url IS NOT NULL")


def downgrade() -> None:
    """Remove the generation status column."""
    op.drop_column('resumes', 'generation_status')
