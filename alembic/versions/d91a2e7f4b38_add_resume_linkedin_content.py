"""add_resume_linkedin_content

Revision ID: d91a2e7f4b38
Revises: b43f9e6a1c07
Create Date: 2026-10-18 10:12:47.308115

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'd91a2e7f4b38'
down_revision: Union[str, None] = 'b43f9e6a1c07'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Store generated LinkedIn profile content on resumes."""
    from sqlalchemy import inspect

    # Check if column already exists (idempotent migration)
    bind = op.get_bind()
    inspector = inspect(bind)
    columns = [col['name'] for col in inspector.get_columns('resumes')]

    if 'linkedin_content' not in columns:
        op.add_column('resumes', sa.Column('linkedin_content', sa.JSON(), nullable=True))


def downgrade() -> None:
    """Remove the LinkedIn content column."""
    op.drop_column('resumes', 'linkedin_content')
