"""Create snippets, tags and snippet_tags

Revision ID: 0001
Revises: 
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Create snippets table
    op.create_table(
        'snippets',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('language', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.CheckConstraint('length(title) > 0 AND length(title) <= 100', name='ck_snippets_title_length'),
        sa.CheckConstraint('length(content) > 0', name='ck_snippets_content_length'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_snippets_language', 'snippets', ['language'])

    # Create tags table
    op.create_table(
        'tags',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=30), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.CheckConstraint('length(name) > 0 AND length(name) <= 30', name='ck_tags_name_length'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_tags_name', 'tags', ['name'], unique=True)

    # Create snippet_tags junction table
    op.create_table(
        'snippet_tags',
        sa.Column('snippet_id', sa.Integer(), nullable=False),
        sa.Column('tag_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.ForeignKeyConstraint(['snippet_id'], ['snippets.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('snippet_id', 'tag_id')
    )
    op.create_index('ix_snippet_tags_snippet_id', 'snippet_tags', ['snippet_id'])
    op.create_index('ix_snippet_tags_tag_id', 'snippet_tags', ['tag_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_snippet_tags_tag_id', table_name='snippet_tags')
    op.drop_index('ix_snippet_tags_snippet_id', table_name='snippet_tags')
    op.drop_table('snippet_tags')
    op.drop_index('ix_tags_name', table_name='tags')
    op.drop_table('tags')
    op.drop_index('ix_snippets_language', table_name='snippets')
    op.drop_table('snippets')
