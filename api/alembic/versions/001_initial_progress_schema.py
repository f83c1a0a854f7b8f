"""Initial schema: paragraph catalog and user progress

Revision ID: 001_initial_progress_schema
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial_progress_schema'
down_revision = None
branch_labels = None
depends_on = None

item_type_enum = sa.Enum('PARAGRAPH_QUESTION', 'IMPORTANT_WORD', name='itemtype')


def upgrade() -> None:
    """Create paragraph, paragraph_question, important_word and user_progress tables."""
    op.create_table(
        'paragraph',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=True),
        sa.Column('theme', sa.String(), nullable=True),
        sa.Column('topic', sa.String(), nullable=True),
        sa.Column('level', sa.String(), nullable=True),
        sa.Column('content', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_paragraph_theme'), 'paragraph', ['theme'], unique=False)
    op.create_index(op.f('ix_paragraph_level'), 'paragraph', ['level'], unique=False)

    op.create_table(
        'paragraph_question',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('paragraph_id', sa.String(), nullable=False),
        sa.Column('question', sa.String(), nullable=False),
        sa.Column('answer', sa.String(), nullable=False),
        sa.Column('choices', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['paragraph_id'], ['paragraph.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_paragraph_question_paragraph_id'), 'paragraph_question', ['paragraph_id'], unique=False)

    op.create_table(
        'important_word',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('paragraph_id', sa.String(), nullable=False),
        sa.Column('term', sa.String(), nullable=False),
        sa.Column('meaning', sa.String(), nullable=False),
        sa.Column('usage_sentence', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['paragraph_id'], ['paragraph.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_important_word_paragraph_id'), 'important_word', ['paragraph_id'], unique=False)

    # item_id references paragraph_question.id or important_word.id depending on item_type
    op.create_table(
        'user_progress',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('item_type', item_type_enum, nullable=False),
        sa.Column('item_id', sa.String(), nullable=False),
        sa.Column('correct_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('wrong_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('success_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('knowledge_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('last_reviewed', sa.DateTime(timezone=True), nullable=False),
        sa.Column('next_review', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'item_type', 'item_id', name='uq_user_progress_user_item')
    )
    op.create_index(op.f('ix_user_progress_user_id'), 'user_progress', ['user_id'], unique=False)
    op.create_index(op.f('ix_user_progress_item_id'), 'user_progress', ['item_id'], unique=False)
    op.create_index(op.f('ix_user_progress_next_review'), 'user_progress', ['next_review'], unique=False)


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index(op.f('ix_user_progress_next_review'), table_name='user_progress')
    op.drop_index(op.f('ix_user_progress_item_id'), table_name='user_progress')
    op.drop_index(op.f('ix_user_progress_user_id'), table_name='user_progress')
    op.drop_table('user_progress')
    op.drop_index(op.f('ix_important_word_paragraph_id'), table_name='important_word')
    op.drop_table('important_word')
    op.drop_index(op.f('ix_paragraph_question_paragraph_id'), table_name='paragraph_question')
    op.drop_table('paragraph_question')
    op.drop_index(op.f('ix_paragraph_level'), table_name='paragraph')
    op.drop_index(op.f('ix_paragraph_theme'), table_name='paragraph')
    op.drop_table('paragraph')
    item_type_enum.drop(op.get_bind(), checkfirst=True)
