"""create_timetable

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table('timetable'):
        op.create_table('timetable',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('course', sa.String(length=255), nullable=True),
            sa.Column('group', sa.String(length=255), nullable=False),
            sa.Column('date', sa.DateTime(timezone=True), nullable=False),
            sa.Column('time', sa.String(length=64), nullable=False),
            sa.Column('subject', sa.String(length=512), nullable=False),
            sa.Column('lesson_type', sa.String(length=255), nullable=True),
            sa.Column('teacher_name', sa.String(length=255), nullable=True),
            sa.Column('lesson_format', sa.String(length=255), nullable=True),
            sa.Column('location', sa.String(length=512), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_timetable_id'), 'timetable', ['id'], unique=False)
        op.create_index(op.f('ix_timetable_group'), 'timetable', ['group'], unique=False)
        op.create_index(op.f('ix_timetable_date'), 'timetable', ['date'], unique=False)
        op.create_index('ix_timetable_group_date', 'timetable', ['group', 'date'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if inspector.has_table('timetable'):
        op.drop_index('ix_timetable_group_date', table_name='timetable')
        op.drop_index(op.f('ix_timetable_date'), table_name='timetable')
        op.drop_index(op.f('ix_timetable_group'), table_name='timetable')
        op.drop_index(op.f('ix_timetable_id'), table_name='timetable')
        op.drop_table('timetable')
