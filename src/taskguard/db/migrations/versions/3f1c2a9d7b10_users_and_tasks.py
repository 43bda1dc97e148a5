"""users and tasks

Learn: Initial schema. tasks.user_id cascades on delete so removing an
account removes everything it owns, even for raw SQL deletes that bypass
the ORM cascade.

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-18 09:12:44.102311
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sqlite_autoincrement=True,
    )
    op.create_table(
        'tasks',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.String(length=1000), nullable=True),
        sa.Column(
            'status',
            sa.Enum('PENDING', 'IN_PROGRESS', 'COMPLETED', name='task_status'),
            nullable=False,
        ),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tasks_user_created', 'tasks', ['user_id', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_tasks_user_created', table_name='tasks')
    op.drop_table('tasks')
    op.drop_table('users')
    sa.Enum(name='task_status').drop(op.get_bind(), checkfirst=True)
