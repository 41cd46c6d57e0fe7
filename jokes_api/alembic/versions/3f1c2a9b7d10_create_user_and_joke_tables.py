"""Create user and joke tables

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-19 10:02:41.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'username',
            sa.String(120).with_variant(sa.String(120, collation='utf8mb4_bin'), 'mysql'),
            nullable=False,
        ),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_user_username', 'user', ['username'], unique=True)

    op.create_table(
        'joke',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('jokester_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('content', sa.Text, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['jokester_id'],
            ['user.id'],
            name='joke_jokester_id_fk',
            ondelete='CASCADE',
        ),
    )
    op.create_index('ix_joke_jokester_id', 'joke', ['jokester_id'])


def downgrade() -> None:
    op.drop_index('ix_joke_jokester_id', table_name='joke')
    op.drop_table('joke')
    op.drop_index('ix_user_username', table_name='user')
    op.drop_table('user')
