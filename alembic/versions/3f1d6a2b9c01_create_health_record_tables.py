"""create health record tables

Revision ID: 3f1d6a2b9c01
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from healthlog.infrastructure.database.base import TABLE_PREFIX

# revision identifiers, used by Alembic.
revision: str = '3f1d6a2b9c01'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# 记录表：表名 -> 业务字段（id、user_email、entry_date、notes、created_at 为公共列）
RECORD_TABLES = {
    'blood_pressure': [
        sa.Column('systolic', sa.Integer(), nullable=False, comment='收缩压（mmHg）'),
        sa.Column('diastolic', sa.Integer(), nullable=False, comment='舒张压（mmHg）'),
    ],
    'weight_entries': [
        sa.Column('weight', sa.Numeric(6, 2), nullable=False, comment='体重（kg）'),
    ],
    'temperature_entries': [
        sa.Column('temperature', sa.Numeric(4, 1), nullable=False, comment='体温（℃）'),
    ],
    'documents': [
        sa.Column('doc_type', sa.Text(), nullable=False, comment='文档类型'),
        sa.Column('file_name', sa.Text(), nullable=False, comment='原始文件名'),
        sa.Column('file_url', sa.Text(), nullable=False, comment='文件URL句柄'),
        sa.Column('file_size', sa.Text(), nullable=False, comment='文件字节数（文本）'),
    ],
}


def upgrade() -> None:
    users = f'{TABLE_PREFIX}users'
    op.create_table(
        users,
        sa.Column('id', sa.String(50), primary_key=True, comment='用户ID（ULID）'),
        sa.Column('email', sa.String(255), nullable=False, comment='用户邮箱（owner key）'),
        sa.Column('name', sa.Text(), nullable=True, comment='显示名'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index(f'ix_{users}_id', users, ['id'])
    op.create_index(f'ix_{users}_email', users, ['email'], unique=True)

    for name, columns in RECORD_TABLES.items():
        table = f'{TABLE_PREFIX}{name}'
        op.create_table(
            table,
            sa.Column('id', sa.String(50), primary_key=True, comment='记录ID（ULID）'),
            sa.Column('user_email', sa.String(255), nullable=False, comment='所属用户（owner key）'),
            sa.Column('entry_date', sa.Date(), nullable=False),
            *columns,
            sa.Column('notes', sa.Text(), nullable=True, comment='备注（可选）'),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        )
        op.create_index(f'ix_{table}_id', table, ['id'])
        op.create_index(f'ix_{table}_user_email', table, ['user_email'])
        op.create_index(f'ix_{table}_entry_date', table, ['entry_date'])


def downgrade() -> None:
    for name in reversed(list(RECORD_TABLES)):
        op.drop_table(f'{TABLE_PREFIX}{name}')
    op.drop_table(f'{TABLE_PREFIX}users')
