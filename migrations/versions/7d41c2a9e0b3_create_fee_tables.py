"""create guardians, payments and activity_logs

Revision ID: 7d41c2a9e0b3
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "7d41c2a9e0b3"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'guardians',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('student_name', sa.String(length=120), nullable=False),
        sa.Column('student_grade', sa.String(length=60), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='guardian'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_guardians_email', 'guardians', ['email'], unique=True)

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('guardian_id', sa.Integer(), sa.ForeignKey('guardians.id'), nullable=False),
        sa.Column('month', sa.String(length=20), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('paid', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('payment_date', sa.DateTime(), nullable=True),
        sa.Column('receipt_url', sa.String(length=512), nullable=True),
        sa.Column('payment_method', sa.String(length=60), nullable=True),
        sa.UniqueConstraint('guardian_id', 'month', 'year', name='uq_payments_guardian_period'),
    )
    op.create_index('ix_payments_guardian_id', 'payments', ['guardian_id'])

    op.create_table(
        'activity_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('guardian_id', sa.Integer(), sa.ForeignKey('guardians.id'), nullable=False),
        sa.Column('action', sa.String(length=100), nullable=False),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_activity_logs_guardian_id', 'activity_logs', ['guardian_id'])


def downgrade():
    op.drop_index('ix_activity_logs_guardian_id', table_name='activity_logs')
    op.drop_table('activity_logs')
    op.drop_index('ix_payments_guardian_id', table_name='payments')
    op.drop_table('payments')
    op.drop_index('ix_guardians_email', table_name='guardians')
    op.drop_table('guardians')
