"""Initial schema: users, projects, time entries and invoice dispatches

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from alembic import op
import sqlalchemy as sa

revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='employee'),
        sa.Column('hourly_rate', sa.Numeric(10, 2), server_default='50'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
        sa.CheckConstraint("role IN ('admin', 'employee')", name='check_user_role'),
    )

    op.create_table(
        'projects',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('client', sa.String(255), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('hourly_rate', sa.Numeric(10, 2), nullable=False, server_default='75'),
        sa.Column('created_by', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
        sa.CheckConstraint("status IN ('active', 'to-invoice', 'completed')", name='check_project_status'),
        sa.CheckConstraint('hourly_rate > 0', name='check_project_rate_positive'),
    )
    op.create_index('idx_projects_status', 'projects', ['status'])
    op.create_index('idx_projects_created_by', 'projects', ['created_by'])

    op.create_table(
        'time_entries',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('project_id', sa.Integer, sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('hours', sa.Numeric(6, 2), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint('hours > 0', name='check_hours_positive'),
    )
    op.create_index('idx_time_entries_project', 'time_entries', ['project_id'])
    op.create_index('idx_time_entries_user_date', 'time_entries', ['user_id', 'date'])

    op.create_table(
        'invoice_dispatches',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('project_id', sa.Integer, sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('provider', sa.String(20), nullable=False),
        sa.Column('reference', sa.String(255), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('idempotency_key', sa.String(255), nullable=False, unique=True),
        sa.Column('payload', sa.JSON),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('idx_invoice_dispatches_project', 'invoice_dispatches', ['project_id'])


def downgrade():
    op.drop_index('idx_invoice_dispatches_project', table_name='invoice_dispatches')
    op.drop_table('invoice_dispatches')
    op.drop_index('idx_time_entries_user_date', table_name='time_entries')
    op.drop_index('idx_time_entries_project', table_name='time_entries')
    op.drop_table('time_entries')
    op.drop_index('idx_projects_created_by', table_name='projects')
    op.drop_index('idx_projects_status', table_name='projects')
    op.drop_table('projects')
    op.drop_table('users')
