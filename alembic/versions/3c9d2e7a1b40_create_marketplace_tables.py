"""create marketplace tables

Revision ID: 3c9d2e7a1b40
Revises:
Create Date: 2025-10-06 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c9d2e7a1b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
	return sa.Column('id', sa.String(length=36), server_default=sa.text('gen_random_uuid()::text'), nullable=False)


def _audit_columns() -> list:
	return [
		sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
		sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
	]


def upgrade() -> None:
	"""Upgrade schema."""
	op.create_table(
		'users',
		_id_column(),
		*_audit_columns(),
		sa.Column('username', sa.String(length=50), nullable=False),
		sa.Column('hashed_password', sa.String(), nullable=False),
		sa.Column('role', sa.String(length=16), nullable=False, server_default='worker'),
		sa.Column('full_name', sa.String(length=200), nullable=True),
		sa.Column('phone', sa.String(length=15), nullable=True),
		sa.Column('language', sa.String(length=8), nullable=True, server_default='en'),
		sa.Column('location', sa.String(), nullable=True),
		sa.Column('skills', sa.JSON(), nullable=True),
		sa.Column('national_id', sa.String(length=32), nullable=True),
		sa.PrimaryKeyConstraint('id')
	)
	op.create_index('ix_users_id', 'users', ['id'], unique=False)
	op.create_index('ix_users_username', 'users', ['username'], unique=True)
	op.create_index('ix_users_role', 'users', ['role'], unique=False)
	op.create_index('ix_users_created_at', 'users', ['created_at'], unique=False)

	op.create_table(
		'jobs',
		_id_column(),
		*_audit_columns(),
		sa.Column('employer_id', sa.String(length=36), nullable=False),
		sa.Column('title', sa.String(length=200), nullable=False),
		sa.Column('description', sa.Text(), nullable=False),
		sa.Column('work_type', sa.String(length=50), nullable=False),
		sa.Column('location', sa.String(), nullable=False),
		sa.Column('location_lat', sa.String(length=32), nullable=True),
		sa.Column('location_lng', sa.String(length=32), nullable=True),
		sa.Column('wage_type', sa.String(length=16), nullable=False, server_default='daily'),
		sa.Column('wage', sa.Integer(), nullable=False),
		sa.Column('headcount', sa.Integer(), nullable=False, server_default='1'),
		sa.Column('skills', sa.JSON(), nullable=True),
		sa.Column('status', sa.String(length=32), nullable=False, server_default='open'),
		sa.Column('assigned_worker_id', sa.String(length=36), nullable=True),
		sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
		sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
		sa.ForeignKeyConstraint(['employer_id'], ['users.id']),
		sa.ForeignKeyConstraint(['assigned_worker_id'], ['users.id']),
		sa.PrimaryKeyConstraint('id')
	)
	op.create_index('ix_jobs_id', 'jobs', ['id'], unique=False)
	op.create_index('ix_jobs_created_at', 'jobs', ['created_at'], unique=False)
	op.create_index('ix_jobs_employer_id', 'jobs', ['employer_id'], unique=False)
	op.create_index('ix_jobs_work_type', 'jobs', ['work_type'], unique=False)
	op.create_index('ix_jobs_status', 'jobs', ['status'], unique=False)
	op.create_index('ix_jobs_assigned_worker_id', 'jobs', ['assigned_worker_id'], unique=False)
	op.create_index('ix_jobs_status_created_at', 'jobs', ['status', 'created_at'], unique=False)
	op.create_index('ix_jobs_work_type_status', 'jobs', ['work_type', 'status'], unique=False)

	op.create_table(
		'job_applications',
		_id_column(),
		*_audit_columns(),
		sa.Column('job_id', sa.String(length=36), nullable=False),
		sa.Column('worker_id', sa.String(length=36), nullable=False),
		sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
		sa.Column('message', sa.Text(), nullable=True),
		sa.ForeignKeyConstraint(['job_id'], ['jobs.id']),
		sa.ForeignKeyConstraint(['worker_id'], ['users.id']),
		sa.PrimaryKeyConstraint('id')
	)
	op.create_index('ix_job_applications_id', 'job_applications', ['id'], unique=False)
	op.create_index('ix_job_applications_created_at', 'job_applications', ['created_at'], unique=False)
	op.create_index('ix_job_applications_job_id', 'job_applications', ['job_id'], unique=False)
	op.create_index('ix_job_applications_worker_id', 'job_applications', ['worker_id'], unique=False)
	op.create_index('ix_job_applications_job_status', 'job_applications', ['job_id', 'status'], unique=False)

	op.create_table(
		'messages',
		_id_column(),
		*_audit_columns(),
		sa.Column('sender_id', sa.String(length=36), nullable=False),
		sa.Column('receiver_id', sa.String(length=36), nullable=False),
		sa.Column('job_id', sa.String(length=36), nullable=True),
		sa.Column('content', sa.Text(), nullable=False),
		sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.text('false')),
		sa.ForeignKeyConstraint(['sender_id'], ['users.id']),
		sa.ForeignKeyConstraint(['receiver_id'], ['users.id']),
		sa.ForeignKeyConstraint(['job_id'], ['jobs.id']),
		sa.PrimaryKeyConstraint('id')
	)
	op.create_index('ix_messages_id', 'messages', ['id'], unique=False)
	op.create_index('ix_messages_created_at', 'messages', ['created_at'], unique=False)
	op.create_index('ix_messages_sender_id', 'messages', ['sender_id'], unique=False)
	op.create_index('ix_messages_receiver_id', 'messages', ['receiver_id'], unique=False)
	op.create_index('ix_messages_job_id', 'messages', ['job_id'], unique=False)
	op.create_index('ix_messages_sender_receiver_created_at', 'messages', ['sender_id', 'receiver_id', 'created_at'], unique=False)

	op.create_table(
		'payments',
		_id_column(),
		*_audit_columns(),
		sa.Column('job_id', sa.String(length=36), nullable=False),
		sa.Column('employer_id', sa.String(length=36), nullable=False),
		sa.Column('worker_id', sa.String(length=36), nullable=False),
		sa.Column('amount', sa.Integer(), nullable=False),
		sa.Column('currency', sa.String(length=3), nullable=False, server_default='INR'),
		sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
		sa.Column('payment_method', sa.String(length=32), nullable=True),
		sa.Column('razorpay_order_id', sa.String(length=64), nullable=True),
		sa.Column('razorpay_payment_id', sa.String(length=64), nullable=True),
		sa.Column('razorpay_signature', sa.String(length=128), nullable=True),
		sa.Column('failure_reason', sa.Text(), nullable=True),
		sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
		sa.ForeignKeyConstraint(['job_id'], ['jobs.id']),
		sa.ForeignKeyConstraint(['employer_id'], ['users.id']),
		sa.ForeignKeyConstraint(['worker_id'], ['users.id']),
		sa.PrimaryKeyConstraint('id')
	)
	op.create_index('ix_payments_id', 'payments', ['id'], unique=False)
	op.create_index('ix_payments_created_at', 'payments', ['created_at'], unique=False)
	op.create_index('ix_payments_job_id', 'payments', ['job_id'], unique=True)
	op.create_index('ix_payments_employer_id', 'payments', ['employer_id'], unique=False)
	op.create_index('ix_payments_worker_id', 'payments', ['worker_id'], unique=False)
	op.create_index('ix_payments_status', 'payments', ['status'], unique=False)
	op.create_index('ix_payments_razorpay_order_id', 'payments', ['razorpay_order_id'], unique=True)


def downgrade() -> None:
	"""Downgrade schema."""
	op.drop_table('payments')
	op.drop_table('messages')
	op.drop_table('job_applications')
	op.drop_table('jobs')
	op.drop_table('users')
