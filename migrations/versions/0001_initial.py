"""initial tables

Revision ID: 0001
Revises:
Create Date: 2025-10-01

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    # enums
    user_role = sa.Enum('TEACHER', 'STUDENT', name='user_role')
    leave_status = sa.Enum('PENDING', 'APPROVED', 'REJECTED', name='leave_status')

    op.create_table('users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('role', user_role, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table('assignments',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('teacher_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_assignments_teacher_id', 'assignments', ['teacher_id'])
    op.create_index('ix_assignments_due_date', 'assignments', ['due_date'])

    op.create_table('submissions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('submission_date', sa.DateTime(), nullable=False),
        sa.Column('student_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('assignment_id', sa.String(36), sa.ForeignKey('assignments.id', ondelete='CASCADE'), nullable=False),
        sa.Column('grade', sa.String(50), nullable=True),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('student_id', 'assignment_id', name='uq_submission_student_assignment'),
    )
    op.create_index('ix_submissions_student_id', 'submissions', ['student_id'])
    op.create_index('ix_submissions_assignment_id', 'submissions', ['assignment_id'])

    op.create_table('schedules',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=False),
        sa.Column('teacher_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
    )
    op.create_index('ix_schedules_start_time', 'schedules', ['start_time'])
    op.create_index('ix_schedules_teacher_id', 'schedules', ['teacher_id'])

    op.create_table('leave_requests',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('status', leave_status, nullable=False),
        sa.Column('student_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('decided_by_id', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('decided_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_leave_requests_status', 'leave_requests', ['status'])
    op.create_index('ix_leave_requests_student_id', 'leave_requests', ['student_id'])

def downgrade():
    op.drop_index('ix_leave_requests_student_id', table_name='leave_requests')
    op.drop_index('ix_leave_requests_status', table_name='leave_requests')
    op.drop_table('leave_requests')
    op.drop_index('ix_schedules_teacher_id', table_name='schedules')
    op.drop_index('ix_schedules_start_time', table_name='schedules')
    op.drop_table('schedules')
    op.drop_index('ix_submissions_assignment_id', table_name='submissions')
    op.drop_index('ix_submissions_student_id', table_name='submissions')
    op.drop_table('submissions')
    op.drop_index('ix_assignments_due_date', table_name='assignments')
    op.drop_index('ix_assignments_teacher_id', table_name='assignments')
    op.drop_table('assignments')
    op.drop_index('ix_users_role', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    if bind.dialect.name != "sqlite":
        sa.Enum(name='leave_status').drop(bind, checkfirst=True)
        sa.Enum(name='user_role').drop(bind, checkfirst=True)
