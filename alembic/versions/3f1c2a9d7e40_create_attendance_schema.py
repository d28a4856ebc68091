"""Create classes, members, subjects, timetable and task tables

Revision ID: 3f1c2a9d7e40
Revises:
Create Date: 2025-03-01 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7e40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


user_role = sa.Enum('STUDENT', 'CR', 'ADMIN', name='user_role')
preferred_language = sa.Enum('GERMAN', 'FRENCH', name='preferred_language')
programming_preference = sa.Enum('C', 'JAVA', name='programming_preference')
subject_type = sa.Enum('NORMAL', 'ELECTIVE_GROUP', name='subject_type')
day_of_week = sa.Enum('MON', 'TUE', 'WED', 'THU', 'FRI', 'SAT', 'SUN', name='day_of_week')
task_type = sa.Enum('ATTENDANCE', 'ASSIGNMENT', name='task_type')
task_status_value = sa.Enum(
    'NOT_ASSIGNED', 'NOT_COMPLETED', 'COMPLETED', 'PRESENT', 'ABSENT', 'OTHER', name='task_status_value'
)


def upgrade() -> None:
    """Create the attendance schema with its uniqueness guarantees."""
    op.create_table(
        'classes',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('section', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_classes_id', 'classes', ['id'])
    op.create_index('ix_classes_name', 'classes', ['name'])

    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('roll_no', sa.String(), nullable=True),
        sa.Column('preferred_language', preferred_language, nullable=True),
        sa.Column('programming_preference', programming_preference, nullable=True),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('class_id', sa.String(), sa.ForeignKey('classes.id'), nullable=False),
        sa.UniqueConstraint('class_id', 'roll_no', name='uq_user_roll_no_per_class'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_name', 'users', ['name'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_class_id', 'users', ['class_id'])

    op.create_table(
        'subjects',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('class_id', sa.String(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('type', subject_type, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_subjects_id', 'subjects', ['id'])
    op.create_index('ix_subjects_class_id', 'subjects', ['class_id'])

    op.create_table(
        'subject_options',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('subject_id', sa.String(), sa.ForeignKey('subjects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_subject_options_id', 'subject_options', ['id'])
    op.create_index('ix_subject_options_subject_id', 'subject_options', ['subject_id'])

    op.create_table(
        'student_subject_preferences',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('student_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('subject_id', sa.String(), sa.ForeignKey('subjects.id'), nullable=False),
        sa.Column('option_id', sa.String(), sa.ForeignKey('subject_options.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('student_id', 'subject_id', name='uq_preference_student_subject'),
    )
    op.create_index('ix_student_subject_preferences_id', 'student_subject_preferences', ['id'])
    op.create_index('ix_student_subject_preferences_student_id', 'student_subject_preferences', ['student_id'])
    op.create_index('ix_student_subject_preferences_subject_id', 'student_subject_preferences', ['subject_id'])

    op.create_table(
        'timetable_slots',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('class_id', sa.String(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('day_of_week', day_of_week, nullable=False),
        sa.Column('period_index', sa.Integer(), nullable=False),
        sa.Column('time_start', sa.String(), nullable=True),
        sa.Column('time_end', sa.String(), nullable=True),
        sa.Column('subject_name', sa.String(), nullable=False),
        sa.Column('subject_type', sa.String(), nullable=True),
        sa.Column('subject_id', sa.String(), sa.ForeignKey('subjects.id', ondelete='SET NULL'), nullable=True),
        sa.UniqueConstraint('class_id', 'day_of_week', 'period_index', name='uq_timetable_slot'),
    )
    op.create_index('ix_timetable_slots_id', 'timetable_slots', ['id'])
    op.create_index('ix_timetable_slots_class_id', 'timetable_slots', ['class_id'])

    op.create_table(
        'tasks',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('class_id', sa.String(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('type', task_type, nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('attendance_date', sa.Date(), nullable=True),
        sa.Column('period_index', sa.Integer(), nullable=True),
        sa.Column('subject', sa.String(), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('class_id', 'attendance_date', 'period_index', name='uq_task_class_date_period'),
    )
    op.create_index('ix_tasks_id', 'tasks', ['id'])
    op.create_index('ix_tasks_class_id', 'tasks', ['class_id'])
    op.create_index('ix_tasks_attendance_date', 'tasks', ['attendance_date'])
    daily_only = sa.text('period_index IS NULL AND attendance_date IS NOT NULL')
    op.create_index(
        'uq_task_class_daily_attendance', 'tasks', ['class_id', 'attendance_date'], unique=True,
        sqlite_where=daily_only, postgresql_where=daily_only,
    )

    op.create_table(
        'task_statuses',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('task_id', sa.String(), sa.ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('student_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', task_status_value, nullable=False),
        sa.Column('remarks', sa.String(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('task_id', 'student_id', name='uq_task_status_task_person'),
    )
    op.create_index('ix_task_statuses_id', 'task_statuses', ['id'])
    op.create_index('ix_task_statuses_task_id', 'task_statuses', ['task_id'])
    op.create_index('ix_task_statuses_student_id', 'task_statuses', ['student_id'])


def downgrade() -> None:
    """Drop the attendance schema."""
    op.drop_table('task_statuses')
    op.drop_index('uq_task_class_daily_attendance', table_name='tasks')
    op.drop_table('tasks')
    op.drop_table('timetable_slots')
    op.drop_table('student_subject_preferences')
    op.drop_table('subject_options')
    op.drop_table('subjects')
    op.drop_table('users')
    op.drop_table('classes')
    bind = op.get_bind()
    for enum_type in (task_status_value, task_type, day_of_week, subject_type,
                      programming_preference, preferred_language, user_role):
        enum_type.drop(bind, checkfirst=True)
