# /app/db/models/task_models.py

"""
This module defines the SQLAlchemy ORM models for `Task` and `TaskStatus`.

A task is one occurrence that needs a per-person mark: an attendance task for a
(date, period) or an assignment. Each person on the task's roster owns exactly
one `TaskStatus` row for it.
"""

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.models.enums import StatusValue, TaskType
from ..base_class import Base


class Task(Base):
    __table_args__ = (
        # One attendance task per (class, date, period). Assignment rows carry a
        # NULL date, and NULLs never collide, so they are unaffected.
        UniqueConstraint("class_id", "attendance_date", "period_index", name="uq_task_class_date_period"),
    )

    id = Column(String, primary_key=True, index=True)
    class_id = Column(String, ForeignKey("classes.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    type = Column(Enum(TaskType, name="task_type"), nullable=False)
    start_date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=True)
    attendance_date = Column(Date, nullable=True, index=True)
    period_index = Column(Integer, nullable=True)
    subject = Column(String, nullable=True)
    created_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    class_ = relationship("Class", back_populates="tasks")
    statuses = relationship("TaskStatus", back_populates="task", cascade="all, delete-orphan")


# Daily (period-less) attendance: the composite constraint above cannot see
# NULL period indexes, so a partial unique index covers that flow.
Index(
    "uq_task_class_daily_attendance",
    Task.class_id,
    Task.attendance_date,
    unique=True,
    sqlite_where=Task.period_index.is_(None) & Task.attendance_date.isnot(None),
    postgresql_where=Task.period_index.is_(None) & Task.attendance_date.isnot(None),
)


class TaskStatus(Base):
    __tablename__ = "task_statuses"
    __table_args__ = (
        UniqueConstraint("task_id", "student_id", name="uq_task_status_task_person"),
    )

    id = Column(String, primary_key=True, index=True)
    task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(Enum(StatusValue, name="task_status_value"), nullable=False)
    remarks = Column(String, nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)

    task = relationship("Task", back_populates="statuses")
