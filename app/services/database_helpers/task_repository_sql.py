# /app/services/database_helpers/task_repository_sql.py

"""
Raw SQLAlchemy queries for tasks and their per-person status rows.

Inserts that can race (task creation, status seeding, status upserts) are
written as INSERT ... ON CONFLICT so the unique constraints on
(class_id, attendance_date, period_index) and (task_id, student_id) pick a
single winner. Losers simply re-read the winning row.
"""

import datetime
import uuid
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.models.task_models import Task, TaskStatus
from app.models.enums import StatusValue, TaskType
from .upsert import insert_ignore, upsert


def new_status_id() -> str:
    return f"sts_{uuid.uuid4().hex[:12]}"


class TaskRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Task Methods ---

    def get_task_by_id(self, task_id: str) -> Optional[Task]:
        return self.db.query(Task).filter(Task.id == task_id).first()

    def get_tasks_by_ids(self, task_ids: Sequence[str]) -> List[Task]:
        if not task_ids:
            return []
        return self.db.query(Task).filter(Task.id.in_(list(task_ids))).all()

    def get_tasks_by_class_id(self, class_id: str, task_type: Optional[TaskType] = None) -> List[Task]:
        query = self.db.query(Task).filter(Task.class_id == class_id)
        if task_type is not None:
            query = query.filter(Task.type == task_type)
        return query.order_by(Task.created_at.desc(), Task.id).all()

    def get_attendance_task(self, class_id: str, attendance_date: datetime.date, period_index: Optional[int]) -> Optional[Task]:
        query = self.db.query(Task).filter(
            Task.class_id == class_id,
            Task.type == TaskType.ATTENDANCE,
            Task.attendance_date == attendance_date,
        )
        if period_index is None:
            query = query.filter(Task.period_index.is_(None))
        else:
            query = query.filter(Task.period_index == period_index)
        return query.first()

    def get_attendance_tasks_in_range(self, class_id: str, start: datetime.date, end: datetime.date) -> List[Task]:
        return (
            self.db.query(Task)
            .filter(
                Task.class_id == class_id,
                Task.type == TaskType.ATTENDANCE,
                Task.attendance_date >= start,
                Task.attendance_date <= end,
            )
            .order_by(Task.attendance_date, Task.period_index)
            .all()
        )

    def insert_task_if_absent(self, record: Dict) -> bool:
        """
        Inserts the task unless its uniqueness key is already taken.
        Returns True only when this call created the row.
        """
        written = insert_ignore(self.db, Task, [record])
        self.db.commit()
        return written == 1

    def add_task(self, record: Dict) -> Task:
        new_task = Task(**record)
        self.db.add(new_task)
        self.db.commit()
        self.db.refresh(new_task)
        return new_task

    def delete_task(self, task_id: str) -> bool:
        task = self.get_task_by_id(task_id)
        if task:
            self.db.delete(task)
            self.db.commit()
            return True
        return False

    # --- Status Methods ---

    def get_statuses_by_task(self, task_id: str) -> List[TaskStatus]:
        return self.db.query(TaskStatus).filter(TaskStatus.task_id == task_id).all()

    def get_statuses_for_tasks(self, task_ids: Sequence[str]) -> List[TaskStatus]:
        if not task_ids:
            return []
        return self.db.query(TaskStatus).filter(TaskStatus.task_id.in_(list(task_ids))).all()

    def get_statuses_by_student(self, student_id: str) -> List[TaskStatus]:
        return self.db.query(TaskStatus).filter(TaskStatus.student_id == student_id).all()

    def count_statuses_by_task(self, task_id: str) -> int:
        return self.db.query(func.count(TaskStatus.id)).filter(TaskStatus.task_id == task_id).scalar() or 0

    def get_status(self, task_id: str, student_id: str) -> Optional[TaskStatus]:
        return (
            self.db.query(TaskStatus)
            .filter(TaskStatus.task_id == task_id, TaskStatus.student_id == student_id)
            .first()
        )

    def seed_statuses(self, task_id: str, student_ids: Sequence[str], default: StatusValue) -> int:
        """
        Creates a `default` row for every listed person that has none yet.
        Existing rows are never touched. Returns how many rows were created.
        """
        rows = [
            {"id": new_status_id(), "task_id": task_id, "student_id": student_id, "status": default}
            for student_id in dict.fromkeys(student_ids)
        ]
        written = insert_ignore(self.db, TaskStatus, rows)
        self.db.commit()
        return written

    def upsert_status(
        self,
        task_id: str,
        student_id: str,
        status: StatusValue,
        remarks: Optional[str],
        submitted_at: Optional[datetime.datetime],
        update_remarks: bool,
    ) -> TaskStatus:
        update_columns = ["status", "submitted_at"]
        if update_remarks:
            update_columns.append("remarks")
        upsert(
            self.db,
            TaskStatus,
            {
                "id": new_status_id(),
                "task_id": task_id,
                "student_id": student_id,
                "status": status,
                "remarks": remarks,
                "submitted_at": submitted_at,
            },
            conflict_columns=("task_id", "student_id"),
            update_columns=update_columns,
        )
        self.db.commit()
        self.db.expire_all()
        return self.get_status(task_id, student_id)

    def bulk_update_statuses(self, task_id: str, status: StatusValue) -> List[TaskStatus]:
        self.db.query(TaskStatus).filter(TaskStatus.task_id == task_id).update(
            {TaskStatus.status: status}, synchronize_session=False
        )
        self.db.commit()
        self.db.expire_all()
        return self.get_statuses_by_task(task_id)

    def delete_statuses_by_student(self, student_id: str) -> int:
        deleted = (
            self.db.query(TaskStatus)
            .filter(TaskStatus.student_id == student_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted
