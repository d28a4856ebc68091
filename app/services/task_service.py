# /app/services/task_service.py

"""
Assignment-style tasks: created by a CR, one NOT_COMPLETED row per student,
updated by the student with an optional remark.
"""

import logging
import uuid
from typing import List, Optional

from ..core.exceptions import NotFoundError
from ..models import attendance_model
from ..models.enums import Role, StatusValue, TaskInitState, TaskType
from . import attendance_service
from .database_service import DatabaseService

logger = logging.getLogger(__name__)


def create_assignment(class_id: str, data: attendance_model.AssignmentCreate, creator_id: Optional[str],
                      db: DatabaseService) -> attendance_model.TaskInitResult:
    if not db.get_class_by_id(class_id):
        raise NotFoundError(f"Class with ID {class_id} not found")
    if data.start_date and data.due_date and data.due_date < data.start_date:
        raise ValueError("The due date must not be before the start date.")

    task = db.add_task({
        "id": f"task_{uuid.uuid4().hex[:12]}",
        "class_id": class_id,
        "type": TaskType.ASSIGNMENT,
        "created_by": creator_id,
        **data.model_dump(),
    })
    # Assignments go to students only; CRs are not graded on them.
    student_ids = [s.id for s in db.get_users_by_roles(class_id, [Role.STUDENT])]
    seeded = db.seed_statuses(task.id, student_ids, StatusValue.NOT_COMPLETED)
    logger.info("Created assignment %s for class %s, seeded %d status(es)", task.id, class_id, seeded)
    return attendance_model.TaskInitResult(
        task=attendance_model.Task.model_validate(task), created=True,
        state=TaskInitState.CREATED, seededCount=seeded,
    )


def list_tasks(class_id: str, db: DatabaseService, task_type: Optional[TaskType] = None) -> List[attendance_model.Task]:
    return [attendance_model.Task.model_validate(t) for t in db.get_tasks_by_class_id(class_id, task_type)]


def get_task(task_id: str, db: DatabaseService) -> Optional[attendance_model.Task]:
    task = db.get_task_by_id(task_id)
    return attendance_model.Task.model_validate(task) if task else None


def delete_task(task_id: str, db: DatabaseService) -> bool:
    """Deletes the task together with all of its status rows."""
    return db.delete_task(task_id)


def submit_status(task_id: str, person_id: str, status: StatusValue, remarks: Optional[str],
                  db: DatabaseService) -> attendance_model.TaskStatus:
    """A student's own update on an assignment; the remark replaces any earlier one."""
    return attendance_service.set_status(task_id, person_id, status, db, remarks=remarks, update_remarks=True)


def initialize_statuses_for_new_student(person_id: str, class_id: str, db: DatabaseService) -> int:
    """
    Gives a newly enrolled student a NOT_COMPLETED row on every existing
    assignment of the class. Attendance rows are created when the student
    first appears on a resolved roster, so past dates are not back-filled.
    """
    created = 0
    for task in db.get_tasks_by_class_id(class_id, TaskType.ASSIGNMENT):
        created += db.seed_statuses(task.id, [person_id], StatusValue.NOT_COMPLETED)
    return created
