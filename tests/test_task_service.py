# /tests/test_task_service.py

import datetime

import pytest

from app.core.exceptions import NotFoundError
from app.models.attendance_model import AssignmentCreate
from app.models.enums import Role, StatusValue, TaskType
from app.services import task_service


@pytest.fixture
def assignment(db_service, elective_setup, make_person):
    make_person(elective_setup["class"].id, "Class Rep", role=Role.CR)
    return task_service.create_assignment(
        elective_setup["class"].id, AssignmentCreate(title="Lab 1", due_date=datetime.date(2025, 3, 20)),
        "usr_cr", db_service,
    )


def test_assignment_is_seeded_for_students_only(db_service, elective_setup, assignment):
    statuses = db_service.get_statuses_by_task(assignment.task.id)

    assert assignment.task.type == TaskType.ASSIGNMENT
    assert assignment.seededCount == 2
    assert {s.student_id for s in statuses} == {elective_setup["asha"].id, elective_setup["bilal"].id}
    assert {s.status for s in statuses} == {StatusValue.NOT_COMPLETED}


def test_submit_status_stamps_submission_and_keeps_remarks(db_service, elective_setup, assignment):
    asha = elective_setup["asha"]

    done = task_service.submit_status(assignment.task.id, asha.id, StatusValue.COMPLETED, "uploaded to drive", db_service)
    reopened = task_service.submit_status(assignment.task.id, asha.id, StatusValue.NOT_COMPLETED, None, db_service)

    assert done.submitted_at is not None
    assert done.remarks == "uploaded to drive"
    assert reopened.submitted_at is None
    assert reopened.remarks is None


def test_assignment_rejects_attendance_values(db_service, elective_setup, assignment):
    with pytest.raises(ValueError):
        task_service.submit_status(assignment.task.id, elective_setup["asha"].id, StatusValue.PRESENT, None, db_service)


def test_due_date_before_start_is_rejected(db_service, elective_setup):
    data = AssignmentCreate(title="Lab 2", start_date=datetime.date(2025, 3, 10), due_date=datetime.date(2025, 3, 1))
    with pytest.raises(ValueError):
        task_service.create_assignment(elective_setup["class"].id, data, None, db_service)
    with pytest.raises(NotFoundError):
        task_service.create_assignment("cls_missing", AssignmentCreate(title="Lab 3"), None, db_service)


def test_delete_task_removes_statuses(db_service, assignment):
    task_id = assignment.task.id
    assert task_service.delete_task(task_id, db_service) is True
    assert task_service.get_task(task_id, db_service) is None
    assert db_service.get_statuses_by_task(task_id) == []
    assert task_service.delete_task(task_id, db_service) is False
