# /app/services/attendance_service.py

"""
This service module is the attendance record manager.

It maps a (class, date, period) occurrence to exactly one persistent
attendance task and owns the per-person status rows of that task. All writes
are idempotent: creating a task that already exists returns the existing one,
seeding a person who already has a row leaves that row alone, and setting a
status updates the single (task, person) row or creates it.

Two recoverable states are kept apart when a task is looked up:

- task absent            -> create it, then seed statuses
- task present, 0 rows   -> seed statuses (a previous seeding did not finish)

Both can be retried safely.
"""

import datetime
import logging
import uuid
from collections import Counter
from typing import List, Optional, Sequence

from ..core.exceptions import InvalidStateError, NotFoundError
from ..models import attendance_model
from ..models.enums import (
    ASSIGNMENT_VALUES, ATTENDANCE_VALUES, DEFAULT_STATUS,
    Language, StatusValue, TaskInitState, TaskType,
)
from ..models.timetable_model import TimetableSlot
from . import roster_service, timetable_service
from .database_service import DatabaseService

logger = logging.getLogger(__name__)


def _format_date(day: datetime.date) -> str:
    return f"{day:%B} {day.day}, {day.year}"


def _allowed_values(task_type: TaskType):
    return ATTENDANCE_VALUES if task_type == TaskType.ATTENDANCE else ASSIGNMENT_VALUES


def _validate_value(task, value: StatusValue) -> None:
    if value not in _allowed_values(task.type):
        raise ValueError(f"Status {value.value} is not valid for a {task.type.value.lower()} task.")


# --- Task lifecycle ---

def get_or_create_task(
    class_id: str,
    day: datetime.date,
    period_index: Optional[int],
    subject_label: Optional[str],
    creator_id: Optional[str],
    roster_ids: Sequence[str],
    db: DatabaseService,
) -> attendance_model.TaskInitResult:
    """
    Returns the attendance task for (class, date, period), creating and seeding
    it on first access. `period_index=None` is the older one-task-per-day flow.

    An existing task with status rows is returned untouched. An existing task
    with no rows is seeded with `roster_ids` instead of being read as "nobody
    needs a mark". A lost creation race degrades to fetching the winner.
    """
    if not db.get_class_by_id(class_id):
        raise NotFoundError(f"Class with ID {class_id} not found")

    task = db.get_attendance_task(class_id, day, period_index)
    created = False
    if task is None:
        if period_index is None:
            title = f"Attendance - {_format_date(day)}"
            description = "Daily attendance"
        else:
            title = f"Attendance - {subject_label} ({_format_date(day)})"
            description = f"Attendance for {subject_label}"
        record = {
            "id": f"task_{uuid.uuid4().hex[:12]}",
            "class_id": class_id,
            "title": title,
            "description": description,
            "type": TaskType.ATTENDANCE,
            "attendance_date": day,
            "period_index": period_index,
            "subject": subject_label,
            "created_by": creator_id,
        }
        created = db.insert_task_if_absent(record)
        task = db.get_attendance_task(class_id, day, period_index)
        if not created:
            logger.warning("Attendance task for class %s on %s period %s was created concurrently; using %s",
                           class_id, day, period_index, task.id)

    if created:
        seeded = db.seed_statuses(task.id, roster_ids, StatusValue.ABSENT)
        logger.info("Created attendance task %s for class %s on %s period %s, seeded %d status(es)",
                    task.id, class_id, day, period_index, seeded)
        state = TaskInitState.CREATED
    elif db.count_statuses_by_task(task.id) == 0:
        seeded = db.seed_statuses(task.id, roster_ids, StatusValue.ABSENT)
        logger.warning("Attendance task %s had no statuses; seeded %d", task.id, seeded)
        state = TaskInitState.RESEEDED
    else:
        seeded = 0
        state = TaskInitState.EXISTING

    return attendance_model.TaskInitResult(
        task=attendance_model.Task.model_validate(task), created=created, state=state, seededCount=seeded,
    )


def get_or_create_daily_task(class_id: str, day: datetime.date, creator_id: Optional[str],
                             db: DatabaseService) -> attendance_model.TaskInitResult:
    """The date-only attendance flow: one task per day, every STUDENT and CR on the roster."""
    roster_ids = [p.id for p in db.get_roster_members(class_id)]
    return get_or_create_task(class_id, day, None, None, creator_id, roster_ids, db)


def reseed_for_roster_change(task_id: str, person_ids: Sequence[str], db: DatabaseService) -> int:
    """
    Makes sure every person now in scope has a status row for the task.

    Rows of people who left scope are kept (history is preserved; they just
    stop appearing in the filtered view). Existing rows are never overwritten.
    Returns the number of rows created.
    """
    task = db.get_task_by_id(task_id)
    if not task:
        raise NotFoundError(f"Task with ID {task_id} not found")

    known = [p.id for p in db.get_users_by_ids(list(person_ids)) if p.class_id == task.class_id]
    ignored = set(person_ids) - set(known)
    if ignored:
        logger.warning("Ignoring %d person id(s) outside class %s while reseeding task %s",
                       len(ignored), task.class_id, task_id)

    created = db.seed_statuses(task_id, known, DEFAULT_STATUS[task.type])
    if created:
        logger.info("Seeded %d new status(es) for task %s after roster change", created, task_id)
    return created


# --- Status rows ---

def get_statuses(task_id: str, db: DatabaseService) -> List[attendance_model.TaskStatus]:
    return [attendance_model.TaskStatus.model_validate(s) for s in db.get_statuses_by_task(task_id)]


def set_status(
    task_id: str,
    person_id: str,
    value: StatusValue,
    db: DatabaseService,
    remarks: Optional[str] = None,
    update_remarks: bool = False,
) -> attendance_model.TaskStatus:
    """
    Sets one person's status on a task with upsert semantics: the existing
    (task, person) row is updated, or a row is inserted. Two concurrent calls
    still leave exactly one row.

    Assignment statuses get `submitted_at` stamped when COMPLETED or OTHER and
    cleared otherwise.
    """
    task = db.get_task_by_id(task_id)
    if not task:
        raise NotFoundError(f"Task with ID {task_id} not found")
    _validate_value(task, value)
    person = db.get_user_by_id(person_id)
    if not person:
        raise NotFoundError(f"Person with ID {person_id} not found")
    if person.class_id != task.class_id:
        raise InvalidStateError(f"Person {person_id} is not a member of class {task.class_id}")

    submitted_at = None
    if task.type == TaskType.ASSIGNMENT and value in (StatusValue.COMPLETED, StatusValue.OTHER):
        submitted_at = datetime.datetime.now(datetime.timezone.utc)

    row = db.upsert_status(task_id, person_id, value, remarks=remarks or None,
                           submitted_at=submitted_at, update_remarks=update_remarks)
    return attendance_model.TaskStatus.model_validate(row)


def toggle_status(task_id: str, person_id: str, db: DatabaseService) -> attendance_model.TaskStatus:
    """Flips PRESENT <-> ABSENT. A person with no row yet is marked PRESENT."""
    current = db.get_status(task_id, person_id)
    new_value = StatusValue.ABSENT if current is not None and current.status == StatusValue.PRESENT else StatusValue.PRESENT
    return set_status(task_id, person_id, new_value, db)


def bulk_set_status(task_id: str, value: StatusValue, db: DatabaseService) -> List[attendance_model.TaskStatus]:
    """Sets every existing row of the task to `value`. Roster membership is not changed."""
    task = db.get_task_by_id(task_id)
    if not task:
        raise NotFoundError(f"Task with ID {task_id} not found")
    _validate_value(task, value)
    rows = db.bulk_update_statuses(task_id, value)
    logger.info("Marked all %d status(es) of task %s as %s", len(rows), task_id, value.value)
    return [attendance_model.TaskStatus.model_validate(r) for r in rows]


def delete_statuses_for_person(person_id: str, db: DatabaseService) -> int:
    """Removes every status row of a person across all tasks and classes."""
    removed = db.delete_statuses_by_student(person_id)
    logger.info("Removed %d status row(s) of person %s", removed, person_id)
    return removed


# --- Views for the marking screen ---

def open_period_attendance(
    class_id: str,
    day: datetime.date,
    period_index: int,
    creator_id: Optional[str],
    db: DatabaseService,
    selected_option: Optional[str] = None,
    selected_language: Optional[Language] = None,
) -> attendance_model.PeriodAttendance:
    """
    Everything the marking screen needs for one period occurrence: the
    resolved roster for the chosen bucket, the task (created on first access)
    and each roster member's current status.
    """
    if not db.get_class_by_id(class_id):
        raise NotFoundError(f"Class with ID {class_id} not found")
    period = roster_service.resolve_period(class_id, day, period_index, db)
    if period is None:
        raise NotFoundError(
            f"Class {class_id} has no period {period_index} on {timetable_service.day_code_for(day).value}"
        )

    roster = roster_service.resolve_roster(class_id, period, db, selected_option, selected_language)
    roster_ids = [m.id for m in roster.members]

    init = get_or_create_task(class_id, day, period_index, roster.subjectName or period.subject_name,
                              creator_id, roster_ids, db)
    if init.state == TaskInitState.EXISTING and roster_ids:
        reseed_for_roster_change(init.task.id, roster_ids, db)

    statuses = {s.student_id: s for s in db.get_statuses_by_task(init.task.id)}
    attendances = []
    for member in roster.members:
        row = statuses.get(member.id)
        attendances.append(attendance_model.StudentAttendance(
            person=member,
            status=row.status if row is not None else StatusValue.ABSENT,
            statusId=row.id if row is not None else None,
        ))

    return attendance_model.PeriodAttendance(task=init.task, state=init.state, roster=roster, attendances=attendances)


def _tasks_with_marks(class_id: str, start: datetime.date, end: datetime.date, db: DatabaseService) -> List:
    """Attendance tasks in the range that hold at least one status row."""
    tasks = db.get_attendance_tasks_in_range(class_id, start, end)
    with_rows = {s.task_id for s in db.get_statuses_for_tasks([t.id for t in tasks])}
    return [t for t in tasks if t.id in with_rows]


def get_day_overview(class_id: str, day: datetime.date, db: DatabaseService) -> attendance_model.DayOverview:
    """The weekday's timetable with a flag telling which periods already have marks."""
    day_code = timetable_service.day_code_for(day)
    marked = {t.period_index for t in _tasks_with_marks(class_id, day, day, db)}
    periods = [
        attendance_model.PeriodOverview(slot=TimetableSlot.model_validate(slot), marked=slot.period_index in marked)
        for slot in db.get_slots_for_day(class_id, day_code)
    ]
    return attendance_model.DayOverview(date=day, dayOfWeek=day_code.value, periods=periods)


def get_marked_dates(class_id: str, start: datetime.date, end: datetime.date,
                     db: DatabaseService) -> List[attendance_model.MarkedDate]:
    if end < start:
        raise ValueError("The end date must not be before the start date.")
    counts = Counter(t.attendance_date for t in _tasks_with_marks(class_id, start, end, db))
    return [attendance_model.MarkedDate(date=d, taskCount=n) for d, n in sorted(counts.items())]


def get_student_attendance(
    person_id: str,
    db: DatabaseService,
    start: Optional[datetime.date] = None,
    end: Optional[datetime.date] = None,
) -> Optional[attendance_model.StudentAttendanceHistory]:
    """A person's own attendance marks, oldest first, with a present/total summary."""
    person = db.get_user_by_id(person_id)
    if not person:
        return None

    statuses = {s.task_id: s for s in db.get_statuses_by_student(person_id)}
    tasks = [t for t in db.get_tasks_by_ids(list(statuses)) if t.type == TaskType.ATTENDANCE]
    if start is not None:
        tasks = [t for t in tasks if t.attendance_date and t.attendance_date >= start]
    if end is not None:
        tasks = [t for t in tasks if t.attendance_date and t.attendance_date <= end]
    tasks.sort(key=lambda t: (t.attendance_date or datetime.date.min, t.period_index or 0))

    entries = [
        attendance_model.StudentAttendanceEntry(
            taskId=t.id, date=t.attendance_date, periodIndex=t.period_index,
            subject=t.subject, status=statuses[t.id].status,
        )
        for t in tasks
    ]
    present = sum(1 for e in entries if e.status == StatusValue.PRESENT)
    total = len(entries)
    return attendance_model.StudentAttendanceHistory(
        personId=person_id,
        entries=entries,
        presentCount=present,
        totalCount=total,
        percentage=round(present * 100.0 / total, 1) if total else 0.0,
    )
