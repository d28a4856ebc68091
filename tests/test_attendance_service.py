# /tests/test_attendance_service.py

import datetime

import pytest

from app.core.exceptions import InvalidStateError, NotFoundError
from app.models.enums import StatusValue, TaskInitState, TaskType, UNASSIGNED
from app.services import attendance_service, task_service
from app.services.database_service import DatabaseService

TUESDAY = datetime.date(2025, 3, 11)


def test_get_or_create_task_is_idempotent(db_service, elective_setup):
    cls, asha = elective_setup["class"], elective_setup["asha"]

    first = attendance_service.get_or_create_task(cls.id, TUESDAY, 3, "Elective Lang", None, [asha.id], db_service)
    second = attendance_service.get_or_create_task(cls.id, TUESDAY, 3, "Elective Lang", None, [asha.id], db_service)

    assert first.task.id == second.task.id
    assert (first.state, second.state) == (TaskInitState.CREATED, TaskInitState.EXISTING)
    assert len(task_service.list_tasks(cls.id, db_service, TaskType.ATTENDANCE)) == 1
    assert first.task.title == "Attendance - Elective Lang (March 11, 2025)"


def test_seeding_again_is_a_no_op(db_service, elective_setup):
    """An already edited status survives a second seeding of the same roster."""
    cls, asha = elective_setup["class"], elective_setup["asha"]
    init = attendance_service.get_or_create_task(cls.id, TUESDAY, 3, "Elective Lang", None, [asha.id], db_service)
    attendance_service.set_status(init.task.id, asha.id, StatusValue.PRESENT, db_service)

    created = attendance_service.reseed_for_roster_change(init.task.id, [asha.id], db_service)

    statuses = attendance_service.get_statuses(init.task.id, db_service)
    assert created == 0
    assert [(s.student_id, s.status) for s in statuses] == [(asha.id, StatusValue.PRESENT)]


def test_task_with_zero_statuses_is_reseeded(db_service, elective_setup):
    cls, asha = elective_setup["class"], elective_setup["asha"]

    empty = attendance_service.get_or_create_task(cls.id, TUESDAY, 5, "Maths", None, [], db_service)
    healed = attendance_service.get_or_create_task(cls.id, TUESDAY, 5, "Maths", None, [asha.id], db_service)
    settled = attendance_service.get_or_create_task(cls.id, TUESDAY, 5, "Maths", None, [asha.id], db_service)

    assert empty.seededCount == 0
    assert (healed.state, healed.seededCount) == (TaskInitState.RESEEDED, 1)
    assert settled.state == TaskInitState.EXISTING
    assert db_service.count_statuses_by_task(empty.task.id) == 1


def test_lost_creation_race_uses_the_winning_task(db_service, session_factory, elective_setup, mocker, caplog):
    """Another request inserts the same (class, date, period) first; this call must reuse it."""
    cls, asha = elective_setup["class"], elective_setup["asha"]
    other_session = session_factory()
    other = DatabaseService(db_session=other_session)
    real_insert = db_service.insert_task_if_absent

    def competitor_wins(record):
        other.insert_task_if_absent({**record, "id": "task_winner"})
        return real_insert(record)

    mocker.patch.object(db_service, "insert_task_if_absent", side_effect=competitor_wins)

    result = attendance_service.get_or_create_task(cls.id, TUESDAY, 3, "Elective Lang", None, [asha.id], db_service)
    other_session.close()

    assert result.task.id == "task_winner"
    assert result.created is False
    assert result.state == TaskInitState.RESEEDED
    assert db_service.count_statuses_by_task("task_winner") == 1
    assert "created concurrently" in caplog.text


def test_concurrent_set_status_leaves_one_row(session_factory, db_service, elective_setup):
    """Two requests marking the same person, each with its own session."""
    cls, asha = elective_setup["class"], elective_setup["asha"]
    task = attendance_service.get_or_create_task(cls.id, TUESDAY, 3, "Elective Lang", None, [], db_service).task
    first_session, second_session = session_factory(), session_factory()
    first, second = DatabaseService(db_session=first_session), DatabaseService(db_session=second_session)

    attendance_service.set_status(task.id, asha.id, StatusValue.PRESENT, first)
    attendance_service.set_status(task.id, asha.id, StatusValue.PRESENT, second)
    first_session.close()
    second_session.close()

    statuses = attendance_service.get_statuses(task.id, db_service)
    assert [(s.student_id, s.status) for s in statuses] == [(asha.id, StatusValue.PRESENT)]


def test_tuesday_elective_scenario(db_service, elective_setup):
    cls, asha, bilal = elective_setup["class"], elective_setup["asha"], elective_setup["bilal"]
    german = elective_setup["options"]["German"]

    # Arrange / Act: open the German bucket and mark Asha present.
    view = attendance_service.open_period_attendance(cls.id, TUESDAY, 3, "usr_cr", db_service, selected_option=german)
    assert [(a.person.id, a.status) for a in view.attendances] == [(asha.id, StatusValue.ABSENT)]
    attendance_service.toggle_status(view.task.id, asha.id, db_service)

    statuses = attendance_service.get_statuses(view.task.id, db_service)
    assert [(s.student_id, s.status) for s in statuses] == [(asha.id, StatusValue.PRESENT)]

    # The unassigned bucket of the same occurrence shows Bilal on the same task.
    unassigned = attendance_service.open_period_attendance(cls.id, TUESDAY, 3, "usr_cr", db_service,
                                                           selected_option=UNASSIGNED)
    assert unassigned.task.id == view.task.id
    assert unassigned.state == TaskInitState.EXISTING
    assert [m.id for m in unassigned.roster.members] == [bilal.id]
    assert db_service.get_status(view.task.id, asha.id).status == StatusValue.PRESENT
    assert db_service.get_status(view.task.id, bilal.id).status == StatusValue.ABSENT


def test_open_period_without_timetable_slot(db_service, elective_setup):
    with pytest.raises(NotFoundError):
        attendance_service.open_period_attendance(elective_setup["class"].id, TUESDAY, 7, None, db_service)


def test_toggle_flips_back_to_absent(db_service, elective_setup):
    cls, asha = elective_setup["class"], elective_setup["asha"]
    task = attendance_service.get_or_create_task(cls.id, TUESDAY, 3, "Elective Lang", None, [asha.id], db_service).task

    assert attendance_service.toggle_status(task.id, asha.id, db_service).status == StatusValue.PRESENT
    assert attendance_service.toggle_status(task.id, asha.id, db_service).status == StatusValue.ABSENT


def test_set_status_validates_value_and_parents(db_service, elective_setup):
    cls, asha = elective_setup["class"], elective_setup["asha"]
    task = attendance_service.get_or_create_task(cls.id, TUESDAY, 3, "Elective Lang", None, [asha.id], db_service).task

    with pytest.raises(ValueError):
        attendance_service.set_status(task.id, asha.id, StatusValue.COMPLETED, db_service)
    with pytest.raises(NotFoundError):
        attendance_service.set_status("task_missing", asha.id, StatusValue.PRESENT, db_service)
    with pytest.raises(NotFoundError):
        attendance_service.set_status(task.id, "usr_missing", StatusValue.PRESENT, db_service)


def test_bulk_set_status_marks_every_row(db_service, elective_setup):
    cls = elective_setup["class"]
    roster = [elective_setup["asha"].id, elective_setup["bilal"].id]
    task = attendance_service.get_or_create_task(cls.id, TUESDAY, 1, "Maths", None, roster, db_service).task

    rows = attendance_service.bulk_set_status(task.id, StatusValue.PRESENT, db_service)

    assert len(rows) == 2
    assert {r.status for r in rows} == {StatusValue.PRESENT}


def test_reseed_ignores_people_from_other_classes(db_service, elective_setup, make_class, make_person):
    cls, asha = elective_setup["class"], elective_setup["asha"]
    outsider = make_person(make_class("Other Class").id, "Outsider")
    task = attendance_service.get_or_create_task(cls.id, TUESDAY, 3, "Elective Lang", None, [asha.id], db_service).task

    created = attendance_service.reseed_for_roster_change(task.id, [elective_setup["bilal"].id, outsider.id], db_service)

    assert created == 1
    assert db_service.get_status(task.id, outsider.id) is None


def test_set_status_refuses_people_from_other_classes(db_service, elective_setup, make_class, make_person):
    cls, asha = elective_setup["class"], elective_setup["asha"]
    outsider = make_person(make_class("Other Class").id, "Outsider")
    task = attendance_service.get_or_create_task(cls.id, TUESDAY, 3, "Elective Lang", None, [asha.id], db_service).task

    with pytest.raises(InvalidStateError):
        attendance_service.set_status(task.id, outsider.id, StatusValue.PRESENT, db_service)
    assert db_service.get_status(task.id, outsider.id) is None


def test_daily_task_is_one_per_date(db_service, elective_setup):
    cls = elective_setup["class"]
    monday = datetime.date(2025, 3, 10)

    first = attendance_service.get_or_create_daily_task(cls.id, monday, None, db_service)
    second = attendance_service.get_or_create_daily_task(cls.id, monday, None, db_service)

    assert first.task.id == second.task.id
    assert first.task.period_index is None
    assert first.seededCount == 2
    assert first.task.description == "Daily attendance"


def test_day_overview_and_marked_dates(db_service, elective_setup):
    cls, asha = elective_setup["class"], elective_setup["asha"]
    attendance_service.get_or_create_daily_task(cls.id, datetime.date(2025, 3, 10), None, db_service)
    attendance_service.get_or_create_task(cls.id, TUESDAY, 3, "Elective Lang", None, [asha.id], db_service)

    overview = attendance_service.get_day_overview(cls.id, TUESDAY, db_service)
    marked = attendance_service.get_marked_dates(cls.id, datetime.date(2025, 3, 1), datetime.date(2025, 3, 31), db_service)

    assert overview.dayOfWeek == "TUE"
    assert [(p.slot.period_index, p.marked) for p in overview.periods] == [(3, True)]
    assert [(m.date, m.taskCount) for m in marked] == [(datetime.date(2025, 3, 10), 1), (TUESDAY, 1)]
    with pytest.raises(ValueError):
        attendance_service.get_marked_dates(cls.id, TUESDAY, datetime.date(2025, 3, 1), db_service)


def test_student_attendance_history(db_service, elective_setup):
    cls, asha = elective_setup["class"], elective_setup["asha"]
    attendance_service.get_or_create_daily_task(cls.id, datetime.date(2025, 3, 10), None, db_service)
    task = attendance_service.get_or_create_task(cls.id, TUESDAY, 3, "Elective Lang", None, [asha.id], db_service).task
    attendance_service.set_status(task.id, asha.id, StatusValue.PRESENT, db_service)

    history = attendance_service.get_student_attendance(asha.id, db_service)

    assert [e.status for e in history.entries] == [StatusValue.ABSENT, StatusValue.PRESENT]
    assert (history.presentCount, history.totalCount, history.percentage) == (1, 2, 50.0)
    assert attendance_service.get_student_attendance("usr_missing", db_service) is None


def test_elective_period_opened_without_option_is_not_marked(db_service, elective_setup):
    cls = elective_setup["class"]

    view = attendance_service.open_period_attendance(cls.id, TUESDAY, 3, None, db_service)
    overview = attendance_service.get_day_overview(cls.id, TUESDAY, db_service)
    marked = attendance_service.get_marked_dates(cls.id, TUESDAY, TUESDAY, db_service)

    assert view.roster.needsSelection is True
    assert db_service.get_statuses_by_task(view.task.id) == []
    assert [(p.slot.period_index, p.marked) for p in overview.periods] == [(3, False)]
    assert marked == []
