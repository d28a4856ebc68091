# /tests/test_timetable_service.py

import datetime

import pytest

from app.core.exceptions import InvalidStateError, NotFoundError
from app.models.enums import DayOfWeek
from app.models.timetable_model import TimetableSlotIn
from app.services import timetable_service


def test_day_code_and_parsing():
    assert timetable_service.day_code_for(datetime.date(2025, 3, 11)) == DayOfWeek.TUE
    assert timetable_service.parse_day("Tuesday") == DayOfWeek.TUE
    assert timetable_service.parse_day("sat") == DayOfWeek.SAT
    assert timetable_service.parse_day("Someday") is None


def test_default_times():
    assert timetable_service.default_times(1) == ("09:00", "09:50")
    assert timetable_service.default_times(9) == ("17:00", "17:50")


def test_empty_grid_has_default_cells(db_service, make_class):
    cls = make_class()
    grid = timetable_service.get_timetable_grid(cls.id, db=db_service)

    assert len(grid) == 6
    assert all(len(row) == 9 for row in grid)
    assert grid[0][0].day_of_week == DayOfWeek.MON
    assert (grid[5][8].time_start, grid[5][8].subject_name) == ("17:00", "")


def test_save_replaces_and_skips_blank_names(db_service, make_class):
    cls = make_class()
    timetable_service.save_timetable(cls.id, [
        TimetableSlotIn(day_of_week=DayOfWeek.MON, period_index=1, subject_name="Old Subject"),
    ], db=db_service)

    saved = timetable_service.save_timetable(cls.id, [
        TimetableSlotIn(day_of_week=DayOfWeek.TUE, period_index=2, subject_name="Physics"),
        TimetableSlotIn(day_of_week=DayOfWeek.TUE, period_index=2, subject_name="Chemistry", time_start="10:15"),
        TimetableSlotIn(day_of_week=DayOfWeek.TUE, period_index=3, subject_name="   "),
    ], db=db_service)

    assert [(s.day_of_week, s.period_index, s.subject_name, s.time_start) for s in saved] == [
        (DayOfWeek.TUE, 2, "Chemistry", "10:15"),
    ]
    assert timetable_service.get_timetable_for_day(cls.id, DayOfWeek.MON, db=db_service) == []
    assert timetable_service.get_slot(cls.id, DayOfWeek.TUE, 2, db=db_service).time_end == "10:50"


def test_save_rejects_unknown_subject_and_class(db_service, make_class):
    cls = make_class()
    slot = TimetableSlotIn(day_of_week=DayOfWeek.MON, period_index=1, subject_name="Maths", subject_id="sub_missing")
    with pytest.raises(NotFoundError):
        timetable_service.save_timetable(cls.id, [slot], db=db_service)
    with pytest.raises(NotFoundError):
        timetable_service.save_timetable("cls_missing", [], db=db_service)


def test_save_rejects_subject_of_another_class(db_service, elective_setup, make_class):
    mine = make_class("Mine")
    slot = TimetableSlotIn(day_of_week=DayOfWeek.TUE, period_index=1, subject_name="Elective Lang",
                           subject_id=elective_setup["subject"].id)

    with pytest.raises(InvalidStateError):
        timetable_service.save_timetable(mine.id, [slot], db=db_service)
    assert timetable_service.get_timetable_for_day(mine.id, DayOfWeek.TUE, db=db_service) == []
