# /tests/test_export_service.py

import datetime

import pytest

from app.core.exceptions import NotFoundError
from app.models.enums import DayOfWeek, StatusValue
from app.models.timetable_model import TimetableSlotIn
from app.services import attendance_service, export_service, timetable_service

TUESDAY = datetime.date(2025, 3, 11)


@pytest.mark.parametrize("week, expected", [
    (1, (datetime.date(2025, 2, 1), datetime.date(2025, 2, 7))),
    (2, (datetime.date(2025, 2, 8), datetime.date(2025, 2, 14))),
    (4, (datetime.date(2025, 2, 22), datetime.date(2025, 2, 28))),
])
def test_week_range(week, expected):
    assert export_service.week_range(week, 2, 2025) == expected


def test_week_range_rejects_out_of_range_input():
    with pytest.raises(ValueError):
        export_service.week_range(5, 3, 2025)
    with pytest.raises(ValueError):
        export_service.week_range(1, 13, 2025)


def _block(df, day):
    """Returns (header, member rows) of the block for `day`."""
    rows = df.values.tolist()
    start = next(i for i, row in enumerate(rows) if row[0] == f"Date: {day.isoformat()}")
    end = next(i for i in range(start + 1, len(rows)) if all(cell == "" for cell in rows[i]))
    return rows[start + 1], rows[start + 2:end]


def test_export_uses_stored_marks_only(db_service, make_class, make_person):
    cls = make_class()
    amy = make_person(cls.id, "Amy", roll_no="1")
    make_person(cls.id, "Ben", roll_no="2")
    timetable_service.save_timetable(cls.id, [
        TimetableSlotIn(day_of_week=DayOfWeek.TUE, period_index=3, subject_name="Mathematics"),
        TimetableSlotIn(day_of_week=DayOfWeek.TUE, period_index=4, subject_name="Physics"),
    ], db=db_service)
    view = attendance_service.open_period_attendance(cls.id, TUESDAY, 3, None, db_service)
    attendance_service.set_status(view.task.id, amy.id, StatusValue.PRESENT, db_service)
    # Joins after attendance was taken: no stored row, so no mark.
    make_person(cls.id, "Cleo", roll_no="3")

    df = export_service.build_weekly_attendance(cls.id, 2, 3, 2025, db_service)
    header, members = _block(df, TUESDAY)

    assert header[:6] == ["Roll No", "Student Name", "-", "-", "Mathematics", "Physics"]
    assert [row[:6] for row in members] == [
        ["1", "Amy", "-", "-", "P", ""],
        ["2", "Ben", "-", "-", "A", ""],
        ["3", "Cleo", "-", "-", "", ""],
    ]


def test_export_csv_starts_with_first_day_of_week(db_service, make_class, make_person):
    cls = make_class()
    make_person(cls.id, "Amy", roll_no="1")

    csv_text = export_service.export_weekly_attendance_as_csv(cls.id, 2, 3, 2025, db_service)

    lines = csv_text.splitlines()
    assert lines[0].startswith("Date: 2025-03-08")
    # Seven date blocks: date row, header, one member, spacer.
    assert len(lines) == 7 * 4


def test_export_needs_members_and_class(db_service, make_class):
    with pytest.raises(NotFoundError):
        export_service.build_weekly_attendance("cls_missing", 1, 3, 2025, db_service)
    with pytest.raises(ValueError):
        export_service.build_weekly_attendance(make_class().id, 1, 3, 2025, db_service)
