# /app/services/export_service.py

"""
Weekly attendance export for the spreadsheet collaborator.

The export only reads statuses that were stored while attendance was taken.
It never resolves rosters again, so what is exported is exactly what was
marked live: a person without a stored row for a period gets an empty cell.
"""

import calendar
import datetime
import logging
from typing import Dict, List, Tuple

import pandas as pd

from ..core.config import settings
from ..core.exceptions import NotFoundError
from ..models.enums import StatusValue
from . import timetable_service
from .database_service import DatabaseService

logger = logging.getLogger(__name__)

_MARKS = {StatusValue.PRESENT: "P", StatusValue.ABSENT: "A"}


def week_range(week_number: int, month: int, year: int) -> Tuple[datetime.date, datetime.date]:
    """
    Week n covers days (n-1)*7+1 .. n*7 of the month; week 4 runs to the last
    day of the month. `month` is 1-12.
    """
    if not 1 <= week_number <= 4:
        raise ValueError("Week number must be between 1 and 4.")
    if not 1 <= month <= 12:
        raise ValueError("Month must be between 1 and 12.")
    start_day = (week_number - 1) * 7 + 1
    end_day = calendar.monthrange(year, month)[1] if week_number == 4 else week_number * 7
    return datetime.date(year, month, start_day), datetime.date(year, month, end_day)


def build_weekly_attendance(class_id: str, week_number: int, month: int, year: int, db: DatabaseService) -> pd.DataFrame:
    """
    Lays out one block per date: a 'Date: YYYY-MM-DD' row, a header row with
    the subject of each period, one row per roster member with P / A marks, and
    a blank spacer row.

    Cell values: 'P' / 'A' from stored statuses, '' when the period has no task
    or the person has no row, '-' when the timetable has no such period.
    """
    if not db.get_class_by_id(class_id):
        raise NotFoundError(f"Class with ID {class_id} not found")
    start, end = week_range(week_number, month, year)

    members = db.get_roster_members(class_id)
    if not members:
        raise ValueError("No students found for this class")

    slots = {(s.day_of_week, s.period_index): s for s in db.get_slots_by_class_id(class_id)}
    tasks = db.get_attendance_tasks_in_range(class_id, start, end)
    task_by_key = {(t.attendance_date, t.period_index): t for t in tasks if t.period_index is not None}

    marks: Dict[Tuple[str, str], StatusValue] = {
        (s.task_id, s.student_id): s.status for s in db.get_statuses_for_tasks([t.id for t in tasks])
    }

    periods = range(1, settings.PERIODS_PER_DAY + 1)
    width = 2 + len(periods)
    rows: List[List[str]] = []

    day = start
    while day <= end:
        day_code = timetable_service.day_code_for(day)
        rows.append([f"Date: {day.isoformat()}"] + [""] * (width - 1))

        header = ["Roll No", "Student Name"]
        for p in periods:
            slot = slots.get((day_code, p))
            header.append(slot.subject_name if slot else "-")
        rows.append(header)

        for member in members:
            row = [member.roll_no or "", member.name]
            for p in periods:
                if (day_code, p) not in slots:
                    row.append("-")
                    continue
                task = task_by_key.get((day, p))
                status = marks.get((task.id, member.id)) if task else None
                row.append(_MARKS.get(status, ""))
            rows.append(row)

        rows.append([""] * width)
        day += datetime.timedelta(days=1)

    logger.info("Built weekly attendance export for class %s (%s to %s, %d task(s))",
                class_id, start, end, len(tasks))
    return pd.DataFrame(rows)


def export_weekly_attendance_as_csv(class_id: str, week_number: int, month: int, year: int, db: DatabaseService) -> str:
    df = build_weekly_attendance(class_id, week_number, month, year, db)
    return df.to_csv(index=False, header=False)
