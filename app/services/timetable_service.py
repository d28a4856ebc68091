# /app/services/timetable_service.py

"""
Read/write access to the weekly timetable template of a class.

The same template applies to every occurrence of a weekday; attendance code
only ever reads it.
"""

import datetime
import logging
from typing import List, Optional

from ..core.config import settings
from ..core.exceptions import InvalidStateError, NotFoundError
from ..models import timetable_model
from ..models.enums import DayOfWeek
from .database_service import DatabaseService

logger = logging.getLogger(__name__)

# Days shown on the timetable grid, Monday to Saturday.
GRID_DAYS = [DayOfWeek.MON, DayOfWeek.TUE, DayOfWeek.WED, DayOfWeek.THU, DayOfWeek.FRI, DayOfWeek.SAT]

# date.weekday(): Monday == 0
_WEEKDAY_CODES = [DayOfWeek.MON, DayOfWeek.TUE, DayOfWeek.WED, DayOfWeek.THU,
                  DayOfWeek.FRI, DayOfWeek.SAT, DayOfWeek.SUN]

_DAY_NAMES = {
    "MONDAY": DayOfWeek.MON, "TUESDAY": DayOfWeek.TUE, "WEDNESDAY": DayOfWeek.WED,
    "THURSDAY": DayOfWeek.THU, "FRIDAY": DayOfWeek.FRI, "SATURDAY": DayOfWeek.SAT, "SUNDAY": DayOfWeek.SUN,
}


def day_code_for(day: datetime.date) -> DayOfWeek:
    return _WEEKDAY_CODES[day.weekday()]


def parse_day(value: str) -> Optional[DayOfWeek]:
    """Accepts 'TUE', 'Tuesday' or 'tuesday'."""
    upper = value.strip().upper()
    if upper in _DAY_NAMES:
        return _DAY_NAMES[upper]
    try:
        return DayOfWeek(upper)
    except ValueError:
        return None


def default_times(period_index: int) -> tuple:
    """Period 1 runs 09:00-09:50, each following period one hour later."""
    if not 1 <= period_index <= settings.PERIODS_PER_DAY:
        period_index = 1
    hour = 8 + period_index
    return f"{hour:02d}:00", f"{hour:02d}:50"


def get_slot(class_id: str, day: DayOfWeek, period_index: int, db: DatabaseService) -> Optional[timetable_model.TimetableSlot]:
    slot = db.get_slot(class_id, day, period_index)
    return timetable_model.TimetableSlot.model_validate(slot) if slot else None


def get_timetable_for_day(class_id: str, day: DayOfWeek, db: DatabaseService) -> List[timetable_model.TimetableSlot]:
    return [timetable_model.TimetableSlot.model_validate(s) for s in db.get_slots_for_day(class_id, day)]


def get_timetable_grid(class_id: str, db: DatabaseService) -> List[List[timetable_model.TimetableSlot]]:
    """
    Returns the full Monday-Saturday grid. Cells with no stored slot are filled
    with an empty subject and the default times for that period.
    """
    stored = {(s.day_of_week, s.period_index): s for s in db.get_slots_by_class_id(class_id)}
    grid = []
    for day in GRID_DAYS:
        row = []
        for period_index in range(1, settings.PERIODS_PER_DAY + 1):
            slot = stored.get((day, period_index))
            if slot is not None:
                row.append(timetable_model.TimetableSlot.model_validate(slot))
            else:
                start, end = default_times(period_index)
                row.append(timetable_model.TimetableSlot(
                    class_id=class_id, day_of_week=day, period_index=period_index,
                    time_start=start, time_end=end, subject_name="", subject_type="",
                ))
        grid.append(row)
    return grid


def save_timetable(class_id: str, slots: List[timetable_model.TimetableSlotIn], db: DatabaseService) -> List[timetable_model.TimetableSlot]:
    """
    Replaces the whole timetable of a class. Slots with a blank subject name
    are dropped; a later duplicate (day, period) overrides an earlier one.
    """
    if not db.get_class_by_id(class_id):
        raise NotFoundError(f"Class with ID {class_id} not found")

    records = {}
    for slot in slots:
        if not slot.subject_name or not slot.subject_name.strip():
            continue
        if slot.subject_id:
            subject = db.get_subject_by_id(slot.subject_id)
            if not subject:
                raise NotFoundError(f"Subject with ID {slot.subject_id} not found")
            if subject.class_id != class_id:
                raise InvalidStateError(f"Subject {slot.subject_id} belongs to another class")
        start, end = default_times(slot.period_index)
        records[(slot.day_of_week, slot.period_index)] = {
            "day_of_week": slot.day_of_week,
            "period_index": slot.period_index,
            "time_start": slot.time_start or start,
            "time_end": slot.time_end or end,
            "subject_name": slot.subject_name.strip(),
            "subject_type": slot.subject_type,
            "subject_id": slot.subject_id,
        }

    saved = db.replace_slots(class_id, list(records.values()))
    logger.info("Saved timetable for class %s (%d slots)", class_id, len(saved))
    return [timetable_model.TimetableSlot.model_validate(s) for s in saved]
