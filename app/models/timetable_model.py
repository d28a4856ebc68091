# /app/models/timetable_model.py

from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional

from .enums import DayOfWeek


class TimetableSlotBase(BaseModel):
    day_of_week: DayOfWeek
    period_index: int = Field(..., ge=1, le=9)
    time_start: Optional[str] = None
    time_end: Optional[str] = None
    subject_name: str = ""
    subject_type: Optional[str] = None
    subject_id: Optional[str] = None

class TimetableSlotIn(TimetableSlotBase):
    pass

class TimetableSlot(TimetableSlotBase):
    model_config = ConfigDict(from_attributes=True)
    id: Optional[str] = None
    class_id: Optional[str] = None

class TimetableSave(BaseModel):
    slots: List[TimetableSlotIn]

class PeriodDescriptor(BaseModel):
    """The part of a timetable slot the roster resolver cares about."""
    model_config = ConfigDict(from_attributes=True)
    period_index: int
    subject_name: str = ""
    subject_id: Optional[str] = None
