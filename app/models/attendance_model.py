# /app/models/attendance_model.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Dict, List, Optional
import datetime

from .enums import RosterMode, StatusValue, TaskInitState, TaskType
from .person_model import Person
from .timetable_model import TimetableSlot


# --- Tasks & statuses ---

class Task(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    class_id: str
    title: str
    description: Optional[str] = None
    type: TaskType
    start_date: Optional[datetime.date] = None
    due_date: Optional[datetime.date] = None
    attendance_date: Optional[datetime.date] = None
    period_index: Optional[int] = None
    subject: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime.datetime] = None

class TaskStatus(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    task_id: str
    student_id: str
    status: StatusValue
    remarks: Optional[str] = None
    submitted_at: Optional[datetime.datetime] = None

class TaskInitResult(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    task: Task
    created: bool
    state: TaskInitState
    seededCount: int = 0

class StatusUpdate(BaseModel):
    status: StatusValue
    remarks: Optional[str] = None

class BulkStatusUpdate(BaseModel):
    status: StatusValue

class RosterReseed(BaseModel):
    person_ids: List[str]

class AssignmentCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    start_date: Optional[datetime.date] = None
    due_date: Optional[datetime.date] = None


# --- Roster resolution ---

class ResolvedRoster(BaseModel):
    """
    The people expected to have a mark for one period occurrence.

    `members` is the selected bucket; `buckets` exposes every bucket so the
    caller can render tabs without resolving again.
    """
    mode: RosterMode
    members: List[Person]
    buckets: Dict[str, List[str]] = Field(default_factory=dict)
    selected: Optional[str] = None
    unassignedCount: int = 0
    needsSelection: bool = False
    subjectId: Optional[str] = None
    subjectName: str = ""


# --- Views handed to UI / export collaborators ---

class StudentAttendance(BaseModel):
    person: Person
    status: StatusValue
    statusId: Optional[str] = None

class PeriodAttendance(BaseModel):
    task: Task
    state: TaskInitState
    roster: ResolvedRoster
    attendances: List[StudentAttendance]

class PeriodOverview(BaseModel):
    slot: TimetableSlot
    marked: bool

class DayOverview(BaseModel):
    date: datetime.date
    dayOfWeek: str
    periods: List[PeriodOverview]

class MarkedDate(BaseModel):
    date: datetime.date
    taskCount: int

class StudentAttendanceEntry(BaseModel):
    taskId: str
    date: Optional[datetime.date] = None
    periodIndex: Optional[int] = None
    subject: Optional[str] = None
    status: StatusValue

class StudentAttendanceHistory(BaseModel):
    personId: str
    entries: List[StudentAttendanceEntry]
    presentCount: int
    totalCount: int
    percentage: float
