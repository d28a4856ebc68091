# /app/models/enums.py

# --- Core Enumerations ---
# Shared by the SQLAlchemy models (stored by name) and the pydantic API contracts.

from enum import Enum


class Role(str, Enum):
    STUDENT = "STUDENT"; CR = "CR"; ADMIN = "ADMIN"

class Language(str, Enum):
    GERMAN = "GERMAN"; FRENCH = "FRENCH"

class ProgrammingPreference(str, Enum):
    C = "C"; JAVA = "JAVA"

class SubjectType(str, Enum):
    NORMAL = "NORMAL"
    ELECTIVE_GROUP = "ELECTIVE_GROUP"

class TaskType(str, Enum):
    ATTENDANCE = "ATTENDANCE"
    ASSIGNMENT = "ASSIGNMENT"

class StatusValue(str, Enum):
    NOT_ASSIGNED = "NOT_ASSIGNED"
    NOT_COMPLETED = "NOT_COMPLETED"
    COMPLETED = "COMPLETED"
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    OTHER = "OTHER"

class RosterMode(str, Enum):
    PLAIN = "PLAIN"
    ELECTIVE = "ELECTIVE"
    LEGACY_LANGUAGE = "LEGACY_LANGUAGE"

class TaskInitState(str, Enum):
    CREATED = "CREATED"     # task row inserted and seeded now
    EXISTING = "EXISTING"   # task and statuses already present, nothing touched
    RESEEDED = "RESEEDED"   # task present but had no statuses; seeded now

class DayOfWeek(str, Enum):
    MON = "MON"; TUE = "TUE"; WED = "WED"; THU = "THU"; FRI = "FRI"; SAT = "SAT"; SUN = "SUN"


# Which status values each task family accepts, and what a fresh row starts as.
ATTENDANCE_VALUES = frozenset({StatusValue.PRESENT, StatusValue.ABSENT})
ASSIGNMENT_VALUES = frozenset({
    StatusValue.NOT_ASSIGNED, StatusValue.NOT_COMPLETED, StatusValue.COMPLETED, StatusValue.OTHER,
})
DEFAULT_STATUS = {TaskType.ATTENDANCE: StatusValue.ABSENT, TaskType.ASSIGNMENT: StatusValue.NOT_COMPLETED}

# Persons that ever appear on an attendance roster. ADMIN never does.
ROSTER_ROLES = (Role.STUDENT, Role.CR)

UNASSIGNED = "UNASSIGNED"
