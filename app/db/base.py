# /app/db/base.py

# This file acts as a central registry for all our SQLAlchemy models.
# By importing them all here, we ensure that the Base class knows about them
# when Alembic runs its auto-generation scan and when `create_all` is called.

# Import the Base class that all models inherit from.
from .base_class import Base

# Import all of our model classes from their respective files.
from .models.class_user_models import Class, User
from .models.subject_models import Subject, SubjectOption, StudentSubjectPreference
from .models.timetable_models import TimetableSlot
from .models.task_models import Task, TaskStatus
