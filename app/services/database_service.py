# /app/services/database_service.py

from typing import Dict, Generator, List, Optional, Sequence
import datetime

from sqlalchemy.orm import Session
from fastapi import Depends

# --- Core Database Setup ---
from app.db.database import get_db
from app.models.enums import DayOfWeek, Role, StatusValue, TaskType

# --- Repository Imports ---
from .database_helpers.class_user_repository_sql import ClassUserRepositorySQL
from .database_helpers.subject_repository_sql import SubjectRepositorySQL
from .database_helpers.timetable_repository_sql import TimetableRepositorySQL
from .database_helpers.task_repository_sql import TaskRepositorySQL


class DatabaseService:
    def __init__(self, db_session: Session):
        """
        Initializes the DatabaseService with one SQL repository per table group.
        All repositories share the same session, so a request sees its own writes.
        """
        if db_session is None:
            raise ValueError("A database session is required.")
        self.session = db_session
        self.class_user_repo = ClassUserRepositorySQL(db_session)
        self.subject_repo = SubjectRepositorySQL(db_session)
        self.timetable_repo = TimetableRepositorySQL(db_session)
        self.task_repo = TaskRepositorySQL(db_session)

    # --- CLASS & MEMBER METHODS (DELEGATED) ---
    def get_all_classes(self): return self.class_user_repo.get_all_classes()
    def get_class_by_id(self, class_id: str): return self.class_user_repo.get_class_by_id(class_id)
    def add_class(self, class_record: Dict): return self.class_user_repo.add_class(class_record)
    def update_class(self, class_id: str, data: Dict): return self.class_user_repo.update_class(class_id, data)
    def delete_class(self, class_id: str) -> bool: return self.class_user_repo.delete_class(class_id)
    def count_members_by_role(self) -> Dict[tuple, int]: return self.class_user_repo.count_members_by_role()
    def get_user_by_id(self, user_id: str): return self.class_user_repo.get_user_by_id(user_id)
    def get_users_by_class_id(self, class_id: str): return self.class_user_repo.get_users_by_class_id(class_id)
    def get_users_by_roles(self, class_id: str, roles: Sequence[Role]): return self.class_user_repo.get_users_by_roles(class_id, roles)
    def get_roster_members(self, class_id: str): return self.class_user_repo.get_roster_members(class_id)
    def get_users_by_ids(self, user_ids: Sequence[str]): return self.class_user_repo.get_users_by_ids(user_ids)
    def is_email_taken(self, email: str, exclude_user_id: Optional[str] = None) -> bool: return self.class_user_repo.is_email_taken(email, exclude_user_id)
    def is_roll_no_taken(self, class_id: str, roll_no: str, exclude_user_id: Optional[str] = None) -> bool: return self.class_user_repo.is_roll_no_taken(class_id, roll_no, exclude_user_id)
    def add_user(self, user_record: Dict): return self.class_user_repo.add_user(user_record)
    def update_user(self, user_id: str, data: Dict): return self.class_user_repo.update_user(user_id, data)
    def delete_user(self, user_id: str) -> bool: return self.class_user_repo.delete_user(user_id)

    # --- SUBJECT, OPTION & PREFERENCE METHODS (DELEGATED) ---
    def get_subjects_by_class_id(self, class_id: str): return self.subject_repo.get_subjects_by_class_id(class_id)
    def get_subject_by_id(self, subject_id: str): return self.subject_repo.get_subject_by_id(subject_id)
    def add_subject(self, record: Dict, option_names: List[str]): return self.subject_repo.add_subject(record, option_names)
    def update_subject(self, subject_id: str, data: Dict): return self.subject_repo.update_subject(subject_id, data)
    def delete_subject(self, subject_id: str) -> bool: return self.subject_repo.delete_subject(subject_id)
    def get_options_by_subject_id(self, subject_id: str): return self.subject_repo.get_options_by_subject_id(subject_id)
    def get_option_by_id(self, option_id: str): return self.subject_repo.get_option_by_id(option_id)
    def replace_options(self, subject_id: str, option_names: List[str]): return self.subject_repo.replace_options(subject_id, option_names)
    def get_preferences_by_subject_id(self, subject_id: str): return self.subject_repo.get_preferences_by_subject_id(subject_id)
    def count_preferences_by_subject_id(self, subject_id: str) -> int: return self.subject_repo.count_preferences_by_subject_id(subject_id)
    def get_preferences_by_student_id(self, student_id: str): return self.subject_repo.get_preferences_by_student_id(student_id)
    def get_preferences_for_class(self, class_id: str): return self.subject_repo.get_preferences_for_class(class_id)
    def upsert_preference(self, student_id: str, subject_id: str, option_id: str): return self.subject_repo.upsert_preference(student_id, subject_id, option_id)
    def delete_preference(self, student_id: str, subject_id: str) -> int: return self.subject_repo.delete_preference(student_id, subject_id)
    def delete_preferences_by_student_id(self, student_id: str) -> int: return self.subject_repo.delete_preferences_by_student_id(student_id)
    def delete_preferences_for_class(self, class_id: str) -> int: return self.subject_repo.delete_preferences_for_class(class_id)

    # --- TIMETABLE METHODS (DELEGATED) ---
    def get_slots_by_class_id(self, class_id: str): return self.timetable_repo.get_slots_by_class_id(class_id)
    def get_slots_for_day(self, class_id: str, day: DayOfWeek): return self.timetable_repo.get_slots_for_day(class_id, day)
    def get_slot(self, class_id: str, day: DayOfWeek, period_index: int): return self.timetable_repo.get_slot(class_id, day, period_index)
    def replace_slots(self, class_id: str, records: List[Dict]): return self.timetable_repo.replace_slots(class_id, records)

    # --- TASK & STATUS METHODS (DELEGATED) ---
    def get_task_by_id(self, task_id: str): return self.task_repo.get_task_by_id(task_id)
    def get_tasks_by_ids(self, task_ids: Sequence[str]): return self.task_repo.get_tasks_by_ids(task_ids)
    def get_tasks_by_class_id(self, class_id: str, task_type: Optional[TaskType] = None): return self.task_repo.get_tasks_by_class_id(class_id, task_type)
    def get_attendance_task(self, class_id: str, attendance_date: datetime.date, period_index: Optional[int]): return self.task_repo.get_attendance_task(class_id, attendance_date, period_index)
    def get_attendance_tasks_in_range(self, class_id: str, start: datetime.date, end: datetime.date): return self.task_repo.get_attendance_tasks_in_range(class_id, start, end)
    def insert_task_if_absent(self, record: Dict) -> bool: return self.task_repo.insert_task_if_absent(record)
    def add_task(self, record: Dict): return self.task_repo.add_task(record)
    def delete_task(self, task_id: str) -> bool: return self.task_repo.delete_task(task_id)
    def get_statuses_by_task(self, task_id: str): return self.task_repo.get_statuses_by_task(task_id)
    def get_statuses_for_tasks(self, task_ids: Sequence[str]): return self.task_repo.get_statuses_for_tasks(task_ids)
    def get_statuses_by_student(self, student_id: str): return self.task_repo.get_statuses_by_student(student_id)
    def count_statuses_by_task(self, task_id: str) -> int: return self.task_repo.count_statuses_by_task(task_id)
    def get_status(self, task_id: str, student_id: str): return self.task_repo.get_status(task_id, student_id)
    def seed_statuses(self, task_id: str, student_ids: Sequence[str], default: StatusValue) -> int: return self.task_repo.seed_statuses(task_id, student_ids, default)
    def bulk_update_statuses(self, task_id: str, status: StatusValue): return self.task_repo.bulk_update_statuses(task_id, status)
    def delete_statuses_by_student(self, student_id: str) -> int: return self.task_repo.delete_statuses_by_student(student_id)

    def upsert_status(self, task_id: str, student_id: str, status: StatusValue, remarks: Optional[str] = None,
                      submitted_at: Optional[datetime.datetime] = None, update_remarks: bool = False):
        return self.task_repo.upsert_status(task_id, student_id, status, remarks, submitted_at, update_remarks)


# --- DEPENDENCY PROVIDER ---
def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """
    FastAPI dependency that provides a DatabaseService instance bound to the
    request's session.
    """
    yield DatabaseService(db_session=db)
