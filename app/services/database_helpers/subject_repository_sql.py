# /app/services/database_helpers/subject_repository_sql.py

"""
Raw SQLAlchemy queries for subjects, elective options and student preferences.
"""

import uuid
from typing import Dict, List, Optional

from sqlalchemy import case, select
from sqlalchemy.orm import Session

from app.db.models.class_user_models import User
from app.db.models.subject_models import StudentSubjectPreference, Subject, SubjectOption
from app.models.enums import SubjectType
from .upsert import upsert


class SubjectRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Subject Methods ---

    def get_subjects_by_class_id(self, class_id: str) -> List[Subject]:
        # NORMAL subjects first, then by name.
        return (
            self.db.query(Subject)
            .filter(Subject.class_id == class_id)
            .order_by(case((Subject.type == SubjectType.NORMAL, 0), else_=1), Subject.name)
            .all()
        )

    def get_subject_by_id(self, subject_id: str) -> Optional[Subject]:
        return self.db.query(Subject).filter(Subject.id == subject_id).first()

    def add_subject(self, record: Dict, option_names: List[str]) -> Subject:
        subject = Subject(**record)
        for name in option_names:
            subject.options.append(SubjectOption(id=f"opt_{uuid.uuid4().hex[:12]}", name=name))
        self.db.add(subject)
        self.db.commit()
        self.db.refresh(subject)
        return subject

    def update_subject(self, subject_id: str, data: Dict) -> Optional[Subject]:
        subject = self.get_subject_by_id(subject_id)
        if subject:
            for key, value in data.items():
                setattr(subject, key, value)
            self.db.commit()
            self.db.refresh(subject)
        return subject

    def delete_subject(self, subject_id: str) -> bool:
        subject = self.get_subject_by_id(subject_id)
        if subject:
            self.db.delete(subject)
            self.db.commit()
            return True
        return False

    # --- Option Methods ---

    def get_options_by_subject_id(self, subject_id: str) -> List[SubjectOption]:
        return (
            self.db.query(SubjectOption)
            .filter(SubjectOption.subject_id == subject_id)
            .order_by(SubjectOption.name, SubjectOption.id)
            .all()
        )

    def get_option_by_id(self, option_id: str) -> Optional[SubjectOption]:
        return self.db.query(SubjectOption).filter(SubjectOption.id == option_id).first()

    def replace_options(self, subject_id: str, option_names: List[str]) -> List[SubjectOption]:
        self.db.query(SubjectOption).filter(SubjectOption.subject_id == subject_id).delete(synchronize_session=False)
        for name in option_names:
            self.db.add(SubjectOption(id=f"opt_{uuid.uuid4().hex[:12]}", subject_id=subject_id, name=name))
        self.db.commit()
        self.db.expire_all()
        return self.get_options_by_subject_id(subject_id)

    # --- Preference Methods ---

    def get_preferences_by_subject_id(self, subject_id: str) -> List[StudentSubjectPreference]:
        return (
            self.db.query(StudentSubjectPreference)
            .filter(StudentSubjectPreference.subject_id == subject_id)
            .all()
        )

    def count_preferences_by_subject_id(self, subject_id: str) -> int:
        return (
            self.db.query(StudentSubjectPreference)
            .filter(StudentSubjectPreference.subject_id == subject_id)
            .count()
        )

    def get_preferences_by_student_id(self, student_id: str) -> List[StudentSubjectPreference]:
        return (
            self.db.query(StudentSubjectPreference)
            .filter(StudentSubjectPreference.student_id == student_id)
            .all()
        )

    def get_preferences_for_class(self, class_id: str) -> List[StudentSubjectPreference]:
        return (
            self.db.query(StudentSubjectPreference)
            .join(User, StudentSubjectPreference.student_id == User.id)
            .filter(User.class_id == class_id)
            .all()
        )

    def get_preference(self, student_id: str, subject_id: str) -> Optional[StudentSubjectPreference]:
        return (
            self.db.query(StudentSubjectPreference)
            .filter(
                StudentSubjectPreference.student_id == student_id,
                StudentSubjectPreference.subject_id == subject_id,
            )
            .first()
        )

    def upsert_preference(self, student_id: str, subject_id: str, option_id: str) -> StudentSubjectPreference:
        """
        Inserts or updates the single (student, subject) preference row.
        The unique constraint resolves concurrent writers to one row.
        """
        upsert(
            self.db,
            StudentSubjectPreference,
            {
                "id": f"pref_{uuid.uuid4().hex[:12]}",
                "student_id": student_id,
                "subject_id": subject_id,
                "option_id": option_id,
            },
            conflict_columns=("student_id", "subject_id"),
            update_columns=("option_id",),
        )
        self.db.commit()
        self.db.expire_all()
        return self.get_preference(student_id, subject_id)

    def delete_preference(self, student_id: str, subject_id: str) -> int:
        deleted = (
            self.db.query(StudentSubjectPreference)
            .filter(
                StudentSubjectPreference.student_id == student_id,
                StudentSubjectPreference.subject_id == subject_id,
            )
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted

    def delete_preferences_by_student_id(self, student_id: str) -> int:
        deleted = (
            self.db.query(StudentSubjectPreference)
            .filter(StudentSubjectPreference.student_id == student_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted

    def delete_preferences_for_class(self, class_id: str) -> int:
        student_ids = select(User.id).where(User.class_id == class_id)
        deleted = (
            self.db.query(StudentSubjectPreference)
            .filter(StudentSubjectPreference.student_id.in_(student_ids))
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted
