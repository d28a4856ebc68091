# /app/services/database_helpers/class_user_repository_sql.py

"""
This module contains all the raw SQLAlchemy queries for the Class and User
tables. It is the direct interface to the database for class rosters and
member profiles.
"""

from typing import Dict, List, Optional, Sequence

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from app.db.models.class_user_models import Class, User
from app.models.enums import ROSTER_ROLES, Role


def _roll_order():
    # Roll number ascending with missing roll numbers last, then name and id
    # so the order is total and repeatable.
    return (User.roll_no.is_(None), User.roll_no, User.name, User.id)


class ClassUserRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Class Methods ---

    def get_all_classes(self) -> List[Class]:
        return self.db.query(Class).order_by(Class.name).all()

    def get_class_by_id(self, class_id: str) -> Optional[Class]:
        return self.db.query(Class).filter(Class.id == class_id).first()

    def add_class(self, record: Dict) -> Class:
        new_class = Class(**record)
        self.db.add(new_class)
        self.db.commit()
        self.db.refresh(new_class)
        return new_class

    def update_class(self, class_id: str, data: Dict) -> Optional[Class]:
        db_class = self.get_class_by_id(class_id)
        if db_class:
            for key, value in data.items():
                setattr(db_class, key, value)
            self.db.commit()
            self.db.refresh(db_class)
        return db_class

    def delete_class(self, class_id: str) -> bool:
        db_class = self.get_class_by_id(class_id)
        if db_class:
            # The cascades defined on the model remove members, subjects,
            # timetable slots and tasks (with their statuses).
            self.db.delete(db_class)
            self.db.commit()
            return True
        return False

    def count_members_by_role(self) -> Dict[tuple, int]:
        """Returns {(class_id, role): count} across all classes."""
        rows = (
            self.db.query(User.class_id, User.role, func.count(User.id))
            .group_by(User.class_id, User.role)
            .all()
        )
        return {(class_id, role): count for class_id, role, count in rows}

    # --- User Methods ---

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_users_by_class_id(self, class_id: str) -> List[User]:
        # CRs first, then students, as the management screens list them.
        return (
            self.db.query(User)
            .filter(User.class_id == class_id)
            .order_by(case((User.role == Role.CR, 0), else_=1), *_roll_order())
            .all()
        )

    def get_users_by_roles(self, class_id: str, roles: Sequence[Role]) -> List[User]:
        return (
            self.db.query(User)
            .filter(User.class_id == class_id, User.role.in_(list(roles)))
            .order_by(*_roll_order())
            .all()
        )

    def get_roster_members(self, class_id: str) -> List[User]:
        """Every STUDENT and CR of the class. ADMIN accounts never appear on a roster."""
        return self.get_users_by_roles(class_id, ROSTER_ROLES)

    def get_users_by_ids(self, user_ids: Sequence[str]) -> List[User]:
        if not user_ids:
            return []
        return self.db.query(User).filter(User.id.in_(list(user_ids))).order_by(*_roll_order()).all()

    def is_email_taken(self, email: str, exclude_user_id: Optional[str] = None) -> bool:
        query = self.db.query(User.id).filter(User.email == email.lower())
        if exclude_user_id:
            query = query.filter(User.id != exclude_user_id)
        return query.first() is not None

    def is_roll_no_taken(self, class_id: str, roll_no: str, exclude_user_id: Optional[str] = None) -> bool:
        query = self.db.query(User.id).filter(User.class_id == class_id, User.roll_no == roll_no)
        if exclude_user_id:
            query = query.filter(User.id != exclude_user_id)
        return query.first() is not None

    def add_user(self, record: Dict) -> User:
        new_user = User(**record)
        self.db.add(new_user)
        self.db.commit()
        self.db.refresh(new_user)
        return new_user

    def update_user(self, user_id: str, data: Dict) -> Optional[User]:
        db_user = self.get_user_by_id(user_id)
        if db_user:
            for key, value in data.items():
                setattr(db_user, key, value)
            self.db.commit()
            self.db.refresh(db_user)
        return db_user

    def delete_user(self, user_id: str) -> bool:
        db_user = self.get_user_by_id(user_id)
        if db_user:
            self.db.delete(db_user)
            self.db.commit()
            return True
        return False
