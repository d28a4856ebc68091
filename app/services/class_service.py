# /app/services/class_service.py

"""
This service module acts as the business logic layer for classes and their
members (students, CRs, admins).

It is plain persistence plus the few rules the class screens rely on: unique
emails, unique roll numbers per class, the protected primary CR, and the
cleanup that must happen before a person disappears.
"""

import logging
import uuid
from typing import List, Optional

from ..core.config import settings
from ..core.exceptions import InvalidStateError, NotFoundError
from ..models import class_model, person_model
from ..models.enums import Language, Role
from . import attendance_service, task_service
from .database_service import DatabaseService

logger = logging.getLogger(__name__)


# --- Classes ---

def create_class(class_data: class_model.ClassCreate, db: DatabaseService) -> class_model.Class:
    record = {"id": f"cls_{uuid.uuid4().hex[:12]}", **class_data.model_dump()}
    new_class = db.add_class(record)
    logger.info("Created class %s (%s)", new_class.id, new_class.name)
    return class_model.Class.model_validate(new_class)


def update_class(class_id: str, class_update: class_model.ClassCreate, db: DatabaseService) -> Optional[class_model.Class]:
    update_data = class_update.model_dump(exclude_unset=True)
    if not update_data:
        raise ValueError("No update data provided.")
    updated = db.update_class(class_id, update_data)
    return class_model.Class.model_validate(updated) if updated else None


def delete_class_by_id(class_id: str, db: DatabaseService) -> bool:
    if not db.get_class_by_id(class_id):
        return False
    # Preferences are not cascaded from subjects, so clear them first.
    db.delete_preferences_for_class(class_id)
    db.delete_class(class_id)
    logger.info("Deleted class %s", class_id)
    return True


def get_all_classes_with_summary(db: DatabaseService) -> List[class_model.ClassSummary]:
    counts = db.count_members_by_role()
    return [
        class_model.ClassSummary(
            id=c.id, name=c.name, section=c.section,
            studentCount=counts.get((c.id, Role.STUDENT), 0),
            crCount=counts.get((c.id, Role.CR), 0),
        )
        for c in db.get_all_classes()
    ]


def get_class(class_id: str, db: DatabaseService) -> Optional[class_model.Class]:
    found = db.get_class_by_id(class_id)
    return class_model.Class.model_validate(found) if found else None


# --- Members ---

def list_members(class_id: str, db: DatabaseService) -> List[person_model.Person]:
    return [person_model.Person.model_validate(u) for u in db.get_users_by_class_id(class_id)]


def get_person(person_id: str, db: DatabaseService) -> Optional[person_model.Person]:
    person = db.get_user_by_id(person_id)
    return person_model.Person.model_validate(person) if person else None


def add_person(class_id: str, person_data: person_model.PersonCreate, db: DatabaseService) -> person_model.Person:
    """Enrolls a person. Email must be globally unique, roll number unique in the class."""
    if not db.get_class_by_id(class_id):
        raise NotFoundError(f"Class with ID {class_id} not found")
    if db.is_email_taken(person_data.email):
        raise ValueError("Email already exists")
    if person_data.roll_no and db.is_roll_no_taken(class_id, person_data.roll_no):
        raise ValueError("Roll number already exists in this class")

    record = {"id": f"usr_{uuid.uuid4().hex[:12]}", "class_id": class_id, **person_data.model_dump()}
    person = db.add_user(record)
    if person.role == Role.CR:
        _warn_if_too_many_crs(class_id, db)
    if person.role == Role.STUDENT:
        task_service.initialize_statuses_for_new_student(person.id, class_id, db)
    logger.info("Enrolled %s %s in class %s", person.role.value, person.id, class_id)
    return person_model.Person.model_validate(person)


def update_person(person_id: str, update: person_model.PersonUpdate, db: DatabaseService) -> Optional[person_model.Person]:
    data = update.model_dump(exclude_unset=True)
    if not data:
        raise ValueError("No update data provided.")
    existing = db.get_user_by_id(person_id)
    if not existing:
        return None
    if data.get("email"):
        data["email"] = data["email"].strip().lower()
        if db.is_email_taken(data["email"], exclude_user_id=person_id):
            raise ValueError("Email already exists")
    if data.get("roll_no") and db.is_roll_no_taken(existing.class_id, data["roll_no"], exclude_user_id=person_id):
        raise ValueError("Roll number already exists in this class")
    return person_model.Person.model_validate(db.update_user(person_id, data))


def change_role(person_id: str, new_role: Role, db: DatabaseService) -> person_model.Person:
    """Promotes a student to CR or demotes a CR. The primary CR cannot be demoted."""
    person = db.get_user_by_id(person_id)
    if not person:
        raise NotFoundError(f"Person with ID {person_id} not found")
    if person.is_primary and new_role != Role.CR:
        raise InvalidStateError("Cannot demote the primary CR account")
    if person.role == Role.ADMIN:
        raise InvalidStateError("Admin accounts cannot change role")

    updated = db.update_user(person_id, {"role": new_role})
    if new_role == Role.CR:
        _warn_if_too_many_crs(person.class_id, db)
    logger.info("Changed role of %s to %s", person_id, new_role.value)
    return person_model.Person.model_validate(updated)


def assign_cr(person_id: str, db: DatabaseService) -> person_model.Person:
    return change_role(person_id, Role.CR, db)


def set_preferred_language(person_id: str, language: Optional[Language], db: DatabaseService) -> Optional[person_model.Person]:
    updated = db.update_user(person_id, {"preferred_language": language})
    return person_model.Person.model_validate(updated) if updated else None


def delete_person(person_id: str, db: DatabaseService) -> Optional[person_model.PersonDeletionSummary]:
    """
    Removes a person together with every status row and preference row that
    references them. Rows of other people are untouched.
    """
    person = db.get_user_by_id(person_id)
    if not person:
        return None
    if person.is_primary:
        raise InvalidStateError("Cannot delete the primary CR account")

    statuses_removed = attendance_service.delete_statuses_for_person(person_id, db)
    preferences_removed = db.delete_preferences_by_student_id(person_id)
    db.delete_user(person_id)
    logger.info("Deleted person %s (%d status row(s), %d preference(s))",
                person_id, statuses_removed, preferences_removed)
    return person_model.PersonDeletionSummary(
        personId=person_id, statusesRemoved=statuses_removed, preferencesRemoved=preferences_removed,
    )


def _warn_if_too_many_crs(class_id: str, db: DatabaseService) -> None:
    cr_count = len(db.get_users_by_roles(class_id, [Role.CR]))
    if cr_count > settings.MAX_CRS_PER_CLASS:
        logger.warning("Class %s now has %d CRs (convention is %d)", class_id, cr_count, settings.MAX_CRS_PER_CLASS)
