# /app/services/elective_service.py

"""
This service module owns the course structure of a class: its subjects, the
options of each elective group, and which option every student picked.

It supplies the roster resolver with option-to-student membership and
guards subject deletion so preferences are never orphaned.
"""

import logging
import uuid
from typing import Dict, List, Optional

from ..core.exceptions import InvalidStateError, NotFoundError
from ..models import subject_model
from ..models.enums import ROSTER_ROLES, SubjectType
from .database_service import DatabaseService

logger = logging.getLogger(__name__)


# --- Subjects ---

def list_subjects(class_id: str, db: DatabaseService) -> List[subject_model.Subject]:
    return [subject_model.Subject.model_validate(s) for s in db.get_subjects_by_class_id(class_id)]


def get_subject(subject_id: str, db: DatabaseService) -> Optional[subject_model.Subject]:
    subject = db.get_subject_by_id(subject_id)
    return subject_model.Subject.model_validate(subject) if subject else None


def create_subject(class_id: str, subject_data: subject_model.SubjectCreate, db: DatabaseService) -> subject_model.Subject:
    """
    Creates a subject. Option counts were already validated by `SubjectCreate`,
    so nothing reaches the database for a malformed elective.
    """
    if not db.get_class_by_id(class_id):
        raise NotFoundError(f"Class with ID {class_id} not found")

    record = {
        "id": f"sub_{uuid.uuid4().hex[:12]}",
        "class_id": class_id,
        "name": subject_data.name.strip(),
        "type": subject_data.type,
    }
    subject = db.add_subject(record, subject_data.options)
    logger.info("Created %s subject %s (%s) with %d option(s)",
                subject.type.value, subject.id, subject.name, len(subject_data.options))
    return subject_model.Subject.model_validate(subject)


def rename_subject(subject_id: str, update: subject_model.SubjectUpdate, db: DatabaseService) -> Optional[subject_model.Subject]:
    data = update.model_dump(exclude_unset=True, exclude_none=True)
    if not data:
        raise ValueError("No update data provided.")
    subject = db.update_subject(subject_id, data)
    return subject_model.Subject.model_validate(subject) if subject else None


def replace_options(subject_id: str, option_names: List[str], db: DatabaseService) -> subject_model.Subject:
    """Swaps the option set of an elective. Refused while any student still holds a preference."""
    subject = db.get_subject_by_id(subject_id)
    if not subject:
        raise NotFoundError(f"Subject with ID {subject_id} not found")
    if subject.type != SubjectType.ELECTIVE_GROUP:
        raise InvalidStateError(f"Subject '{subject.name}' is not an elective group and has no options.")
    assigned = db.count_preferences_by_subject_id(subject_id)
    if assigned:
        raise InvalidStateError(
            f"This subject has {assigned} student preference(s) assigned. Please remove these first."
        )
    db.replace_options(subject_id, option_names)
    return subject_model.Subject.model_validate(db.get_subject_by_id(subject_id))


def can_delete_subject(subject_id: str, db: DatabaseService) -> subject_model.SubjectDeletionCheck:
    assigned = db.count_preferences_by_subject_id(subject_id)
    if assigned > 0:
        return subject_model.SubjectDeletionCheck(
            canDelete=False,
            reason=f"This subject has {assigned} student preference(s) assigned. Please remove these first.",
        )
    return subject_model.SubjectDeletionCheck(canDelete=True)


def delete_subject(subject_id: str, db: DatabaseService) -> subject_model.SubjectDeletionCheck:
    """
    Deletes a subject (and its options) only if no preference references it.
    The returned check explains why nothing happened when deletion is refused.
    """
    if not db.get_subject_by_id(subject_id):
        return subject_model.SubjectDeletionCheck(canDelete=False, reason=f"Subject with ID {subject_id} not found")

    check = can_delete_subject(subject_id, db)
    if not check.canDelete:
        logger.warning("Refused to delete subject %s: %s", subject_id, check.reason)
        return check

    db.delete_subject(subject_id)
    logger.info("Deleted subject %s", subject_id)
    return check


# --- Preferences ---

def set_preference(student_id: str, subject_id: str, option_id: Optional[str], db: DatabaseService) -> Optional[subject_model.Preference]:
    """
    Records a student's chosen option for an elective.

    `None` clears the preference (the student becomes unassigned). Otherwise the
    single (student, subject) row is inserted or updated in one statement.
    """
    student = db.get_user_by_id(student_id)
    if not student:
        raise NotFoundError(f"Person with ID {student_id} not found")
    subject = db.get_subject_by_id(subject_id)
    if not subject:
        raise NotFoundError(f"Subject with ID {subject_id} not found")

    if option_id is None:
        removed = db.delete_preference(student_id, subject_id)
        if removed:
            logger.info("Cleared preference of %s for subject %s", student_id, subject_id)
        return None

    if subject.type != SubjectType.ELECTIVE_GROUP:
        raise InvalidStateError(f"Subject '{subject.name}' is not an elective group.")
    if student.class_id != subject.class_id:
        raise InvalidStateError("The student and the subject belong to different classes.")
    option = db.get_option_by_id(option_id)
    if not option or option.subject_id != subject_id:
        raise NotFoundError(f"Option {option_id} does not belong to subject {subject_id}")

    preference = db.upsert_preference(student_id, subject_id, option_id)
    logger.info("Set preference of %s for subject %s to option %s", student_id, subject_id, option_id)
    return subject_model.Preference.model_validate(preference)


def get_preferences_for_student(student_id: str, db: DatabaseService) -> List[subject_model.Preference]:
    return [subject_model.Preference.model_validate(p) for p in db.get_preferences_by_student_id(student_id)]


def get_preferences_for_class(class_id: str, db: DatabaseService) -> List[subject_model.Preference]:
    return [subject_model.Preference.model_validate(p) for p in db.get_preferences_for_class(class_id)]


def get_membership(subject_id: str, db: DatabaseService) -> Optional[subject_model.ElectiveMembership]:
    """
    Groups the class roster by chosen option.

    Every option appears as a key, even with no members. Students without a
    preference row land only in `unassigned`, never in an option bucket.
    Member lists keep roster order (roll number, then name).
    """
    subject = db.get_subject_by_id(subject_id)
    if not subject:
        return None

    roster = db.get_users_by_roles(subject.class_id, ROSTER_ROLES)
    chosen: Dict[str, str] = {p.student_id: p.option_id for p in db.get_preferences_by_subject_id(subject_id)}

    buckets: Dict[str, List[str]] = {option.id: [] for option in db.get_options_by_subject_id(subject_id)}
    unassigned: List[str] = []
    for person in roster:
        option_id = chosen.get(person.id)
        if option_id is None:
            unassigned.append(person.id)
        elif option_id in buckets:
            buckets[option_id].append(person.id)
        else:
            # Preference points at an option that no longer exists.
            logger.warning("Preference of %s for subject %s references unknown option %s",
                           person.id, subject_id, option_id)
            unassigned.append(person.id)

    return subject_model.ElectiveMembership(subjectId=subject_id, options=buckets, unassigned=unassigned)
