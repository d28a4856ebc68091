# /app/services/roster_service.py

"""
Works out who must have an attendance mark for one timetable period.

Three cases, checked in order:

1. The period is linked to an ELECTIVE_GROUP subject: class members are split
   into one bucket per option plus an UNASSIGNED bucket for students with no
   preference. The caller picks the bucket; nothing is chosen here.
2. The period has no structured elective but its free-text name reads as a
   language period: members are split into GERMAN / FRENCH by their language
   preference. Members with no language are counted, not silently placed.
3. Anything else: every STUDENT and CR in the class.

Resolution is a pure read of stored state. The selected option or language is
always passed in explicitly, never taken from UI state.
"""

import datetime
import logging
from typing import Dict, List, Optional

from ..models.attendance_model import ResolvedRoster
from ..models.enums import Language, RosterMode, SubjectType, UNASSIGNED
from ..models.person_model import Person
from ..models.timetable_model import PeriodDescriptor
from . import elective_service, language_classifier, timetable_service
from .database_service import DatabaseService

logger = logging.getLogger(__name__)


def resolve_period(class_id: str, day: datetime.date, period_index: int, db: DatabaseService) -> Optional[PeriodDescriptor]:
    """Loads the timetable slot that applies to `day`; None when the weekday has no such period."""
    slot = db.get_slot(class_id, timetable_service.day_code_for(day), period_index)
    return PeriodDescriptor.model_validate(slot) if slot else None


def resolve_roster(
    class_id: str,
    period: PeriodDescriptor,
    db: DatabaseService,
    selected_option: Optional[str] = None,
    selected_language: Optional[Language] = None,
) -> ResolvedRoster:
    roster = db.get_roster_members(class_id)
    by_id = {person.id: person for person in roster}

    subject = db.get_subject_by_id(period.subject_id) if period.subject_id else None
    if period.subject_id and subject is None:
        logger.warning("Period %s of class %s links missing subject %s; using the subject name instead",
                       period.period_index, class_id, period.subject_id)
    elif subject is not None and subject.class_id != class_id:
        logger.warning("Period %s of class %s links subject %s of class %s; using the subject name instead",
                       period.period_index, class_id, subject.id, subject.class_id)
        subject = None

    if subject is not None and subject.type == SubjectType.ELECTIVE_GROUP:
        return _resolve_elective(subject, period, by_id, db, selected_option)

    if language_classifier.is_language_period(period.subject_name):
        return _resolve_legacy_language(period, roster, selected_language)

    return ResolvedRoster(
        mode=RosterMode.PLAIN,
        members=[Person.model_validate(p) for p in roster],
        subjectId=subject.id if subject is not None else None,
        subjectName=subject.name if subject is not None else period.subject_name,
    )


def _resolve_elective(subject, period: PeriodDescriptor, by_id: Dict, db: DatabaseService,
                      selected_option: Optional[str]) -> ResolvedRoster:
    membership = elective_service.get_membership(subject.id, db)
    buckets: Dict[str, List[str]] = dict(membership.options)
    buckets[UNASSIGNED] = list(membership.unassigned)

    if selected_option is not None and selected_option not in buckets:
        raise ValueError(f"Option {selected_option} is not an option of subject '{subject.name}'")

    members = [Person.model_validate(by_id[pid]) for pid in buckets[selected_option]] if selected_option else []
    return ResolvedRoster(
        mode=RosterMode.ELECTIVE,
        members=members,
        buckets=buckets,
        selected=selected_option,
        unassignedCount=len(membership.unassigned),
        needsSelection=selected_option is None,
        subjectId=subject.id,
        subjectName=subject.name or period.subject_name,
    )


def _resolve_legacy_language(period: PeriodDescriptor, roster: List, selected_language: Optional[Language]) -> ResolvedRoster:
    buckets: Dict[str, List[str]] = {Language.GERMAN.value: [], Language.FRENCH.value: []}
    for person in roster:
        if person.preferred_language is not None:
            buckets[person.preferred_language.value].append(person.id)

    unassigned_count = language_classifier.count_without_language(roster)
    if unassigned_count:
        logger.warning("%d member(s) have no language preference and are missing from period '%s'",
                       unassigned_count, period.subject_name)

    if selected_language is not None:
        language = selected_language
    elif language_classifier.needs_manual_selection(period.subject_name):
        language = None
    else:
        language = language_classifier.classify(period.subject_name)
    if language is None:
        members = []
    else:
        members = [Person.model_validate(p) for p in roster if p.preferred_language == language]

    return ResolvedRoster(
        mode=RosterMode.LEGACY_LANGUAGE,
        members=members,
        buckets=buckets,
        selected=language.value if language is not None else None,
        unassignedCount=unassigned_count,
        needsSelection=language is None,
        subjectName=period.subject_name,
    )
