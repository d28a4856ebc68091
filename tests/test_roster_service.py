# /tests/test_roster_service.py

import datetime

import pytest

from app.models.enums import DayOfWeek, Language, Role, RosterMode, UNASSIGNED
from app.models.timetable_model import PeriodDescriptor, TimetableSlotIn
from app.services import roster_service, timetable_service

TUESDAY = datetime.date(2025, 3, 11)


def test_elective_period_resolves_selected_option(db_service, elective_setup):
    cls, options = elective_setup["class"], elective_setup["options"]
    period = roster_service.resolve_period(cls.id, TUESDAY, 3, db=db_service)

    roster = roster_service.resolve_roster(cls.id, period, db_service, selected_option=options["German"])

    assert roster.mode == RosterMode.ELECTIVE
    assert [m.id for m in roster.members] == [elective_setup["asha"].id]
    assert roster.needsSelection is False
    assert roster.subjectName == "Elective Lang"


def test_elective_period_unassigned_bucket(db_service, elective_setup):
    cls = elective_setup["class"]
    period = roster_service.resolve_period(cls.id, TUESDAY, 3, db=db_service)

    roster = roster_service.resolve_roster(cls.id, period, db_service, selected_option=UNASSIGNED)

    assert [m.id for m in roster.members] == [elective_setup["bilal"].id]
    assert roster.unassignedCount == 1
    assert roster.buckets[elective_setup["options"]["French"]] == []


def test_elective_period_without_selection_needs_one(db_service, elective_setup):
    cls = elective_setup["class"]
    period = roster_service.resolve_period(cls.id, TUESDAY, 3, db=db_service)

    roster = roster_service.resolve_roster(cls.id, period, db_service)

    assert roster.needsSelection is True
    assert roster.members == []
    assert set(roster.buckets) == set(elective_setup["options"].values()) | {UNASSIGNED}


def test_unknown_option_is_rejected(db_service, elective_setup):
    cls = elective_setup["class"]
    period = roster_service.resolve_period(cls.id, TUESDAY, 3, db=db_service)
    with pytest.raises(ValueError):
        roster_service.resolve_roster(cls.id, period, db_service, selected_option="opt_nope")


def test_day_without_the_period_resolves_to_none(db_service, elective_setup):
    wednesday = datetime.date(2025, 3, 12)
    assert roster_service.resolve_period(elective_setup["class"].id, wednesday, 3, db=db_service) is None


@pytest.fixture
def language_class(db_service, make_class, make_person):
    cls = make_class("Legacy Class")
    people = {
        "gita": make_person(cls.id, "Gita", roll_no="1", language=Language.GERMAN),
        "farid": make_person(cls.id, "Farid", roll_no="2", language=Language.FRENCH),
        "nora": make_person(cls.id, "Nora", roll_no="3"),
        "cory": make_person(cls.id, "Cory", roll_no="4", role=Role.CR, language=Language.GERMAN),
        "adam": make_person(cls.id, "Adam Admin", role=Role.ADMIN, language=Language.GERMAN),
    }
    return cls, people


def test_legacy_language_period_filters_by_preference(db_service, language_class, caplog):
    cls, people = language_class
    period = PeriodDescriptor(period_index=2, subject_name="German Language")

    roster = roster_service.resolve_roster(cls.id, period, db_service)

    assert roster.mode == RosterMode.LEGACY_LANGUAGE
    assert [m.id for m in roster.members] == [people["gita"].id, people["cory"].id]
    assert roster.unassignedCount == 1
    assert "no language preference" in caplog.text


def test_generic_language_period_needs_manual_selection(db_service, language_class):
    cls, people = language_class
    period = PeriodDescriptor(period_index=2, subject_name="LANGUAGE")

    unselected = roster_service.resolve_roster(cls.id, period, db_service)
    selected = roster_service.resolve_roster(cls.id, period, db_service, selected_language=Language.FRENCH)

    assert unselected.needsSelection is True
    assert unselected.members == []
    assert [m.id for m in selected.members] == [people["farid"].id]
    assert selected.selected == "FRENCH"


def test_plain_period_includes_students_and_crs_only(db_service, language_class):
    cls, people = language_class
    timetable_service.save_timetable(cls.id, [
        TimetableSlotIn(day_of_week=DayOfWeek.MON, period_index=1, subject_name="Mathematics"),
    ], db=db_service)
    period = roster_service.resolve_period(cls.id, datetime.date(2025, 3, 10), 1, db=db_service)

    roster = roster_service.resolve_roster(cls.id, period, db_service)

    assert roster.mode == RosterMode.PLAIN
    assert people["adam"].id not in {m.id for m in roster.members}
    assert len(roster.members) == 4


def test_subject_of_another_class_is_ignored(db_service, elective_setup, make_class, make_person, caplog):
    mine = make_class("Mine")
    dina = make_person(mine.id, "Dina", roll_no="1")
    period = PeriodDescriptor(period_index=1, subject_name="Elective Lang", subject_id=elective_setup["subject"].id)

    roster = roster_service.resolve_roster(mine.id, period, db_service, selected_option=UNASSIGNED)

    assert roster.mode == RosterMode.PLAIN
    assert roster.subjectId is None
    assert [m.id for m in roster.members] == [dina.id]
    assert elective_setup["class"].id in caplog.text
