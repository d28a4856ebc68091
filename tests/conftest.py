# /tests/conftest.py

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.db.base import Base
from app.models.class_model import ClassCreate
from app.models.enums import DayOfWeek, Language, Role, SubjectType
from app.models.person_model import PersonCreate
from app.models.subject_model import SubjectCreate
from app.models.timetable_model import TimetableSlotIn
from app.services import class_service, elective_service, timetable_service
from app.services.database_service import DatabaseService


@pytest.fixture
def session_factory(tmp_path):
    """
    A fresh SQLite database file per test. A file (rather than :memory:) lets
    several sessions see each other's commits, like separate requests would.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'attendance_test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def db_service(session_factory):
    session = session_factory()
    yield DatabaseService(db_session=session)
    session.close()


@pytest.fixture
def make_class(db_service):
    def _make(name="CSE 3rd Year"):
        return class_service.create_class(ClassCreate(name=name), db=db_service)
    return _make


@pytest.fixture
def make_person(db_service):
    def _make(class_id, name, roll_no=None, role=Role.STUDENT, language=None):
        person = PersonCreate(
            name=name,
            email=f"{name.lower().replace(' ', '.')}@example.com",
            roll_no=roll_no,
            role=role,
            preferred_language=language,
        )
        return class_service.add_person(class_id, person, db=db_service)
    return _make


@pytest.fixture
def elective_setup(db_service, make_class, make_person):
    """
    Class C with Tuesday period 3 bound to the elective 'Elective Lang'
    (German / French). Asha prefers German, Bilal has no preference.
    """
    cls = make_class("Class C")
    asha = make_person(cls.id, "Asha", roll_no="1", language=Language.GERMAN)
    bilal = make_person(cls.id, "Bilal", roll_no="2")
    subject = elective_service.create_subject(
        cls.id, SubjectCreate(name="Elective Lang", type=SubjectType.ELECTIVE_GROUP, options=["German", "French"]),
        db=db_service,
    )
    options = {o.name: o.id for o in subject.options}
    elective_service.set_preference(asha.id, subject.id, options["German"], db=db_service)
    timetable_service.save_timetable(cls.id, [
        TimetableSlotIn(day_of_week=DayOfWeek.TUE, period_index=3, subject_name="Elective Lang", subject_id=subject.id),
    ], db=db_service)
    return {"class": cls, "asha": asha, "bilal": bilal, "subject": subject, "options": options}
