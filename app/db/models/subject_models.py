# /app/db/models/subject_models.py

"""
ORM models for the course structure: subjects, the options of an elective
group, and each student's chosen option per elective.
"""

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.models.enums import SubjectType
from ..base_class import Base


class Subject(Base):
    id = Column(String, primary_key=True, index=True)
    class_id = Column(String, ForeignKey("classes.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(Enum(SubjectType, name="subject_type"), nullable=False, default=SubjectType.NORMAL)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    class_ = relationship("Class", back_populates="subjects")
    # Options go with their subject. Preferences are deliberately NOT cascaded:
    # a subject that still has preferences must be refused at the service layer.
    options = relationship(
        "SubjectOption",
        back_populates="subject",
        cascade="all, delete-orphan",
        order_by="SubjectOption.name",
    )


class SubjectOption(Base):
    __tablename__ = "subject_options"

    id = Column(String, primary_key=True, index=True)
    subject_id = Column(String, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    subject = relationship("Subject", back_populates="options")


class StudentSubjectPreference(Base):
    """
    A student's chosen option for one elective subject.

    At most one row per (student, subject); the unique constraint is what makes
    concurrent "set preference" calls resolve to a single row.
    """
    __tablename__ = "student_subject_preferences"
    __table_args__ = (
        UniqueConstraint("student_id", "subject_id", name="uq_preference_student_subject"),
    )

    id = Column(String, primary_key=True, index=True)
    student_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    subject_id = Column(String, ForeignKey("subjects.id"), nullable=False, index=True)
    option_id = Column(String, ForeignKey("subject_options.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
