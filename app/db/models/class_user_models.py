# /app/db/models/class_user_models.py

"""
This module defines the SQLAlchemy ORM models for the `Class` and `User`
entities. A class owns its members; a member is a student, a Class
Representative (CR) or an admin.
"""

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.models.enums import Language, ProgrammingPreference, Role
from ..base_class import Base


class Class(Base):
    """
    SQLAlchemy model representing a single class / cohort.

    Deleting a class removes its members, subjects, timetable and tasks.
    """
    __tablename__ = "classes"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    section = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    members = relationship("User", back_populates="class_", cascade="all, delete-orphan")
    subjects = relationship("Subject", back_populates="class_", cascade="all, delete-orphan")
    timetable_slots = relationship("TimetableSlot", cascade="all, delete-orphan")
    tasks = relationship("Task", back_populates="class_", cascade="all, delete-orphan")


class User(Base):
    """
    SQLAlchemy model representing a person inside a class.

    `is_primary` marks the CR account that can be neither demoted nor deleted.
    """
    __table_args__ = (
        UniqueConstraint("class_id", "roll_no", name="uq_user_roll_no_per_class"),
    )

    id = Column(String, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    role = Column(Enum(Role, name="user_role"), nullable=False, default=Role.STUDENT)
    roll_no = Column(String, nullable=True)
    preferred_language = Column(Enum(Language, name="preferred_language"), nullable=True)
    programming_preference = Column(Enum(ProgrammingPreference, name="programming_preference"), nullable=True)
    is_primary = Column(Boolean, nullable=False, default=False)

    class_id = Column(String, ForeignKey("classes.id"), nullable=False, index=True)
    class_ = relationship("Class", back_populates="members")
