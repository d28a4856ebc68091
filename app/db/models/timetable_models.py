# /app/db/models/timetable_models.py

from sqlalchemy import Column, Enum, ForeignKey, Integer, String, UniqueConstraint

from app.models.enums import DayOfWeek
from ..base_class import Base


class TimetableSlot(Base):
    """
    One cell of a class's weekly timetable template.

    `subject_name` is free text (older slots only have this); `subject_id`
    links the slot to a structured subject when one has been attached.
    """
    __tablename__ = "timetable_slots"
    __table_args__ = (
        UniqueConstraint("class_id", "day_of_week", "period_index", name="uq_timetable_slot"),
    )

    id = Column(String, primary_key=True, index=True)
    class_id = Column(String, ForeignKey("classes.id"), nullable=False, index=True)
    day_of_week = Column(Enum(DayOfWeek, name="day_of_week"), nullable=False)
    period_index = Column(Integer, nullable=False)  # 1-based
    time_start = Column(String, nullable=True)
    time_end = Column(String, nullable=True)
    subject_name = Column(String, nullable=False)
    subject_type = Column(String, nullable=True)  # 'T', 'P', 'Lab', ...
    subject_id = Column(String, ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True)
