# /app/services/database_helpers/timetable_repository_sql.py

import uuid
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.db.models.timetable_models import TimetableSlot
from app.models.enums import DayOfWeek


class TimetableRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_slots_by_class_id(self, class_id: str) -> List[TimetableSlot]:
        return (
            self.db.query(TimetableSlot)
            .filter(TimetableSlot.class_id == class_id)
            .order_by(TimetableSlot.period_index)
            .all()
        )

    def get_slots_for_day(self, class_id: str, day: DayOfWeek) -> List[TimetableSlot]:
        return (
            self.db.query(TimetableSlot)
            .filter(TimetableSlot.class_id == class_id, TimetableSlot.day_of_week == day)
            .order_by(TimetableSlot.period_index)
            .all()
        )

    def get_slot(self, class_id: str, day: DayOfWeek, period_index: int) -> Optional[TimetableSlot]:
        return (
            self.db.query(TimetableSlot)
            .filter(
                TimetableSlot.class_id == class_id,
                TimetableSlot.day_of_week == day,
                TimetableSlot.period_index == period_index,
            )
            .first()
        )

    def replace_slots(self, class_id: str, records: List[Dict]) -> List[TimetableSlot]:
        """Drops the class's whole timetable and writes `records` in its place."""
        self.db.query(TimetableSlot).filter(TimetableSlot.class_id == class_id).delete(synchronize_session=False)
        for record in records:
            self.db.add(TimetableSlot(id=f"slot_{uuid.uuid4().hex[:12]}", class_id=class_id, **record))
        self.db.commit()
        return self.get_slots_by_class_id(class_id)
