# /app/routers/timetable_router.py

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from ..core.deps import require_roles
from ..models import timetable_model
from ..models.enums import Role
from ..services import timetable_service
from ..services.database_service import DatabaseService, get_db_service
from .errors import http_error_from

router = APIRouter()

class_managers = require_roles(Role.ADMIN, Role.CR)
any_member = require_roles(Role.ADMIN, Role.CR, Role.STUDENT)


@router.get("/{class_id}", response_model=List[List[timetable_model.TimetableSlot]], summary="Get the Weekly Timetable Grid")
def get_timetable(class_id: str, _=Depends(any_member), db: DatabaseService = Depends(get_db_service)):
    """Monday to Saturday, one row per day; empty periods carry default times."""
    return timetable_service.get_timetable_grid(class_id=class_id, db=db)

@router.put("/{class_id}", response_model=List[timetable_model.TimetableSlot], summary="Replace the Weekly Timetable")
def save_timetable(class_id: str, body: timetable_model.TimetableSave, _=Depends(class_managers), db: DatabaseService = Depends(get_db_service)):
    try:
        return timetable_service.save_timetable(class_id=class_id, slots=body.slots, db=db)
    except ValueError as e:
        raise http_error_from(e)

@router.get("/{class_id}/day/{day}", response_model=List[timetable_model.TimetableSlot], summary="Get the Periods of One Weekday")
def get_timetable_for_day(class_id: str, day: str, _=Depends(any_member), db: DatabaseService = Depends(get_db_service)):
    day_code = timetable_service.parse_day(day)
    if day_code is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown day '{day}'")
    return timetable_service.get_timetable_for_day(class_id=class_id, day=day_code, db=db)
