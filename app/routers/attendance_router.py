# /app/routers/attendance_router.py

import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from ..core.deps import ensure_self_or_roles, require_roles
from ..models import attendance_model
from ..models.enums import Role
from ..models.person_model import IdentityContext
from ..services import attendance_service, export_service, language_classifier
from ..services.database_service import DatabaseService, get_db_service
from .errors import http_error_from

router = APIRouter()

markers = require_roles(Role.ADMIN, Role.CR)
any_member = require_roles(Role.ADMIN, Role.CR, Role.STUDENT)


# --- Class-scoped endpoints (/api/attendance/classes/{class_id}) ---

@router.post("/classes/{class_id}/dates/{day}/periods/{period_index}", response_model=attendance_model.PeriodAttendance, summary="Open a Period for Marking")
def open_period(
    class_id: str,
    day: datetime.date,
    period_index: int,
    option: Optional[str] = Query(default=None, description="Elective option id, or UNASSIGNED."),
    language: Optional[str] = Query(default=None, description="GERMAN or FRENCH, for legacy language periods."),
    identity: IdentityContext = Depends(markers),
    db: DatabaseService = Depends(get_db_service),
):
    """
    Resolves who needs a mark for this period, creates the attendance task on
    first access and returns each member's current status.
    """
    selected_language = language_classifier.parse_language(language)
    if language and selected_language is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown language '{language}'")
    try:
        return attendance_service.open_period_attendance(
            class_id=class_id, day=day, period_index=period_index, creator_id=identity.person_id,
            db=db, selected_option=option, selected_language=selected_language,
        )
    except ValueError as e:
        raise http_error_from(e)

@router.post("/classes/{class_id}/dates/{day}/daily", response_model=attendance_model.TaskInitResult, summary="Get or Create the Daily Attendance Task")
def open_daily(class_id: str, day: datetime.date, identity: IdentityContext = Depends(markers), db: DatabaseService = Depends(get_db_service)):
    try:
        return attendance_service.get_or_create_daily_task(class_id=class_id, day=day, creator_id=identity.person_id, db=db)
    except ValueError as e:
        raise http_error_from(e)

@router.get("/classes/{class_id}/dates/{day}", response_model=attendance_model.DayOverview, summary="Get the Periods of a Date and Which Are Marked")
def get_day_overview(class_id: str, day: datetime.date, _=Depends(markers), db: DatabaseService = Depends(get_db_service)):
    return attendance_service.get_day_overview(class_id=class_id, day=day, db=db)

@router.get("/classes/{class_id}/marked-dates", response_model=List[attendance_model.MarkedDate], summary="List Dates That Have Attendance")
def get_marked_dates(class_id: str, start: datetime.date, end: datetime.date, _=Depends(markers), db: DatabaseService = Depends(get_db_service)):
    try:
        return attendance_service.get_marked_dates(class_id=class_id, start=start, end=end, db=db)
    except ValueError as e:
        raise http_error_from(e)

@router.get("/classes/{class_id}/export", summary="Download Weekly Attendance as CSV", response_class=StreamingResponse)
def export_weekly(
    class_id: str,
    week: int = Query(..., ge=1, le=4),
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000),
    _=Depends(markers),
    db: DatabaseService = Depends(get_db_service),
):
    try:
        csv_text = export_service.export_weekly_attendance_as_csv(class_id=class_id, week_number=week, month=month, year=year, db=db)
    except ValueError as e:
        raise http_error_from(e)
    filename = f"attendance_{class_id}_{year}-{month:02d}_week{week}.csv"
    return StreamingResponse(iter([csv_text]), media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})


# --- Task-scoped endpoints (/api/attendance/tasks/{task_id}) ---

@router.get("/tasks/{task_id}/statuses", response_model=List[attendance_model.TaskStatus], summary="List the Status Rows of a Task")
def get_statuses(task_id: str, _=Depends(markers), db: DatabaseService = Depends(get_db_service)):
    return attendance_service.get_statuses(task_id=task_id, db=db)

@router.put("/tasks/{task_id}/statuses", response_model=List[attendance_model.TaskStatus], summary="Mark Everyone on a Task")
def bulk_set_status(task_id: str, body: attendance_model.BulkStatusUpdate, _=Depends(markers), db: DatabaseService = Depends(get_db_service)):
    try:
        return attendance_service.bulk_set_status(task_id=task_id, value=body.status, db=db)
    except ValueError as e:
        raise http_error_from(e)

@router.put("/tasks/{task_id}/statuses/{person_id}", response_model=attendance_model.TaskStatus, summary="Set One Person's Status")
def set_status(task_id: str, person_id: str, body: attendance_model.StatusUpdate, _=Depends(markers), db: DatabaseService = Depends(get_db_service)):
    try:
        return attendance_service.set_status(task_id=task_id, person_id=person_id, value=body.status, db=db, remarks=body.remarks)
    except ValueError as e:
        raise http_error_from(e)

@router.post("/tasks/{task_id}/statuses/{person_id}/toggle", response_model=attendance_model.TaskStatus, summary="Toggle Present/Absent")
def toggle_status(task_id: str, person_id: str, _=Depends(markers), db: DatabaseService = Depends(get_db_service)):
    try:
        return attendance_service.toggle_status(task_id=task_id, person_id=person_id, db=db)
    except ValueError as e:
        raise http_error_from(e)

@router.post("/tasks/{task_id}/reseed", summary="Seed Status Rows for People Newly in Scope")
def reseed(task_id: str, body: attendance_model.RosterReseed, _=Depends(markers), db: DatabaseService = Depends(get_db_service)):
    try:
        created = attendance_service.reseed_for_roster_change(task_id=task_id, person_ids=body.person_ids, db=db)
    except ValueError as e:
        raise http_error_from(e)
    return {"taskId": task_id, "created": created}


# --- Student view ---

@router.get("/students/{person_id}", response_model=attendance_model.StudentAttendanceHistory, summary="Get a Student's Attendance History")
def get_student_attendance(
    person_id: str,
    start: Optional[datetime.date] = None,
    end: Optional[datetime.date] = None,
    identity: IdentityContext = Depends(any_member),
    db: DatabaseService = Depends(get_db_service),
):
    ensure_self_or_roles(identity, person_id, Role.ADMIN, Role.CR)
    history = attendance_service.get_student_attendance(person_id=person_id, db=db, start=start, end=end)
    if history is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Person with ID {person_id} not found")
    return history
