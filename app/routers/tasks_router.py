# /app/routers/tasks_router.py

from fastapi import APIRouter, Depends, HTTPException, Query, status, Response
from typing import List, Optional

from ..core.deps import ensure_self_or_roles, require_roles
from ..models import attendance_model
from ..models.enums import Role, TaskType
from ..models.person_model import IdentityContext
from ..services import attendance_service, task_service
from ..services.database_service import DatabaseService, get_db_service
from .errors import http_error_from

router = APIRouter()

class_managers = require_roles(Role.ADMIN, Role.CR)
any_member = require_roles(Role.ADMIN, Role.CR, Role.STUDENT)


@router.get("/class/{class_id}", response_model=List[attendance_model.Task], summary="List the Tasks of a Class")
def list_tasks(class_id: str, task_type: Optional[TaskType] = Query(default=None, alias="type"), _=Depends(any_member), db: DatabaseService = Depends(get_db_service)):
    return task_service.list_tasks(class_id=class_id, db=db, task_type=task_type)

@router.post("/class/{class_id}", response_model=attendance_model.TaskInitResult, status_code=status.HTTP_201_CREATED, summary="Create an Assignment")
def create_assignment(class_id: str, body: attendance_model.AssignmentCreate, identity: IdentityContext = Depends(class_managers), db: DatabaseService = Depends(get_db_service)):
    try:
        return task_service.create_assignment(class_id=class_id, data=body, creator_id=identity.person_id, db=db)
    except ValueError as e:
        raise http_error_from(e)

@router.get("/{task_id}", response_model=attendance_model.Task, summary="Get a Single Task")
def get_task(task_id: str, _=Depends(any_member), db: DatabaseService = Depends(get_db_service)):
    task = task_service.get_task(task_id=task_id, db=db)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Task with ID {task_id} not found")
    return task

@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a Task and Its Statuses")
def delete_task(task_id: str, _=Depends(class_managers), db: DatabaseService = Depends(get_db_service)):
    if not task_service.delete_task(task_id=task_id, db=db):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Task with ID {task_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{task_id}/statuses", response_model=List[attendance_model.TaskStatus], summary="List the Status Rows of a Task")
def get_statuses(task_id: str, _=Depends(class_managers), db: DatabaseService = Depends(get_db_service)):
    return attendance_service.get_statuses(task_id=task_id, db=db)

@router.put("/{task_id}/statuses/{person_id}", response_model=attendance_model.TaskStatus, summary="Submit a Status with Remarks")
def submit_status(task_id: str, person_id: str, body: attendance_model.StatusUpdate, identity: IdentityContext = Depends(any_member), db: DatabaseService = Depends(get_db_service)):
    ensure_self_or_roles(identity, person_id, Role.ADMIN, Role.CR)
    try:
        return task_service.submit_status(task_id=task_id, person_id=person_id, status=body.status, remarks=body.remarks, db=db)
    except ValueError as e:
        raise http_error_from(e)
