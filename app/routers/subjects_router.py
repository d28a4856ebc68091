# /app/routers/subjects_router.py

from fastapi import APIRouter, Depends, HTTPException, status, Response
from typing import List, Optional

from ..core.deps import ensure_self_or_roles, require_roles
from ..models import subject_model
from ..models.enums import Role
from ..models.person_model import IdentityContext
from ..services import elective_service
from ..services.database_service import DatabaseService, get_db_service
from .errors import http_error_from

router = APIRouter()

class_managers = require_roles(Role.ADMIN, Role.CR)
any_member = require_roles(Role.ADMIN, Role.CR, Role.STUDENT)


# --- Class-scoped collection (/api/subjects/class/{class_id}) ---

@router.get("/class/{class_id}", response_model=List[subject_model.Subject], summary="List the Subjects of a Class")
def list_subjects(class_id: str, _=Depends(any_member), db: DatabaseService = Depends(get_db_service)):
    return elective_service.list_subjects(class_id=class_id, db=db)

@router.post("/class/{class_id}", response_model=subject_model.Subject, status_code=status.HTTP_201_CREATED, summary="Create a Subject or Elective Group")
def create_subject(class_id: str, subject_create: subject_model.SubjectCreate, _=Depends(class_managers), db: DatabaseService = Depends(get_db_service)):
    try:
        return elective_service.create_subject(class_id=class_id, subject_data=subject_create, db=db)
    except ValueError as e:
        raise http_error_from(e)

@router.get("/preferences/class/{class_id}", response_model=List[subject_model.Preference], summary="List All Elective Preferences of a Class")
def list_class_preferences(class_id: str, _=Depends(class_managers), db: DatabaseService = Depends(get_db_service)):
    return elective_service.get_preferences_for_class(class_id=class_id, db=db)

@router.get("/preferences/student/{student_id}", response_model=List[subject_model.Preference], summary="List a Student's Elective Preferences")
def list_student_preferences(student_id: str, identity: IdentityContext = Depends(any_member), db: DatabaseService = Depends(get_db_service)):
    ensure_self_or_roles(identity, student_id, Role.ADMIN, Role.CR)
    return elective_service.get_preferences_for_student(student_id=student_id, db=db)


# --- Individual subject (/api/subjects/{subject_id}) ---

@router.get("/{subject_id}", response_model=subject_model.Subject, summary="Get a Single Subject")
def get_subject(subject_id: str, _=Depends(any_member), db: DatabaseService = Depends(get_db_service)):
    subject = elective_service.get_subject(subject_id=subject_id, db=db)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Subject with ID {subject_id} not found")
    return subject

@router.put("/{subject_id}", response_model=subject_model.Subject, summary="Rename a Subject")
def rename_subject(subject_id: str, update: subject_model.SubjectUpdate, _=Depends(class_managers), db: DatabaseService = Depends(get_db_service)):
    try:
        subject = elective_service.rename_subject(subject_id=subject_id, update=update, db=db)
    except ValueError as e:
        raise http_error_from(e)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Subject with ID {subject_id} not found")
    return subject

@router.put("/{subject_id}/options", response_model=subject_model.Subject, summary="Replace the Options of an Elective Group")
def replace_options(subject_id: str, body: subject_model.OptionsReplace, _=Depends(class_managers), db: DatabaseService = Depends(get_db_service)):
    try:
        return elective_service.replace_options(subject_id=subject_id, option_names=body.options, db=db)
    except ValueError as e:
        raise http_error_from(e)

@router.get("/{subject_id}/can-delete", response_model=subject_model.SubjectDeletionCheck, summary="Check Whether a Subject Can Be Deleted")
def can_delete_subject(subject_id: str, _=Depends(class_managers), db: DatabaseService = Depends(get_db_service)):
    return elective_service.can_delete_subject(subject_id=subject_id, db=db)

@router.delete("/{subject_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a Subject")
def delete_subject(subject_id: str, _=Depends(class_managers), db: DatabaseService = Depends(get_db_service)):
    if elective_service.get_subject(subject_id=subject_id, db=db) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Subject with ID {subject_id} not found")
    check = elective_service.delete_subject(subject_id=subject_id, db=db)
    if not check.canDelete:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=check.reason)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{subject_id}/membership", response_model=subject_model.ElectiveMembership, summary="Students per Elective Option")
def get_membership(subject_id: str, _=Depends(class_managers), db: DatabaseService = Depends(get_db_service)):
    membership = elective_service.get_membership(subject_id=subject_id, db=db)
    if membership is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Subject with ID {subject_id} not found")
    return membership

@router.put("/{subject_id}/preferences/{student_id}", response_model=Optional[subject_model.Preference], summary="Set or Clear a Student's Elective Option")
def set_preference(subject_id: str, student_id: str, body: subject_model.PreferenceSet, identity: IdentityContext = Depends(any_member), db: DatabaseService = Depends(get_db_service)):
    ensure_self_or_roles(identity, student_id, Role.ADMIN, Role.CR)
    try:
        return elective_service.set_preference(student_id=student_id, subject_id=subject_id, option_id=body.option_id, db=db)
    except ValueError as e:
        raise http_error_from(e)
