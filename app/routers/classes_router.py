# /app/routers/classes_router.py

from fastapi import APIRouter, Depends, HTTPException, status, Response
from typing import List

from ..core.deps import require_roles
from ..models import class_model, person_model
from ..models.enums import Role
from ..services import class_service, database_service
from .errors import http_error_from

router = APIRouter()

admin_only = require_roles(Role.ADMIN)
class_managers = require_roles(Role.ADMIN, Role.CR)
any_member = require_roles(Role.ADMIN, Role.CR, Role.STUDENT)

# --- CLASS COLLECTION ENDPOINTS (/api/classes) ---

@router.get("", response_model=List[class_model.ClassSummary], summary="Get All Classes with Member Counts")
def get_all_classes(_=Depends(admin_only), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return class_service.get_all_classes_with_summary(db=db)

@router.post("", response_model=class_model.Class, status_code=status.HTTP_201_CREATED, summary="Create a New Class")
def create_new_class(class_create: class_model.ClassCreate, _=Depends(admin_only), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return class_service.create_class(class_data=class_create, db=db)

# --- INDIVIDUAL CLASS RESOURCE ENDPOINTS (/api/classes/{class_id}) ---

@router.get("/{class_id}", response_model=class_model.Class, summary="Get a Single Class")
def get_class_by_id(class_id: str, _=Depends(any_member), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    found = class_service.get_class(class_id=class_id, db=db)
    if found is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Class with ID {class_id} not found")
    return found

@router.put("/{class_id}", response_model=class_model.Class, summary="Update a Class")
def update_class_details(class_id: str, class_update: class_model.ClassCreate, _=Depends(admin_only), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        updated_class = class_service.update_class(class_id=class_id, class_update=class_update, db=db)
    except ValueError as e:
        raise http_error_from(e)
    if updated_class is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Class with ID {class_id} not found")
    return updated_class

@router.delete("/{class_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a Class")
def delete_class(class_id: str, _=Depends(admin_only), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    was_deleted = class_service.delete_class_by_id(class_id=class_id, db=db)
    if not was_deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Class with ID {class_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# --- MEMBER SUB-RESOURCE ENDPOINTS ---

@router.get("/{class_id}/members", response_model=List[person_model.Person], summary="List Class Members")
def list_members(class_id: str, _=Depends(class_managers), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return class_service.list_members(class_id=class_id, db=db)

@router.post("/{class_id}/members", response_model=person_model.Person, status_code=status.HTTP_201_CREATED, summary="Enroll a Member")
def add_member(class_id: str, person_create: person_model.PersonCreate, _=Depends(class_managers), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return class_service.add_person(class_id=class_id, person_data=person_create, db=db)
    except ValueError as e:
        raise http_error_from(e)

@router.put("/{class_id}/members/{person_id}", response_model=person_model.Person, summary="Update a Member")
def update_member(class_id: str, person_id: str, person_update: person_model.PersonUpdate, _=Depends(class_managers), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        updated = class_service.update_person(person_id=person_id, update=person_update, db=db)
    except ValueError as e:
        raise http_error_from(e)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Person with ID {person_id} not found")
    return updated

@router.put("/{class_id}/members/{person_id}/role", response_model=person_model.Person, summary="Promote or Demote a CR")
def change_member_role(class_id: str, person_id: str, role_change: person_model.RoleChange, _=Depends(admin_only), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return class_service.change_role(person_id=person_id, new_role=role_change.role, db=db)
    except ValueError as e:
        raise http_error_from(e)

@router.put("/{class_id}/members/{person_id}/language", response_model=person_model.Person, summary="Set a Member's Language Preference")
def set_member_language(class_id: str, person_id: str, change: person_model.LanguageChange, _=Depends(class_managers), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    updated = class_service.set_preferred_language(person_id=person_id, language=change.preferred_language, db=db)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Person with ID {person_id} not found")
    return updated

@router.delete("/{class_id}/members/{person_id}", response_model=person_model.PersonDeletionSummary, summary="Remove a Member")
def remove_member(class_id: str, person_id: str, _=Depends(class_managers), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        summary = class_service.delete_person(person_id=person_id, db=db)
    except ValueError as e:
        raise http_error_from(e)
    if summary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Person with ID {person_id} not found in class {class_id}")
    return summary

@router.post("/{class_id}/members/{person_id}/cr", response_model=person_model.Person, summary="Assign a Member as CR")
def assign_class_representative(class_id: str, person_id: str, _=Depends(admin_only), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return class_service.assign_cr(person_id=person_id, db=db)
    except ValueError as e:
        raise http_error_from(e)
