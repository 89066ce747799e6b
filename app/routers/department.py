# app/routers/department.py
from fastapi import APIRouter, Depends, HTTPException, status
from app.database import get_store
from app.exceptions import StoreError
from app.routers.errors import http_error
from app.schemas.common import success
from app.schemas.department import DepartmentCreate, DepartmentUpdate
from app.store import RelationalStore

router = APIRouter()

@router.get("")
def get_departments(store: RelationalStore = Depends(get_store)):
    return success(store.departments)

@router.get("/{department_id}")
def get_department(department_id: str, store: RelationalStore = Depends(get_store)):
    department = store.get_department_by_id(department_id)
    if not department:
        raise HTTPException(status_code=404, detail="Department not found")
    return success(department)

@router.get("/{department_id}/teams")
def get_department_teams(department_id: str, store: RelationalStore = Depends(get_store)):
    """Get the teams owned by a department"""
    if not store.get_department_by_id(department_id):
        raise HTTPException(status_code=404, detail="Department not found")
    return success(store.get_teams_by_department(department_id))

@router.get("/{department_id}/users")
def get_department_users(department_id: str, store: RelationalStore = Depends(get_store)):
    """Get the users belonging to any team of a department"""
    if not store.get_department_by_id(department_id):
        raise HTTPException(status_code=404, detail="Department not found")
    return success(store.get_users_by_department(department_id))

@router.post("", status_code=status.HTTP_201_CREATED)
def create_department(department: DepartmentCreate, store: RelationalStore = Depends(get_store)):
    try:
        created = store.add_department(department)
    except StoreError as e:
        raise http_error(e)
    return success(created, message="Department created successfully")

@router.put("/{department_id}")
def update_department(department_id: str, department_update: DepartmentUpdate, store: RelationalStore = Depends(get_store)):
    try:
        updated = store.update_department(department_id, department_update)
    except StoreError as e:
        raise http_error(e)
    return success(updated, message="Department updated successfully")

@router.delete("/{department_id}")
def delete_department(department_id: str, store: RelationalStore = Depends(get_store)):
    """Delete a department no team belongs to"""
    try:
        store.delete_department(department_id)
    except StoreError as e:
        raise http_error(e)
    return success(message="Department deleted successfully")
