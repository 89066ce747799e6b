# app/routers/competency.py
# Organizational competencies, evaluated for every employee
from fastapi import APIRouter, Depends, HTTPException, status
from app.database import get_store
from app.exceptions import StoreError
from app.routers.errors import http_error
from app.schemas.common import success
from app.schemas.competency import CompetencyCreate, CompetencyUpdate
from app.store import RelationalStore

router = APIRouter()

@router.get("/organizational")
def get_competencies(store: RelationalStore = Depends(get_store)):
    return success(store.list_competencies())

@router.get("/organizational/{competency_id}")
def get_competency(competency_id: str, store: RelationalStore = Depends(get_store)):
    competency = store.get_competency(competency_id)
    if not competency:
        raise HTTPException(status_code=404, detail="Competency not found")
    return success(competency)

@router.post("/organizational", status_code=status.HTTP_201_CREATED)
def create_competency(competency: CompetencyCreate, store: RelationalStore = Depends(get_store)):
    try:
        created = store.add_competency(competency)
    except StoreError as e:
        raise http_error(e)
    return success(created, message="Competency created successfully")

@router.put("/organizational/{competency_id}")
def update_competency(competency_id: str, competency_update: CompetencyUpdate, store: RelationalStore = Depends(get_store)):
    try:
        updated = store.update_competency(competency_id, competency_update)
    except StoreError as e:
        raise http_error(e)
    return success(updated, message="Competency updated successfully")

@router.delete("/organizational/{competency_id}")
def delete_competency(competency_id: str, store: RelationalStore = Depends(get_store)):
    try:
        store.delete_competency(competency_id)
    except StoreError as e:
        raise http_error(e)
    return success(message="Competency deleted successfully")
