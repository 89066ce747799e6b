# app/routers/pdi.py
from fastapi import APIRouter, Depends, HTTPException
from app.database import get_store
from app.exceptions import StoreError
from app.routers.errors import http_error
from app.schemas.common import success
from app.schemas.pdi import PdiCreate
from app.store import RelationalStore

router = APIRouter()

@router.get("/{user_id}")
def get_pdi(user_id: str, store: RelationalStore = Depends(get_store)):
    """Get the development plan of an employee"""
    pdi = store.get_pdi(user_id)
    if not pdi:
        raise HTTPException(status_code=404, detail="PDI not found")
    return success(pdi)

@router.post("")
def save_pdi(pdi: PdiCreate, store: RelationalStore = Depends(get_store)):
    """Create or replace the development plan of an employee"""
    try:
        saved = store.save_pdi(pdi)
    except StoreError as e:
        raise http_error(e)
    return success(saved, message="PDI saved successfully")
