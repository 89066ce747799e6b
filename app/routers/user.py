# app/routers/user.py
from fastapi import APIRouter, Depends, HTTPException, status
from typing import Optional
from app.database import get_store
from app.exceptions import StoreError
from app.routers.errors import http_error
from app.schemas.common import success
from app.schemas.user import EmailCheck, UserCreate, UserTeamsAdd, UserUpdate
from app.store import RelationalStore
from app.utils.hierarchy import HierarchyManager

router = APIRouter()

@router.get("")
def get_users(
    active: Optional[bool] = None,
    is_leader: Optional[bool] = None,
    is_director: Optional[bool] = None,
    is_leader_or_director: Optional[bool] = None,
    reports_to: Optional[str] = None,
    store: RelationalStore = Depends(get_store)
):
    """Get users matching every given filter"""
    users = store.list_users(
        active=active,
        is_leader=is_leader,
        is_director=is_director,
        is_leader_or_director=is_leader_or_director,
        reports_to=reports_to
    )
    return success(users)

@router.get("/check-email/{email}")
def check_email(email: str, store: RelationalStore = Depends(get_store)):
    """Check whether an email is already registered"""
    exists = any(user.email.lower() == email.lower() for user in store.users)
    return success(EmailCheck(exists=exists))

@router.get("/leader/{leader_id}/subordinates")
def get_subordinates(leader_id: str, recursive: bool = False, store: RelationalStore = Depends(get_store)):
    """Get the users reporting to a leader (directly, or at any depth with recursive=true)"""
    if not store.get_user_by_id(leader_id):
        raise HTTPException(status_code=404, detail="User not found")

    hierarchy = HierarchyManager(store)
    if recursive:
        return success(hierarchy.get_all_subordinates(leader_id))
    return success(hierarchy.get_direct_subordinates(leader_id))

@router.post("/create-with-auth", status_code=status.HTTP_201_CREATED)
def create_user_with_auth(user: UserCreate, store: RelationalStore = Depends(get_store)):
    """Create a user together with its login credentials"""
    if not user.password:
        raise HTTPException(status_code=400, detail="Password is required")
    # Demo mode keeps no credentials; the password is only checked for presence
    try:
        created = store.add_user(user)
    except StoreError as e:
        raise http_error(e)
    return success(created, message="User created successfully")

@router.get("/{user_id}")
def get_user(user_id: str, store: RelationalStore = Depends(get_store)):
    """Get a specific user by ID"""
    user = store.get_user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return success(user)

@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, store: RelationalStore = Depends(get_store)):
    """Create a new user and add it to its teams"""
    try:
        created = store.add_user(user)
    except StoreError as e:
        raise http_error(e)
    return success(created, message="User created successfully")

@router.put("/{user_id}")
def update_user(user_id: str, user_update: UserUpdate, store: RelationalStore = Depends(get_store)):
    """Update a user"""
    try:
        updated = store.update_user(user_id, user_update)
    except StoreError as e:
        raise http_error(e)
    return success(updated, message="User updated successfully")

@router.delete("/{user_id}")
def delete_user(user_id: str, store: RelationalStore = Depends(get_store)):
    """Delete a user who leads no team"""
    try:
        store.delete_user(user_id)
    except StoreError as e:
        raise http_error(e)
    return success(message="User deleted successfully")

@router.get("/{user_id}/teams")
def get_user_teams(user_id: str, store: RelationalStore = Depends(get_store)):
    """Get the teams a user belongs to"""
    if not store.get_user_by_id(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return success(store.get_teams_by_user(user_id))

@router.post("/{user_id}/teams")
def add_user_to_teams(user_id: str, payload: UserTeamsAdd, store: RelationalStore = Depends(get_store)):
    """Add a user to more teams, keeping its current ones"""
    user = store.get_user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    team_ids = user.team_ids + [team_id for team_id in payload.team_ids if team_id not in user.team_ids]
    try:
        updated = store.update_user(user_id, UserUpdate(team_ids=team_ids))
    except StoreError as e:
        raise http_error(e)
    return success(updated, message="User added to teams")
