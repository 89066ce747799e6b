# app/routers/team.py
from fastapi import APIRouter, Depends, HTTPException, status
from app.database import get_store
from app.exceptions import StoreError
from app.routers.errors import http_error
from app.schemas.common import success
from app.schemas.team import TeamCreate, TeamMemberAdd, TeamMembersReplace, TeamUpdate
from app.store import RelationalStore

router = APIRouter()

@router.get("")
def get_teams(store: RelationalStore = Depends(get_store)):
    """Get all teams"""
    return success(store.teams)

@router.get("/members/all")
def get_all_team_members(store: RelationalStore = Depends(get_store)):
    """Get every (team, member) pair in one call"""
    return success(store.team_memberships())

@router.get("/user/{user_id}")
def get_user_teams(user_id: str, store: RelationalStore = Depends(get_store)):
    """Get the teams a user belongs to"""
    return success(store.get_teams_by_user(user_id))

@router.get("/{team_id}")
def get_team(team_id: str, store: RelationalStore = Depends(get_store)):
    """Get a specific team"""
    team = store.get_team_by_id(team_id)
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    return success(team)

@router.post("", status_code=status.HTTP_201_CREATED)
def create_team(team: TeamCreate, store: RelationalStore = Depends(get_store)):
    """Create a new team; the leader is always added as a member"""
    try:
        created = store.add_team(team)
    except StoreError as e:
        raise http_error(e)
    return success(created, message="Team created successfully")

@router.put("/{team_id}")
def update_team(team_id: str, team_update: TeamUpdate, store: RelationalStore = Depends(get_store)):
    """Update a team"""
    try:
        updated = store.update_team(team_id, team_update)
    except StoreError as e:
        raise http_error(e)
    return success(updated, message="Team updated successfully")

@router.delete("/{team_id}")
def delete_team(team_id: str, store: RelationalStore = Depends(get_store)):
    """Delete a team"""
    try:
        store.delete_team(team_id)
    except StoreError as e:
        raise http_error(e)
    return success(message="Team deleted successfully")

@router.get("/{team_id}/members")
def get_team_members(team_id: str, store: RelationalStore = Depends(get_store)):
    """Get the members of a team"""
    if not store.get_team_by_id(team_id):
        raise HTTPException(status_code=404, detail="Team not found")
    return success(store.get_users_by_team(team_id))

@router.post("/{team_id}/members")
def add_team_member(team_id: str, member: TeamMemberAdd, store: RelationalStore = Depends(get_store)):
    """Add a member to a team"""
    try:
        team = store.add_team_member(team_id, member.user_id)
    except StoreError as e:
        raise http_error(e)
    return success(team, message="Member added successfully")

@router.put("/{team_id}/members")
def replace_team_members(team_id: str, members: TeamMembersReplace, store: RelationalStore = Depends(get_store)):
    """Replace the member list of a team (its leader always stays)"""
    try:
        team = store.update_team(team_id, TeamUpdate(member_ids=members.user_ids))
    except StoreError as e:
        raise http_error(e)
    return success(team, message="Members updated successfully")

@router.delete("/{team_id}/members/{user_id}")
def remove_team_member(team_id: str, user_id: str, store: RelationalStore = Depends(get_store)):
    """Remove a member from a team"""
    try:
        team = store.remove_team_member(team_id, user_id)
    except StoreError as e:
        raise http_error(e)
    return success(team, message="Member removed successfully")
