# app/models/team.py
from datetime import datetime
from typing import List, Optional
from pydantic import AliasChoices, BaseModel, Field

from app.models.user import User


class Team(BaseModel):
    id: str
    name: str
    department_id: str
    # The hosted API calls the leader "responsible"
    leader_id: str = Field(validation_alias=AliasChoices("leader_id", "responsible_id"))
    member_ids: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
        "populate_by_name": True,
        "extra": "ignore",
    }


class TeamMembership(BaseModel):
    """One (team, member) pair as served by /teams/members/all"""
    team_id: str
    user: User
