# app/models/user.py
from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator


class User(BaseModel):
    id: str
    name: str
    email: str
    position: str = ""
    is_leader: bool = False
    is_director: bool = False
    active: bool = True
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    join_date: Optional[date] = None
    reports_to: Optional[str] = None
    profile_image: Optional[str] = None

    # Denormalized relationship fields kept in sync by the relational store
    team_ids: List[str] = Field(default_factory=list)
    leader_of_team_ids: List[str] = Field(default_factory=list)
    department_ids: List[str] = Field(default_factory=list)

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def directors_are_leaders(self):
        if self.is_director:
            self.is_leader = True
        return self
