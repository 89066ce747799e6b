from pydantic import AliasChoices, BaseModel, EmailStr, Field
from typing import List, Optional
from datetime import date


class UserCreate(BaseModel):
    name: str
    email: EmailStr
    position: str = ""
    is_leader: bool = False
    is_director: bool = False
    active: bool = True
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    join_date: Optional[date] = None
    reports_to: Optional[str] = None
    profile_image: Optional[str] = None
    team_ids: List[str] = Field(default_factory=list)
    leader_of_team_ids: List[str] = Field(default_factory=list)
    # Only used by the hosted backend's create-with-auth route
    password: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    position: Optional[str] = None
    is_leader: Optional[bool] = None
    is_director: Optional[bool] = None
    active: Optional[bool] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    join_date: Optional[date] = None
    reports_to: Optional[str] = None
    profile_image: Optional[str] = None
    team_ids: Optional[List[str]] = None

    model_config = {
        "from_attributes": True
    }


class UserTeamsAdd(BaseModel):
    team_ids: List[str] = Field(validation_alias=AliasChoices("team_ids", "teamIds"))


class EmailCheck(BaseModel):
    exists: bool
