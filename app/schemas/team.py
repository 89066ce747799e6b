from pydantic import AliasChoices, BaseModel, Field
from typing import Optional, List


class TeamCreate(BaseModel):
    name: str
    department_id: str
    leader_id: str = Field(validation_alias=AliasChoices("leader_id", "responsible_id"))
    member_ids: List[str] = Field(default_factory=list)
    description: Optional[str] = None

    model_config = {
        "populate_by_name": True
    }


class TeamUpdate(BaseModel):
    name: Optional[str] = None
    department_id: Optional[str] = None
    leader_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("leader_id", "responsible_id")
    )
    member_ids: Optional[List[str]] = None
    description: Optional[str] = None

    model_config = {
        "from_attributes": True,
        "populate_by_name": True
    }


class TeamMemberAdd(BaseModel):
    user_id: str


class TeamMembersReplace(BaseModel):
    user_ids: List[str]
