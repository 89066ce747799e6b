# app/schemas/drafts.py
"""
Form state carried by the registration/edit wizard.

Each entity kind has its own draft so a wizard path only carries the fields
it validates. Values hold whatever the operator has typed so far (plain
strings, empty by default) and are converted to the strict create/update
payloads only on submit.
"""
from datetime import date
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, Field


class ProfileType(str, Enum):
    REGULAR = "regular"
    LEADER = "leader"
    DIRECTOR = "director"


class UserDraft(BaseModel):
    kind: Literal["user"] = "user"
    profile_type: ProfileType = ProfileType.REGULAR
    name: str = ""
    email: str = ""
    password: str = ""
    phone: str = ""
    birth_date: Optional[date] = None
    join_date: Optional[date] = None
    position: str = ""
    team_ids: List[str] = Field(default_factory=list)
    reports_to: str = ""
    profile_image: Optional[str] = None

    model_config = {
        "validate_assignment": True
    }

    @property
    def is_leader(self) -> bool:
        return self.profile_type != ProfileType.REGULAR

    @property
    def is_director(self) -> bool:
        return self.profile_type == ProfileType.DIRECTOR


class TeamDraft(BaseModel):
    kind: Literal["team"] = "team"
    name: str = ""
    department_id: str = ""
    responsible_id: str = ""
    member_ids: List[str] = Field(default_factory=list)
    description: str = ""

    model_config = {
        "validate_assignment": True
    }


class DepartmentDraft(BaseModel):
    kind: Literal["department"] = "department"
    name: str = ""
    description: str = ""

    model_config = {
        "validate_assignment": True
    }


Draft = Annotated[Union[UserDraft, TeamDraft, DepartmentDraft], Field(discriminator="kind")]
