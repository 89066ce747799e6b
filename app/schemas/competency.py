from pydantic import BaseModel
from typing import Optional


class CompetencyCreate(BaseModel):
    name: str
    description: Optional[str] = None


class CompetencyUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
