# app/models/competency.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class OrganizationalCompetency(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "extra": "ignore",
    }
