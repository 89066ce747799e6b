# app/models/department.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class Department(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
        "extra": "ignore",
    }
