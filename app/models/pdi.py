# app/models/pdi.py
# Individual development plan (PDI) records
from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class PdiItem(BaseModel):
    id: Optional[str] = None
    competency: str
    expected_results: str = ""
    how_to_develop: str = ""
    schedule: str = ""
    status: int = Field(default=1, ge=1, le=5)
    notes: Optional[str] = None
    term: Literal["short", "medium", "long"] = "medium"


class PdiRecord(BaseModel):
    id: str
    employee_id: str
    cycle_id: Optional[str] = None
    leader_evaluation_id: Optional[str] = None
    items: List[PdiItem] = Field(default_factory=list)
    period: str = "annual"
    status: Literal["draft", "active", "completed", "cancelled"] = "active"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "extra": "ignore",
    }
