from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from app.models.pdi import PdiItem


class PdiCreate(BaseModel):
    employee_id: str
    cycle_id: Optional[str] = None
    leader_evaluation_id: Optional[str] = None
    items: List[PdiItem] = Field(default_factory=list)
    period: str = "annual"
    status: Literal["draft", "active", "completed", "cancelled"] = "active"
