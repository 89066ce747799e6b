# app/schemas/evaluation.py
# Flat evaluation value objects. Scoring arithmetic lives in the hosted backend.
from datetime import date
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

CriterionCategory = Literal["technical", "behavioral", "deliveries"]


class CriterionScore(BaseModel):
    name: str
    description: Optional[str] = None
    category: CriterionCategory
    score: Optional[int] = Field(default=None, ge=1, le=4)


class Feedback(BaseModel):
    strengths: str = ""
    improvements: str = ""
    observations: str = ""


class Evaluation(BaseModel):
    id: Optional[str] = None
    cycle_id: str
    employee_id: str
    evaluator_id: Optional[str] = None
    evaluation_type: Literal["self", "leader"]
    status: Literal["pending", "in-progress", "completed"] = "pending"
    criteria: List[CriterionScore] = Field(default_factory=list)
    feedback: Feedback = Field(default_factory=Feedback)
    potential_score: Optional[int] = Field(default=None, ge=1, le=4)
    evaluation_date: Optional[date] = None

    def scores_for(self, category: CriterionCategory) -> List[int]:
        """Scored criteria of one category, unscored ones skipped"""
        return [c.score for c in self.criteria if c.category == category and c.score is not None]


class ConsensusMeeting(BaseModel):
    id: Optional[str] = None
    cycle_id: str
    employee_id: str
    self_evaluation_id: Optional[str] = None
    leader_evaluation_id: Optional[str] = None
    meeting_date: Optional[date] = None
    consensus_score: float = Field(ge=1, le=4)
    potential_score: float = Field(ge=1, le=4)
    meeting_notes: Optional[str] = None
    participants: List[str] = Field(default_factory=list)
    status: Literal["scheduled", "completed", "cancelled"] = "scheduled"
