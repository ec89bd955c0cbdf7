from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional, List

from evalhub.tasks.schemas import TaskOut

class EvaluationRequest(BaseModel):
    # all optional so the handler can answer with its own missing_fields error
    task_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    code: Optional[str] = None

class EvaluationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    task_id: str
    score: int
    strengths: List[str]
    weaknesses: List[str]
    improvements: List[str]
    full_report: Optional[str] = None
    is_paid: bool
    created_at: datetime

class EvaluationView(EvaluationOut):
    task: TaskOut
    plan: str
    report_unlocked: bool
