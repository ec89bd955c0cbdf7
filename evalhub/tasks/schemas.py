from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List

class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    code: Optional[str] = None
    evaluate: bool = Field(default=True, description="Run the evaluation right after saving")

    @field_validator("title", "description")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_validator("code")
    @classmethod
    def _empty_code_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v if v and v.strip() else None

class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    title: str
    description: str
    code: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime | None = None

class EvaluationSummary(BaseModel):
    id: str
    score: int
    is_paid: bool

class TaskWithEvaluation(TaskOut):
    evaluation: Optional[EvaluationSummary] = None

class TaskList(BaseModel):
    items: List[TaskWithEvaluation]
    page: int
    per_page: int
    total: int
    total_pages: int

class TaskStats(BaseModel):
    total_tasks: int
    completed_tasks: int
    average_score: int
    total_evaluations: int

class TaskSubmitted(BaseModel):
    task: TaskOut
    evaluation_id: Optional[str] = None
