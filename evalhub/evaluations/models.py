from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Integer, Text, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from evalhub.shared.db import Base
import uuid, json

def _id32() -> str:
    return uuid.uuid4().hex

def _load_list(raw: str | None) -> list[str]:
    try:
        val = json.loads(raw or "[]")
    except ValueError:
        return []
    return val if isinstance(val, list) else []

class Evaluation(Base):
    __tablename__ = "evaluations"
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_id32)
    # one evaluation per task
    task_id: Mapped[str] = mapped_column(String(32), ForeignKey("tasks.id", ondelete="CASCADE"), unique=True, index=True)
    score: Mapped[int] = mapped_column(Integer, default=0)
    # string lists stored as JSON text; use the properties below
    strengths_json: Mapped[str] = mapped_column(Text, default="[]")
    weaknesses_json: Mapped[str] = mapped_column(Text, default="[]")
    improvements_json: Mapped[str] = mapped_column(Text, default="[]")
    full_report: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    @property
    def strengths(self) -> list[str]:
        return _load_list(self.strengths_json)

    @strengths.setter
    def strengths(self, val: list[str]): self.strengths_json = json.dumps(val or [])

    @property
    def weaknesses(self) -> list[str]:
        return _load_list(self.weaknesses_json)

    @weaknesses.setter
    def weaknesses(self, val: list[str]): self.weaknesses_json = json.dumps(val or [])

    @property
    def improvements(self) -> list[str]:
        return _load_list(self.improvements_json)

    @improvements.setter
    def improvements(self, val: list[str]): self.improvements_json = json.dumps(val or [])
