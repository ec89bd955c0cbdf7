from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from evalhub.shared.db import Base
import uuid

PENDING, COMPLETED, FAILED = "pending", "completed", "failed"

def _id32() -> str:
    return uuid.uuid4().hex

class Payment(Base):
    __tablename__ = "payments"
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_id32)
    user_id: Mapped[str] = mapped_column(String(36), index=True)
    # null for plan purchases, or once the evaluation is deleted
    evaluation_id: Mapped[str | None] = mapped_column(String(32), ForeignKey("evaluations.id", ondelete="SET NULL"), nullable=True, index=True)
    plan: Mapped[str | None] = mapped_column(String(32), nullable=True)
    # unique: webhook redeliveries land on the same row
    stripe_payment_id: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    amount: Mapped[int] = mapped_column(Integer)  # cents
    status: Mapped[str] = mapped_column(String(16), default=PENDING)  # pending|completed|failed
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
