from datetime import datetime, timezone
from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from evalhub.shared.db import Base

FREE = "Free"
PREMIUM = "Premium"
ULTRA_PREMIUM = "Ultra Premium"
PLANS = (FREE, PREMIUM, ULTRA_PREMIUM)

class Profile(Base):
    __tablename__ = "profiles"
    # same id as the auth user
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), index=True)
    full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    subscription_plan: Mapped[str] = mapped_column(String(32), default=FREE)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
