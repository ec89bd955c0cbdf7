from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    email: str
    full_name: Optional[str] = None
    subscription_plan: str
    created_at: datetime
    updated_at: datetime | None = None

class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, max_length=200)

class UpgradePlanIn(BaseModel):
    plan: str
    user_id: Optional[str] = Field(default=None, description="Defaults to the caller; admins may target others")

class PlanOut(BaseModel):
    name: str
    price_cents: int
    features: List[str]
    action: str  # current|upgrade|switch
