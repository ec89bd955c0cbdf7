from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional

class CreateIntentIn(BaseModel):
    evaluation_id: Optional[str] = None

class DemoPlanIn(BaseModel):
    plan: str

class PaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    evaluation_id: Optional[str] = None
    plan: Optional[str] = None
    stripe_payment_id: str
    amount: int
    status: str
    created_at: datetime
