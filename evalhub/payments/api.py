import logging

from fastapi import APIRouter, Depends, HTTPException, Header, Request
from sqlalchemy.orm import Session

from evalhub.shared.db import get_db
from evalhub.shared.auth import get_user
from evalhub.shared.config import settings
from evalhub.shared.http import ok, err
from evalhub.payments import gateway
from evalhub.payments.schemas import CreateIntentIn, DemoPlanIn, PaymentOut
from evalhub.payments.service import (
    AlreadyUnlocked, create_report_intent, handle_event, list_payments, demo_unlock_report, demo_buy_plan,
)
from evalhub.profiles.api import current_profile
from evalhub.profiles.schemas import ProfileOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])

def require_mode(mode: str):
    """Stripe and demo checkouts are mutually exclusive; only the configured one answers."""
    def _dep():
        if settings.PAYMENT_MODE != mode:
            err(f"{mode} payments are disabled", code="payment_mode_disabled", status=409,
                details={"payment_mode": settings.PAYMENT_MODE})
    return _dep

@router.get("", response_model=list[PaymentOut])
def my_payments(user = Depends(get_user), db: Session = Depends(get_db)):
    return list_payments(db, user["sub"])

@router.post("/create-intent", dependencies=[Depends(require_mode("stripe"))])
def create_intent(payload: CreateIntentIn, user = Depends(get_user), db: Session = Depends(get_db)):
    if not payload.evaluation_id:
        err("Evaluation ID is required", code="missing_fields")
    try:
        intent = create_report_intent(db, user["sub"], payload.evaluation_id)
    except LookupError:
        raise HTTPException(404, "Evaluation not found")
    except PermissionError:
        raise HTTPException(403, "Unauthorized")
    except AlreadyUnlocked:
        err("Report already unlocked", code="already_unlocked")
    except gateway.PaymentGatewayError:
        err("Failed to create payment intent", code="payment_failed", status=502)
    return {"client_secret": intent["client_secret"]}

@router.post("/webhook", dependencies=[Depends(require_mode("stripe"))])
async def stripe_webhook(
    request: Request,
    db: Session = Depends(get_db),
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
):
    if not stripe_signature:
        err("No signature", code="no_signature")
    body = await request.body()
    try:
        event = gateway.verify_webhook(body, stripe_signature)
    except gateway.InvalidSignature as e:
        logger.warning("rejected webhook: %s", e)
        err("Invalid signature", code="invalid_signature")
    except gateway.PaymentGatewayError:
        logger.exception("webhook received but Stripe is not configured")
        err("Webhook failed", code="webhook_failed", status=500)
    try:
        handled = handle_event(db, event)
    except ValueError as e:
        err("Malformed event", code="malformed_event", details=str(e))
    return {"received": True, "handled": handled}

@router.post("/demo/evaluations/{evaluation_id}", dependencies=[Depends(require_mode("demo"))])
def demo_unlock(evaluation_id: str, user = Depends(get_user), db: Session = Depends(get_db)):
    try:
        pay = demo_unlock_report(db, user["sub"], evaluation_id)
    except LookupError:
        raise HTTPException(404, "Evaluation not found")
    except PermissionError:
        raise HTTPException(403, "Unauthorized")
    except AlreadyUnlocked:
        err("Report already unlocked", code="already_unlocked")
    return ok(PaymentOut.model_validate(pay).model_dump(mode="json"))

@router.post("/demo/plan", dependencies=[Depends(require_mode("demo"))])
def demo_plan(payload: DemoPlanIn, user = Depends(get_user), prof = Depends(current_profile), db: Session = Depends(get_db)):
    try:
        prof, pay = demo_buy_plan(db, user["sub"], payload.plan)
    except ValueError:
        err("Invalid plan", code="invalid_plan", details={"plan": payload.plan})
    return ok({
        "profile": ProfileOut.model_validate(prof).model_dump(mode="json"),
        "payment": PaymentOut.model_validate(pay).model_dump(mode="json") if pay else None,
    })
