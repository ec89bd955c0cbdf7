import logging
import uuid

from sqlalchemy import select, desc
from sqlalchemy.orm import Session

from evalhub.shared.config import settings
from evalhub.evaluations.models import Evaluation
from evalhub.evaluations.service import get_owned
from evalhub.payments import gateway
from evalhub.payments.models import Payment, PENDING, COMPLETED, FAILED
from evalhub.profiles.models import Profile, FREE, PREMIUM
from evalhub.profiles.service import plan_price, set_plan

logger = logging.getLogger(__name__)

class AlreadyUnlocked(Exception):
    pass

def _payment_by_ref(db: Session, ref: str) -> Payment | None:
    return db.scalars(select(Payment).where(Payment.stripe_payment_id == ref)).first()

def list_payments(db: Session, user_id: str) -> list[Payment]:
    stmt = select(Payment).where(Payment.user_id == user_id).order_by(desc(Payment.created_at))
    return list(db.scalars(stmt).all())

def create_report_intent(db: Session, user_id: str, evaluation_id: str) -> dict:
    """
    Ask Stripe for a PaymentIntent unlocking one report.
    Raises LookupError / PermissionError / AlreadyUnlocked before any charge is created.
    """
    ev, _task = get_owned(db, user_id, evaluation_id)
    if ev.is_paid:
        raise AlreadyUnlocked(evaluation_id)
    intent = gateway.create_payment_intent(
        amount=settings.REPORT_PRICE_CENTS,
        currency=settings.PAYMENT_CURRENCY,
        metadata={"evaluation_id": evaluation_id, "user_id": user_id},
    )
    db.add(Payment(
        user_id=user_id, evaluation_id=evaluation_id,
        stripe_payment_id=intent["id"], amount=settings.REPORT_PRICE_CENTS, status=PENDING,
    ))
    db.commit()
    logger.info("payment intent %s created for evaluation %s", intent["id"], evaluation_id)
    return intent

def _upsert_payment(db: Session, ref: str, **fields) -> Payment:
    pay = _payment_by_ref(db, ref)
    if pay is None:
        pay = Payment(stripe_payment_id=ref, **fields)
        db.add(pay)
    else:
        for k, v in fields.items():
            setattr(pay, k, v)
    return pay

def _on_intent_succeeded(db: Session, intent: dict):
    md = intent.get("metadata") or {}
    evaluation_id, user_id = md.get("evaluation_id"), md.get("user_id")
    if not evaluation_id or not user_id:
        logger.warning("payment %s succeeded without evaluation metadata", intent.get("id"))
        return
    ev = db.get(Evaluation, evaluation_id)
    if ev is not None:
        ev.is_paid = True
    else:
        # paid for something that was deleted meanwhile; still record the money
        logger.warning("payment %s references missing evaluation %s", intent.get("id"), evaluation_id)
        evaluation_id = None
    prof = db.get(Profile, user_id)
    if prof is not None and prof.subscription_plan == FREE:
        prof.subscription_plan = PREMIUM
    _upsert_payment(
        db, intent["id"], user_id=user_id, evaluation_id=evaluation_id,
        amount=int(intent.get("amount") or settings.REPORT_PRICE_CENTS), status=COMPLETED,
    )
    db.commit()
    logger.info("payment %s completed for evaluation %s", intent["id"], evaluation_id)

def _on_intent_failed(db: Session, intent: dict):
    pay = _payment_by_ref(db, intent["id"])
    if pay is None:
        return
    if pay.status != COMPLETED:
        pay.status = FAILED
        db.commit()
    logger.info("payment %s failed", intent["id"])

EVENT_HANDLERS = {
    "payment_intent.succeeded": _on_intent_succeeded,
    "payment_intent.payment_failed": _on_intent_failed,
}

def handle_event(db: Session, event: dict) -> bool:
    """Apply a verified Stripe event. Returns False for event types we ignore."""
    handler = EVENT_HANDLERS.get(event.get("type"))
    if handler is None:
        return False
    intent = (event.get("data") or {}).get("object") or {}
    if not intent.get("id"):
        raise ValueError("event carries no payment intent")
    handler(db, intent)
    return True

def _demo_ref() -> str:
    return f"demo_{uuid.uuid4().hex}"

def demo_unlock_report(db: Session, user_id: str, evaluation_id: str) -> Payment:
    """Simulated checkout: no money moves, the server just records a completed payment."""
    ev, _task = get_owned(db, user_id, evaluation_id)
    if ev.is_paid:
        raise AlreadyUnlocked(evaluation_id)
    ev.is_paid = True
    pay = Payment(
        user_id=user_id, evaluation_id=evaluation_id, stripe_payment_id=_demo_ref(),
        amount=settings.REPORT_PRICE_CENTS, status=COMPLETED,
    )
    db.add(pay)
    db.commit(); db.refresh(pay)
    logger.info("demo payment %s unlocked evaluation %s", pay.stripe_payment_id, evaluation_id)
    return pay

def demo_buy_plan(db: Session, user_id: str, plan: str) -> tuple[Profile, Payment | None]:
    price = plan_price(plan)  # ValueError on unknown plan
    prof = set_plan(db, user_id, plan)
    if price == 0:
        return prof, None
    pay = Payment(user_id=user_id, plan=plan, stripe_payment_id=_demo_ref(), amount=price, status=COMPLETED)
    db.add(pay)
    db.commit(); db.refresh(pay)
    return prof, pay
