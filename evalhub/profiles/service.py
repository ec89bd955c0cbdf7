import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from evalhub.profiles.models import Profile, PLANS, FREE, PREMIUM, ULTRA_PREMIUM

logger = logging.getLogger(__name__)

# display catalog; price in cents
PLAN_CATALOG = [
    {"name": FREE, "price_cents": 0, "features": ["Score and summary for every task", "Unlock single reports"]},
    {"name": PREMIUM, "price_cents": 499, "features": ["Full reports unlocked", "Priority evaluation"]},
    {"name": ULTRA_PREMIUM, "price_cents": 1999, "features": ["Everything in Premium", "Comprehensive enterprise-level reports"]},
]
PLAN_RANK = {FREE: 0, PREMIUM: 1, ULTRA_PREMIUM: 2}

# profile plan -> tier name understood by the report generator
PLAN_TIER = {FREE: "free", PREMIUM: "premium", ULTRA_PREMIUM: "ultra"}

def plan_price(plan: str) -> int:
    for p in PLAN_CATALOG:
        if p["name"] == plan:
            return p["price_cents"]
    raise ValueError(f"invalid_plan: {plan}")

def tier_for_plan(plan: str | None) -> str:
    return PLAN_TIER.get(plan or FREE, "free")

def report_unlocked(plan: str | None, is_paid: bool) -> bool:
    return bool(is_paid) or plan in (PREMIUM, ULTRA_PREMIUM)

def plan_action(current: str, target: str) -> str:
    if current == target:
        return "current"
    return "upgrade" if PLAN_RANK[target] > PLAN_RANK.get(current, 0) else "switch"

def get_or_create_profile(db: Session, user: dict, full_name: str | None = None) -> Profile:
    """Profiles are created lazily, the first time an authenticated user needs one."""
    prof = db.get(Profile, user["sub"])
    if prof:
        return prof
    prof = Profile(id=user["sub"], email=user.get("email") or "", full_name=full_name, subscription_plan=FREE)
    db.add(prof)
    try:
        db.commit()
    except IntegrityError:
        # created concurrently by another request
        db.rollback()
        return db.get(Profile, user["sub"])
    db.refresh(prof)
    logger.info("created profile for %s", prof.id)
    return prof

def update_profile(db: Session, prof: Profile, full_name: str | None) -> Profile:
    if full_name is not None:
        prof.full_name = full_name.strip() or None
    db.commit(); db.refresh(prof)
    return prof

def set_plan(db: Session, user_id: str, plan: str) -> Profile:
    if plan not in PLANS:
        raise ValueError(f"invalid_plan: {plan}")
    prof = db.get(Profile, user_id)
    if not prof:
        raise LookupError("profile_not_found")
    prof.subscription_plan = plan
    db.commit(); db.refresh(prof)
    logger.info("plan for %s set to %s", user_id, plan)
    return prof
