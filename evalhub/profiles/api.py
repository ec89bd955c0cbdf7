from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from evalhub.shared.db import get_db
from evalhub.shared.auth import get_user, is_admin
from evalhub.shared.http import ok, err
from evalhub.profiles.models import Profile
from evalhub.profiles.schemas import ProfileOut, ProfileUpdate, UpgradePlanIn, PlanOut
from evalhub.profiles.service import (
    PLAN_CATALOG, get_or_create_profile, update_profile, set_plan, plan_action,
)

router = APIRouter(tags=["Profile"])

def current_profile(user = Depends(get_user), db: Session = Depends(get_db)) -> Profile:
    return get_or_create_profile(db, user)

@router.get("/profile")
def get_profile(user = Depends(get_user), prof: Profile = Depends(current_profile)):
    return {"user": {"id": user["sub"], "email": user["email"]}, "profile": ProfileOut.model_validate(prof)}

@router.patch("/profile", response_model=ProfileOut)
def patch_profile(payload: ProfileUpdate, prof: Profile = Depends(current_profile), db: Session = Depends(get_db)):
    return update_profile(db, prof, payload.full_name)

@router.post("/profile/upgrade-plan")
def upgrade_plan(payload: UpgradePlanIn, user = Depends(get_user), db: Session = Depends(get_db)):
    target = payload.user_id or user["sub"]
    if target != user["sub"] and not is_admin(user):
        err("cannot change another account's plan", code="forbidden", status=403)
    if target == user["sub"]:
        get_or_create_profile(db, user)
    try:
        prof = set_plan(db, target, payload.plan)
    except ValueError:
        err("Invalid plan", code="invalid_plan", status=400, details={"plan": payload.plan})
    except LookupError:
        raise HTTPException(404, "Profile not found")
    return ok({"plan": prof.subscription_plan, "profile": ProfileOut.model_validate(prof).model_dump(mode="json")})

@router.get("/plans", response_model=list[PlanOut])
def list_plans(prof: Profile = Depends(current_profile)):
    return [{**p, "action": plan_action(prof.subscription_plan, p["name"])} for p in PLAN_CATALOG]
