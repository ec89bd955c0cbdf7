from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from evalhub.shared.db import get_db
from evalhub.shared.auth import get_user
from evalhub.shared.config import settings
from evalhub.shared.http import ok, err
from evalhub.evaluations.schemas import EvaluationRequest, EvaluationView
from evalhub.evaluations.service import EvaluationFailed, get_owned, run_evaluation
from evalhub.evaluations.models import Evaluation
from evalhub.profiles.api import current_profile
from evalhub.profiles.models import Profile
from evalhub.profiles.service import report_unlocked, tier_for_plan
from evalhub.tasks.models import Task, EVALUATING
from evalhub.tasks.schemas import TaskOut
from evalhub.tasks.service import get_task

router = APIRouter(prefix="/evaluations", tags=["Evaluations"])

def _view(ev: Evaluation, task: Task, plan: str) -> EvaluationView:
    unlocked = report_unlocked(plan, ev.is_paid)
    return EvaluationView(
        id=ev.id, task_id=ev.task_id, score=ev.score,
        strengths=ev.strengths, weaknesses=ev.weaknesses, improvements=ev.improvements,
        full_report=ev.full_report if unlocked else None,
        is_paid=ev.is_paid, created_at=ev.created_at,
        task=TaskOut.model_validate(task), plan=plan, report_unlocked=unlocked,
    )

def _load_owned(db: Session, user_id: str, evaluation_id: str) -> tuple[Evaluation, Task]:
    try:
        return get_owned(db, user_id, evaluation_id)
    except LookupError:
        raise HTTPException(404, "Evaluation not found")
    except PermissionError:
        raise HTTPException(403, "Unauthorized")

@router.post("")
def api_evaluate(payload: EvaluationRequest, user = Depends(get_user), db: Session = Depends(get_db)):
    if not payload.task_id or not (payload.title or "").strip() or not (payload.description or "").strip():
        err("Missing required fields", code="missing_fields")
    task = get_task(db, user["sub"], payload.task_id)
    if not task:
        raise HTTPException(404, "Task not found")
    if task.status == EVALUATING:
        err("Evaluation already in progress", code="evaluation_in_progress", status=409)
    try:
        ev = run_evaluation(db, task, payload.title, payload.description, payload.code or None, settings.EVALUATION_TIER)
    except EvaluationFailed:
        err("Failed to evaluate task", code="evaluation_failed", status=500)
    return ok({"evaluation_id": ev.id})

@router.get("/{evaluation_id}", response_model=EvaluationView)
def api_get_evaluation(
    evaluation_id: str,
    user = Depends(get_user),
    prof: Profile = Depends(current_profile),
    db: Session = Depends(get_db),
):
    ev, task = _load_owned(db, user["sub"], evaluation_id)
    return _view(ev, task, prof.subscription_plan)

@router.post("/{evaluation_id}/regenerate", response_model=EvaluationView)
def api_regenerate(
    evaluation_id: str,
    user = Depends(get_user),
    prof: Profile = Depends(current_profile),
    db: Session = Depends(get_db),
):
    """Re-run the model for this task at the caller's current plan tier."""
    ev, task = _load_owned(db, user["sub"], evaluation_id)
    if task.status == EVALUATING:
        err("Evaluation already in progress", code="evaluation_in_progress", status=409)
    try:
        ev = run_evaluation(db, task, task.title, task.description, task.code, tier_for_plan(prof.subscription_plan))
    except EvaluationFailed:
        err("Failed to regenerate report", code="evaluation_failed", status=500)
    return _view(ev, task, prof.subscription_plan)
