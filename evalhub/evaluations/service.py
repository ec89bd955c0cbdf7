import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from evalhub.evaluations.models import Evaluation
from evalhub.llm.service import evaluate_task
from evalhub.tasks.models import Task, EVALUATING, COMPLETED, FAILED
from evalhub.tasks.service import set_status

logger = logging.getLogger(__name__)

class EvaluationFailed(Exception):
    """The evaluation could not be completed; the task has been marked failed."""

def get_for_task(db: Session, task_id: str) -> Evaluation | None:
    return db.scalars(select(Evaluation).where(Evaluation.task_id == task_id)).first()

def get_owned(db: Session, user_id: str, evaluation_id: str) -> tuple[Evaluation, Task]:
    """Raises LookupError if missing, PermissionError if the task belongs to someone else."""
    ev = db.get(Evaluation, evaluation_id)
    task = db.get(Task, ev.task_id) if ev else None
    if not ev or not task:
        raise LookupError("evaluation_not_found")
    if task.user_id != user_id:
        raise PermissionError("not_owner")
    return ev, task

def _mark_failed(db: Session, task_id: str):
    try:
        task = db.get(Task, task_id)
        if task:
            set_status(db, task, FAILED)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("could not mark task %s failed", task_id)

def run_evaluation(
    db: Session,
    task: Task,
    title: str,
    description: str,
    code: str | None,
    tier: str,
) -> Evaluation:
    """
    evaluating -> model call -> store result -> completed.

    Model trouble degrades to a canned report inside evaluate_task. Anything that still
    escapes rolls back, flips the task to failed and surfaces as EvaluationFailed.
    An existing evaluation for the task is overwritten in place, keeping its paid flag.
    """
    task_id = task.id
    try:
        set_status(db, task, EVALUATING)
        result = evaluate_task(title, description, code, tier)

        ev = get_for_task(db, task_id)
        if ev is None:
            ev = Evaluation(task_id=task_id, is_paid=False)
            db.add(ev)
        ev.score = result.score
        ev.strengths = result.strengths
        ev.weaknesses = result.weaknesses
        ev.improvements = result.improvements
        ev.full_report = result.full_report
        db.commit()
        db.refresh(ev)

        set_status(db, task, COMPLETED)
    except Exception as e:
        db.rollback()
        logger.exception("evaluation failed for task %s", task_id)
        _mark_failed(db, task_id)
        raise EvaluationFailed(task_id) from e
    logger.info("task %s evaluated: evaluation %s score %s", task_id, ev.id, ev.score)
    return ev
