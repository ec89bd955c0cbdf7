import logging
import math

from sqlalchemy.orm import Session
from sqlalchemy import select, desc, func, update

from evalhub.shared import sse
from evalhub.tasks.models import Task, PENDING, STATUSES
from evalhub.tasks.schemas import TaskCreate

logger = logging.getLogger(__name__)

def create_task(db: Session, user_id: str, payload: TaskCreate) -> Task:
    task = Task(
        user_id=user_id,
        title=payload.title,
        description=payload.description,
        code=payload.code,
        status=PENDING,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    sse.publish_task_status(user_id, task.id, task.status)
    return task

def get_task(db: Session, user_id: str, task_id: str) -> Task | None:
    task = db.get(Task, task_id)
    if not task or task.user_id != user_id:
        return None
    return task

def set_status(db: Session, task: Task, status: str) -> Task:
    if status not in STATUSES:
        raise ValueError(f"invalid_status: {status}")
    task.status = status
    db.commit()
    db.refresh(task)
    sse.publish_task_status(task.user_id, task.id, status)
    return task

def list_tasks(db: Session, user_id: str, page: int = 1, per_page: int = 5):
    """Newest first, each row paired with its evaluation (or None)."""
    from evalhub.evaluations.models import Evaluation

    total = db.scalar(select(func.count()).select_from(Task).where(Task.user_id == user_id)) or 0
    stmt = (
        select(Task, Evaluation)
        .outerjoin(Evaluation, Evaluation.task_id == Task.id)
        .where(Task.user_id == user_id)
        .order_by(desc(Task.created_at))
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    rows = db.execute(stmt).all()
    total_pages = math.ceil(total / per_page) if total else 0
    return rows, total, total_pages

def task_stats(db: Session, user_id: str) -> dict:
    from evalhub.evaluations.models import Evaluation

    total = db.scalar(select(func.count()).select_from(Task).where(Task.user_id == user_id)) or 0
    evaluated, score_sum = db.execute(
        select(func.count(Evaluation.id), func.coalesce(func.sum(Evaluation.score), 0))
        .join(Task, Task.id == Evaluation.task_id)
        .where(Task.user_id == user_id)
    ).one()
    return {
        "total_tasks": total,
        "completed_tasks": evaluated,
        "average_score": round(score_sum / evaluated) if evaluated else 0,
        "total_evaluations": evaluated,
    }

def delete_task(db: Session, user_id: str, task_id: str) -> bool:
    from evalhub.evaluations.models import Evaluation
    from evalhub.payments.models import Payment

    task = get_task(db, user_id, task_id)
    if not task:
        return False
    ev = db.scalars(select(Evaluation).where(Evaluation.task_id == task.id)).first()
    if ev:
        # payments are an audit trail; keep them, drop the dangling reference
        db.execute(update(Payment).where(Payment.evaluation_id == ev.id).values(evaluation_id=None))
        db.delete(ev)
    db.delete(task)
    db.commit()
    logger.info("deleted task %s for %s", task_id, user_id)
    return True
