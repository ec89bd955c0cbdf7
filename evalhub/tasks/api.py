import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from starlette.responses import StreamingResponse
from sqlalchemy.orm import Session

from evalhub.shared.db import get_db
from evalhub.shared.auth import get_user
from evalhub.shared.config import settings
from evalhub.shared import sse
from evalhub.tasks.schemas import (
    TaskCreate, TaskOut, TaskList, TaskStats, TaskSubmitted, TaskWithEvaluation, EvaluationSummary,
)
from evalhub.tasks.service import create_task, get_task, list_tasks, task_stats, delete_task

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["Tasks"])

@router.post("", response_model=TaskSubmitted, status_code=201)
def submit_task(payload: TaskCreate, user = Depends(get_user), db: Session = Depends(get_db)):
    from evalhub.evaluations.service import EvaluationFailed, run_evaluation

    task = create_task(db, user["sub"], payload)
    evaluation_id = None
    if payload.evaluate:
        try:
            ev = run_evaluation(db, task, task.title, task.description, task.code, settings.EVALUATION_TIER)
            evaluation_id = ev.id
        except EvaluationFailed:
            # task already flipped to failed; the caller sees it in the status
            logger.warning("task %s saved but evaluation failed", task.id)
        db.refresh(task)
    return {"task": task, "evaluation_id": evaluation_id}

@router.get("", response_model=TaskList)
def dashboard(
    page: int = Query(1, ge=1),
    per_page: int = Query(5, ge=1, le=100),
    user = Depends(get_user),
    db: Session = Depends(get_db),
):
    rows, total, total_pages = list_tasks(db, user["sub"], page, per_page)
    items = []
    for task, ev in rows:
        item = TaskWithEvaluation.model_validate(task)
        if ev is not None:
            item.evaluation = EvaluationSummary(id=ev.id, score=ev.score, is_paid=ev.is_paid)
        items.append(item)
    return {"items": items, "page": page, "per_page": per_page, "total": total, "total_pages": total_pages}

@router.get("/stats", response_model=TaskStats)
def stats(user = Depends(get_user), db: Session = Depends(get_db)):
    return task_stats(db, user["sub"])

@router.get("/stream")
async def stream(request: Request, user = Depends(get_user)):
    uid = user["sub"]

    async def _gen():
        async for part in sse.sse_stream(uid):
            if await request.is_disconnected():
                break
            yield part

    return StreamingResponse(_gen(), media_type="text/event-stream")

@router.get("/{task_id}", response_model=TaskOut)
def get_one(task_id: str, user = Depends(get_user), db: Session = Depends(get_db)):
    task = get_task(db, user["sub"], task_id)
    if not task:
        raise HTTPException(404, "Task not found")
    return task

@router.delete("/{task_id}", status_code=204)
def delete_one(task_id: str, user = Depends(get_user), db: Session = Depends(get_db)):
    if not delete_task(db, user["sub"], task_id):
        raise HTTPException(404, "Task not found")
    return
