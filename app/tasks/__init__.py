from flask import current_app
from sqlalchemy import event
from sqlalchemy.orm import Session

from celery_app import celery_app  # noqa: F401
from models import db

PENDING_TASKS = "pending_tasks"


def dispatch(task, *args):
    """Run ``task`` inline under TESTING, otherwise queue it."""
    if current_app.config.get("TESTING"):
        return task(*args)
    return task.delay(*args)


def dispatch_after_commit(task, *args):
    """Hold ``task`` until the current DB transaction commits; a rollback drops it."""
    db.session.info.setdefault(PENDING_TASKS, []).append((task, args))


@event.listens_for(Session, "after_commit")
def _send_pending(session):
    for task, args in session.info.pop(PENDING_TASKS, []):
        dispatch(task, *args)


@event.listens_for(Session, "after_soft_rollback")
def _drop_pending(session, previous_transaction):
    session.info.pop(PENDING_TASKS, None)
